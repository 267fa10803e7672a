"""
Persistence package for the Users service.

MongoDB is the authoritative store for user records; the optional unique
index on ``email`` is created at startup.
"""
