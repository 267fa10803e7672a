"""
Cache package for the Users service.

Provides a thin Redis client and the read-through layer that serves
get-by-email lookups from Redis, falling back to the backing store on a
miss and writing found records back with a fixed TTL.
"""
