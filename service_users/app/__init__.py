"""
Users Service package.

A small HTTP service that creates user records and looks them up by
email. It provides:

- app.main: API surface for create, get-by-email and health.
- app.validation: Field checks for create requests.
- app.cache: Redis client and the read-through cache for lookups.
- app.persistence: MongoDB store for user records.

Guidelines:
- The service is stateless; the store and cache are external.
- The store is authoritative; cached copies may be stale up to their TTL.
"""
