"""
Shared utilities for the Users service.

This package aggregates common building blocks consumed by service packages:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and response bodies
- base_service: FastAPI scaffolding (middleware, health, metrics, error handlers)
- test_helpers: In-memory Redis/MongoDB clients for tests

Do not import from service packages into shared/.
"""
