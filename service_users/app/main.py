"""
Users service: create user records and look them up by email.
"""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import ValidationError, StoreWriteError, StoreReadError, CacheUnavailableError

from .models import CacheResult, UserCreateRequest
from .validation import validate_user_payload
from .persistence.mongo import MongoUserStore
from .cache.redis_cache import RedisCache
from .cache.read_through import ReadThroughCache, RAISE


class UsersService(BaseService):
    """Users service implementation.

    The store and cache clients are built from configuration unless passed
    in, so tests can supply in-memory doubles.
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        store: Optional[MongoUserStore] = None,
        cache: Optional[RedisCache] = None,
    ):
        super().__init__("users", config)

        self.store = store or MongoUserStore(
            self.config.mongo_uri,
            database=self.config.mongo_database,
            unique_email_index=self.config.unique_email_index,
        )

        self.cache = None
        self.read_through = None
        if self.config.cache_enabled:
            self.cache = cache or RedisCache(self.config.redis_url)
            self.read_through = ReadThroughCache(
                self.cache,
                ttl_seconds=self.config.cache_ttl_seconds,
                read_error_policy=self.config.cache_read_error_policy,
                metrics=self.metrics,
            )

        self._setup_users_routes()

    def _setup_users_routes(self):
        """Set up users-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "users",
                "message": "Users Service",
                "version": "1.0.0",
                "capabilities": self._capabilities(),
            }

        @self.app.post("/users", status_code=201)
        async def create_user(payload: UserCreateRequest):
            """Create a user."""
            if self.config.validation_enabled:
                errors = validate_user_payload(payload)
                if errors:
                    self.metrics.increment_counter("users_created_total", status="invalid")
                    raise ValidationError([error.to_dict() for error in errors])

            try:
                record = await self.store.create_user(payload.to_document())
            except StoreWriteError:
                self.metrics.increment_counter("users_created_total", status="rejected")
                raise

            self.metrics.increment_counter("users_created_total", status="created")
            self.logger.info("User created", email=record.email)
            return record.to_json()

        @self.app.get("/users/{email}")
        async def get_user(email: str):
            """Get a user by email, served from the cache when possible."""
            if self.read_through is None:
                result = CacheResult(record=await self._fetch_user(email))
            else:
                result = await self.read_through.get_or_fetch(email, self._fetch_user)

            if not result.found:
                return JSONResponse(status_code=404, content={"message": "User not found"})

            self.logger.debug("User served", email=email, cache_hit=result.hit)
            return result.record

    async def _fetch_user(self, email: str) -> Optional[Dict[str, Any]]:
        """Backing-store lookup used on cache misses."""
        try:
            record = await self.store.find_by_email(email)
        except StoreReadError:
            self.metrics.increment_counter("store_reads_total", outcome="error")
            raise

        if record is None:
            self.metrics.increment_counter("store_reads_total", outcome="not_found")
            return None

        self.metrics.increment_counter("store_reads_total", outcome="found")
        return record.to_json()

    def _capabilities(self):
        capabilities = ["persistence"]
        if self.config.validation_enabled:
            capabilities.append("validation")
        if self.config.unique_email_index:
            capabilities.append("unique_email")
        if self.read_through is not None:
            capabilities.append("caching")
        return capabilities

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check users dependencies."""
        dependencies = {}

        try:
            dependencies["mongo"] = "ok" if await self.store.health_check() else "error"
        except Exception:
            dependencies["mongo"] = "error"

        if self.cache is not None:
            try:
                dependencies["redis"] = "ok" if await self.cache.health_check() else "error"
            except Exception:
                dependencies["redis"] = "error"

        return dependencies

    async def start(self):
        """Start users service components."""
        await self.store.start()

        if self.cache is not None:
            try:
                await self.cache.start()
            except CacheUnavailableError as e:
                if self.config.cache_read_error_policy == RAISE:
                    # Shutdown hooks never run after a failed startup
                    await self.store.stop()
                    raise
                # Lookups degrade to misses until Redis comes back
                self.logger.warning("Starting without cache", error=e.message)

        self.logger.info("Users service started", capabilities=self._capabilities())

    async def stop(self):
        """Stop users service components."""
        await self.store.stop()
        if self.cache is not None:
            await self.cache.stop()

        self.logger.info("Users service stopped")


def create_app(config: Optional[ServiceConfig] = None):
    """Create users service application."""
    service = UsersService(config)
    return service.app


if __name__ == "__main__":
    service = UsersService()
    service.run()
