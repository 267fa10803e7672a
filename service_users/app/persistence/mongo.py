"""
MongoDB persistence layer for the Users service.
"""

from typing import Any, Dict, Optional

from pymongo import AsyncMongoClient, ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from shared.logging import get_logger
from shared.errors import StoreUnavailableError, StoreWriteError, StoreReadError
from ..models import UserRecord


class MongoUserStore:
    """MongoDB persistence layer for user records."""

    def __init__(
        self,
        mongo_uri: str,
        database: str = "users",
        collection: str = "users",
        unique_email_index: bool = True,
        client: Optional[AsyncMongoClient] = None,
    ):
        self.mongo_uri = mongo_uri
        self.database_name = database
        self.collection_name = collection
        self.unique_email_index = unique_email_index
        self.logger = get_logger("users.persistence.mongo")
        self.client: Optional[AsyncMongoClient] = client
        self.collection = None

    async def start(self):
        """Start the persistence layer."""
        try:
            if self.client is None:
                self.client = AsyncMongoClient(self.mongo_uri)

            await self.client.admin.command("ping")

            db = self.client.get_default_database(default=self.database_name)
            self.collection = db[self.collection_name]

            if self.unique_email_index:
                await self._create_indexes()

            self.logger.info("Connected to MongoDB", database=db.name, collection=self.collection_name)

        except PyMongoError as e:
            self.logger.error("MongoDB Error", error=str(e))
            raise StoreUnavailableError(str(e))

    async def stop(self):
        """Stop the persistence layer."""
        if self.client:
            await self.client.close()
            self.logger.info("MongoDB connection closed")

    async def _create_indexes(self):
        """Create the unique lookup index on email."""
        await self.collection.create_index([("email", ASCENDING)], unique=True)
        self.logger.info("Ensured unique index", field="email")

    async def create_user(self, document: Dict[str, Any]) -> UserRecord:
        """Insert a user document and return the stored record."""
        to_insert = dict(document)
        try:
            result = await self.collection.insert_one(to_insert)
        except DuplicateKeyError as e:
            self.logger.info("Duplicate user rejected", email=document.get("email"))
            raise StoreWriteError(str(e)) from e
        except PyMongoError as e:
            self.logger.error("Error creating user", error=str(e))
            raise StoreWriteError(str(e)) from e

        to_insert["_id"] = result.inserted_id
        return UserRecord.from_document(to_insert)

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        """Find the user with the given email, None when absent."""
        try:
            document = await self.collection.find_one({"email": email})
        except PyMongoError as e:
            self.logger.error("Error finding user", email=email, error=str(e))
            raise StoreReadError(str(e)) from e

        if document is None:
            return None

        return UserRecord.from_document(document)

    async def health_check(self) -> bool:
        """Check MongoDB health."""
        try:
            await self.client.admin.command("ping")
            return True
        except PyMongoError:
            return False
