"""
User data models for the Users service.
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass, asdict

from pydantic import BaseModel, ConfigDict, Field


class UserCreateRequest(BaseModel):
    """Request model for creating a user."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address, used as the lookup key")

    def to_document(self) -> Dict[str, Any]:
        """Fields to persist; unset fields are left out of the document."""
        return self.model_dump(exclude_none=True)


class UserRecord(BaseModel):
    """Stored user as returned to clients and held in the cache."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Store-assigned identifier")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserRecord":
        """Build a record from a raw store document."""
        return cls(
            id=str(document["_id"]),
            name=document.get("name"),
            email=document.get("email"),
        )

    def to_json(self) -> Dict[str, Any]:
        """JSON body; absent fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass
class FieldError:
    """A single failed field constraint."""
    path: str
    msg: str
    value: Any = None
    type: str = "field"
    location: str = "body"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CacheResult:
    """Outcome of a read-through lookup."""
    record: Optional[Dict[str, Any]] = None
    hit: bool = False

    @property
    def found(self) -> bool:
        return self.record is not None
