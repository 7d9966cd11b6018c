"""
Parcel Pydantic schemas.

Defines the in-memory record exchanged with the parcel store.
"""

import enum
from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator


def utc_timestamp() -> str:
    """Current UTC time in RFC3339 form, second precision."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class ParcelRecord(BaseModel):
    """
    Schema for a parcel record.
    
    `number` is 0 until the store assigns one on insert.
    """
    number: int = Field(0, description="Store-assigned parcel number")
    client: int = Field(..., description="Owning client identifier")
    status: str = Field(..., description="Parcel status")
    address: str = Field(..., description="Delivery address")
    created_at: str = Field(default_factory=utc_timestamp, description="RFC3339 creation time")
    
    @field_validator("status", mode="before")
    @classmethod
    def unwrap_enum(cls, value):
        if isinstance(value, enum.Enum):
            return value.value
        return value
    
    class Config:
        from_attributes = True
