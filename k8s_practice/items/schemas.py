"""Pydantic schemas for items."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemCreate(BaseModel):
    """Schema for creating a new item.

    ``name`` is optional here so that a missing name can be reported as a
    client error by the endpoint rather than as a schema violation.
    """

    name: str | None = Field(None, max_length=255)

    @field_validator("name", mode="after")
    @classmethod
    def strip_whitespace(cls, v: str | None) -> str | None:
        """Strip leading/trailing whitespace; blank names become None."""
        if v is None:
            return None
        return v.strip() or None


class ItemResponse(BaseModel):
    """Schema for item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime


class ItemList(BaseModel):
    """Schema for the recent items listing."""

    message: str
    data: list[ItemResponse]


class ItemCreated(BaseModel):
    """Schema for the item creation result."""

    message: str
    item: ItemResponse
