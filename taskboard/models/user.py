"""User models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """Request body for creating a user. Presence is checked by the service."""

    name: str | None = Field(None, description="Display name")
    email: str | None = Field(None, description="Email address, unique when persisted")


class User(BaseModel):
    """A user record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | int = Field(..., description="User identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    created_at: datetime | None = Field(None, alias="createdAt", description="Creation time")
