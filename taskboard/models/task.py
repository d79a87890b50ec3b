"""Task models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TaskCreate(BaseModel):
    """Request body for creating a task."""

    title: str | None = Field(None, description="Task title")


class Task(BaseModel):
    """A task record. id and timestamps are only set for persisted tasks."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(None, description="Task identifier")
    title: str = Field(..., description="Task title")
    completed: bool = Field(False, description="Completion flag")
    created_at: datetime | None = Field(None, alias="createdAt", description="Creation time")
    updated_at: datetime | None = Field(None, alias="updatedAt", description="Last update time")
