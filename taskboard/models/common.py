"""Common models used across the API."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    message: str | None = Field(None, description="Error detail (non-production only)")


class DatabaseStatus(BaseModel):
    """Connection state of the persistent store."""

    phase: str = Field(..., description="Connection phase")
    host: str | None = Field(None, description="Server host while connected")
    port: int | None = Field(None, description="Server port while connected")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    message: str = Field(..., description="Human readable status message")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Check timestamp"
    )
    environment: str = Field(..., description="Deployment environment")
    db: DatabaseStatus = Field(..., description="Database connection state")
