"""Pydantic schemas for the JSON endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime = Field(default_factory=datetime.now)
    boards: int = Field(ge=0)
    tasks: int = Field(ge=0)
    tasks_done: int = Field(ge=0)
