"""Health check related Pydantic schemas."""

from datetime import datetime
from pydantic import BaseModel


class ServiceStatus(BaseModel):
    """Schema for individual service status."""

    database: str
    news: str
    jobs: str
    stock: str
    tone: str


class HealthResponse(BaseModel):
    """Response schema for health check."""

    status: str  # 'ok', 'degraded', 'down'
    timestamp: datetime
    services: ServiceStatus
