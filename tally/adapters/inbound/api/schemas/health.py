from typing import Optional

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    status: str = Field(
        ...,
        description="Status of the check (e.g., 'healthy').",
        examples=["healthy"],
    )
    error: Optional[str] = Field(
        None,
        description="Error message if unhealthy.",
        examples=["HALF_EVEN rounded 2.5 to 3"],
    )


class ServiceHealthResponse(BaseModel):
    status: str = Field(
        ..., description="Overall service status.", examples=["healthy"]
    )
    checks: dict[str, HealthCheckResponse]
