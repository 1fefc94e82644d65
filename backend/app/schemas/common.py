"""
Murmur Backend — Shared Schema Base and Envelope Models
=========================================================

What:  `CamelModel` base plus the small response envelopes shared by all
       routes (errors, messages, health).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for every API schema.

    - alias_generator=to_camel: JSON keys are camelCase
    - populate_by_name: services and tests may use the snake_case names
    - from_attributes: schemas validate directly from ORM instances
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """
    Error body returned for every failed request.

    Example:
        {"error": "Post not found"}
    """
    error: str = Field(description="Human-readable error description")


class MessageResponse(BaseModel):
    """Plain confirmation returned by follow/unfollow."""
    message: str


class HealthResponse(CamelModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
