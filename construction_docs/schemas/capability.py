"""Capability API schemas."""

from pydantic import BaseModel, Field


class CapabilitiesResponse(BaseModel):
    """Response for GET /capabilities/me: what the caller's role may do."""

    role: str | None = None
    capabilities: list[str] = Field(default_factory=list)
