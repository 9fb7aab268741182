"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    """Payload for creating a scheduling session."""

    title: str


class SubmitAvailabilityRequest(BaseModel):
    """Payload for one participant's availability."""

    name: str
    slots: list[str] = Field(default_factory=list)
