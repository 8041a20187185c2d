from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class StoredPerson(BaseModel):
    """Persisted founder entity as returned by a store."""

    id: str
    name: str
    normalized_name: str
    email: str | None = None
    linkedin: str | None = None
    title: str | None = None
    bio: str | None = None
    location: str | None = None
    education: str | None = None
    experience: str | None = None
    skills: list[str] = Field(default_factory=list)
    twitter: str | None = None
    github: str | None = None
    website: str | None = None
    source: str | None = None
    pipeline_stage: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(extra="ignore")
