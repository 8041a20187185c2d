from __future__ import annotations

import re
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


_TEXT_FIELDS = (
    "email",
    "linkedin",
    "title",
    "bio",
    "location",
    "education",
    "experience",
    "twitter",
    "github",
    "website",
)


class PersonRecord(BaseModel):
    """Incoming founder row (CSV, JSON or form). Untrusted until validated by the importer."""

    name: str | None = None
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
    company_name: str | None = None
    role: str | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator(
        "name", "email", "linkedin", "title", "bio", "location", "education",
        "experience", "twitter", "github", "website", "company_name", "role",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (int, float)):
            value = str(value)
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("skills", mode="before")
    @classmethod
    def _split_skills(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [s.strip() for s in re.split(r"[,;]", value) if s.strip()]
        return value

    def to_fields(self) -> Dict[str, Any]:
        """Project into store fields. Empty values are left out."""
        fields: Dict[str, Any] = {}
        if self.name:
            fields["name"] = self.name
        for key in _TEXT_FIELDS:
            value = getattr(self, key)
            if value:
                fields[key] = value
        if self.skills:
            fields["skills"] = list(self.skills)
        return fields
