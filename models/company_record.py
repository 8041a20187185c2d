from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CompanyRef(BaseModel):
    """Minimal company shape returned by the company lookup."""

    id: str
    name: str

    model_config = ConfigDict(extra="ignore")
