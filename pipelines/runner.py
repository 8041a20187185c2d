from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from utils.logging_setup import init_logging


@dataclass
class RunContext:
    # Raw founder rows (dicts or PersonRecord) in submission order
    people: list = field(default_factory=list)
    # row index -> "merge" | "new" | "skip"
    decisions: Dict[int, str] = field(default_factory=dict)
    outcome: Optional[object] = None
    candidates: list = field(default_factory=list)
    meta: dict = field(default_factory=dict)


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        init_logging()
        for step in self.steps:
            name = type(step).__name__
            started = time.monotonic()
            ctx = step.run(ctx)
            logging.debug(
                f"{name} done",
                extra={"step": name, "status": "ok", "duration_ms": int((time.monotonic() - started) * 1000)},
            )
        return ctx
