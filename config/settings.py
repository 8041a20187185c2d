from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


def _bool_env(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Core/runtime
    db_path: str
    run_env: str
    log_level: str

    # Matching
    name_match_threshold: int
    name_prefix_length: int

    # Import defaults
    import_chunk_size: int
    import_source: str
    import_pipeline_stage: str
    default_founder_role: str

    # Decision tracing
    resolution_trace: bool = False
    resolution_log_path: str = "logs/resolution_decisions.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    threshold = _int_env("NAME_MATCH_THRESHOLD", 85)
    if not 0 <= threshold <= 100:
        raise RuntimeError("NAME_MATCH_THRESHOLD must be between 0 and 100")
    prefix_length = _int_env("NAME_PREFIX_LENGTH", 2)
    if prefix_length < 1:
        raise RuntimeError("NAME_PREFIX_LENGTH must be at least 1")
    chunk_size = _int_env("IMPORT_CHUNK_SIZE", 50)
    if chunk_size < 1:
        raise RuntimeError("IMPORT_CHUNK_SIZE must be at least 1")

    return Settings(
        db_path=os.getenv("DB_PATH", "founders.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        name_match_threshold=threshold,
        name_prefix_length=prefix_length,
        import_chunk_size=chunk_size,
        import_source=os.getenv("IMPORT_SOURCE", "csv_upload"),
        import_pipeline_stage=os.getenv("IMPORT_PIPELINE_STAGE", "Screening"),
        default_founder_role=os.getenv("DEFAULT_FOUNDER_ROLE", "Founder"),
        resolution_trace=_bool_env("RESOLUTION_TRACE"),
        resolution_log_path=os.getenv("RESOLUTION_LOG_PATH", "logs/resolution_decisions.jsonl"),
    )
