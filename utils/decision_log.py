from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass


def log_decision(
    *,
    row_index: int,
    submitted_name: Optional[str],
    match_type: str,
    confidence: int,
    action: str,
    person_id: Optional[str] = None,
    status: str = "ok",
    error: Optional[str] = None,
) -> None:
    """Append a single JSON line describing how one import row was resolved.

    Controlled by RESOLUTION_TRACE / RESOLUTION_LOG_PATH in config/settings.py
    """
    from config.settings import get_settings
    settings = get_settings()
    if not settings.resolution_trace:
        return

    log_path = Path(settings.resolution_log_path)
    _ensure_parent_dir(log_path)

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "row_index": row_index,
        "submitted_name": submitted_name,
        "match_type": match_type,
        "confidence": confidence,
        "action": action,
        "person_id": person_id,
        "status": status,
        "error": error,
    }
    run_id = os.getenv("RUN_ID")
    if run_id:
        payload["run_id"] = run_id

    try:
        with log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
    except OSError:
        # Never break an import on trace failures
        return
