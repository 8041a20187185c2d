from __future__ import annotations

import re
from typing import Optional


_NON_LETTER = re.compile(r"[^a-z\s]")
_WHITESPACE = re.compile(r"\s+")
_PROFILE_SLUG = re.compile(r"linkedin\.com/in/([^/?#]+)")


def normalize_name(name: Optional[str]) -> str:
    """Lowercase, keep only letters and whitespace, collapse spaces.

    Total: None and empty input normalize to "".
    """
    if not name:
        return ""
    lowered = str(name).lower().strip()
    letters = _NON_LETTER.sub("", lowered)
    return _WHITESPACE.sub(" ", letters).strip()


def normalize_profile_identifier(url: Optional[str]) -> str:
    """Reduce a LinkedIn profile URL to its slug.

    Unparseable values come back lowercased and trimmed so exact comparison
    still works on them.
    """
    if not url:
        return ""
    clean = str(url).lower().strip()
    m = _PROFILE_SLUG.search(clean)
    return m.group(1) if m else clean


def normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    clean = str(email).strip().lower()
    return clean or None


def name_prefix_key(normalized_name: str, length: int) -> str:
    """First token of an already normalized name, cut to `length` characters."""
    parts = normalized_name.split(" ")
    return parts[0][:length] if parts else ""
