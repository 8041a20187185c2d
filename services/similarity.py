from __future__ import annotations

import math
from typing import Optional

from rapidfuzz.distance import Levenshtein

from services.normalize import normalize_name


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit cost for insertion, deletion and substitution."""
    return Levenshtein.distance(a, b)


def name_similarity(a: Optional[str], b: Optional[str]) -> int:
    """Similarity of two person names on a 0-100 scale."""
    norm_a = normalize_name(a)
    norm_b = normalize_name(b)
    if norm_a == norm_b:
        return 100

    max_len = max(len(norm_a), len(norm_b))
    if max_len == 0:
        return 100
    distance = levenshtein_distance(norm_a, norm_b)
    # Round half up, not Python's banker's rounding
    return int(math.floor((max_len - distance) / max_len * 100 + 0.5))
