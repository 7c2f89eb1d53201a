"""Progress statistics for the student progress view."""
from __future__ import annotations

import math
from typing import Any, List, Optional

from records import ExamScore


def _score_of(entry: Any) -> Optional[float]:
    if not isinstance(entry, dict):
        return None
    raw = entry.get("score")
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) else None
    if isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
        return value if math.isfinite(value) else None
    return None


def exam_score_entries(exam_scores: Any) -> List[ExamScore]:
    """Normalize free-form exam score JSON to (date, score) pairs, skipping malformed entries.

    Anything other than a list counts as no scores.
    """
    entries: List[ExamScore] = []
    if not isinstance(exam_scores, list):
        return entries
    for entry in exam_scores:
        score = _score_of(entry)
        if score is None:
            continue
        entries.append(ExamScore(date=str(entry.get("date") or ""), score=score))
    return entries


def average_score(exam_scores: Any) -> int:
    """Mean of the numeric scores rounded half up; 0 when there are none.

    >>> average_score([{"date": "2024-01-15", "score": 85}, {"date": "2024-02-20", "score": 91}])
    88
    """
    scores = [e.score for e in exam_score_entries(exam_scores)]
    if not scores:
        return 0
    return int(math.floor(sum(scores) / len(scores) + 0.5))


def format_score(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else f"{score:g}"


__all__ = ["exam_score_entries", "average_score", "format_score"]
