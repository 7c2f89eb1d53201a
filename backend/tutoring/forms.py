"""
Form parsing helpers shared by the entity specifications.

Forms arrive as string mappings (browser form posts); these helpers turn them
into store payloads or raise FormValidationError with the text shown to users.
"""
from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional


REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"
INVALID_AGE_MESSAGE = "Please enter a valid age"
INVALID_DATETIME_MESSAGE = "Please enter a valid date and time"
INVALID_EXAM_SCORES_MESSAGE = "Invalid JSON format for exam scores"

CHECKBOX_ON = "on"

# fromisoformat before 3.11 only takes 3 or 6 fractional digits.
_FRACTION_RE = re.compile(r"\.(\d+)")


class FormValidationError(ValueError):
    """Raised when a submitted form cannot become a store payload."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


def text(form: Mapping[str, Any], name: str) -> str:
    value = form.get(name)
    if value is None:
        return ""
    return str(value).strip()


def optional_text(form: Mapping[str, Any], name: str) -> Optional[str]:
    """Return the stripped value or None for empty input."""
    return text(form, name) or None


def require(form: Mapping[str, Any], names: Iterable[str]) -> None:
    for name in names:
        if not text(form, name):
            raise FormValidationError(REQUIRED_FIELDS_MESSAGE, field=name)


def checkbox(form: Mapping[str, Any], name: str) -> bool:
    return text(form, name).lower() in {CHECKBOX_ON, "true", "1", "yes"}


def int_or_zero(raw: Any) -> int:
    """Parse a leading integer like a lenient number input; fall back to 0."""
    parsed = leading_int(raw)
    return parsed if parsed is not None else 0


def leading_int(raw: Any) -> Optional[int]:
    """Parse the leading integer of a number input (" 12abc" -> 12); None if absent."""
    value = str(raw or "").strip()
    sign = ""
    if value and value[0] in "+-":
        sign, value = value[0], value[1:]
    digits = ""
    for ch in value:
        if not ch.isdigit():
            break
        digits += ch
    if not digits:
        return None
    return int(sign + digits)


def parse_age(raw: str) -> int:
    age = leading_int(raw)
    if age is None or age < 1 or age > 100:
        raise FormValidationError(INVALID_AGE_MESSAGE, field="age")
    return age


def _parse_iso(raw: str) -> datetime:
    value = raw.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    value = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    return datetime.fromisoformat(value)


def parse_datetime_local(raw: str) -> str:
    """Convert a `datetime-local` value (YYYY-MM-DDTHH:MM) to ISO-8601 UTC.

    Values without an offset are taken as UTC; values with an offset are
    converted.
    """
    try:
        parsed = _parse_iso(raw)
    except ValueError:
        raise FormValidationError(INVALID_DATETIME_MESSAGE, field="date_time") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat()


def to_datetime_local(stored: Optional[str]) -> str:
    """Render a stored timestamp as a UTC `datetime-local` value ("" if unreadable)."""
    if not stored:
        return ""
    try:
        parsed = _parse_iso(str(stored))
    except ValueError:
        return ""
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M")


def parse_json_text(raw: str) -> Any:
    """Empty text means `[]`; anything else must be a JSON array."""
    if not raw.strip():
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        raise FormValidationError(INVALID_EXAM_SCORES_MESSAGE, field="exam_scores") from None
    if not isinstance(value, list):
        raise FormValidationError(INVALID_EXAM_SCORES_MESSAGE, field="exam_scores")
    return value


def pretty_json(value: Any) -> str:
    return json.dumps(value if value is not None else [], indent=2, ensure_ascii=False)


__all__ = [
    "FormValidationError",
    "REQUIRED_FIELDS_MESSAGE",
    "INVALID_AGE_MESSAGE",
    "INVALID_DATETIME_MESSAGE",
    "INVALID_EXAM_SCORES_MESSAGE",
    "CHECKBOX_ON",
    "text",
    "optional_text",
    "require",
    "checkbox",
    "leading_int",
    "int_or_zero",
    "parse_age",
    "parse_datetime_local",
    "to_datetime_local",
    "parse_json_text",
    "pretty_json",
]
