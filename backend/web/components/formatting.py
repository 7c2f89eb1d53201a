"""Display formatting shared by cards and tables."""

from datetime import datetime, timezone
from typing import Any, Optional


DISPLAY_FORMAT = "%b %d, %Y - %I:%M %p"


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_datetime(value: Any) -> str:
    """Render a stored timestamp as "Mar 01, 2024 - 02:30 PM" (UTC); raw text if unreadable."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value or "")
    return parsed.strftime(DISPLAY_FORMAT)


def format_date(value: Any) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value or "")
    return parsed.strftime("%b %d, %Y")
