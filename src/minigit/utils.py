"""Display helpers for minigit output."""

from datetime import datetime, timezone

_AGE_UNITS = [
    ("year", 31536000),
    ("week", 604800),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
]


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def get_iso_timestamp() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


def humanize_date(iso_string: str) -> str:
    """Convert a commit timestamp to a relative age.

    Examples:
        "2024-01-15T10:30:45Z" -> "2 hours ago"
        "2024-01-10T10:30:45Z" -> "5 days ago"

    Unparseable timestamps are returned unchanged.
    """
    try:
        dt = datetime.fromisoformat(iso_string.rstrip("Z"))
    except ValueError:
        return iso_string

    now = datetime.now(timezone.utc).replace(tzinfo=None)
    seconds = (now - dt).total_seconds()
    for unit, span in _AGE_UNITS:
        if seconds >= span:
            count = int(seconds // span)
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "just now"
