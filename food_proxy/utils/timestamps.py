"""
Timestamp formatting shared by the health and token endpoints.
"""

from datetime import datetime, timezone


def isoformat(ts: float) -> str:
    """Render an epoch timestamp as an ISO-8601 UTC string with millisecond precision."""
    dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
