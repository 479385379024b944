"""Small helpers shared across endpoints."""

import uuid
from datetime import datetime, timezone


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_error_reference() -> str:
    """Generate an opaque correlation reference for server errors."""
    return f"ErrorID-{uuid.uuid4()}"
