from datetime import UTC, datetime
from typing import Any, Optional


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a Postgres/ISO timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
