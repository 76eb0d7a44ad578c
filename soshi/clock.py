from datetime import datetime, timezone


def utcnow() -> datetime:
    # Columns are naive UTC, so drop the tzinfo after reading the clock.
    return datetime.now(timezone.utc).replace(tzinfo=None)
