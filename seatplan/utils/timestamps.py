"""
Timestamp helpers for saved versions
"""

from datetime import datetime, timezone

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def format_saved_at(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with milliseconds, e.g. 2024-06-15T18:30:00.000Z"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"

def parse_saved_at(value: str) -> datetime:
    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment
