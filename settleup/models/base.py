from datetime import datetime, timezone

from bson import ObjectId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a string document id."""
    return str(ObjectId())
