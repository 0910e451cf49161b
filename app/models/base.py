from datetime import datetime, timezone

from bson import ObjectId
from pydantic import BaseModel, Field, ConfigDict


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """New record id (ObjectId hex, sortable by creation time)."""
    return str(ObjectId())


class RecordModel(BaseModel):
    """Base for records persisted whole through the key-value store."""
    id: str = Field(default_factory=generate_id)
    created_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True
    )

    def to_record(self) -> dict:
        # datetimes stay native so the mongo backend stores BSON dates
        return self.model_dump()
