from pydantic import BaseModel, field_validator
from typing import Any, List, Optional
from datetime import datetime


class EntryCreate(BaseModel):
    # Raw JSON values: the router only checks presence with a truthiness test
    # (0, "" and null count as missing) and the store converts or rejects the rest.
    quantity: Any = None
    location: Any = None
    notes: Any = None

    @field_validator("notes")
    @classmethod
    def _blank_notes_to_none(cls, v: Any) -> Any:
        return v or None


class EntrySummary(BaseModel):
    id: int
    quantity: int
    location: str
    notes: Optional[str] = None
    created_at: datetime


class EntryRead(EntrySummary):
    updated_at: datetime


class EntryList(BaseModel):
    entries: List[EntrySummary]
    count: int
