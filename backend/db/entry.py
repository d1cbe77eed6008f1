from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import func

from .database import Base

LOCATION_MAX_LENGTH = 255


class Entry(Base):
    """One recorded occurrence: a positive quantity at a location, with optional notes"""
    __tablename__ = "entries"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="entries_quantity_check"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    quantity = Column(Integer, nullable=False)
    location = Column(String(LOCATION_MAX_LENGTH), nullable=False)
    notes = Column(Text, nullable=True)

    # Both defaults come from the same statement, so created_at == updated_at on insert.
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    @property
    def to_schema(self):
        """Convert Entry model to schema dictionary format"""
        return {
            "id": self.id,
            "quantity": self.quantity,
            "location": self.location,
            "notes": self.notes,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @property
    def to_summary(self):
        """List-view shape: the full row without updated_at"""
        data = self.to_schema
        data.pop("updated_at")
        return data


Index("idx_entries_created_at", Entry.created_at.desc())
Index("idx_entries_location", Entry.location)
