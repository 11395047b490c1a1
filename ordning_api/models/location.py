from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKeyConstraint, PrimaryKeyConstraint, String
from ..models import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Location(Base):
    __tablename__ = "locations"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_locations"),
        ForeignKeyConstraint(
            ["parent_location_id"],
            ["locations.id"],
            name="fk_locations_parent_location",
            ondelete="RESTRICT",
        ),
    )

    id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    parent_location_id = Column(String(255), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Location(id={self.id}, name={self.name}, parent_location_id={self.parent_location_id})>"
