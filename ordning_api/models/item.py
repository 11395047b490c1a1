import uuid

from sqlalchemy import Column, DateTime, ForeignKeyConstraint, JSON, PrimaryKeyConstraint, String
from sqlalchemy.dialects.postgresql import JSONB

from ..models import Base
from .location import utcnow


def _new_item_id() -> str:
    return str(uuid.uuid4())


class Item(Base):
    __tablename__ = "items"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_items"),
        ForeignKeyConstraint(
            ["location_id"],
            ["locations.id"],
            name="fk_items_location",
            ondelete="RESTRICT",
        ),
    )

    id = Column(String(36), nullable=False, default=_new_item_id)
    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    location_id = Column(String(255), nullable=False, index=True)
    properties = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Item(id={self.id}, name={self.name}, location_id={self.location_id})>"
