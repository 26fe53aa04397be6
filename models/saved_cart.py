from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime

from models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SavedCart(Base):
    """
    Server-side copy of a buyer's cart, keyed like the browser storage entry.

    The payload is the JSON-serialized CartDTO, stored as-is.
    """
    __tablename__ = 'saved_carts'

    storage_key = Column(String(255), primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
