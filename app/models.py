"""
Data Model

Records live as flat JSON objects under generated keys inside named
collections of a single realtime tree:

    menu/{key}          MenuItem
    reservations/{key}  Reservation
    orders/{key}        Order
    inquiries/{key}     ContactInquiry
    gallery/{key}       GalleryImage

The SQL-backed tree stores every node of every collection in one table.
Status enums are plain string values. Nothing enforces transitions between them.
"""

import enum

from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from app.database import Base


class Collection(str, enum.Enum):
    """Top-level collections of the realtime tree."""
    MENU = "menu"
    RESERVATIONS = "reservations"
    ORDERS = "orders"
    INQUIRIES = "inquiries"
    GALLERY = "gallery"


class ReservationStatus(str, enum.Enum):
    """Reservation workflow."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderType(str, enum.Enum):
    """Order type - Pickup or Delivery."""
    DELIVERY = "delivery"
    PICKUP = "pickup"


class InquiryStatus(str, enum.Enum):
    """Contact inquiry workflow."""
    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"


class RealtimeRecord(Base):
    """
    One child node of a collection in the SQL-backed realtime tree.

    `key` is the generated push ID, `data` the JSON record exactly as the
    public and admin pages read and write it.
    """
    __tablename__ = "realtime_records"
    __table_args__ = (
        UniqueConstraint("collection", "key", name="uq_realtime_records_collection_key"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    collection = Column(String(50), nullable=False, index=True)
    key = Column(String(64), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<RealtimeRecord {self.collection}/{self.key}>"
