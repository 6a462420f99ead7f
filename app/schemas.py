"""
Pydantic Schemas for Form and API Validation

Records are written to the realtime tree with camelCase keys (`createdAt`,
`isVeg`, `customerName`, ...). Every schema here accepts either the Python
field name or that wire alias, and `to_record()` dumps the wire shape.
"""

import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models import InquiryStatus, OrderStatus, OrderType, ReservationStatus


EMAIL_RE = re.compile(r"^[\w\.\+-]+@[\w\.-]+\.\w+$")


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a `Z` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RecordModel(BaseModel):
    """Base for everything stored in the tree."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def _validate_email(v: str) -> str:
    if not EMAIL_RE.match(v):
        raise ValueError("Invalid email format")
    return v


# =============================================================================
# PUBLIC FORMS
# =============================================================================

class ReservationCreate(RecordModel):
    """Table reservation submitted from the public site. Only presence is checked."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1, examples=["2024-06-01"])
    time: str = Field(..., min_length=1, examples=["7:30 PM"])
    guests: int
    special_request: Optional[str] = Field(default="")
    status: ReservationStatus = ReservationStatus.PENDING
    created_at: str = Field(default_factory=utc_timestamp)

    @field_validator("special_request", mode="before")
    @classmethod
    def blank_special_request(cls, v: Optional[str]) -> str:
        return v or ""


class InquiryCreate(RecordModel):
    """Contact form message."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: Optional[str] = Field(default="")
    message: str = Field(..., min_length=1)
    status: InquiryStatus = InquiryStatus.UNREAD
    created_at: str = Field(default_factory=utc_timestamp)

    @field_validator("phone", mode="before")
    @classmethod
    def blank_phone(cls, v: Optional[str]) -> str:
        return v or ""


# =============================================================================
# ADMIN FORMS
# =============================================================================

class MenuItemForm(RecordModel):
    """Menu item as written by the admin menu tab (full overwrite)."""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    price: float = Field(..., ge=0)
    category: str = Field(default="", max_length=50)
    image: str = Field(default="")
    is_veg: bool = True
    is_available: bool = True


class GalleryImageRecord(RecordModel):
    """Metadata record pointing at an uploaded gallery blob."""
    url: str
    name: str
    category: str = "food"
    uploaded_at: str = Field(default_factory=utc_timestamp)


# =============================================================================
# ORDERS
# =============================================================================

class OrderItem(RecordModel):
    """Single line of an order."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Royal Chicken Biryani"])
    quantity: int = Field(..., ge=1, le=99, examples=[2])
    price: float = Field(..., ge=0, examples=[299])


class OrderCreate(RecordModel):
    """Request schema for creating a new order."""
    customer_name: str = Field(..., min_length=1, max_length=100, examples=["Asha Rao"])
    customer_phone: str = Field(..., min_length=1, max_length=20, examples=["9876543210"])
    customer_email: Optional[str] = Field(None, max_length=255)
    address: str = Field(default="", max_length=255)
    items: List[OrderItem] = Field(..., min_length=1)
    order_type: OrderType = OrderType.DELIVERY
    delivery_time: Optional[str] = None
    special_instructions: Optional[str] = Field(None, max_length=500)

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        return _validate_email(v)

    @property
    def total_amount(self) -> float:
        return round(sum(item.quantity * item.price for item in self.items), 2)

    def to_record(self) -> dict[str, Any]:
        record = self.model_dump(by_alias=True, mode="json", exclude_none=True)
        record["totalAmount"] = self.total_amount
        record["status"] = OrderStatus.PENDING.value
        record["createdAt"] = utc_timestamp()
        return record


class OrderCreateResponse(BaseModel):
    """Response after successfully creating an order."""
    success: bool
    message: str
    order_id: str
    total_amount: float


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    realtime_database: str
    storage: str
    timestamp: datetime
