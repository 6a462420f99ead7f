"""
Dashboard counters, status badges and category helpers.

Pure functions over decoded record lists. "Today" is the UTC calendar date,
matching the UTC `createdAt` timestamps written by the public forms.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from app.models import InquiryStatus, OrderStatus, ReservationStatus


@dataclass(frozen=True)
class Badge:
    label: str
    css: str


@dataclass(frozen=True)
class StatCard:
    label: str
    value: str
    icon: str
    tab: str


STATUS_BADGES: dict[str, dict[str, Badge]] = {
    "reservations": {
        ReservationStatus.PENDING.value: Badge("Pending", "badge-secondary"),
        ReservationStatus.CONFIRMED.value: Badge("Confirmed", "badge-success"),
        ReservationStatus.CANCELLED.value: Badge("Cancelled", "badge-destructive"),
    },
    "orders": {
        OrderStatus.PENDING.value: Badge("Pending", "badge-secondary"),
        OrderStatus.CONFIRMED.value: Badge("Confirmed", "badge-default"),
        OrderStatus.PREPARING.value: Badge("Preparing", "badge-default"),
        OrderStatus.READY.value: Badge("Ready", "badge-default"),
        OrderStatus.DELIVERED.value: Badge("Delivered", "badge-default"),
        OrderStatus.CANCELLED.value: Badge("Cancelled", "badge-destructive"),
    },
    "inquiries": {
        InquiryStatus.UNREAD.value: Badge("Unread", "badge-secondary"),
        InquiryStatus.READ.value: Badge("Read", "badge-info"),
        InquiryStatus.REPLIED.value: Badge("Replied", "badge-success"),
    },
}

DEFAULT_STATUS = {
    "reservations": ReservationStatus.PENDING.value,
    "orders": OrderStatus.PENDING.value,
    "inquiries": InquiryStatus.UNREAD.value,
}

GALLERY_CATEGORIES = ["food", "restaurant", "ambiance", "events", "staff", "other"]

GALLERY_BADGES = {
    "food": "badge-default",
    "restaurant": "badge-secondary",
    "ambiance": "badge-outline",
    "events": "badge-destructive",
    "staff": "badge-default",
    "other": "badge-secondary",
}


def status_badge(kind: str, status: Optional[str]) -> Badge:
    """Badge for a status; unknown values render as the kind's default status."""
    badges = STATUS_BADGES[kind]
    return badges.get(status or "", badges[DEFAULT_STATUS[kind]])


def gallery_badge(category: str) -> str:
    return GALLERY_BADGES.get(category, "badge-secondary")


def today_iso(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).astimezone(timezone.utc).date().isoformat()


def _amount(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


# =============================================================================
# ORDERS
# =============================================================================

def todays_orders(orders: Iterable[dict], today: Optional[str] = None) -> list[dict]:
    """Orders created today that were not cancelled."""
    day = today or today_iso()
    return [
        o for o in orders
        if str(o.get("createdAt") or "").startswith(day)
        and o.get("status") != OrderStatus.CANCELLED.value
    ]


def pending_orders(orders: Iterable[dict]) -> list[dict]:
    return [o for o in orders if o.get("status") == OrderStatus.PENDING.value]


def total_revenue(orders: Iterable[dict]) -> float:
    """Sum of totalAmount over delivered orders."""
    return round(sum(
        _amount(o.get("totalAmount"))
        for o in orders
        if o.get("status") == OrderStatus.DELIVERED.value
    ), 2)


# =============================================================================
# RESERVATIONS & INQUIRIES
# =============================================================================

def todays_reservations(reservations: Iterable[dict], today: Optional[str] = None) -> list[dict]:
    day = today or today_iso()
    return [
        r for r in reservations
        if r.get("date") == day and r.get("status") != ReservationStatus.CANCELLED.value
    ]


def upcoming_reservations(reservations: Iterable[dict], today: Optional[str] = None) -> list[dict]:
    """Reservations dated after today (ISO dates compare lexically)."""
    day = today or today_iso()
    return [
        r for r in reservations
        if str(r.get("date") or "") > day and r.get("status") != ReservationStatus.CANCELLED.value
    ]


def unread_count(inquiries: Iterable[dict]) -> int:
    return sum(1 for i in inquiries if i.get("status") == InquiryStatus.UNREAD.value)


def replied_today(inquiries: Iterable[dict], today: Optional[str] = None) -> int:
    """Replied inquiries that were received today (by `createdAt`)."""
    day = today or today_iso()
    return sum(
        1 for i in inquiries
        if i.get("status") == InquiryStatus.REPLIED.value
        and str(i.get("createdAt") or "").startswith(day)
    )


def overview_stats(
    reservations: Sequence[dict],
    menu: Sequence[dict],
    inquiries: Sequence[dict],
    orders: Sequence[dict],
    today: Optional[str] = None,
) -> list[StatCard]:
    """The four cards on the overview tab."""
    return [
        StatCard("Total Reservations", str(len(reservations)), "users", "reservations"),
        StatCard("Menu Items", str(len(menu)), "chef-hat", "menu"),
        StatCard("New Messages", str(unread_count(inquiries)), "message", "messages"),
        StatCard("Orders Today", str(len(todays_orders(orders, today))), "cart", "orders"),
    ]


# =============================================================================
# CATEGORIES
# =============================================================================

def filter_by_category(items: Sequence[dict], category: str, all_label: str = "All") -> list[dict]:
    """Items whose category equals `category`; the "All" label keeps everything."""
    if category == all_label:
        return list(items)
    return [item for item in items if item.get("category") == category]


def category_counts(
    items: Sequence[dict],
    categories: Sequence[str],
    all_label: Optional[str] = "All",
) -> list[tuple[str, int]]:
    counts = [(c, sum(1 for i in items if i.get("category") == c)) for c in categories]
    if all_label is not None:
        counts.insert(0, (all_label, len(items)))
    return counts


def images_by_category(images: Sequence[dict], category: str) -> list[dict]:
    return [img for img in images if img.get("category") == category]


def gallery_category_counts(images: Sequence[dict]) -> list[tuple[str, int]]:
    return category_counts(images, GALLERY_CATEGORIES, all_label=None)
