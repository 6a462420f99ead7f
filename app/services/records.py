"""
Record list helpers shared by the admin tabs and the JSON API.

Every admin list is rebuilt from a full collection snapshot: decode the
{key: record} mapping, sort it, then apply the search / status / date
filters chosen in the tab.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence

from app.models import Collection
from app.services.realtime import Snapshot


SEARCH_FIELDS: dict[str, tuple[str, ...]] = {
    Collection.RESERVATIONS.value: ("name", "email", "phone"),
    Collection.ORDERS.value: ("customerName", "customerPhone", "id"),
    Collection.INQUIRIES.value: ("name", "email", "message"),
    Collection.MENU.value: ("name", "description", "category"),
    Collection.GALLERY.value: ("name", "category"),
}

# None keeps key order, which is creation order for push keys
SORT_FIELDS: dict[str, Optional[str]] = {
    Collection.RESERVATIONS.value: "createdAt",
    Collection.ORDERS.value: "createdAt",
    Collection.INQUIRIES.value: "createdAt",
    Collection.GALLERY.value: "uploadedAt",
    Collection.MENU.value: None,
}

ALL = "all"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (with or without `Z`) into an aware datetime."""
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_newest_first(records: Iterable[dict], field: str = "createdAt") -> list[dict]:
    """
    Sort records by `field` descending.

    Records without a parseable timestamp go last, in their original order.
    """
    floor = datetime.min.replace(tzinfo=timezone.utc)

    def sort_key(record: dict) -> tuple[bool, datetime]:
        ts = parse_timestamp(record.get(field))
        return (ts is not None, ts or floor)

    return sorted(records, key=sort_key, reverse=True)


def snapshot_to_records(snapshot: Snapshot) -> list[dict]:
    """Replace-the-whole-list decoding of one snapshot."""
    records = snapshot.records()
    sort_field = SORT_FIELDS.get(snapshot.collection)
    if sort_field:
        records = sort_newest_first(records, sort_field)
    return records


def matches_search(record: dict, term: str, fields: Sequence[str]) -> bool:
    """Case-insensitive substring match of `term` against any of `fields`."""
    needle = term.strip().lower()
    if not needle:
        return True
    return any(needle in str(record.get(f) or "").lower() for f in fields)


def filter_records(
    records: Iterable[dict],
    search: str = "",
    fields: Sequence[str] = (),
    status: Optional[str] = ALL,
    date: Optional[str] = None,
) -> list[dict]:
    """
    Intersection of the search, status and date filters.

    `status` of "all" (or empty) and an empty `date` disable those filters.
    """
    result = []
    for record in records:
        if search and not matches_search(record, search, fields):
            continue
        if status and status != ALL and record.get("status") != status:
            continue
        if date and record.get("date") != date:
            continue
        result.append(record)
    return result


def list_collection(
    snapshot: Snapshot,
    search: str = "",
    status: Optional[str] = ALL,
    date: Optional[str] = None,
) -> list[dict]:
    """Decode, sort and filter a snapshot with the collection's search fields."""
    return filter_records(
        snapshot_to_records(snapshot),
        search=search,
        fields=SEARCH_FIELDS.get(snapshot.collection, ()),
        status=status,
        date=date,
    )
