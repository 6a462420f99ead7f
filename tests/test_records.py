from app.services.realtime import Snapshot
from app.services.records import (
    SEARCH_FIELDS,
    filter_records,
    list_collection,
    parse_timestamp,
    snapshot_to_records,
    sort_newest_first,
)


INQUIRIES = {
    "k1": {"name": "Alice", "email": "alice@example.com", "message": "Parking?",
           "status": "unread", "createdAt": "2024-06-01T10:00:00.000Z"},
    "k2": {"name": "Bob", "email": "bob@example.com", "message": "Vegan options?",
           "status": "read", "createdAt": "2024-06-02T10:00:00.000Z"},
}


def test_parse_timestamp_formats():
    assert parse_timestamp("2024-06-01T10:00:00.000Z").tzinfo is not None
    assert parse_timestamp("2024-06-01T10:00:00") is not None
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None


def test_sort_newest_first_puts_untimestamped_last():
    records = [
        {"id": "a", "createdAt": "2024-06-01T10:00:00.000Z"},
        {"id": "b"},
        {"id": "c", "createdAt": "2024-06-03T10:00:00.000Z"},
        {"id": "d", "createdAt": "not a date"},
    ]
    ids = [r["id"] for r in sort_newest_first(records)]
    assert ids[:2] == ["c", "a"]
    assert set(ids[2:]) == {"b", "d"}


def test_snapshot_to_records_sorts_by_collection_field():
    records = snapshot_to_records(Snapshot("inquiries", INQUIRIES))
    assert [r["name"] for r in records] == ["Bob", "Alice"]
    assert records[0]["id"] == "k2"


def test_menu_keeps_key_order():
    menu = {"k1": {"name": "Naan"}, "k2": {"name": "Dal"}}
    assert [r["name"] for r in snapshot_to_records(Snapshot("menu", menu))] == ["Naan", "Dal"]


def test_empty_snapshot_clears_list():
    assert list_collection(Snapshot("inquiries", None)) == []


def test_unread_filter():
    records = list_collection(Snapshot("inquiries", INQUIRIES), status="unread")
    assert [r["name"] for r in records] == ["Alice"]


def test_search_is_case_insensitive_and_field_scoped():
    records = snapshot_to_records(Snapshot("inquiries", INQUIRIES))
    fields = SEARCH_FIELDS["inquiries"]
    assert [r["name"] for r in filter_records(records, "VEGAN", fields)] == ["Bob"]
    assert [r["name"] for r in filter_records(records, "alice@", fields)] == ["Alice"]
    assert filter_records(records, "read", ("name",)) == []


def test_filters_intersect():
    reservations = {
        "r1": {"name": "Ravi", "phone": "111", "date": "2024-06-01", "status": "pending",
               "createdAt": "2024-05-01T00:00:00.000Z"},
        "r2": {"name": "Ravi", "phone": "222", "date": "2024-06-02", "status": "pending",
               "createdAt": "2024-05-02T00:00:00.000Z"},
        "r3": {"name": "Sita", "phone": "333", "date": "2024-06-01", "status": "confirmed",
               "createdAt": "2024-05-03T00:00:00.000Z"},
    }
    snap = Snapshot("reservations", reservations)
    assert [r["id"] for r in list_collection(snap, search="ravi", date="2024-06-01")] == ["r1"]
    assert [r["id"] for r in list_collection(snap, status="all", date="2024-06-01")] == ["r3", "r1"]
    assert list_collection(snap, search="ravi", status="confirmed") == []


def test_orders_searchable_by_key():
    orders = {"-NxAbc": {"customerName": "Asha", "customerPhone": "999",
                         "createdAt": "2024-06-01T00:00:00.000Z"}}
    assert len(list_collection(Snapshot("orders", orders), search="nxabc")) == 1
