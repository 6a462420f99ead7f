from datetime import datetime, timezone

from app.content import PREVIEW_CATEGORIES, SIGNATURE_DISHES
from app.services.dashboard import (
    category_counts,
    filter_by_category,
    gallery_category_counts,
    images_by_category,
    overview_stats,
    pending_orders,
    replied_today,
    status_badge,
    today_iso,
    todays_orders,
    todays_reservations,
    total_revenue,
    unread_count,
    upcoming_reservations,
)


TODAY = "2024-06-01"


def test_today_is_utc_date():
    assert today_iso(datetime(2024, 6, 1, 23, 30, tzinfo=timezone.utc)) == "2024-06-01"


def test_todays_orders_excludes_cancelled():
    orders = [
        {"status": "pending", "createdAt": "2024-06-01T09:00:00.000Z"},
        {"status": "cancelled", "createdAt": "2024-06-01T10:00:00.000Z"},
        {"status": "delivered", "createdAt": "2024-05-31T10:00:00.000Z"},
    ]
    assert len(todays_orders(orders, TODAY)) == 1


def test_revenue_counts_delivered_only():
    orders = [
        {"status": "delivered", "totalAmount": 598},
        {"status": "delivered", "totalAmount": "99.5"},
        {"status": "pending", "totalAmount": 1000},
        {"status": "delivered"},
    ]
    assert total_revenue(orders) == 697.5
    assert len(pending_orders(orders)) == 1


def test_reservation_counters():
    reservations = [
        {"date": "2024-06-01", "status": "pending"},
        {"date": "2024-06-01", "status": "cancelled"},
        {"date": "2024-06-05", "status": "confirmed"},
        {"date": "2024-05-20", "status": "confirmed"},
    ]
    assert len(todays_reservations(reservations, TODAY)) == 1
    assert len(upcoming_reservations(reservations, TODAY)) == 1


def test_replied_today_counts_replied_messages_received_today():
    inquiries = [
        {"status": "replied", "createdAt": "2024-06-01T08:00:00.000Z"},
        {"status": "replied", "createdAt": "2024-05-31T23:59:00.000Z"},
        {"status": "read", "createdAt": "2024-06-01T09:00:00.000Z"},
        {"status": "replied"},
    ]
    assert replied_today(inquiries, TODAY) == 1
    assert replied_today([], TODAY) == 0


def test_overview_stats():
    stats = overview_stats(
        reservations=[{}, {}],
        menu=[{}, {}, {}],
        inquiries=[{"status": "unread"}, {"status": "read"}],
        orders=[{"status": "pending", "createdAt": "2024-06-01T09:00:00.000Z"}],
        today=TODAY,
    )
    assert [(s.label, s.value) for s in stats] == [
        ("Total Reservations", "2"),
        ("Menu Items", "3"),
        ("New Messages", "1"),
        ("Orders Today", "1"),
    ]
    assert unread_count([]) == 0


def test_status_badge_falls_back_to_default():
    assert status_badge("orders", "delivered").label == "Delivered"
    assert status_badge("inquiries", "bogus").label == "Unread"
    assert status_badge("reservations", None).css == "badge-secondary"


def test_signature_dish_category_filter():
    mains = filter_by_category(SIGNATURE_DISHES, "Main Course")
    assert {d["name"] for d in mains} == {"Paneer Butter Masala", "Lamb Rogan Josh", "Dal Makhani"}
    assert len(filter_by_category(SIGNATURE_DISHES, "All")) == len(SIGNATURE_DISHES)
    assert filter_by_category(SIGNATURE_DISHES, "Desserts") == []


def test_category_counts_are_computed():
    counts = dict(category_counts(SIGNATURE_DISHES, PREVIEW_CATEGORIES))
    assert counts["All"] == 6
    assert counts["Main Course"] == 3
    assert counts["Desserts"] == 0


def test_gallery_grouping():
    images = [{"category": "food"}, {"category": "food"}, {"category": "staff"}]
    assert len(images_by_category(images, "food")) == 2
    counts = dict(gallery_category_counts(images))
    assert counts == {"food": 2, "restaurant": 0, "ambiance": 0, "events": 0, "staff": 1, "other": 0}
