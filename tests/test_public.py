import asyncio
import re
from urllib.parse import parse_qs, urlparse

from app.services.realtime import MockRealtimeDatabase, get_realtime_db


RESERVATION = {
    "name": "Ravi Kumar",
    "email": "ravi@example.com",
    "phone": "+91 98765 00000",
    "date": "2030-06-01",
    "time": "7:30 PM",
    "guests": "4",
}


def _toasts(response):
    return parse_qs(urlparse(response.headers["location"]).query).get("toast", [])


def _stored(db, collection):
    return asyncio.run(db.get(collection)) or {}


def test_home_renders_all_sections(client):
    response = client.get("/")
    assert response.status_code == 200
    for anchor in ('id="hero"', 'id="about"', 'id="menu"', 'id="contact"', 'id="reserve-dialog"'):
        assert anchor in response.text
    assert "Royal Chicken Biryani" in response.text
    assert "11:00 AM" in response.text


def test_home_category_filter(client):
    response = client.get("/", params={"category": "Breads"})
    assert "Garlic Naan" in response.text
    assert "Royal Chicken Biryani" not in response.text
    assert re.search(r"Desserts\s*<span class=\"chip-count\">0</span>", response.text)


def test_home_shows_toast_from_query(client):
    response = client.get("/", params={"toast": "reservation_sent"})
    assert "Reservation Confirmed!" in response.text
    assert "toast-default" in response.text


def test_unknown_toast_code_is_ignored(client):
    response = client.get("/", params={"toast": "<script>"})
    assert response.status_code == 200
    assert 'class="toast ' not in response.text


def test_reservation_is_stored_pending(client, db):
    response = client.post(
        "/reservations",
        data={**RESERVATION, "specialRequest": "Window seat"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert _toasts(response) == ["reservation_sent"]

    [record] = _stored(db, "reservations").values()
    assert record["status"] == "pending"
    assert record["guests"] == 4
    assert record["specialRequest"] == "Window seat"
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", record["createdAt"])


def test_reservation_accepts_plural_special_requests_field(client, db):
    client.post("/reservations", data={**RESERVATION, "specialRequests": "High chair"}, follow_redirects=False)
    [record] = _stored(db, "reservations").values()
    assert record["specialRequest"] == "High chair"


def test_reservation_without_special_request(client, db):
    client.post("/reservations", data=RESERVATION, follow_redirects=False)
    [record] = _stored(db, "reservations").values()
    assert record["specialRequest"] == ""


def test_reservation_long_special_request_is_stored(client, db):
    request_text = "Anniversary dinner, please arrange flowers and a quiet corner table. " * 10
    response = client.post(
        "/reservations",
        data={**RESERVATION, "specialRequest": request_text},
        follow_redirects=False,
    )
    assert _toasts(response) == ["reservation_sent"]

    [record] = _stored(db, "reservations").values()
    assert record["specialRequest"] == request_text.strip()


def test_reservation_missing_field_writes_nothing(client, db):
    data = {**RESERVATION, "phone": ""}
    response = client.post("/reservations", data=data, follow_redirects=False)
    assert response.status_code == 303
    assert _toasts(response) == ["reservation_invalid"]
    assert response.headers["location"].endswith("#reserve")
    assert _stored(db, "reservations") == {}


def test_reservation_backend_failure_shows_error(client):
    client.app.dependency_overrides[get_realtime_db] = lambda: MockRealtimeDatabase(failure_rate=1.0)
    response = client.post("/reservations", data=RESERVATION, follow_redirects=False)
    assert _toasts(response) == ["reservation_failed"]

    page = client.get(response.headers["location"])
    assert "Failed to submit reservation. Please try again." in page.text
    assert "toast-destructive" in page.text


def test_contact_message_is_stored_unread(client, db):
    response = client.post(
        "/contact",
        data={"name": "Alice", "email": "alice@example.com", "message": "Do you cater?"},
        follow_redirects=False,
    )
    assert _toasts(response) == ["inquiry_sent"]

    [record] = _stored(db, "inquiries").values()
    assert record["status"] == "unread"
    assert record["phone"] == ""
    assert record["message"] == "Do you cater?"


def test_contact_long_message_is_stored(client, db):
    message = "We are planning a wedding reception for 200 guests. " * 50
    response = client.post(
        "/contact",
        data={"name": "Alice", "email": "alice@example.com",
              "phone": "+91 98765 43210 ext 12", "message": message},
        follow_redirects=False,
    )
    assert _toasts(response) == ["inquiry_sent"]

    [record] = _stored(db, "inquiries").values()
    assert record["message"] == message.strip()
    assert record["phone"] == "+91 98765 43210 ext 12"


def test_contact_blank_message_writes_nothing(client, db):
    response = client.post(
        "/contact",
        data={"name": "Alice", "email": "alice@example.com", "message": "   "},
        follow_redirects=False,
    )
    assert _toasts(response) == ["inquiry_invalid"]
    assert response.headers["location"].endswith("#contact")
    assert _stored(db, "inquiries") == {}


def test_contact_missing_name_writes_nothing(client, db):
    response = client.post(
        "/contact",
        data={"email": "alice@example.com", "message": "Do you cater?"},
        follow_redirects=False,
    )
    assert _toasts(response) == ["inquiry_invalid"]
    assert _stored(db, "inquiries") == {}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "operational"
    assert data["realtime_database"] == "healthy"
    assert data["storage"] == "healthy"
