"""
Public restaurant site.

    - GET  /               : landing page (hero, about, menu preview, contact)
    - POST /reservations   : table reservation form
    - POST /contact        : contact form

Form posts validate with the pydantic schemas, push one record on success,
and always answer with a 303 back to the landing page carrying a toast.
"""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from app import content
from app.core.config import get_settings
from app.models import Collection
from app.routes.common import redirect_with_toast, render
from app.schemas import InquiryCreate, ReservationCreate
from app.services.dashboard import category_counts, filter_by_category
from app.services.realtime import BaseRealtimeDatabase, get_realtime_db


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Public"])

RESERVATION_FIELDS = ("name", "email", "phone", "date", "time", "guests")
INQUIRY_FIELDS = ("name", "email", "phone", "message")


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, category: str = Query("All")) -> HTMLResponse:
    """Landing page; `category` filters the signature dish preview."""
    context = {
        "nav_links": content.NAV_LINKS,
        "hero": content.HERO,
        "about": content.ABOUT,
        "dishes": filter_by_category(content.SIGNATURE_DISHES, category),
        "category_counts": category_counts(content.SIGNATURE_DISHES, content.PREVIEW_CATEGORIES),
        "active_category": category,
        "time_slots": content.TIME_SLOTS,
        "guest_options": content.GUEST_OPTIONS,
        "footer_links": content.FOOTER_LINKS,
        "footer_services": content.FOOTER_SERVICES,
        "social_links": content.SOCIAL_LINKS,
        "contact_info": content.contact_info(get_settings()),
    }
    return render(request, "index.html", **context)


@router.post("/reservations")
async def create_reservation(
    request: Request,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
) -> RedirectResponse:
    form = await request.form()
    data = {f: form.get(f) for f in RESERVATION_FIELDS}
    data["special_request"] = form.get("specialRequest") or form.get("specialRequests")

    try:
        reservation = ReservationCreate(**data)
    except ValidationError as e:
        logger.info(f"Rejected reservation form: {e.error_count()} invalid field(s)")
        return redirect_with_toast("/", "reservation_invalid", fragment="reserve")

    try:
        key = await db.push(Collection.RESERVATIONS.value, reservation.to_record())
    except Exception as e:
        logger.exception(f"Error saving reservation: {e}")
        return redirect_with_toast("/", "reservation_failed", fragment="reserve")

    logger.info(f"Reservation {key} for {reservation.guests} guest(s) on {reservation.date}")
    return redirect_with_toast("/", "reservation_sent", fragment="hero")


@router.post("/contact")
async def create_inquiry(
    request: Request,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
) -> RedirectResponse:
    form = await request.form()

    try:
        inquiry = InquiryCreate(**{f: form.get(f) for f in INQUIRY_FIELDS})
    except ValidationError as e:
        logger.info(f"Rejected contact form: {e.error_count()} invalid field(s)")
        return redirect_with_toast("/", "inquiry_invalid", fragment="contact")

    try:
        key = await db.push(Collection.INQUIRIES.value, inquiry.to_record())
    except Exception as e:
        logger.exception(f"Error saving inquiry: {e}")
        return redirect_with_toast("/", "inquiry_failed", fragment="contact")

    logger.info(f"Inquiry {key} received")
    return redirect_with_toast("/", "inquiry_sent", fragment="contact")
