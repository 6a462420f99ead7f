"""
Shared route plumbing: templates, toast notifications, redirects.

Every write path ends in a 303 redirect that carries one or more `toast`
codes in the query string; the next page render turns them into toast
notifications from the TOASTS table.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from app.core.config import get_settings
from app.services.dashboard import gallery_badge, status_badge
from app.services.records import parse_timestamp


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


@dataclass(frozen=True)
class Toast:
    title: str
    description: str
    variant: str = "default"


def _failure(what: str) -> Toast:
    return Toast("Error", f"Failed to {what}. Please try again.", "destructive")


TOASTS: dict[str, Toast] = {
    # Public forms
    "reservation_sent": Toast(
        "Reservation Confirmed!",
        "Thank you for your reservation. We'll call you to confirm the details.",
    ),
    "reservation_failed": _failure("submit reservation"),
    "reservation_invalid": Toast(
        "Missing details", "Please fill in all required reservation fields.", "destructive"
    ),
    "inquiry_sent": Toast("Message Sent!", "Thank you for your inquiry. We'll get back to you soon."),
    "inquiry_failed": _failure("send message"),
    "inquiry_invalid": Toast(
        "Missing details", "Please enter your name, a valid email and a message.", "destructive"
    ),
    # Session
    "logged_out": Toast("Logged out successfully", "You have been signed out from the admin dashboard."),
    "login_required": Toast("Please sign in", "Your admin session has expired.", "destructive"),
    # Menu
    "menu_added": Toast("Menu item added!", "New menu item has been successfully added."),
    "menu_updated": Toast("Menu item updated!", "The menu item has been successfully updated."),
    "menu_save_failed": _failure("save menu item"),
    "menu_invalid": Toast("Missing details", "Name, description and a valid price are required.", "destructive"),
    "menu_deleted": Toast("Menu item deleted!", "The menu item has been successfully deleted."),
    "menu_delete_failed": _failure("delete menu item"),
    # Reservations
    "reservation_status": Toast("Status updated!", "Reservation has been {value}."),
    "reservation_status_failed": _failure("update reservation status"),
    "reservation_deleted": Toast("Reservation deleted!", "The reservation has been successfully deleted."),
    "reservation_delete_failed": _failure("delete reservation"),
    # Orders
    "order_status": Toast("Status updated!", "Order status changed to {value}."),
    "order_status_failed": _failure("update order status"),
    "order_deleted": Toast("Order deleted!", "The order has been successfully deleted."),
    "order_delete_failed": _failure("delete order"),
    # Inquiries
    "inquiry_status": Toast("Status updated!", "Inquiry marked as {value}."),
    "inquiry_status_failed": _failure("update inquiry status"),
    "inquiry_deleted": Toast("Inquiry deleted!", "The inquiry has been successfully deleted."),
    "inquiry_delete_failed": _failure("delete inquiry"),
    # Gallery
    "gallery_uploaded": Toast("{ok} image(s) uploaded successfully!", "Images were added to the {category} gallery."),
    "gallery_upload_failed": Toast(
        "Some uploads failed", "{failed} image(s) failed to upload. Please try again.", "destructive"
    ),
    "gallery_no_files": Toast("No files selected", "Choose at least one image to upload.", "destructive"),
    "gallery_deleted": Toast("Image deleted!", "The image has been successfully deleted."),
    "gallery_delete_failed": _failure("delete image"),
}


class _Params(dict):
    def __missing__(self, key: str) -> str:
        return ""


def toasts_from_request(request: Request) -> list[Toast]:
    """Resolve the `toast` query codes (unknown codes are ignored)."""
    params = _Params(request.query_params.items())
    resolved = []
    for code in request.query_params.getlist("toast"):
        toast = TOASTS.get(code)
        if toast is None:
            continue
        resolved.append(Toast(
            title=toast.title.format_map(params),
            description=toast.description.format_map(params),
            variant=toast.variant,
        ))
    return resolved


def redirect_with_toast(
    path: str,
    *codes: str,
    fragment: str = "",
    **params: Any,
) -> RedirectResponse:
    query = [("toast", c) for c in codes]
    query += [(k, str(v)) for k, v in params.items() if v not in (None, "")]
    url = path
    if query:
        url += ("&" if "?" in path else "?") + urlencode(query)
    if fragment:
        url += f"#{fragment}"
    return RedirectResponse(url, status_code=303)


# =============================================================================
# TEMPLATES
# =============================================================================

def format_datetime(value: Optional[str]) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return value or ""
    return parsed.strftime("%d %b %Y, %I:%M %p")


def format_currency(value: Any) -> str:
    settings = get_settings()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        amount = 0.0
    if amount.is_integer():
        return f"{settings.currency_symbol}{int(amount):,}"
    return f"{settings.currency_symbol}{amount:,.2f}"


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["datetime"] = format_datetime
templates.env.filters["currency"] = format_currency
templates.env.globals["status_badge"] = status_badge
templates.env.globals["gallery_badge"] = gallery_badge
templates.env.globals["current_year"] = lambda: datetime.now().year


def render(request: Request, template: str, status_code: int = 200, **context: Any):
    context.setdefault("toasts", toasts_from_request(request))
    return templates.TemplateResponse(
        request,
        template,
        {"settings": get_settings(), **context},
        status_code=status_code,
    )
