"""
Admin Dashboard

Session-protected management pages. Each tab is server-rendered from a full
collection snapshot; the browser keeps it live by listening on
/admin/stream/{collection} (Server-Sent Events) and re-fetching the tab
partial whenever a new snapshot arrives.

Endpoints:
    - GET/POST /admin/login, POST /admin/logout
    - GET /admin?tab=...                    : dashboard shell + active tab
    - GET /admin/partials/{tab}             : tab body only
    - GET /admin/stream/{collection}        : snapshot event stream
    - POST /admin/menu[/{key}[/delete]]     : menu CRUD with image upload
    - POST /admin/{reservations|orders|inquiries}/{key}/status|delete
    - POST /admin/gallery[/{key}/delete]    : multi-upload / delete
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, StreamingResponse
from pydantic import ValidationError
from starlette.datastructures import FormData, UploadFile

from app import content
from app.core.config import get_settings
from app.core.security import (
    AdminLoginRequired,
    authenticate_admin,
    create_session_token,
    decode_session_token,
    require_admin,
)
from app.models import Collection, InquiryStatus, OrderStatus, ReservationStatus
from app.routes.common import redirect_with_toast, render
from app.schemas import GalleryImageRecord, MenuItemForm
from app.services.dashboard import (
    GALLERY_CATEGORIES,
    category_counts,
    filter_by_category,
    gallery_category_counts,
    images_by_category,
    overview_stats,
    pending_orders,
    replied_today,
    today_iso,
    todays_orders,
    todays_reservations,
    total_revenue,
    unread_count,
    upcoming_reservations,
)
from app.services.realtime import BaseRealtimeDatabase, Snapshot, get_realtime_db
from app.services.records import (
    ALL,
    SEARCH_FIELDS,
    filter_records,
    list_collection,
    snapshot_to_records,
)
from app.services.storage import (
    BaseStorageService,
    build_object_path,
    get_storage_service,
    guess_content_type,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

TABS = ["overview", "menu", "reservations", "orders", "messages", "gallery"]

TAB_LABELS = {
    "overview": "Overview",
    "menu": "Menu",
    "reservations": "Reservations",
    "orders": "Orders",
    "messages": "Messages",
    "gallery": "Gallery",
}

# Collections each tab listens to
TAB_COLLECTIONS: dict[str, list[str]] = {
    "overview": [
        Collection.RESERVATIONS.value,
        Collection.MENU.value,
        Collection.INQUIRIES.value,
        Collection.ORDERS.value,
    ],
    "menu": [Collection.MENU.value],
    "reservations": [Collection.RESERVATIONS.value],
    "orders": [Collection.ORDERS.value],
    "messages": [Collection.INQUIRIES.value],
    "gallery": [Collection.GALLERY.value],
}

STATUS_OPTIONS = {
    Collection.RESERVATIONS.value: [s.value for s in ReservationStatus],
    Collection.ORDERS.value: [s.value for s in OrderStatus],
    Collection.INQUIRIES.value: [s.value for s in InquiryStatus],
}


@dataclass
class TabFilters:
    search: str = ""
    status: str = ALL
    date: str = ""
    category: str = ""


def _tab_url(tab: str) -> str:
    return f"/admin?tab={tab}"


def _checked(form: FormData, name: str) -> bool:
    return str(form.get(name) or "").lower() in ("on", "true", "1", "yes")


def _uploaded_file(value: Any) -> Optional[UploadFile]:
    if isinstance(value, UploadFile) and value.filename:
        return value
    return None


# =============================================================================
# SESSION
# =============================================================================

@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    settings = get_settings()
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        try:
            decode_session_token(token)
            return RedirectResponse("/admin", status_code=303)
        except AdminLoginRequired:
            pass
    return render(request, "admin/login.html", error=None, email="")


@router.post("/login")
async def login(request: Request):
    settings = get_settings()
    form = await request.form()
    email = str(form.get("email") or "")
    password = str(form.get("password") or "")

    if not authenticate_admin(email, password):
        logger.warning(f"Failed admin login for {email!r}")
        return render(
            request,
            "admin/login.html",
            status_code=401,
            error="Invalid email or password",
            email=email,
        )

    logger.info(f"Admin login: {email}")
    response = RedirectResponse("/admin", status_code=303)
    response.set_cookie(
        settings.session_cookie_name,
        create_session_token(email.strip().lower()),
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return response


@router.post("/logout")
async def logout(request: Request) -> RedirectResponse:
    settings = get_settings()
    response = redirect_with_toast("/admin/login", "logged_out")
    response.delete_cookie(settings.session_cookie_name)
    return response


# =============================================================================
# DASHBOARD PAGES
# =============================================================================

async def load_snapshot(db: BaseRealtimeDatabase, collection: str) -> Snapshot:
    """Current snapshot of a collection; read failures render as empty."""
    try:
        value = await db.get(collection)
    except Exception as e:
        logger.exception(f"Error reading {collection}: {e}")
        value = None
    return Snapshot(collection, value)


async def tab_context(
    tab: str,
    db: BaseRealtimeDatabase,
    filters: TabFilters,
) -> dict[str, Any]:
    """Template context for one dashboard tab."""
    today = today_iso()
    ctx: dict[str, Any] = {
        "tab": tab,
        "filters": filters,
        "today": today,
        "collections": TAB_COLLECTIONS[tab],
    }

    if tab == "overview":
        reservations, menu, inquiries, orders = [
            snapshot_to_records(await load_snapshot(db, c))
            for c in TAB_COLLECTIONS["overview"]
        ]
        ctx.update(
            stats=overview_stats(reservations, menu, inquiries, orders, today),
            recent_reservations=reservations[:5],
            recent_orders=orders[:5],
            unread_messages=[i for i in inquiries if i.get("status") == InquiryStatus.UNREAD.value][:5],
        )

    elif tab == "menu":
        items = snapshot_to_records(await load_snapshot(db, Collection.MENU.value))
        category = filters.category or "All"
        items = filter_records(items, filters.search, SEARCH_FIELDS[Collection.MENU.value])
        ctx.update(
            items=filter_by_category(items, category),
            active_category=category,
            category_counts=category_counts(items, content.MENU_CATEGORIES),
            menu_categories=content.MENU_CATEGORIES,
        )

    elif tab == "reservations":
        snapshot = await load_snapshot(db, Collection.RESERVATIONS.value)
        everything = snapshot_to_records(snapshot)
        ctx.update(
            records=list_collection(snapshot, filters.search, filters.status, filters.date),
            total=len(everything),
            todays=len(todays_reservations(everything, today)),
            upcoming=len(upcoming_reservations(everything, today)),
            pending=sum(1 for r in everything if r.get("status") == ReservationStatus.PENDING.value),
            status_options=STATUS_OPTIONS[Collection.RESERVATIONS.value],
        )

    elif tab == "orders":
        snapshot = await load_snapshot(db, Collection.ORDERS.value)
        everything = snapshot_to_records(snapshot)
        ctx.update(
            records=list_collection(snapshot, filters.search, filters.status),
            total=len(everything),
            pending=len(pending_orders(everything)),
            todays=len(todays_orders(everything, today)),
            revenue=total_revenue(everything),
            status_options=STATUS_OPTIONS[Collection.ORDERS.value],
        )

    elif tab == "messages":
        snapshot = await load_snapshot(db, Collection.INQUIRIES.value)
        everything = snapshot_to_records(snapshot)
        ctx.update(
            records=list_collection(snapshot, filters.search, filters.status),
            total=len(everything),
            unread=unread_count(everything),
            replied_today=replied_today(everything, today),
            status_options=STATUS_OPTIONS[Collection.INQUIRIES.value],
        )

    elif tab == "gallery":
        images = snapshot_to_records(await load_snapshot(db, Collection.GALLERY.value))
        category = filters.category if filters.category in GALLERY_CATEGORIES else GALLERY_CATEGORIES[0]
        ctx.update(
            images=images_by_category(images, category),
            total=len(images),
            active_category=category,
            category_counts=gallery_category_counts(images),
            gallery_categories=GALLERY_CATEGORIES,
        )

    return ctx


def _filters(
    search: str = Query(""),
    status: str = Query(ALL),
    date: str = Query(""),
    category: str = Query(""),
) -> TabFilters:
    return TabFilters(search=search.strip(), status=status or ALL, date=date, category=category)


@router.get("", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    tab: str = Query("overview"),
    filters: TabFilters = Depends(_filters),
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
):
    if tab not in TABS:
        tab = "overview"
    ctx = await tab_context(tab, db, filters)
    return render(
        request,
        "admin/dashboard.html",
        tabs=TABS,
        tab_labels=TAB_LABELS,
        admin_email=admin.get("sub"),
        **ctx,
    )


@router.get("/partials/{tab}", response_class=HTMLResponse)
async def dashboard_partial(
    request: Request,
    tab: str,
    filters: TabFilters = Depends(_filters),
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
):
    if tab not in TABS:
        return HTMLResponse("Unknown tab", status_code=404)
    ctx = await tab_context(tab, db, filters)
    return render(request, f"admin/partials/{tab}.html", toasts=[], **ctx)


@router.get("/stream/{collection}")
async def stream_collection(
    request: Request,
    collection: Collection,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
) -> StreamingResponse:
    """Server-Sent Events: one `snapshot` event per collection change."""

    async def event_source():
        listener = db.listen(collection.value)
        try:
            async for snapshot in listener:
                if await request.is_disconnected():
                    break
                yield f"event: snapshot\ndata: {json.dumps(snapshot.to_dict())}\n\n"
        except Exception as e:
            logger.exception(f"Stream for {collection.value} failed: {e}")
        finally:
            await listener.aclose()

    return StreamingResponse(
        event_source(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


# =============================================================================
# MENU
# =============================================================================

def _menu_item(form: FormData, image: str) -> MenuItemForm:
    return MenuItemForm(
        name=form.get("name"),
        description=form.get("description"),
        price=form.get("price"),
        category=form.get("category") or "",
        image=image,
        is_veg=_checked(form, "isVeg"),
        is_available=_checked(form, "isAvailable"),
    )


async def _store_upload(storage: BaseStorageService, folder: str, upload: UploadFile) -> str:
    data = await upload.read()
    content_type = upload.content_type or guess_content_type(upload.filename)
    return await storage.upload(build_object_path(folder, upload.filename), data, content_type)


@router.post("/menu")
async def create_menu_item(
    request: Request,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    storage: BaseStorageService = Depends(get_storage_service),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    form = await request.form()
    try:
        item = _menu_item(form, image="")
    except ValidationError:
        return redirect_with_toast(_tab_url("menu"), "menu_invalid")

    try:
        upload = _uploaded_file(form.get("image"))
        if upload:
            item.image = await _store_upload(storage, "menu", upload)
        key = await db.push(Collection.MENU.value, item.to_record())
    except Exception as e:
        logger.exception(f"Error adding menu item: {e}")
        return redirect_with_toast(_tab_url("menu"), "menu_save_failed")

    logger.info(f"Menu item {key} added: {item.name}")
    return redirect_with_toast(_tab_url("menu"), "menu_added")


@router.post("/menu/{key}")
async def update_menu_item(
    key: str,
    request: Request,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    storage: BaseStorageService = Depends(get_storage_service),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    form = await request.form()
    try:
        existing = (await db.get(Collection.MENU.value) or {}).get(key) or {}
        item = _menu_item(form, image=existing.get("image", ""))
    except ValidationError:
        return redirect_with_toast(_tab_url("menu"), "menu_invalid")
    except Exception as e:
        logger.exception(f"Error loading menu item {key}: {e}")
        return redirect_with_toast(_tab_url("menu"), "menu_save_failed")

    try:
        upload = _uploaded_file(form.get("image"))
        if upload:
            item.image = await _store_upload(storage, "menu", upload)
        await db.set(f"{Collection.MENU.value}/{key}", item.to_record())
    except Exception as e:
        logger.exception(f"Error updating menu item {key}: {e}")
        return redirect_with_toast(_tab_url("menu"), "menu_save_failed")

    logger.info(f"Menu item {key} updated")
    return redirect_with_toast(_tab_url("menu"), "menu_updated")


@router.post("/menu/{key}/delete")
async def delete_menu_item(
    key: str,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    try:
        await db.remove(f"{Collection.MENU.value}/{key}")
    except Exception as e:
        logger.exception(f"Error deleting menu item {key}: {e}")
        return redirect_with_toast(_tab_url("menu"), "menu_delete_failed")
    return redirect_with_toast(_tab_url("menu"), "menu_deleted")


# =============================================================================
# RESERVATIONS, ORDERS, INQUIRIES
# =============================================================================

async def _set_status(
    db: BaseRealtimeDatabase,
    collection: Collection,
    key: str,
    request: Request,
    toast: str,
    tab: str,
) -> RedirectResponse:
    """Write `{collection}/{key}/status`; any known status may replace any other."""
    form = await request.form()
    status = str(form.get("status") or "")
    if status not in STATUS_OPTIONS[collection.value]:
        logger.info(f"Rejected status {status!r} for {collection.value}/{key}")
        return redirect_with_toast(_tab_url(tab), f"{toast}_status_failed")

    try:
        await db.set(f"{collection.value}/{key}/status", status)
    except Exception as e:
        logger.exception(f"Error updating {collection.value}/{key}: {e}")
        return redirect_with_toast(_tab_url(tab), f"{toast}_status_failed")

    logger.info(f"{collection.value}/{key} -> {status}")
    return redirect_with_toast(_tab_url(tab), f"{toast}_status", value=status)


async def _delete(
    db: BaseRealtimeDatabase,
    collection: Collection,
    key: str,
    toast: str,
    tab: str,
) -> RedirectResponse:
    try:
        await db.remove(f"{collection.value}/{key}")
    except Exception as e:
        logger.exception(f"Error deleting {collection.value}/{key}: {e}")
        return redirect_with_toast(_tab_url(tab), f"{toast}_delete_failed")
    return redirect_with_toast(_tab_url(tab), f"{toast}_deleted")


@router.post("/reservations/{key}/status")
async def update_reservation_status(
    key: str,
    request: Request,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    return await _set_status(db, Collection.RESERVATIONS, key, request, "reservation", "reservations")


@router.post("/reservations/{key}/delete")
async def delete_reservation(
    key: str,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    return await _delete(db, Collection.RESERVATIONS, key, "reservation", "reservations")


@router.post("/orders/{key}/status")
async def update_order_status(
    key: str,
    request: Request,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    return await _set_status(db, Collection.ORDERS, key, request, "order", "orders")


@router.post("/orders/{key}/delete")
async def delete_order(
    key: str,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    return await _delete(db, Collection.ORDERS, key, "order", "orders")


@router.post("/inquiries/{key}/status")
async def update_inquiry_status(
    key: str,
    request: Request,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    return await _set_status(db, Collection.INQUIRIES, key, request, "inquiry", "messages")


@router.post("/inquiries/{key}/delete")
async def delete_inquiry(
    key: str,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    return await _delete(db, Collection.INQUIRIES, key, "inquiry", "messages")


# =============================================================================
# GALLERY
# =============================================================================

@router.post("/gallery")
async def upload_gallery_images(
    request: Request,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    storage: BaseStorageService = Depends(get_storage_service),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    form = await request.form()
    category = str(form.get("category") or GALLERY_CATEGORIES[0])
    if category not in GALLERY_CATEGORIES:
        category = "other"
    uploads = [f for f in map(_uploaded_file, form.getlist("files")) if f]
    target = f"{_tab_url('gallery')}&category={category}"

    if not uploads:
        return redirect_with_toast(target, "gallery_no_files")

    async def upload_one(upload: UploadFile) -> bool:
        try:
            url = await _store_upload(storage, "gallery", upload)
            record = GalleryImageRecord(url=url, name=upload.filename, category=category)
            await db.push(Collection.GALLERY.value, record.to_record())
            return True
        except Exception as e:
            logger.exception(f"Error uploading {upload.filename}: {e}")
            return False

    results = await asyncio.gather(*(upload_one(u) for u in uploads))
    ok = sum(results)
    failed = len(results) - ok
    logger.info(f"Gallery upload: {ok} stored, {failed} failed ({category})")

    codes = []
    if ok:
        codes.append("gallery_uploaded")
    if failed:
        codes.append("gallery_upload_failed")
    return redirect_with_toast(target, *codes, ok=ok, failed=failed)


@router.post("/gallery/{key}/delete")
async def delete_gallery_image(
    key: str,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    storage: BaseStorageService = Depends(get_storage_service),
    admin: dict = Depends(require_admin),
) -> RedirectResponse:
    """Delete the blob first, then the record pointing at it."""
    try:
        record = (await db.get(Collection.GALLERY.value) or {}).get(key)
        if record is None:
            raise LookupError(f"No gallery image {key}")
        await storage.delete(record["url"])
        await db.remove(f"{Collection.GALLERY.value}/{key}")
    except Exception as e:
        logger.exception(f"Error deleting gallery image {key}: {e}")
        return redirect_with_toast(_tab_url("gallery"), "gallery_delete_failed")

    target = f"{_tab_url('gallery')}&category={record.get('category', '')}"
    return redirect_with_toast(target, "gallery_deleted")
