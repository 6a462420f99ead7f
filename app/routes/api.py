"""
JSON API

    - POST /api/orders                : create an order (total computed server-side)
    - GET  /api/admin/{collection}    : filtered, sorted collection listing (admin session)
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.security import require_admin
from app.models import Collection
from app.schemas import ErrorResponse, OrderCreate, OrderCreateResponse
from app.services.realtime import BaseRealtimeDatabase, Snapshot, get_realtime_db
from app.services.records import ALL, list_collection


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["API"])


@router.post(
    "/orders",
    response_model=OrderCreateResponse,
    status_code=201,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Create Order",
)
async def create_order(
    order_data: OrderCreate,
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
) -> OrderCreateResponse:
    """
    Create a new order.

    The total is always computed from the line items; the order starts in
    `pending` and is moved through its lifecycle from the admin dashboard.
    """
    logger.info(f"Creating order for: {order_data.customer_name}")

    try:
        key = await db.push(Collection.ORDERS.value, order_data.to_record())
    except Exception as e:
        logger.exception(f"Error creating order: {e}")
        raise HTTPException(status_code=500, detail="Failed to place order")

    logger.info(f"Order {key} created ({order_data.total_amount})")
    return OrderCreateResponse(
        success=True,
        message="Order placed successfully!",
        order_id=key,
        total_amount=order_data.total_amount,
    )


@router.get("/admin/{collection}", summary="List Collection")
async def list_records(
    collection: Collection,
    search: str = Query(""),
    status: Optional[str] = Query(ALL),
    date: Optional[str] = Query(None),
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    """Same list the dashboard tab shows, newest first."""
    try:
        value = await db.get(collection.value)
    except Exception as e:
        logger.exception(f"Error reading {collection.value}: {e}")
        raise HTTPException(status_code=503, detail="Realtime database unavailable")

    records = list_collection(Snapshot(collection.value, value), search, status, date)
    return {"collection": collection.value, "total": len(records), "records": records}
