"""Order router.

Endpoints:
    GET    /api/orders          List orders (optional ?status=)
    GET    /api/orders/{id}     Get one order
    POST   /api/orders          Record a new order
    PUT    /api/orders/{id}     Replace an order's fields
    DELETE /api/orders/{id}     Delete an order
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BeforeValidator

from bookstock.deps import get_recorder, get_store
from bookstock.models.activity_log import ActivityType
from bookstock.models.order import OrderStatus
from bookstock.schemas.order import OrderIn, OrderOut
from bookstock.schemas.validators import normalize_status
from bookstock.services.store import RecordStore
from bookstock.utils.activity import ActivityRecorder

router = APIRouter()

# `?status=` is trimmed and lower-cased like the request body field.
StatusFilter = Annotated[OrderStatus | None, BeforeValidator(normalize_status)]


@router.get("", response_model=list[OrderOut])
async def list_orders(
    status_filter: StatusFilter = Query(None, alias="status"),
    store: RecordStore = Depends(get_store),
):
    orders = await store.list_orders(status=status_filter)
    return [OrderOut.model_validate(o) for o in orders]


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(order_id: int, store: RecordStore = Depends(get_store)):
    return OrderOut.model_validate(await store.get_order(order_id))


@router.post("", response_model=OrderOut, status_code=201)
async def create_order(
    body: OrderIn,
    store: RecordStore = Depends(get_store),
    recorder: ActivityRecorder = Depends(get_recorder),
):
    order = await store.insert_order(body.model_dump())
    await recorder.record_for(ActivityType.ORDER_RECEIVED, order)
    return OrderOut.model_validate(order)


@router.put("/{order_id}", response_model=OrderOut)
async def update_order(
    order_id: int,
    body: OrderIn,
    store: RecordStore = Depends(get_store),
    recorder: ActivityRecorder = Depends(get_recorder),
):
    order = await store.update_order(order_id, body.model_dump())
    await recorder.record_for(ActivityType.ORDER_UPDATED, order)
    return OrderOut.model_validate(order)


@router.delete("/{order_id}", status_code=204, response_class=Response)
async def delete_order(
    order_id: int,
    store: RecordStore = Depends(get_store),
    recorder: ActivityRecorder = Depends(get_recorder),
):
    order = await store.delete_order(order_id)
    await recorder.record_for(ActivityType.ORDER_DELETED, order)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
