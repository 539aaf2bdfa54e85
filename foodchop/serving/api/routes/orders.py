"""
Orders API Endpoints

Order placement, status transitions and per-customer listing.

Transition endpoints answer with a bare JSON boolean: ``true`` if the order
moved to the new status, ``false`` otherwise.
"""

from typing import List

from fastapi import APIRouter, Depends

from foodchop.domain import Order, OrderPayload
from foodchop.serving.api.dependencies import get_caller, get_marketplace, unwrap
from foodchop.services import FoodMarketplace

router = APIRouter()


@router.post("", response_model=Order, status_code=201)
async def place_order(
    payload: OrderPayload,
    caller: str = Depends(get_caller),
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> Order:
    """Place an order as the calling customer."""
    return unwrap(await marketplace.orders.place_order(payload, caller))


@router.get("/customer/{customer_id}", response_model=List[Order])
async def get_orders_by_customer(
    customer_id: str,
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> List[Order]:
    """Get all orders for a specific customer."""
    return unwrap(await marketplace.orders.get_orders_by_customer(customer_id))


@router.post("/{order_id}/cancel", response_model=bool)
async def cancel_order(
    order_id: str,
    caller: str = Depends(get_caller),
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> bool:
    return await marketplace.orders.cancel_order(order_id, caller)


@router.post("/{order_id}/confirm", response_model=bool)
async def confirm_order(
    order_id: str,
    caller: str = Depends(get_caller),
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> bool:
    return await marketplace.orders.confirm_order(order_id, caller)


@router.post("/{order_id}/deliver", response_model=bool)
async def deliver_order(
    order_id: str,
    caller: str = Depends(get_caller),
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> bool:
    return await marketplace.orders.deliver_order(order_id, caller)
