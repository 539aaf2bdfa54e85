"""
Carts API Endpoints

Server-side cart persistence for the storefront.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from foodchop.domain.models import RecordModel
from foodchop.serving.api.dependencies import get_marketplace, unwrap
from foodchop.services import Cart, FoodMarketplace

router = APIRouter()


class AddToCartRequest(RecordModel):
    """Add-to-cart request"""
    product_id: Optional[str] = None


@router.get("/{cart_id}", response_model=Cart)
async def get_cart(
    cart_id: str,
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> Cart:
    """Get a cart; unknown ids return an empty cart."""
    return await marketplace.get_cart(cart_id)


@router.post("/{cart_id}/items", response_model=Cart)
async def add_to_cart(
    cart_id: str,
    request: AddToCartRequest,
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> Cart:
    """Add one unit of a product to the cart."""
    return unwrap(await marketplace.add_to_cart(cart_id, request.product_id or ""))
