"""
Products API Endpoints

Catalog queries and owner-only inventory updates.
"""

from typing import List

from fastapi import APIRouter, Depends

from foodchop.domain import CustomerInteraction, FoodPayload, FoodProduct, QuantityUpdate
from foodchop.serving.api.dependencies import get_caller, get_marketplace, unwrap
from foodchop.services import FoodMarketplace

router = APIRouter()


@router.get("", response_model=List[FoodProduct])
async def get_products(
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> List[FoodProduct]:
    """List all products."""
    return unwrap(await marketplace.catalog.list_products())


@router.get("/{product_id}", response_model=FoodProduct)
async def get_product_by_id(
    product_id: str,
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> FoodProduct:
    """Get product details."""
    return unwrap(await marketplace.catalog.lookup_product(product_id))


@router.get("/{product_id}/interactions", response_model=List[CustomerInteraction])
async def get_product_interactions(
    product_id: str,
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> List[CustomerInteraction]:
    """Reviews left for a product."""
    return unwrap(await marketplace.reviews.get_customer_interactions_by_product(product_id))


@router.post("", response_model=FoodProduct, status_code=201)
async def add_product(
    payload: FoodPayload,
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> FoodProduct:
    """
    Add a product to the catalog.
    
    All fields are required and must be non-zero.
    """
    return unwrap(await marketplace.catalog.add_product(payload))


@router.put("/{product_id}/quantity", response_model=FoodProduct)
async def update_product_quantity(
    product_id: str,
    update: QuantityUpdate,
    caller: str = Depends(get_caller),
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> FoodProduct:
    """Set a product's available quantity (owner only)."""
    return unwrap(
        await marketplace.catalog.update_product_quantity(product_id, update.quantity, caller)
    )
