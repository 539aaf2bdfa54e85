"""
Reviews API Endpoints
"""

from typing import List

from fastapi import APIRouter, Depends

from foodchop.domain import CustomerInteraction, CustomerInteractionPayload
from foodchop.serving.api.dependencies import get_caller, get_marketplace, unwrap
from foodchop.services import FoodMarketplace

router = APIRouter()


@router.post("", response_model=CustomerInteraction, status_code=201)
async def add_customer_interaction(
    payload: CustomerInteractionPayload,
    caller: str = Depends(get_caller),
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> CustomerInteraction:
    """Rate and review a product as the calling customer."""
    return unwrap(await marketplace.reviews.add_customer_interaction(payload, caller))


@router.get("/product/{product_id}", response_model=List[CustomerInteraction])
async def get_customer_interactions_by_product(
    product_id: str,
    marketplace: FoodMarketplace = Depends(get_marketplace),
) -> List[CustomerInteraction]:
    return unwrap(await marketplace.reviews.get_customer_interactions_by_product(product_id))
