"""
Review Collection

Customer ratings and reviews. Reviews are never edited or deleted.
"""

import asyncio
from typing import List, Optional

import structlog

from foodchop.domain import (
    CustomerInteraction,
    CustomerInteractionPayload,
    Err,
    ErrorKind,
    Ok,
    Result,
)
from foodchop.services.common import Clock, IdFactory, new_id, utc_now
from foodchop.storage import RecordMap, StorageError

logger = structlog.get_logger(__name__)


class ReviewCollection:
    
    def __init__(
        self,
        reviews: RecordMap[CustomerInteraction],
        lock: Optional[asyncio.Lock] = None,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ):
        self.reviews = reviews
        self.lock = lock or asyncio.Lock()
        self._clock = clock
        self._new_id = id_factory
    
    async def add_customer_interaction(
        self,
        payload: CustomerInteractionPayload,
        caller: str,
    ) -> Result[CustomerInteraction]:
        """
        Store a review by the caller.
        
        The rating is not range-checked and the product is not looked up.
        A rating of zero counts as missing.
        """
        if not payload.product_id or not payload.rating or not payload.review:
            return Err(ErrorKind.INVALID_INPUT, "Invalid payload")
        
        interaction = CustomerInteraction(
            id=self._new_id(),
            customer_id=caller,
            product_id=payload.product_id,
            rating=payload.rating,
            review=payload.review,
            created_at=self._clock(),
        )
        
        async with self.lock:
            try:
                await self.reviews.insert(interaction.id, interaction)
            except StorageError as e:
                logger.error("Review insert failed", interaction_id=interaction.id, error=str(e))
                return Err(ErrorKind.STORAGE_FAILURE, "Failed to create customer interaction")
        
        logger.info(
            "Review added",
            interaction_id=interaction.id,
            product_id=interaction.product_id,
            rating=interaction.rating,
        )
        return Ok(interaction)
    
    async def get_customer_interactions_by_product(
        self,
        product_id: str,
    ) -> Result[List[CustomerInteraction]]:
        if not product_id:
            return Err(ErrorKind.INVALID_INPUT, "Invalid Product ID provided.")
        
        reviews = await self.reviews.values()
        return Ok([review for review in reviews if review.product_id == product_id])
