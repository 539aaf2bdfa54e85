"""
Product Catalog

Lookup, listing, creation and inventory updates for food products.
"""

import asyncio
from typing import List, Optional

import structlog

from foodchop.domain import Err, ErrorKind, FoodPayload, FoodProduct, Ok, Result
from foodchop.services.common import IdFactory, new_id
from foodchop.storage import RecordMap, StorageError

logger = structlog.get_logger(__name__)


class ProductCatalog:
    """
    Product collection operations.
    
    Only ``owner`` may change a product's inventory directly; with no owner
    configured nobody may. Mutating calls hold ``lock`` for their whole
    duration.
    """
    
    def __init__(
        self,
        products: RecordMap[FoodProduct],
        owner: Optional[str],
        lock: Optional[asyncio.Lock] = None,
        id_factory: IdFactory = new_id,
    ):
        self.products = products
        self.owner = owner
        self.lock = lock or asyncio.Lock()
        self._new_id = id_factory
    
    async def lookup_product(self, product_id: str) -> Result[FoodProduct]:
        """Get a product by id."""
        if not product_id:
            return Err(ErrorKind.INVALID_INPUT, "Invalid ID provided.")
        
        product = await self.products.get(product_id)
        if product is None:
            return Err(ErrorKind.NOT_FOUND, f"Product with id={product_id} not found")
        return Ok(product)
    
    async def list_products(self) -> Result[List[FoodProduct]]:
        """All products. Callers must not rely on the order."""
        return Ok(await self.products.values())
    
    async def add_product(self, payload: FoodPayload) -> Result[FoodProduct]:
        """
        Create a product with a fresh id.
        
        Every field must be present and truthy, so a price or quantity of
        zero is rejected along with missing fields.
        """
        if (
            not payload.name
            or not payload.description
            or not payload.price
            or not payload.quantity_available
        ):
            return Err(ErrorKind.INVALID_INPUT, "Invalid payload")
        if payload.price < 0 or payload.quantity_available < 0:
            return Err(ErrorKind.INVALID_INPUT, "Invalid payload")
        
        product = FoodProduct(
            id=self._new_id(),
            name=payload.name,
            description=payload.description,
            price=payload.price,
            quantity_available=payload.quantity_available,
        )
        
        async with self.lock:
            try:
                created = await self.products.create(product.id, product)
            except StorageError as e:
                logger.error("Product insert failed", product_id=product.id, error=str(e))
                return Err(ErrorKind.STORAGE_FAILURE, "Failed to create product")
        
        if not created:
            return Err(ErrorKind.DUPLICATE_ID, "Product with the same id already exists")
        
        logger.info("Product added", product_id=product.id, name=product.name)
        return Ok(product)
    
    async def update_product_quantity(
        self,
        product_id: str,
        new_quantity: Optional[int],
        caller: str,
    ) -> Result[FoodProduct]:
        """
        Overwrite a product's available quantity. Owner only.
        
        Checked in order: id present, product exists, caller is the owner,
        quantity is a non-negative number.
        """
        if not product_id:
            return Err(ErrorKind.INVALID_INPUT, "Invalid Product ID provided.")
        not_found = Err(
            ErrorKind.NOT_FOUND,
            f"Couldn't update Product with id={product_id}. Product not found",
        )
        
        async with self.lock:
            product = await self.products.get(product_id)
            if product is None:
                return not_found
            
            if self.owner is None or caller != self.owner:
                logger.warning("Quantity update rejected", product_id=product_id, caller=caller)
                return Err(ErrorKind.UNAUTHORIZED, "You are not the owner of this product")
            
            if new_quantity is None or new_quantity < 0:
                return Err(ErrorKind.INVALID_INPUT, "Invalid quantity provided.")
            
            try:
                updated = await self.products.update(
                    product_id,
                    lambda current: current.model_copy(update={"quantity_available": new_quantity}),
                )
            except StorageError as e:
                logger.error("Product update failed", product_id=product_id, error=str(e))
                return Err(ErrorKind.STORAGE_FAILURE, not_found.message)
        
        if updated is None:
            return not_found
        
        logger.info(
            "Product quantity updated",
            product_id=product_id,
            previous=product.quantity_available,
            quantity=new_quantity,
        )
        return Ok(updated)
