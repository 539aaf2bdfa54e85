"""
Food Marketplace

Wires the catalog, order, review and cart services to one storage backend
and one owner identity.
"""

import asyncio
from typing import Optional

import structlog

from foodchop.domain import CustomerInteraction, Err, FoodProduct, Ok, Order, Result
from foodchop.services.cart import Cart, CartStore
from foodchop.services.catalog import ProductCatalog
from foodchop.services.common import Clock, IdFactory, new_id, utc_now
from foodchop.services.orders import OrderLifecycle
from foodchop.services.reviews import ReviewCollection
from foodchop.storage import StorageBackend

logger = structlog.get_logger(__name__)

PRODUCTS = "products"
ORDERS = "orders"
REVIEWS = "customer_interactions"
CARTS = "carts"


class FoodMarketplace:
    """
    The ordering service.
    
    Every mutating call across all services runs under one shared lock, so
    calls are applied one at a time within this process. Writes that depend
    on what was read are compare-and-set against the store, so processes
    sharing a redis or sql store do not lose each other's updates.
    
    With ``owner`` unset, owner-only operations are refused for every caller.
    
    Example:
        marketplace = FoodMarketplace(MemoryBackend(), owner="owner-principal")
        result = await marketplace.catalog.add_product(payload)
    """
    
    def __init__(
        self,
        backend: StorageBackend,
        owner: Optional[str],
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ):
        self.backend = backend
        self.owner = owner
        self.lock = asyncio.Lock()
        
        products = backend.collection(PRODUCTS, FoodProduct)
        
        self.catalog = ProductCatalog(
            products,
            owner=owner,
            lock=self.lock,
            id_factory=id_factory,
        )
        self.orders = OrderLifecycle(
            backend.collection(ORDERS, Order),
            products,
            owner=owner,
            lock=self.lock,
            clock=clock,
            id_factory=id_factory,
        )
        self.reviews = ReviewCollection(
            backend.collection(REVIEWS, CustomerInteraction),
            lock=self.lock,
            clock=clock,
            id_factory=id_factory,
        )
        self.carts = CartStore(backend.collection(CARTS, Cart))
        
        logger.info("Marketplace initialized", backend=backend.name, owner=owner)
        if owner is None:
            logger.warning("No owner configured, owner-only operations are disabled")
    
    async def add_to_cart(self, cart_id: str, product_id: str) -> Result[Cart]:
        """Add one unit of a catalog product to a cart."""
        found = await self.catalog.lookup_product(product_id)
        if isinstance(found, Err):
            return found
        
        async with self.lock:
            cart = await self.carts.add_item(cart_id, found.value)
        return Ok(cart)
    
    async def get_cart(self, cart_id: str) -> Cart:
        return await self.carts.load(cart_id)
