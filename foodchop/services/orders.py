"""
Order Lifecycle

Placement and status transitions for customer orders.

State machine:
    placed → confirmed → delivered
    placed → cancelled

cancelled and delivered are terminal. Transition calls report an invalid
attempt by returning False and leave the order unchanged.
"""

import asyncio
from typing import Callable, List, Optional

import structlog

from foodchop.domain import (
    Err,
    ErrorKind,
    FoodProduct,
    Ok,
    Order,
    OrderPayload,
    OrderStatus,
    Result,
)
from foodchop.services.common import Clock, IdFactory, new_id, utc_now
from foodchop.storage import RecordMap, StorageError

logger = structlog.get_logger(__name__)

# (order, caller) -> allowed
Authorizer = Callable[[Order, str], bool]


class OrderLifecycle:
    """
    Order collection operations.
    
    Placing an order also decrements the product's available quantity, so
    this service writes to both the orders and the products collections.
    """
    
    def __init__(
        self,
        orders: RecordMap[Order],
        products: RecordMap[FoodProduct],
        owner: Optional[str],
        lock: Optional[asyncio.Lock] = None,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ):
        self.orders = orders
        self.products = products
        self.owner = owner
        self.lock = lock or asyncio.Lock()
        self._clock = clock
        self._new_id = id_factory
    
    # =========================================================================
    # PLACEMENT
    # =========================================================================
    
    async def place_order(self, payload: OrderPayload, caller: str) -> Result[Order]:
        """
        Place an order for the caller and take the quantity out of inventory.
        
        Inventory is not floor-checked: ordering more than is available
        leaves a negative ``quantity_available``.
        """
        if not payload.product_id or not payload.quantity or payload.quantity < 0:
            return Err(ErrorKind.INVALID_INPUT, "Invalid payload")
        
        async with self.lock:
            product = await self.products.get(payload.product_id)
            if product is None:
                return Err(ErrorKind.NOT_FOUND, "Product not found")
            
            order = Order(
                id=self._new_id(),
                customer_id=caller,
                product_id=product.id,
                quantity=payload.quantity,
                status=OrderStatus.PLACED,
                created_at=self._clock(),
            )
            
            try:
                await self.orders.insert(order.id, order)
            except StorageError as e:
                logger.error("Order insert failed", order_id=order.id, error=str(e))
                return Err(ErrorKind.STORAGE_FAILURE, "Failed to place order")
            
            try:
                updated_product = await self.products.update(
                    product.id,
                    lambda current: current.model_copy(
                        update={"quantity_available": current.quantity_available - order.quantity}
                    ),
                )
            except StorageError as e:
                logger.error("Inventory update failed, withdrawing order", order_id=order.id, error=str(e))
                await self.orders.remove(order.id)
                return Err(ErrorKind.STORAGE_FAILURE, "Failed to place order")
            
            if updated_product is None:
                await self.orders.remove(order.id)
                return Err(ErrorKind.NOT_FOUND, "Product not found")
        
        logger.info(
            "Order placed",
            order_id=order.id,
            product_id=product.id,
            quantity=order.quantity,
            caller=caller,
            remaining=updated_product.quantity_available,
        )
        return Ok(order)
    
    # =========================================================================
    # TRANSITIONS
    # =========================================================================
    
    async def _transition(
        self,
        order_id: str,
        caller: str,
        source: OrderStatus,
        target: OrderStatus,
        authorize: Optional[Authorizer] = None,
    ) -> bool:
        """Move the order from source to target status if the caller may."""
        if not order_id:
            return False
        
        refusal = {"reason": "order not found"}
        
        def advance(order: Order) -> Optional[Order]:
            if authorize is not None and not authorize(order, caller):
                refusal["reason"] = "caller not permitted"
                return None
            if order.status != source:
                refusal["reason"] = f"order is {order.status.value}"
                return None
            return order.model_copy(update={"status": target})
        
        async with self.lock:
            try:
                updated = await self.orders.update(order_id, advance)
            except StorageError as e:
                logger.error("Order status write failed", order_id=order_id, error=str(e))
                return False
        
        if updated is None:
            logger.info(
                "Order transition refused",
                order_id=order_id,
                caller=caller,
                target=target.value,
                reason=refusal["reason"],
            )
            return False
        
        logger.info("Order status changed", order_id=order_id, status=target.value, caller=caller)
        return True
    
    async def cancel_order(self, order_id: str, caller: str) -> bool:
        """Cancel a placed order. Only the customer who placed it may cancel."""
        return await self._transition(
            order_id,
            caller,
            OrderStatus.PLACED,
            OrderStatus.CANCELLED,
            authorize=lambda order, who: order.customer_id == who,
        )
    
    async def confirm_order(self, order_id: str, caller: str) -> bool:
        """Confirm a placed order. Any caller may confirm."""
        return await self._transition(
            order_id,
            caller,
            OrderStatus.PLACED,
            OrderStatus.CONFIRMED,
        )
    
    async def deliver_order(self, order_id: str, caller: str) -> bool:
        """Mark a confirmed order delivered. Owner only; nobody if no owner is configured."""
        return await self._transition(
            order_id,
            caller,
            OrderStatus.CONFIRMED,
            OrderStatus.DELIVERED,
            authorize=lambda _order, who: self.owner is not None and who == self.owner,
        )
    
    # =========================================================================
    # QUERIES
    # =========================================================================
    
    async def get_orders_by_customer(self, customer_id: str) -> Result[List[Order]]:
        """All orders placed by a customer."""
        if not customer_id:
            return Err(ErrorKind.INVALID_INPUT, "Invalid Customer ID provided.")
        
        orders = await self.orders.values()
        return Ok([order for order in orders if str(order.customer_id) == customer_id])
