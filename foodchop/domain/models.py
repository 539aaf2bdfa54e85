"""
Domain Models

Records kept by the ordering service. Each record lives in its own
collection, keyed by its ``id``:

- FoodProduct: catalog entry with available inventory
- Order: a customer's order for a single product
- CustomerInteraction: a rating and review left for a product

Payload models carry client input. Their fields are optional so that a
missing field reaches the service layer and is reported as invalid input
rather than rejected by the HTTP layer.

JSON field names are camelCase; Python attributes are snake_case.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OrderStatus(str, Enum):
    """Order status enumeration"""
    PLACED = "placed"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    DELIVERED = "delivered"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.CANCELLED, OrderStatus.DELIVERED)


class RecordModel(BaseModel):
    """Base class for stored records and request payloads"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# RECORDS
# =============================================================================

class FoodProduct(RecordModel):
    """Catalog product. ``price`` is in the smallest currency unit."""
    id: str
    name: str
    description: str
    price: int
    quantity_available: int


class Order(RecordModel):
    """Customer order for one product"""
    id: str
    customer_id: str
    product_id: str
    quantity: int
    status: OrderStatus = OrderStatus.PLACED
    created_at: datetime


class CustomerInteraction(RecordModel):
    """Customer rating and review for a product. Immutable once stored."""
    id: str
    customer_id: str
    product_id: str
    rating: int
    review: str
    created_at: datetime


# =============================================================================
# PAYLOADS
# =============================================================================

class FoodPayload(RecordModel):
    """New product request"""
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = None
    quantity_available: Optional[int] = None


class OrderPayload(RecordModel):
    """Order placement request"""
    product_id: Optional[str] = None
    quantity: Optional[int] = None


class CustomerInteractionPayload(RecordModel):
    """New review request"""
    product_id: Optional[str] = None
    rating: Optional[int] = None
    review: Optional[str] = None


class QuantityUpdate(RecordModel):
    """Inventory update request"""
    quantity: Optional[int] = None
