"""
Domain Module
"""
from .models import (
    CustomerInteraction,
    CustomerInteractionPayload,
    FoodPayload,
    FoodProduct,
    Order,
    OrderPayload,
    OrderStatus,
    QuantityUpdate,
)
from .results import Err, ErrorKind, Ok, Result

__all__ = [
    "CustomerInteraction",
    "CustomerInteractionPayload",
    "FoodPayload",
    "FoodProduct",
    "Order",
    "OrderPayload",
    "OrderStatus",
    "QuantityUpdate",
    "Err",
    "ErrorKind",
    "Ok",
    "Result",
]
