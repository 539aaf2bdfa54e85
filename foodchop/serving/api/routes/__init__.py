"""
API Routes Module
"""
from .carts import router as carts_router
from .health import router as health_router
from .orders import router as orders_router
from .products import router as products_router
from .reviews import router as reviews_router

__all__ = [
    "carts_router",
    "health_router",
    "orders_router",
    "products_router",
    "reviews_router",
]
