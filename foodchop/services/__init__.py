"""
Services Module
"""
from .cart import Cart, CartItem, CartStore, MenuCategory, build_menu, select_category
from .catalog import ProductCatalog
from .marketplace import FoodMarketplace
from .orders import OrderLifecycle
from .reviews import ReviewCollection

__all__ = [
    "Cart",
    "CartItem",
    "CartStore",
    "MenuCategory",
    "build_menu",
    "select_category",
    "ProductCatalog",
    "FoodMarketplace",
    "OrderLifecycle",
    "ReviewCollection",
]
