"""
Catalog and Cart

Storefront-side helpers: grouping products into menu categories, the
shopping cart, and cart persistence.

A cart holds one line per product id. Adding a product that is already in
the cart bumps that line's quantity by one instead of adding a new line.
"""

from typing import Iterable, List, Mapping, Optional

import structlog
from pydantic import computed_field

from foodchop.domain import FoodProduct
from foodchop.domain.models import RecordModel
from foodchop.storage import RecordMap

logger = structlog.get_logger(__name__)

DEFAULT_CATEGORY = "Menu"


# =============================================================================
# MENU
# =============================================================================

class MenuCategory(RecordModel):
    """A named group of products shown together"""
    category_name: str
    items: List[FoodProduct] = []


def build_menu(
    products: Iterable[FoodProduct],
    categories: Optional[Mapping[str, str]] = None,
    default_category: str = DEFAULT_CATEGORY,
) -> List[MenuCategory]:
    """
    Group products by category, in order of first appearance.
    
    Args:
        products: Products to group
        categories: Product id -> category name
        default_category: Category for products missing from ``categories``
    """
    categories = categories or {}
    menu: List[MenuCategory] = []
    by_name = {}
    
    for product in products:
        name = categories.get(product.id, default_category)
        if name not in by_name:
            by_name[name] = MenuCategory(category_name=name)
            menu.append(by_name[name])
        by_name[name].items.append(product)
    
    return menu


def select_category(
    menu: List[MenuCategory],
    category_name: Optional[str] = None,
) -> List[FoodProduct]:
    """Items of the named category; the first category when no name is given."""
    if not menu:
        return []
    if category_name is None:
        return list(menu[0].items)
    for category in menu:
        if category.category_name == category_name:
            return list(category.items)
    return []


# =============================================================================
# CART
# =============================================================================

class CartItem(FoodProduct):
    """Product snapshot plus the quantity in the cart"""
    quantity: int = 1


class Cart(RecordModel):
    items: List[CartItem] = []
    
    @computed_field
    @property
    def item_count(self) -> int:
        """Total quantity across all lines"""
        return sum(item.quantity for item in self.items)
    
    def add(self, product: FoodProduct) -> CartItem:
        """Add one unit of product, merging with an existing line."""
        for item in self.items:
            if item.id == product.id:
                item.quantity += 1
                return item
        
        item = CartItem(**product.model_dump(), quantity=1)
        self.items.append(item)
        return item


class CartStore:
    """
    Persists carts by cart id.
    
    An unknown cart id loads as an empty cart.
    """
    
    def __init__(self, carts: RecordMap[Cart]):
        self.carts = carts
    
    async def load(self, cart_id: str) -> Cart:
        cart = await self.carts.get(cart_id)
        return cart if cart is not None else Cart()
    
    async def add_item(self, cart_id: str, product: FoodProduct) -> Cart:
        """Add one unit of product to the stored cart, creating it if needed."""
        def add(cart: Cart) -> Cart:
            cart.add(product)
            return cart
        
        cart = await self.carts.update(cart_id, add, default=Cart())
        logger.debug("Cart saved", cart_id=cart_id, item_count=cart.item_count)
        return cart
