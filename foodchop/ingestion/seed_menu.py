"""
Menu Seeding

Loads products into the catalog through ``add_product``, so seeded items
get the same validation and fresh ids as products added over the API.

Usage:
    python -m foodchop.ingestion.seed_menu
    python -m foodchop.ingestion.seed_menu --file menu.json

A menu file is a JSON list of product payloads:
    [{"name": "Burger", "description": "...", "price": 500, "quantityAvailable": 10}]

Seeding the memory backend from a separate process has no effect on a
running server; use the redis or sql backend.
"""

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from foodchop.config import get_settings
from foodchop.config.logging import configure_logging
from foodchop.domain import Err, FoodPayload, FoodProduct
from foodchop.services import FoodMarketplace
from foodchop.storage import create_backend

logger = structlog.get_logger(__name__)

DEMO_MENU: List[Dict[str, Any]] = [
    {"name": "Burger", "description": "Beef patty, cheddar, pickles", "price": 500, "quantityAvailable": 10},
    {"name": "Chicken Wrap", "description": "Grilled chicken, lettuce, garlic sauce", "price": 450, "quantityAvailable": 15},
    {"name": "Jollof Rice", "description": "Smoky tomato rice with plantain", "price": 650, "quantityAvailable": 20},
    {"name": "Veggie Pizza", "description": "Peppers, onions, olives, mozzarella", "price": 900, "quantityAvailable": 8},
    {"name": "Fries", "description": "Hand-cut, sea salt", "price": 200, "quantityAvailable": 30},
    {"name": "Lemonade", "description": "Fresh squeezed", "price": 150, "quantityAvailable": 40},
]


def load_menu_file(path: Path) -> List[Dict[str, Any]]:
    """Read a JSON list of product payloads."""
    with open(path, "r", encoding="utf-8") as fh:
        items = json.load(fh)
    if not isinstance(items, list):
        raise ValueError(f"{path} must contain a JSON list of products")
    return items


async def seed_menu(
    marketplace: FoodMarketplace,
    items: List[Dict[str, Any]],
) -> List[FoodProduct]:
    """
    Add each menu item to the catalog.
    
    Items the catalog rejects are logged and skipped.
    
    Returns:
        The products that were created
    """
    created = []
    for item in items:
        payload = FoodPayload.model_validate(item)
        result = await marketplace.catalog.add_product(payload)
        if isinstance(result, Err):
            logger.warning("Skipping menu item", item=item, reason=result.message)
            continue
        created.append(result.value)
    
    logger.info(f"Seeded {len(created)} of {len(items)} menu items")
    return created


async def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the FoodChop catalog")
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="JSON menu file (default: built-in demo menu)",
    )
    args = parser.parse_args(argv)
    
    settings = get_settings()
    configure_logging(settings=settings)
    
    items = load_menu_file(args.file) if args.file else DEMO_MENU
    
    backend = create_backend(settings)
    await backend.connect()
    try:
        marketplace = FoodMarketplace(backend, owner=settings.security.owner_id)
        created = await seed_menu(marketplace, items)
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        raise
    finally:
        await backend.close()
    
    return 0 if created or not items else 1


def run() -> None:
    """Console script entry point."""
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()
