"""
Unit Tests - Menu Seeding
"""
import json

import pytest

from foodchop.ingestion import DEMO_MENU, load_menu_file, seed_menu


async def test_seeds_demo_menu(marketplace):
    created = await seed_menu(marketplace, DEMO_MENU)
    
    listed = (await marketplace.catalog.list_products()).value
    assert len(created) == len(DEMO_MENU)
    assert sorted(p.name for p in listed) == sorted(item["name"] for item in DEMO_MENU)


async def test_skips_rejected_items(marketplace):
    items = [
        {"name": "Burger", "description": "Beef", "price": 500, "quantityAvailable": 10},
        {"name": "Free Water", "description": "Tap", "price": 0, "quantityAvailable": 99},
    ]
    
    created = await seed_menu(marketplace, items)
    
    assert [p.name for p in created] == ["Burger"]


def test_load_menu_file(tmp_path):
    path = tmp_path / "menu.json"
    path.write_text(json.dumps(DEMO_MENU[:2]), encoding="utf-8")
    
    assert load_menu_file(path) == DEMO_MENU[:2]


def test_load_menu_file_requires_list(tmp_path):
    path = tmp_path / "menu.json"
    path.write_text(json.dumps({"name": "Burger"}), encoding="utf-8")
    
    with pytest.raises(ValueError):
        load_menu_file(path)
