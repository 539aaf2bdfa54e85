"""
Ingestion Module
"""
from .seed_menu import DEMO_MENU, load_menu_file, seed_menu

__all__ = ["DEMO_MENU", "load_menu_file", "seed_menu"]
