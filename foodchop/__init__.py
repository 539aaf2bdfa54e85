"""
FoodChop Ordering Service

Product catalog, order lifecycle and customer reviews behind a FastAPI API.
"""

__version__ = "1.0.0"
