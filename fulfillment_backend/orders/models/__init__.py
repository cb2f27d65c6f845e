"""
PATH: orders/models/__init__.py

Orders models export surface.
"""

from .inventory_unit import InventoryUnit
from .order import Order
from .stock_location import StockLocation

__all__ = [
    "InventoryUnit",
    "Order",
    "StockLocation",
]
