from src.inventory.events import EventBus, EventType
from src.inventory.panel import InventoryPanel
from src.inventory.repository import InventoryRepository
from src.inventory.view_engine import compute_view, derive_status

__all__ = [
    "EventBus",
    "EventType",
    "InventoryPanel",
    "InventoryRepository",
    "compute_view",
    "derive_status",
]
