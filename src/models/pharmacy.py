"""Eczane stok yönetimi veri modelleri."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

ALL_FILTER = "all"
DEFAULT_BRAND_NAME = "Generic"
DEFAULT_CATEGORY_NAME = "Uncategorized"
DEFAULT_MINIMUM_STOCK_LEVEL = 10


class DerivedStatus(str, Enum):
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    LOW_STOCK = "low_stock"
    GOOD = "good"


class NotificationVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str = ""


@dataclass(frozen=True)
class Pharmacy:
    id: str
    user_id: str
    name: str = ""


@dataclass(frozen=True)
class MedicineBrand:
    id: str
    name: str


@dataclass(frozen=True)
class MedicineCategory:
    id: str
    name: str


@dataclass(frozen=True)
class Medicine:
    id: str
    name: str
    brand_id: Optional[str] = None
    category_id: Optional[str] = None
    generic_name: str = ""
    dosage: str = ""
    form: str = ""
    requires_prescription: bool = False
    # Listeleme için join edilen isimler
    brand_name: Optional[str] = None
    category_name: Optional[str] = None


@dataclass(frozen=True)
class InventoryItem:
    """Bir ilacın stoktaki tek bir partisi (batch)."""

    id: str
    medicine_id: str
    medicine_name: str
    batch_number: str
    expiry_date: date
    brand_name: str = DEFAULT_BRAND_NAME
    category_name: str = DEFAULT_CATEGORY_NAME
    purchase_price: Decimal = Decimal("0")
    selling_price: Decimal = Decimal("0")
    quantity_in_stock: int = 0
    minimum_stock_level: int = DEFAULT_MINIMUM_STOCK_LEVEL
    supplier_name: str = ""


@dataclass(frozen=True)
class CatalogLists:
    medicines: tuple[Medicine, ...] = ()
    brands: tuple[MedicineBrand, ...] = ()
    categories: tuple[MedicineCategory, ...] = ()


@dataclass(frozen=True)
class FilterCriteria:
    search_term: str = ""
    category_filter: str = ALL_FILTER
    brand_filter: str = ALL_FILTER


@dataclass(frozen=True)
class ViewState:
    """Panelin anlık görünüm durumu. Her kullanıcı etkileşiminde yenisiyle değiştirilir."""

    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    add_dialog_open: bool = False
    edit_dialog_open: bool = False
    add_medicine_dialog_open: bool = False


@dataclass(frozen=True)
class InventorySummary:
    total: int = 0
    low_stock: int = 0
    expiring_soon: int = 0
    expired: int = 0
    collection_total: int = 0


@dataclass(frozen=True)
class InventoryView:
    visible: tuple[InventoryItem, ...] = ()
    # Salt okunur: compute_view MappingProxyType ile sarar
    statuses: Mapping[str, frozenset[DerivedStatus]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    summary: InventorySummary = field(default_factory=InventorySummary)


@dataclass
class Notification:
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())
