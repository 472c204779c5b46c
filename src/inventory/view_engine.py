"""Filtre ve durum motoru - görünür stok listesi ve özet sayıları.

Saf fonksiyonlar: girdi koleksiyonu, filtre kriterleri ve referans tarihi
dışında hiçbir duruma bakmaz, hiçbir şeyi değiştirmez. Koleksiyonun zaten
tek bir eczaneye ait olduğu varsayılır.

Durum kuralları (yalnızca gün bazında):
- Expired: son kullanma tarihi referans tarihinden önce
- ExpiringSoon: 0 < kalan gün <= 30 ve süresi geçmemiş
- LowStock: stok miktarı <= minimum stok seviyesi (tarihten bağımsız)
- Good: yukarıdakilerin hiçbiri değilse
"""

from __future__ import annotations

from datetime import date, datetime
from types import MappingProxyType
from typing import Iterable, Optional, Sequence, Union

from src.models.pharmacy import (
    ALL_FILTER,
    DerivedStatus,
    FilterCriteria,
    InventoryItem,
    InventorySummary,
    InventoryView,
)

EXPIRING_SOON_DAYS = 30

DateLike = Union[date, datetime]


def _as_date(value: Optional[DateLike]) -> date:
    """datetime değerlerini gününe indirger; None ise bugünü döndürür."""
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


# --- Filtreleme ---

def matches_search(item: InventoryItem, search_term: str) -> bool:
    """Arama terimi ilaç, marka, kategori veya parti numarasından birinde geçiyor mu."""
    term = search_term.strip().lower()
    if not term:
        return True
    return any(
        term in value.lower()
        for value in (
            item.medicine_name,
            item.brand_name,
            item.category_name,
            item.batch_number,
        )
    )


def _is_active(filter_value: str) -> bool:
    return bool(filter_value) and filter_value != ALL_FILTER


def matches_category(item: InventoryItem, category_filter: str) -> bool:
    if not _is_active(category_filter):
        return True
    return item.category_name.lower() == category_filter.lower()


def matches_brand(item: InventoryItem, brand_filter: str) -> bool:
    if not _is_active(brand_filter):
        return True
    return item.brand_name.lower() == brand_filter.lower()


def filter_items(
    items: Iterable[InventoryItem], criteria: FilterCriteria
) -> list[InventoryItem]:
    """Üç kriterin kesişimini uygular; giriş sırası korunur."""
    filtered = list(items)

    if criteria.search_term.strip():
        filtered = [i for i in filtered if matches_search(i, criteria.search_term)]

    if _is_active(criteria.category_filter):
        filtered = [i for i in filtered if matches_category(i, criteria.category_filter)]

    if _is_active(criteria.brand_filter):
        filtered = [i for i in filtered if matches_brand(i, criteria.brand_filter)]

    return filtered


# --- Durum hesaplama ---

def days_to_expiry(item: InventoryItem, reference_date: Optional[DateLike] = None) -> int:
    return (item.expiry_date - _as_date(reference_date)).days


def is_expired(item: InventoryItem, reference_date: Optional[DateLike] = None) -> bool:
    return item.expiry_date < _as_date(reference_date)


def is_expiring_soon(
    item: InventoryItem,
    reference_date: Optional[DateLike] = None,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> bool:
    if is_expired(item, reference_date):
        return False
    return 0 < days_to_expiry(item, reference_date) <= expiring_soon_days


def is_low_stock(item: InventoryItem) -> bool:
    return item.quantity_in_stock <= item.minimum_stock_level


def derive_status(
    item: InventoryItem,
    reference_date: Optional[DateLike] = None,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> frozenset[DerivedStatus]:
    """Bir kalem için geçerli tüm durum rozetlerini döndürür.

    Expired ile ExpiringSoon birbirini dışlar; LowStock ikisiyle de birlikte
    olabilir. Good yalnızca başka hiçbir durum yoksa verilir.
    """
    ref = _as_date(reference_date)
    statuses: set[DerivedStatus] = set()

    if is_expired(item, ref):
        statuses.add(DerivedStatus.EXPIRED)
    elif is_expiring_soon(item, ref, expiring_soon_days):
        statuses.add(DerivedStatus.EXPIRING_SOON)

    if is_low_stock(item):
        statuses.add(DerivedStatus.LOW_STOCK)

    if not statuses:
        statuses.add(DerivedStatus.GOOD)

    return frozenset(statuses)


# --- Özet ---

def summarize(
    visible: Sequence[InventoryItem],
    statuses: dict[str, frozenset[DerivedStatus]],
    collection_total: int,
) -> InventorySummary:
    """Görünür alt küme üzerinde bağımsız sayımlar (bir kalem birden fazla sayıma girebilir)."""
    return InventorySummary(
        total=len(visible),
        low_stock=sum(1 for i in visible if DerivedStatus.LOW_STOCK in statuses[i.id]),
        expiring_soon=sum(
            1 for i in visible if DerivedStatus.EXPIRING_SOON in statuses[i.id]
        ),
        expired=sum(1 for i in visible if DerivedStatus.EXPIRED in statuses[i.id]),
        collection_total=collection_total,
    )


def compute_view(
    items: Sequence[InventoryItem],
    criteria: Optional[FilterCriteria] = None,
    reference_date: Optional[DateLike] = None,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> InventoryView:
    """Görünür listeyi, kalem durumlarını ve özet sayılarını hesaplar."""
    criteria = criteria or FilterCriteria()
    ref = _as_date(reference_date)

    visible = filter_items(items, criteria)
    statuses = {
        item.id: derive_status(item, ref, expiring_soon_days) for item in visible
    }

    return InventoryView(
        visible=tuple(visible),
        statuses=MappingProxyType(statuses),
        summary=summarize(visible, statuses, collection_total=len(items)),
    )
