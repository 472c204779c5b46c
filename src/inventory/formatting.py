"""Görüntüleme yardımcıları."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from src.models.pharmacy import DerivedStatus

STATUS_LABELS: dict[DerivedStatus, str] = {
    DerivedStatus.EXPIRED: "Expired",
    DerivedStatus.EXPIRING_SOON: "Expiring Soon",
    DerivedStatus.LOW_STOCK: "Low Stock",
    DerivedStatus.GOOD: "Good",
}

# Rozetlerin ekrandaki sırası
_BADGE_ORDER = [
    DerivedStatus.EXPIRED,
    DerivedStatus.EXPIRING_SOON,
    DerivedStatus.LOW_STOCK,
    DerivedStatus.GOOD,
]


def format_currency(amount: Decimal | int | float) -> str:
    """Tutarı iki ondalık basamakla yazar."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{value:.2f}"


def format_date(value: date) -> str:
    return value.isoformat()


def status_labels(statuses: frozenset[DerivedStatus]) -> list[str]:
    """Durum kümesini sabit sırada rozet etiketlerine çevirir."""
    return [STATUS_LABELS[s] for s in _BADGE_ORDER if s in statuses]
