"""Eczane stok paneli konfigürasyonu.

Ortam değişkenleri (.env dahil) varsayılanları ezer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import env_loader  # noqa: F401  (.env yüklemesi için)

TABLE_NAMES: dict[str, str] = {
    "pharmacies": "Pharmacies",
    "inventory": "PharmacyInventory",
    "medicines": "Medicines",
    "brands": "MedicineBrands",
    "categories": "MedicineCategories",
}


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} tam sayı olmalı: {raw!r}")


@dataclass(frozen=True)
class Settings:
    region_name: str = "us-west-2"
    table_prefix: str = ""
    expiring_soon_days: int = 30
    default_minimum_stock_level: int = 10

    @classmethod
    def from_env(cls) -> "Settings":
        """Ayarları ortam değişkenlerinden okur."""
        return cls(
            region_name=os.environ.get("AWS_DEFAULT_REGION", "us-west-2"),
            table_prefix=os.environ.get("PHARMACY_TABLE_PREFIX", ""),
            expiring_soon_days=_int_env("PHARMACY_EXPIRING_SOON_DAYS", 30),
            default_minimum_stock_level=_int_env("PHARMACY_DEFAULT_MIN_STOCK", 10),
        )

    def table_name(self, key: str) -> str:
        """Mantıksal tablo anahtarını ön ekli DynamoDB tablo adına çevirir."""
        return f"{self.table_prefix}{TABLE_NAMES[key]}"
