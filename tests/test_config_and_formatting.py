"""Konfigürasyon ve görüntüleme yardımcıları unit testleri."""

from datetime import date
from decimal import Decimal

import pytest

from src.config import Settings
from src.inventory.formatting import format_currency, format_date, status_labels
from src.models.pharmacy import DerivedStatus


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ["AWS_DEFAULT_REGION", "PHARMACY_TABLE_PREFIX",
                     "PHARMACY_EXPIRING_SOON_DAYS", "PHARMACY_DEFAULT_MIN_STOCK"]:
            monkeypatch.delenv(name, raising=False)
        settings = Settings.from_env()
        assert settings.region_name == "us-west-2"
        assert settings.expiring_soon_days == 30
        assert settings.default_minimum_stock_level == 10
        assert settings.table_name("inventory") == "PharmacyInventory"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-central-1")
        monkeypatch.setenv("PHARMACY_TABLE_PREFIX", "test-")
        monkeypatch.setenv("PHARMACY_EXPIRING_SOON_DAYS", "45")
        settings = Settings.from_env()
        assert settings.region_name == "eu-central-1"
        assert settings.expiring_soon_days == 45
        assert settings.table_name("brands") == "test-MedicineBrands"

    def test_invalid_int_raises(self, monkeypatch):
        monkeypatch.setenv("PHARMACY_DEFAULT_MIN_STOCK", "on")
        with pytest.raises(ValueError):
            Settings.from_env()


class TestFormatting:
    def test_currency_two_digits(self):
        assert format_currency(Decimal("12.5")) == "12.50"
        assert format_currency(Decimal("0")) == "0.00"
        assert format_currency(3.456) == "3.46"

    def test_date(self):
        assert format_date(date(2025, 1, 9)) == "2025-01-09"

    def test_status_labels_order(self):
        labels = status_labels(frozenset({DerivedStatus.LOW_STOCK, DerivedStatus.EXPIRED}))
        assert labels == ["Expired", "Low Stock"]
