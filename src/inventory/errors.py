"""Stok paneli hata sınıfları.

Hepsi kurtarılabilir: çağrı noktasında yakalanır, kullanıcıya bildirim olarak
gösterilir ve bellekteki durum değişmeden kalır.
"""

from __future__ import annotations

from typing import Iterable


class InventoryError(Exception):
    """Tüm stok paneli hatalarının temel sınıfı."""


class ValidationError(InventoryError):
    """İstemci tarafı ön koşul sağlanmadı; ağ çağrısı yapılmadı."""

    def __init__(self, missing_fields: Iterable[str], message: str = ""):
        self.missing_fields = tuple(missing_fields)
        super().__init__(
            message or f"Zorunlu alanlar eksik: {', '.join(self.missing_fields)}"
        )


class DataAccessError(InventoryError):
    """Veri deposu çağrısı başarısız oldu veya beklenmeyen şekilde veri döndü."""


class NotAuthenticated(InventoryError):
    """Oturum açmış kullanıcı yok."""


class SetupRequired(InventoryError):
    """Kullanıcının bağlı bir eczane kaydı yok."""
