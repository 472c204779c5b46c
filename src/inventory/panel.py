"""Stok yönetim paneli - görünüm durumu, form durumu ve bildirimler.

Panel tek bellek içi stok koleksiyonunun sahibidir. Koleksiyon yalnızca iki
yoldan değişir: açık bir yenileme (load/refresh_inventory) veya adaptörün
yazma sonrası yayınladığı INVENTORY_REPLACED olayı. Tüm hatalar çağrı
noktasında yakalanır, geçici bildirime çevrilir ve mevcut durum korunur.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from datetime import date
from typing import Any, Callable, Optional

from src.inventory.errors import (
    DataAccessError,
    InventoryError,
    NotAuthenticated,
    SetupRequired,
    ValidationError,
)
from src.inventory.events import CollectionEvent, EventType
from src.inventory.repository import (
    INVENTORY_REQUIRED_FIELDS,
    MEDICINE_REQUIRED_FIELDS,
    InventoryRepository,
    missing_fields,
)
from src.inventory.view_engine import compute_view
from src.models.pharmacy import (
    ALL_FILTER,
    CatalogLists,
    CurrentUser,
    FilterCriteria,
    InventoryItem,
    InventoryView,
    Notification,
    NotificationVariant,
    ViewState,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InventoryForm:
    """Stok ekleme/düzenleme formu. Değerler ekrandaki gibi metin olarak tutulur."""

    batch_number: str = ""
    expiry_date: str = ""
    purchase_price: str = ""
    selling_price: str = ""
    quantity_in_stock: str = ""
    minimum_stock_level: str = "10"
    supplier_name: str = ""

    @classmethod
    def from_item(cls, item: InventoryItem) -> "InventoryForm":
        return cls(
            batch_number=item.batch_number,
            expiry_date=item.expiry_date.isoformat(),
            purchase_price=str(item.purchase_price),
            selling_price=str(item.selling_price),
            quantity_in_stock=str(item.quantity_in_stock),
            minimum_stock_level=str(item.minimum_stock_level),
            supplier_name=item.supplier_name,
        )


@dataclass(frozen=True)
class MedicineForm:
    name: str = ""
    generic_name: str = ""
    dosage: str = ""
    form: str = ""
    brand_id: str = ""
    category_id: str = ""
    requires_prescription: bool = False


class InventoryPanel:
    """Eczane stok paneli kontrolcüsü (arayüzden bağımsız)."""

    def __init__(
        self,
        repository: InventoryRepository,
        user_provider: Callable[[], Optional[CurrentUser]],
        clock: Optional[Callable[[], date]] = None,
    ):
        self.repository = repository
        self.user_provider = user_provider
        self.clock = clock or date.today

        self.state = ViewState()
        self.items: list[InventoryItem] = []
        self.catalog = CatalogLists()
        self.loading = True
        self.notifications: list[Notification] = []

        self.inventory_form = InventoryForm()
        self.medicine_form = MedicineForm()
        self.selected_medicine_id = ""
        self.editing_item: Optional[InventoryItem] = None

        repository.events.subscribe(EventType.INVENTORY_REPLACED, self._on_inventory_replaced)
        repository.events.subscribe(EventType.CATALOG_REPLACED, self._on_catalog_replaced)

    # --- Yükleme ---

    def load(self) -> None:
        """İlk açılış: stok listesi ve katalog listeleri."""
        try:
            self.refresh_inventory()
            self.load_catalog()
        finally:
            self.loading = False

    def refresh_inventory(self) -> bool:
        try:
            items = self.repository.fetch_inventory(self.user_provider())
        except InventoryError as e:
            logger.error("Stok listesi yüklenemedi: %s", e)
            self._notify_error("Error", "Failed to load inventory")
            return False
        self.items = items
        return True

    def load_catalog(self) -> None:
        self.catalog = self.repository.fetch_catalog_lists()

    def _on_inventory_replaced(self, event: CollectionEvent) -> None:
        self.items = list(event.payload)

    def _on_catalog_replaced(self, event: CollectionEvent) -> None:
        self.catalog = replace(self.catalog, medicines=tuple(event.payload))

    # --- Filtreler ---

    def _set_criteria(self, **changes: str) -> None:
        self.state = replace(self.state, criteria=replace(self.state.criteria, **changes))

    def set_search_term(self, search_term: str) -> None:
        self._set_criteria(search_term=search_term)

    def set_category_filter(self, category: str) -> None:
        self._set_criteria(category_filter=category or ALL_FILTER)

    def set_brand_filter(self, brand: str) -> None:
        self._set_criteria(brand_filter=brand or ALL_FILTER)

    def clear_filters(self) -> None:
        self.state = replace(self.state, criteria=FilterCriteria())

    def view(self) -> InventoryView:
        """Mevcut koleksiyon ve kriterler için görünümü yeniden hesaplar."""
        return compute_view(
            self.items,
            self.state.criteria,
            self.clock(),
            expiring_soon_days=self.repository.settings.expiring_soon_days,
        )

    # --- Dialoglar ve formlar ---

    def open_add_dialog(self) -> None:
        self.state = replace(self.state, add_dialog_open=True)

    def close_add_dialog(self) -> None:
        self.state = replace(self.state, add_dialog_open=False)

    def open_add_medicine_dialog(self) -> None:
        self.state = replace(self.state, add_medicine_dialog_open=True)

    def close_add_medicine_dialog(self) -> None:
        self.state = replace(self.state, add_medicine_dialog_open=False)

    def select_medicine(self, medicine_id: str) -> None:
        self.selected_medicine_id = medicine_id

    def update_inventory_form(self, **changes: str) -> None:
        self.inventory_form = replace(self.inventory_form, **changes)

    def update_medicine_form(self, **changes: Any) -> None:
        self.medicine_form = replace(self.medicine_form, **changes)

    def start_edit(self, item: InventoryItem) -> None:
        """Düzenleme formunu seçilen kalemin değerleriyle doldurur."""
        self.editing_item = item
        self.inventory_form = InventoryForm.from_item(item)
        self.state = replace(self.state, edit_dialog_open=True)

    def cancel_edit(self) -> None:
        self.editing_item = None
        self.state = replace(self.state, edit_dialog_open=False)

    # --- Yazma işlemleri ---
    # Bildirim metinleri sabit ve İngilizcedir; hata ayrıntısı yalnızca loglanır.

    def _resolve_pharmacy_id(self, action: str) -> Optional[str]:
        """Oturumdaki kullanıcının eczanesini bulur; bulamazsa bildirim gösterir."""
        try:
            return self.repository.require_pharmacy(self.user_provider()).id
        except NotAuthenticated:
            self._notify_error("Authentication Error", f"Please log in to {action} inventory")
        except SetupRequired:
            self._notify_error("Setup Required", "Please complete your pharmacy setup first")
        except DataAccessError as e:
            logger.error("Eczane kaydı okunamadı: %s", e)
            self._notify_error("Error", f"Failed to {action} inventory item")
        return None

    def add_inventory(self) -> bool:
        fields = {"medicine_id": self.selected_medicine_id, **asdict(self.inventory_form)}

        # Ağ çağrısından önce istemci tarafı kontrol
        if missing_fields(fields, ["medicine_id", "batch_number", "expiry_date"]):
            self._notify_error(
                "Missing Information",
                "Please select a medicine and fill in batch number and expiry date",
            )
            return False
        if missing_fields(fields, INVENTORY_REQUIRED_FIELDS):
            self._notify_error("Missing Information", "Please enter selling price and quantity")
            return False

        pharmacy_id = self._resolve_pharmacy_id("add")
        if pharmacy_id is None:
            return False
        try:
            self.repository.insert_inventory_item(pharmacy_id, fields)
        except ValidationError as e:
            logger.warning("Stok formu geçersiz: %s", e)
            self._notify_error("Missing Information", "Please fill in all required fields")
            return False
        except DataAccessError as e:
            logger.error("Stok eklenemedi: %s", e)
            self._notify_error("Error", "Failed to add inventory item")
            return False

        self._notify("Success", "Inventory item added successfully")
        self.state = replace(self.state, add_dialog_open=False)
        self.selected_medicine_id = ""
        self.inventory_form = InventoryForm()
        return True

    def update_inventory(self) -> bool:
        if self.editing_item is None:
            return False

        pharmacy_id = self._resolve_pharmacy_id("update")
        if pharmacy_id is None:
            return False
        try:
            self.repository.update_inventory_item(
                pharmacy_id, self.editing_item.id, asdict(self.inventory_form)
            )
        except ValidationError as e:
            logger.warning("Stok formu geçersiz: %s", e)
            self._notify_error("Missing Information", "Please fill in all required fields")
            return False
        except DataAccessError as e:
            logger.error("Stok güncellenemedi: %s", e)
            self._notify_error("Error", "Failed to update inventory item")
            return False

        self._notify("Success", "Inventory item updated successfully")
        self.cancel_edit()
        return True

    def add_medicine(self) -> bool:
        fields = asdict(self.medicine_form)
        if missing_fields(fields, MEDICINE_REQUIRED_FIELDS):
            self._notify_error("Missing Information", "Please fill in all required fields")
            return False

        try:
            self.repository.insert_medicine(fields)
        except InventoryError as e:
            logger.error("İlaç eklenemedi: %s", e)
            self._notify_error("Error", "Failed to add medicine")
            return False

        self._notify("Success", "Medicine added successfully")
        self.state = replace(self.state, add_medicine_dialog_open=False)
        self.medicine_form = MedicineForm()
        return True

    # --- Bildirimler ---

    def _notify(
        self,
        title: str,
        description: str,
        variant: NotificationVariant = NotificationVariant.DEFAULT,
    ) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.notifications.append(notification)
        return notification

    def _notify_error(self, title: str, description: str) -> Notification:
        return self._notify(title, description, NotificationVariant.DESTRUCTIVE)

    def dismiss_notifications(self) -> list[Notification]:
        dismissed, self.notifications = self.notifications, []
        return dismissed
