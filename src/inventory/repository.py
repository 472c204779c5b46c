"""Stok deposu adaptörü - DynamoDB okuma/yazma ve düz InventoryItem eşlemesi.

Beş tablo kullanılır: Pharmacies, PharmacyInventory, Medicines,
MedicineBrands, MedicineCategories. Stok satırları ilaç, marka ve kategori
kayıtlarıyla istemci tarafında birleştirilir. Ham satırlar yalnızca
parse_inventory_row içinde tipli modele çevrilir; eksik/bozuk alanlar orada
varsayılana çekilir ya da reddedilir.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Mapping, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from src.config import Settings
from src.inventory.errors import (
    DataAccessError,
    NotAuthenticated,
    SetupRequired,
    ValidationError,
)
from src.inventory.events import EventBus, EventType
from src.models.pharmacy import (
    DEFAULT_BRAND_NAME,
    DEFAULT_CATEGORY_NAME,
    CatalogLists,
    CurrentUser,
    InventoryItem,
    Medicine,
    MedicineBrand,
    MedicineCategory,
    Pharmacy,
)

logger = logging.getLogger(__name__)

STORE_ERRORS = (ClientError, BotoCoreError)

INVENTORY_REQUIRED_FIELDS = [
    "medicine_id",
    "batch_number",
    "expiry_date",
    "selling_price",
    "quantity_in_stock",
]
MEDICINE_REQUIRED_FIELDS = ["name", "brand_id", "category_id"]

# update_inventory_item'ın tamamen ezdiği alanlar
MUTABLE_INVENTORY_FIELDS = [
    "batch_number",
    "expiry_date",
    "purchase_price",
    "selling_price",
    "quantity_in_stock",
    "minimum_stock_level",
    "supplier_name",
]


# --- Ayrıştırma yardımcıları ---

def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def missing_fields(fields: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    """Boş veya hiç verilmemiş zorunlu alanları döndürür."""
    return [name for name in required if _is_blank(fields.get(name))]


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Sayıyı Decimal'e çevirir; çevrilemeyen veya negatif değerlerde default döner."""
    if _is_blank(value) or isinstance(value, bool):
        return default
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    if not result.is_finite() or result < 0:
        return default
    return result


def to_int(value: Any, default: int) -> int:
    """Tam sayıya çevirir (ondalık kısım atılır); hatalı veya negatifse default."""
    number = to_decimal(value, default=Decimal(-1))
    if number < 0:
        return default
    return int(number)


def to_date(value: Any) -> date:
    """ISO tarih (YYYY-MM-DD, saat kısmı varsa atılır) veya date nesnesini date'e çevirir."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value.strip()) < 10:
        raise ValueError(f"Geçersiz tarih: {value!r}")
    return date.fromisoformat(value.strip()[:10])


def parse_inventory_row(
    row: Mapping[str, Any],
    medicine: Optional[Mapping[str, Any]],
    brand: Optional[Mapping[str, Any]] = None,
    category: Optional[Mapping[str, Any]] = None,
    default_minimum_stock_level: int = 10,
) -> InventoryItem:
    """Birleştirilmiş ham stok satırını InventoryItem'a çevirir."""
    if _is_blank(row.get("id")):
        raise DataAccessError("Stok satırında id alanı yok")
    if not medicine or _is_blank(medicine.get("name")):
        raise DataAccessError(
            f"Stok satırı {row.get('id')!r} için ilaç kaydı bulunamadı"
        )
    try:
        expiry = to_date(row.get("expiry_date"))
    except ValueError as e:
        raise DataAccessError(
            f"Stok satırı {row.get('id')!r} için son kullanma tarihi okunamadı"
        ) from e

    return InventoryItem(
        id=str(row["id"]),
        medicine_id=str(row.get("medicine_id", "")),
        medicine_name=str(medicine["name"]),
        brand_name=str((brand or {}).get("name") or DEFAULT_BRAND_NAME),
        category_name=str((category or {}).get("name") or DEFAULT_CATEGORY_NAME),
        batch_number=str(row.get("batch_number") or ""),
        expiry_date=expiry,
        purchase_price=to_decimal(row.get("purchase_price")),
        selling_price=to_decimal(row.get("selling_price")),
        quantity_in_stock=to_int(row.get("quantity_in_stock"), 0),
        minimum_stock_level=to_int(
            row.get("minimum_stock_level"), default_minimum_stock_level
        ),
        supplier_name=str(row.get("supplier_name") or ""),
    )


def _by_name(name: Optional[str]) -> str:
    return (name or "").lower()


class InventoryRepository:
    """Eczane stok verisine erişim katmanı."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        dynamodb_resource: Optional[Any] = None,
        events: Optional[EventBus] = None,
    ):
        self.settings = settings or Settings.from_env()
        # AWS istemcisi - dependency injection destekli
        self.dynamodb = dynamodb_resource or boto3.resource(
            "dynamodb", region_name=self.settings.region_name
        )
        self.events = events or EventBus()

        # Tablo referansları
        self.pharmacies_table = self.dynamodb.Table(self.settings.table_name("pharmacies"))
        self.inventory_table = self.dynamodb.Table(self.settings.table_name("inventory"))
        self.medicines_table = self.dynamodb.Table(self.settings.table_name("medicines"))
        self.brands_table = self.dynamodb.Table(self.settings.table_name("brands"))
        self.categories_table = self.dynamodb.Table(self.settings.table_name("categories"))

    # --- Düşük seviye tablo erişimi ---

    def _call(self, description: str, operation: Callable[[], Any]) -> Any:
        """Depo çağrısını yapar; boto hatalarını DataAccessError'a çevirir."""
        try:
            return operation()
        except STORE_ERRORS as e:
            logger.error("DynamoDB hatası (%s): %s", description, e)
            raise DataAccessError(f"{description} başarısız: {e}") from e

    def _query_all(self, table: Any, description: str, **kwargs: Any) -> list[dict]:
        """LastEvaluatedKey ile sayfalayarak tüm sonuçları toplar."""
        items: list[dict] = []
        params = dict(kwargs)
        while True:
            resp = self._call(description, lambda: table.query(**params))
            items.extend(resp.get("Items", []))
            if "LastEvaluatedKey" not in resp:
                break
            params["ExclusiveStartKey"] = resp["LastEvaluatedKey"]
        return items

    def _scan_all(self, table: Any, description: str) -> list[dict]:
        items: list[dict] = []
        params: dict[str, Any] = {}
        while True:
            resp = self._call(description, lambda: table.scan(**params))
            items.extend(resp.get("Items", []))
            if "LastEvaluatedKey" not in resp:
                break
            params["ExclusiveStartKey"] = resp["LastEvaluatedKey"]
        return items

    def _get(self, table: Any, item_id: str, description: str) -> Optional[dict]:
        resp = self._call(description, lambda: table.get_item(Key={"id": item_id}))
        return resp.get("Item")

    # --- Eczane çözümleme ---

    def fetch_pharmacy_for_user(self, current_user: CurrentUser) -> Optional[Pharmacy]:
        """Kullanıcının sahip olduğu eczaneyi döndürür, yoksa None."""
        rows = self._call(
            "eczane sorgusu",
            lambda: self.pharmacies_table.query(
                IndexName="UserIndex",
                KeyConditionExpression=Key("user_id").eq(current_user.id),
                Limit=1,
            ),
        ).get("Items", [])
        if not rows:
            return None
        row = rows[0]
        return Pharmacy(id=str(row["id"]), user_id=str(row["user_id"]), name=str(row.get("name", "")))

    def require_pharmacy(self, current_user: Optional[CurrentUser]) -> Pharmacy:
        """Yazma işlemleri için eczaneyi çözer; kullanıcı veya eczane yoksa hata verir."""
        if current_user is None:
            raise NotAuthenticated("Stok işlemleri için giriş yapılmalı")
        pharmacy = self.fetch_pharmacy_for_user(current_user)
        if pharmacy is None:
            raise SetupRequired(f"Kullanıcı {current_user.id} için eczane kaydı yok")
        return pharmacy

    # --- Stok okuma ---

    def fetch_inventory(self, current_user: Optional[CurrentUser]) -> list[InventoryItem]:
        """Kullanıcının eczanesine ait tüm stok partilerini döndürür.

        Kullanıcı veya eczane yoksa boş liste döner (kurulum henüz tamamlanmamış).
        """
        if current_user is None:
            logger.info("Oturum yok, stok listesi boş döndürülüyor")
            return []
        pharmacy = self.fetch_pharmacy_for_user(current_user)
        if pharmacy is None:
            logger.info("Kullanıcı %s için eczane yok, stok listesi boş", current_user.id)
            return []
        return self.fetch_inventory_for_pharmacy(pharmacy.id)

    def fetch_inventory_for_pharmacy(self, pharmacy_id: str) -> list[InventoryItem]:
        rows = self._query_all(
            self.inventory_table,
            "stok sorgusu",
            IndexName="PharmacyIndex",
            KeyConditionExpression=Key("pharmacy_id").eq(pharmacy_id),
        )

        # Her ilaç/marka/kategori kaydı bir kez okunur
        medicines: dict[str, Optional[dict]] = {}
        brands: dict[str, Optional[dict]] = {}
        categories: dict[str, Optional[dict]] = {}

        items: list[InventoryItem] = []
        for row in rows:
            medicine_id = str(row.get("medicine_id", ""))
            if medicine_id not in medicines:
                medicines[medicine_id] = (
                    self._get(self.medicines_table, medicine_id, "ilaç okuma")
                    if medicine_id
                    else None
                )
            medicine = medicines[medicine_id]

            brand = category = None
            if medicine:
                brand_id = medicine.get("brand_id")
                if brand_id:
                    if brand_id not in brands:
                        brands[brand_id] = self._get(self.brands_table, brand_id, "marka okuma")
                    brand = brands[brand_id]
                category_id = medicine.get("category_id")
                if category_id:
                    if category_id not in categories:
                        categories[category_id] = self._get(
                            self.categories_table, category_id, "kategori okuma"
                        )
                    category = categories[category_id]

            items.append(
                parse_inventory_row(
                    row,
                    medicine,
                    brand,
                    category,
                    default_minimum_stock_level=self.settings.default_minimum_stock_level,
                )
            )

        logger.info("Eczane %s için %d stok kalemi yüklendi", pharmacy_id, len(items))
        return items

    # --- Katalog listeleri ---

    def _load_brands(self) -> list[MedicineBrand]:
        rows = self._scan_all(self.brands_table, "marka listesi")
        brands = [MedicineBrand(id=str(r["id"]), name=str(r.get("name", ""))) for r in rows]
        return sorted(brands, key=lambda b: _by_name(b.name))

    def _load_categories(self) -> list[MedicineCategory]:
        rows = self._scan_all(self.categories_table, "kategori listesi")
        categories = [
            MedicineCategory(id=str(r["id"]), name=str(r.get("name", ""))) for r in rows
        ]
        return sorted(categories, key=lambda c: _by_name(c.name))

    def _load_medicines(
        self,
        brand_names: Mapping[str, str],
        category_names: Mapping[str, str],
    ) -> list[Medicine]:
        rows = self._scan_all(self.medicines_table, "ilaç listesi")
        medicines = [
            self._medicine_from_row(r, brand_names, category_names) for r in rows
        ]
        return sorted(medicines, key=lambda m: _by_name(m.name))

    @staticmethod
    def _medicine_from_row(
        row: Mapping[str, Any],
        brand_names: Mapping[str, str],
        category_names: Mapping[str, str],
    ) -> Medicine:
        brand_id = row.get("brand_id")
        category_id = row.get("category_id")
        return Medicine(
            id=str(row["id"]),
            name=str(row.get("name", "")),
            brand_id=brand_id,
            category_id=category_id,
            generic_name=str(row.get("generic_name") or ""),
            dosage=str(row.get("dosage") or ""),
            form=str(row.get("form") or ""),
            requires_prescription=bool(row.get("requires_prescription", False)),
            brand_name=brand_names.get(brand_id) if brand_id else None,
            category_name=category_names.get(category_id) if category_id else None,
        )

    def fetch_catalog_lists(self) -> CatalogLists:
        """İlaç, marka ve kategori listelerini isme göre sıralı döndürür.

        Her liste bağımsız okunur; biri başarısız olursa loglanır ve boş kalır.
        """
        brands: list[MedicineBrand] = []
        categories: list[MedicineCategory] = []
        medicines: list[Medicine] = []

        try:
            brands = self._load_brands()
        except DataAccessError as e:
            logger.warning("Marka listesi yüklenemedi: %s", e)
        try:
            categories = self._load_categories()
        except DataAccessError as e:
            logger.warning("Kategori listesi yüklenemedi: %s", e)
        try:
            medicines = self._load_medicines(
                {b.id: b.name for b in brands},
                {c.id: c.name for c in categories},
            )
        except DataAccessError as e:
            logger.warning("İlaç listesi yüklenemedi: %s", e)

        return CatalogLists(
            medicines=tuple(medicines),
            brands=tuple(brands),
            categories=tuple(categories),
        )

    # --- Yazma işlemleri ---

    def _inventory_values(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Form alanlarını DynamoDB'ye yazılacak tipli değerlere çevirir."""
        try:
            expiry = to_date(fields.get("expiry_date"))
        except ValueError as e:
            raise ValidationError(["expiry_date"], "Son kullanma tarihi YYYY-MM-DD olmalı") from e

        selling_price = to_decimal(fields.get("selling_price"), default=Decimal(-1))
        if selling_price < 0:
            raise ValidationError(["selling_price"], "Satış fiyatı geçerli bir sayı olmalı")
        quantity = to_int(fields.get("quantity_in_stock"), -1)
        if quantity < 0:
            raise ValidationError(["quantity_in_stock"], "Stok miktarı geçerli bir sayı olmalı")

        return {
            "batch_number": str(fields.get("batch_number") or "").strip(),
            "expiry_date": expiry.isoformat(),
            "purchase_price": to_decimal(fields.get("purchase_price")),
            "selling_price": selling_price,
            "quantity_in_stock": quantity,
            "minimum_stock_level": to_int(
                fields.get("minimum_stock_level"),
                self.settings.default_minimum_stock_level,
            ),
            "supplier_name": str(fields.get("supplier_name") or ""),
        }

    def insert_inventory_item(
        self, pharmacy_id: str, fields: Mapping[str, Any]
    ) -> InventoryItem:
        """Yeni stok partisi ekler. Yazmadan önce zorunlu alanları doğrular."""
        missing = missing_fields(fields, INVENTORY_REQUIRED_FIELDS)
        if missing:
            raise ValidationError(missing)
        values = self._inventory_values(fields)

        if self._get(self.pharmacies_table, pharmacy_id, "eczane okuma") is None:
            raise DataAccessError(f"Eczane kaydı bulunamadı: {pharmacy_id}")
        medicine_id = str(fields["medicine_id"])
        medicine = self._get(self.medicines_table, medicine_id, "ilaç okuma")
        if medicine is None:
            raise DataAccessError(f"İlaç kaydı bulunamadı: {medicine_id}")

        row = {
            "id": str(uuid.uuid4()),
            "pharmacy_id": pharmacy_id,
            "medicine_id": medicine_id,
            **values,
        }
        self._call(
            "stok ekleme",
            lambda: self.inventory_table.put_item(
                Item=row, ConditionExpression="attribute_not_exists(id)"
            ),
        )
        logger.info("Stok kalemi eklendi: %s (eczane %s)", row["id"], pharmacy_id)

        brand = category = None
        if medicine.get("brand_id"):
            brand = self._get(self.brands_table, medicine["brand_id"], "marka okuma")
        if medicine.get("category_id"):
            category = self._get(self.categories_table, medicine["category_id"], "kategori okuma")
        item = parse_inventory_row(
            row,
            medicine,
            brand,
            category,
            default_minimum_stock_level=self.settings.default_minimum_stock_level,
        )

        self._publish_inventory(pharmacy_id)
        return item

    def update_inventory_item(
        self, pharmacy_id: str, item_id: str, fields: Mapping[str, Any]
    ) -> None:
        """Eczaneye ait stok satırının değiştirilebilir tüm alanlarını ezer (son yazan kazanır).

        Satır yoksa veya başka bir eczaneye aitse koşul başarısız olur ve
        DataAccessError fırlatılır; iki durum ayırt edilmez.
        """
        missing = missing_fields(
            fields, [f for f in INVENTORY_REQUIRED_FIELDS if f != "medicine_id"]
        )
        if missing:
            raise ValidationError(missing)
        values = self._inventory_values(fields)

        names = {f"#f{i}": name for i, name in enumerate(MUTABLE_INVENTORY_FIELDS)}
        names["#pid"] = "pharmacy_id"
        attr_values = {
            f":v{i}": values[name] for i, name in enumerate(MUTABLE_INVENTORY_FIELDS)
        }
        attr_values[":pid"] = pharmacy_id
        expression = "SET " + ", ".join(
            f"#f{i} = :v{i}" for i in range(len(MUTABLE_INVENTORY_FIELDS))
        )

        try:
            self.inventory_table.update_item(
                Key={"id": item_id},
                UpdateExpression=expression,
                ConditionExpression="attribute_exists(id) AND #pid = :pid",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=attr_values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                logger.warning(
                    "Stok kaydı bulunamadı veya eczaneye ait değil: %s (eczane %s)",
                    item_id, pharmacy_id,
                )
                raise DataAccessError(f"Stok kaydı bulunamadı: {item_id}") from e
            logger.error("DynamoDB hatası (stok güncelleme): %s", e)
            raise DataAccessError(f"stok güncelleme başarısız: {e}") from e
        except BotoCoreError as e:
            logger.error("DynamoDB hatası (stok güncelleme): %s", e)
            raise DataAccessError(f"stok güncelleme başarısız: {e}") from e

        logger.info("Stok kalemi güncellendi: %s (eczane %s)", item_id, pharmacy_id)
        self._publish_inventory(pharmacy_id)

    def insert_medicine(self, fields: Mapping[str, Any]) -> Medicine:
        """Kataloğa yeni ilaç ekler."""
        missing = missing_fields(fields, MEDICINE_REQUIRED_FIELDS)
        if missing:
            raise ValidationError(missing)

        brand_id = str(fields["brand_id"])
        brand = self._get(self.brands_table, brand_id, "marka okuma")
        if brand is None:
            raise DataAccessError(f"Marka kaydı bulunamadı: {brand_id}")
        category_id = str(fields["category_id"])
        category = self._get(self.categories_table, category_id, "kategori okuma")
        if category is None:
            raise DataAccessError(f"Kategori kaydı bulunamadı: {category_id}")

        row = {
            "id": str(uuid.uuid4()),
            "name": str(fields["name"]).strip(),
            "generic_name": str(fields.get("generic_name") or ""),
            "dosage": str(fields.get("dosage") or ""),
            "form": str(fields.get("form") or ""),
            "brand_id": brand_id,
            "category_id": category_id,
            "requires_prescription": bool(fields.get("requires_prescription", False)),
        }
        self._call(
            "ilaç ekleme",
            lambda: self.medicines_table.put_item(
                Item=row, ConditionExpression="attribute_not_exists(id)"
            ),
        )
        logger.info("İlaç eklendi: %s (%s)", row["name"], row["id"])

        self._publish_catalog()
        return self._medicine_from_row(
            row,
            {brand_id: str(brand.get("name", ""))},
            {category_id: str(category.get("name", ""))},
        )

    # --- Yazma sonrası tam snapshot yayını ---

    def _publish_inventory(self, pharmacy_id: str) -> None:
        try:
            items = self.fetch_inventory_for_pharmacy(pharmacy_id)
        except DataAccessError as e:
            logger.warning("Yazma sonrası stok yenilenemedi (%s): %s", pharmacy_id, e)
            return
        self.events.publish(EventType.INVENTORY_REPLACED, items, pharmacy_id=pharmacy_id)

    def _publish_catalog(self) -> None:
        try:
            brands = self._load_brands()
            categories = self._load_categories()
            medicines = self._load_medicines(
                {b.id: b.name for b in brands},
                {c.id: c.name for c in categories},
            )
        except DataAccessError as e:
            logger.warning("Yazma sonrası ilaç listesi yenilenemedi: %s", e)
            return
        self.events.publish(EventType.CATALOG_REPLACED, medicines)
