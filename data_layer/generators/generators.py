"""Örnek eczane verisi üretim modülü.

Bir eczane, 6 marka, 6 kategori, 18 ilaç ve her ilaç için 1-3 stok partisi
üretir.

Problemli senaryolar:
- Son kullanma tarihi geçmiş partiler
- 30 gün içinde son kullanma tarihi dolacak partiler
- Minimum stok seviyesinin altındaki partiler
- Markası/kategorisi silinmiş ilaç (Generic / Uncategorized varsayılanı)
"""
import json
import os
import random
import uuid
from datetime import date, timedelta
from typing import Dict, List, Optional


# --- SABİTLER ---

BRANDS = ["Abdi İbrahim", "Bayer", "Deva", "Eczacıbaşı", "Novartis", "Pfizer"]

CATEGORIES = ["Analjezik", "Antibiyotik", "Antihistaminik", "Kardiyovasküler", "Vitamin", "Gastrointestinal"]

# (ilaç adı, etken madde, doz, form, kategori, reçeteli mi)
MEDICINES = [
    ("Parol", "Parasetamol", "500mg", "Tablet", "Analjezik", False),
    ("Majezik", "Flurbiprofen", "100mg", "Tablet", "Analjezik", False),
    ("Arveles", "Deksketoprofen", "25mg", "Tablet", "Analjezik", False),
    ("Augmentin", "Amoksisilin + Klavulanik asit", "1000mg", "Tablet", "Antibiyotik", True),
    ("Cipro", "Siprofloksasin", "500mg", "Tablet", "Antibiyotik", True),
    ("Klacid", "Klaritromisin", "500mg", "Tablet", "Antibiyotik", True),
    ("Aerius", "Desloratadin", "5mg", "Tablet", "Antihistaminik", False),
    ("Zyrtec", "Setirizin", "10mg", "Tablet", "Antihistaminik", False),
    ("Allerset", "Levosetirizin", "5mg", "Şurup", "Antihistaminik", False),
    ("Beloc", "Metoprolol", "50mg", "Tablet", "Kardiyovasküler", True),
    ("Coraspin", "Asetilsalisilik asit", "100mg", "Tablet", "Kardiyovasküler", False),
    ("Norvasc", "Amlodipin", "5mg", "Tablet", "Kardiyovasküler", True),
    ("Supradyn", "Multivitamin", "", "Efervesan", "Vitamin", False),
    ("Devit-3", "Kolekalsiferol", "50000IU", "Damla", "Vitamin", False),
    ("Benexol", "B1 + B6 + B12", "", "Tablet", "Vitamin", False),
    ("Nexium", "Esomeprazol", "40mg", "Tablet", "Gastrointestinal", True),
    ("Gaviscon", "Sodyum aljinat", "", "Süspansiyon", "Gastrointestinal", False),
    ("Rennie", "Kalsiyum karbonat", "", "Çiğneme tableti", "Gastrointestinal", False),
]

PRICE_RANGES: Dict[str, tuple] = {
    "Analjezik": (20, 90),
    "Antibiyotik": (60, 250),
    "Antihistaminik": (40, 160),
    "Kardiyovasküler": (50, 300),
    "Vitamin": (30, 200),
    "Gastrointestinal": (40, 220),
}

SUPPLIERS = ["Selçuk Ecza", "Alliance Healthcare", "As Ecza", ""]


def _new_id() -> str:
    return str(uuid.uuid4())


# --- ÜRETİM FONKSİYONLARI ---

def generate_brands() -> List[dict]:
    return [{"id": _new_id(), "name": name} for name in BRANDS]


def generate_categories() -> List[dict]:
    return [{"id": _new_id(), "name": name} for name in CATEGORIES]


def generate_medicines(brands: List[dict], categories: List[dict]) -> List[dict]:
    """18 ilaç üretir; son ilacın markası ve kategorisi bilerek boş bırakılır."""
    category_ids = {c["name"]: c["id"] for c in categories}
    medicines = []
    for name, generic, dosage, form, category, rx in MEDICINES:
        medicines.append({
            "id": _new_id(),
            "name": name,
            "generic_name": generic,
            "dosage": dosage,
            "form": form,
            "brand_id": random.choice(brands)["id"],
            "category_id": category_ids[category],
            "requires_prescription": rx,
        })

    # --- PROBLEMLİ SENARYO: ilişkisi olmayan ilaç ---
    medicines[-1].pop("brand_id")
    medicines[-1].pop("category_id")
    return medicines


def generate_pharmacy(user_id: str, name: str = "Merkez Eczanesi") -> dict:
    return {"id": _new_id(), "user_id": user_id, "name": name}


def generate_inventory(
    pharmacy_id: str,
    medicines: List[dict],
    categories: Optional[List[dict]] = None,
    reference_date: Optional[date] = None,
) -> List[dict]:
    """Her ilaç için 1-3 parti üretir.

    Problemli senaryolar:
    - Partilerin ~%10'u son kullanma tarihini geçmiş
    - ~%15'i 30 gün içinde dolacak
    - ~%20'si minimum stok seviyesinde veya altında
    """
    today = reference_date or date.today()
    category_names = {c["id"]: c["name"] for c in categories or []}
    inventory = []

    for med in medicines:
        for batch_idx in range(random.randint(1, 3)):
            roll = random.random()
            if roll < 0.10:
                expiry = today - timedelta(days=random.randint(1, 120))
            elif roll < 0.25:
                expiry = today + timedelta(days=random.randint(1, 30))
            else:
                expiry = today + timedelta(days=random.randint(31, 720))

            minimum = random.choice([5, 10, 10, 20])
            if random.random() < 0.20:
                quantity = random.randint(0, minimum)
            else:
                quantity = random.randint(minimum + 1, minimum * 15)

            price_min, price_max = PRICE_RANGES.get(
                category_names.get(med.get("category_id", ""), ""), (20, 200)
            )
            purchase = round(random.uniform(price_min, price_max), 2)

            inventory.append({
                "id": _new_id(),
                "pharmacy_id": pharmacy_id,
                "medicine_id": med["id"],
                "batch_number": f"{med['name'][:3].upper()}-{today.year % 100:02d}{batch_idx + 1:02d}{random.randint(100, 999)}",
                "expiry_date": expiry.isoformat(),
                "purchase_price": purchase,
                "selling_price": round(purchase * random.uniform(1.15, 1.45), 2),
                "quantity_in_stock": quantity,
                "minimum_stock_level": minimum,
                "supplier_name": random.choice(SUPPLIERS),
            })

    return inventory


def save_json(data, filepath: str):
    """JSON dosyasına kaydet."""
    os.makedirs(os.path.dirname(filepath), exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    print(f"  ✓ {filepath} ({len(data)} kayıt)")


def generate_all(
    user_id: str,
    output_dir: str = "data_layer/data",
    seed: int = 42,
    reference_date: Optional[date] = None,
):
    """Tüm örnek veriyi üretir ve kaydeder."""
    random.seed(seed)
    print("🏥 Örnek eczane verisi üretiliyor...\n")

    brands = generate_brands()
    categories = generate_categories()
    medicines = generate_medicines(brands, categories)
    pharmacy = generate_pharmacy(user_id)
    inventory = generate_inventory(pharmacy["id"], medicines, categories, reference_date)

    save_json(brands, f"{output_dir}/brands.json")
    save_json(categories, f"{output_dir}/categories.json")
    save_json(medicines, f"{output_dir}/medicines.json")
    save_json([pharmacy], f"{output_dir}/pharmacies.json")
    save_json(inventory, f"{output_dir}/inventory.json")

    print(f"\n{'='*60}")
    print(f"✅ Üretim tamamlandı!")
    print(f"   Eczane: {pharmacy['name']} (kullanıcı {user_id})")
    print(f"   Markalar: {len(brands)}, Kategoriler: {len(categories)}, İlaçlar: {len(medicines)}")
    print(f"   Stok partileri: {len(inventory)}")
    print(f"   Çıktı dizini: {output_dir}/")

    return {
        "brands": brands,
        "categories": categories,
        "medicines": medicines,
        "pharmacies": [pharmacy],
        "inventory": inventory,
    }


if __name__ == "__main__":
    import sys

    generate_all(user_id=sys.argv[1] if len(sys.argv) > 1 else "demo-user")
