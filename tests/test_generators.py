"""Örnek veri üreticisi unit testleri."""

import random
from datetime import date

from data_layer.generators.generators import (
    generate_brands,
    generate_categories,
    generate_inventory,
    generate_medicines,
    generate_pharmacy,
)
from src.inventory.repository import parse_inventory_row
from src.inventory.view_engine import compute_view

TODAY = date(2025, 6, 1)


def _generate():
    random.seed(7)
    brands = generate_brands()
    categories = generate_categories()
    medicines = generate_medicines(brands, categories)
    pharmacy = generate_pharmacy("user-1")
    inventory = generate_inventory(pharmacy["id"], medicines, categories, TODAY)
    return brands, categories, medicines, pharmacy, inventory


class TestGenerators:
    def test_rows_belong_to_pharmacy(self):
        _, _, medicines, pharmacy, inventory = _generate()
        assert pharmacy["user_id"] == "user-1"
        assert len(inventory) >= len(medicines)
        assert all(row["pharmacy_id"] == pharmacy["id"] for row in inventory)

    def test_rows_parse_into_items(self):
        brands, categories, medicines, _, inventory = _generate()
        meds = {m["id"]: m for m in medicines}
        brand_map = {b["id"]: b for b in brands}
        category_map = {c["id"]: c for c in categories}

        items = [
            parse_inventory_row(
                row,
                meds[row["medicine_id"]],
                brand_map.get(meds[row["medicine_id"]].get("brand_id")),
                category_map.get(meds[row["medicine_id"]].get("category_id")),
            )
            for row in inventory
        ]
        assert len(items) == len(inventory)
        # Son ilacın ilişkileri bilerek boş
        orphan = [i for i in items if i.medicine_id == medicines[-1]["id"]]
        assert orphan and all(i.brand_name == "Generic" for i in orphan)

        summary = compute_view(items, None, TODAY).summary
        assert summary.total == len(items)
