"""Filtre ve durum motoru unit testleri."""

import itertools
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from src.inventory.view_engine import (
    compute_view,
    days_to_expiry,
    derive_status,
    filter_items,
    is_expired,
    is_expiring_soon,
    is_low_stock,
    matches_brand,
    matches_category,
    matches_search,
)
from src.models.pharmacy import DerivedStatus, FilterCriteria, InventoryItem

TODAY = date(2025, 6, 1)


def _item(
    item_id: str = "inv-1",
    name: str = "Paracetamol",
    brand: str = "Acme",
    category: str = "Analgesic",
    batch: str = "B-001",
    qty: int = 50,
    minimum: int = 10,
    expiry: date = TODAY + timedelta(days=90),
) -> InventoryItem:
    return InventoryItem(
        id=item_id,
        medicine_id=f"med-{item_id}",
        medicine_name=name,
        brand_name=brand,
        category_name=category,
        batch_number=batch,
        expiry_date=expiry,
        selling_price=Decimal("12.50"),
        quantity_in_stock=qty,
        minimum_stock_level=minimum,
    )


def _sample_items() -> list[InventoryItem]:
    return [
        _item("inv-1", "Paracetamol", "Acme", "Analgesic", "PAR-01", qty=5, expiry=TODAY + timedelta(days=5)),
        _item("inv-2", "Amoxicillin", "Generic", "Antibiotic", "AMX-07", qty=50, expiry=TODAY + timedelta(days=60)),
    ]


def _catalog() -> list[InventoryItem]:
    return [
        _item("a", "Parol", "Abdi", "Analjezik", "PRL-1"),
        _item("b", "Majezik", "Sanovel", "Analjezik", "MJZ-2"),
        _item("c", "Augmentin", "GSK", "Antibiyotik", "AUG-3"),
        _item("d", "Cipro", "Bayer", "Antibiyotik", "prl-9"),
        _item("e", "Aspirin", "Bayer", "Analjezik", "ASP-5"),
    ]


class TestExampleScenarios:
    """Örnek koleksiyon üzerinde özet sayıları."""

    def test_unfiltered_summary(self):
        view = compute_view(_sample_items(), FilterCriteria(), TODAY)
        assert len(view.visible) == 2
        assert view.summary.total == 2
        assert view.summary.low_stock == 1
        assert view.summary.expiring_soon == 1
        assert view.summary.expired == 0

    def test_search_amox(self):
        view = compute_view(_sample_items(), FilterCriteria(search_term="amox"), TODAY)
        assert [i.medicine_name for i in view.visible] == ["Amoxicillin"]
        assert view.summary.total == 1
        assert view.summary.low_stock == 0
        assert view.summary.expiring_soon == 0
        assert view.summary.expired == 0
        assert view.summary.collection_total == 2

    def test_empty_collection(self):
        view = compute_view([], FilterCriteria(search_term="x", category_filter="Vitamin"), TODAY)
        assert view.visible == ()
        assert view.summary.total == 0
        assert view.summary.low_stock == 0
        assert view.summary.expiring_soon == 0
        assert view.summary.expired == 0


class TestFiltering:
    """Arama, kategori ve marka filtreleri."""

    def test_sentinel_criteria_returns_input_unchanged(self):
        items = _catalog()
        view = compute_view(items, FilterCriteria(search_term="   "), TODAY)
        assert list(view.visible) == items

    def test_default_criteria_when_none(self):
        items = _catalog()
        assert list(compute_view(items, None, TODAY).visible) == items

    def test_search_matches_any_field(self):
        items = _catalog()
        # "prl" hem Parol'ün parti numarasında hem de Cipro'nun "prl-9" partisinde geçer
        visible = filter_items(items, FilterCriteria(search_term="PRL"))
        assert {i.id for i in visible} == {"a", "d"}

    def test_search_matches_brand_and_category(self):
        items = _catalog()
        assert {i.id for i in filter_items(items, FilterCriteria(search_term="bayer"))} == {"d", "e"}
        assert {i.id for i in filter_items(items, FilterCriteria(search_term="antibiy"))} == {"c", "d"}

    def test_search_term_is_trimmed(self):
        items = _catalog()
        assert [i.id for i in filter_items(items, FilterCriteria(search_term="  majezik "))] == ["b"]

    def test_search_property_holds_for_every_item(self):
        items = _catalog()
        for term in ["a", "in", "BAY", "-", "zz", "analjezik"]:
            visible = filter_items(items, FilterCriteria(search_term=term))
            for item in items:
                fields = [item.medicine_name, item.brand_name, item.category_name, item.batch_number]
                has_term = any(term.lower() in f.lower() for f in fields)
                assert (item in visible) == has_term

    def test_category_filter_case_insensitive_exact(self):
        items = _catalog()
        visible = filter_items(items, FilterCriteria(category_filter="ANTIBIYOTIK"))
        assert {i.id for i in visible} == {"c", "d"}
        # Kısmi eşleşme yeterli değil
        assert filter_items(items, FilterCriteria(category_filter="Antibiy")) == []

    def test_brand_filter_case_insensitive_exact(self):
        items = _catalog()
        assert {i.id for i in filter_items(items, FilterCriteria(brand_filter="bayer"))} == {"d", "e"}

    def test_all_filters_combined(self):
        items = _catalog()
        criteria = FilterCriteria(search_term="a", category_filter="Analjezik", brand_filter="Bayer")
        assert [i.id for i in filter_items(items, criteria)] == ["e"]

    def test_predicate_order_does_not_matter(self):
        items = _catalog()
        predicates = [
            lambda i: matches_search(i, "a"),
            lambda i: matches_category(i, "analjezik"),
            lambda i: matches_brand(i, "BAYER"),
        ]
        expected = {i.id for i in filter_items(
            items, FilterCriteria(search_term="a", category_filter="analjezik", brand_filter="BAYER")
        )}
        for order in itertools.permutations(predicates):
            result = items
            for predicate in order:
                result = [i for i in result if predicate(i)]
            assert {i.id for i in result} == expected

    def test_filter_keeps_input_order(self):
        items = _catalog()
        visible = filter_items(items, FilterCriteria(category_filter="Analjezik"))
        assert [i.id for i in visible] == ["a", "b", "e"]


class TestStatusDerivation:
    """Son kullanma ve stok durumları."""

    def test_low_stock_at_threshold(self):
        assert is_low_stock(_item(qty=10, minimum=10)) is True
        assert is_low_stock(_item(qty=11, minimum=10)) is False
        assert is_low_stock(_item(qty=0, minimum=0)) is True

    def test_low_stock_independent_of_date(self):
        item = _item(qty=3, minimum=10, expiry=TODAY - timedelta(days=400))
        for ref in [TODAY, TODAY + timedelta(days=1000), TODAY - timedelta(days=1000)]:
            assert DerivedStatus.LOW_STOCK in derive_status(item, ref)

    def test_one_day_before_expiry_is_expiring_soon(self):
        item = _item(qty=50, minimum=10, expiry=TODAY)
        status = derive_status(item, TODAY - timedelta(days=1))
        assert status == frozenset({DerivedStatus.EXPIRING_SOON})

    def test_one_day_after_expiry_is_expired(self):
        item = _item(expiry=TODAY)
        status = derive_status(item, TODAY + timedelta(days=1))
        assert DerivedStatus.EXPIRED in status
        assert DerivedStatus.EXPIRING_SOON not in status

    def test_long_expired_never_expiring_soon(self):
        item = _item(expiry=TODAY)
        ref = TODAY + timedelta(days=31)
        assert is_expired(item, ref) is True
        assert is_expiring_soon(item, ref) is False

    def test_expiry_day_itself_is_neither(self):
        item = _item(qty=50, expiry=TODAY)
        assert days_to_expiry(item, TODAY) == 0
        assert derive_status(item, TODAY) == frozenset({DerivedStatus.GOOD})

    def test_thirty_day_boundary(self):
        assert is_expiring_soon(_item(expiry=TODAY + timedelta(days=30)), TODAY) is True
        assert is_expiring_soon(_item(expiry=TODAY + timedelta(days=31)), TODAY) is False

    def test_custom_expiring_window(self):
        item = _item(expiry=TODAY + timedelta(days=45))
        assert is_expiring_soon(item, TODAY, expiring_soon_days=60) is True

    def test_time_of_day_ignored(self):
        item = _item(expiry=TODAY)
        late = datetime(2025, 5, 31, 23, 59)
        assert days_to_expiry(item, late) == 1
        assert is_expired(item, datetime(2025, 6, 1, 23, 59)) is False

    def test_expired_and_low_stock_together(self):
        item = _item(qty=2, minimum=10, expiry=TODAY - timedelta(days=3))
        assert derive_status(item, TODAY) == frozenset(
            {DerivedStatus.EXPIRED, DerivedStatus.LOW_STOCK}
        )

    def test_expiring_and_low_stock_together(self):
        item = _item(qty=2, minimum=10, expiry=TODAY + timedelta(days=3))
        assert derive_status(item, TODAY) == frozenset(
            {DerivedStatus.EXPIRING_SOON, DerivedStatus.LOW_STOCK}
        )

    def test_good_only_when_nothing_else(self):
        assert derive_status(_item(qty=50, expiry=TODAY + timedelta(days=200)), TODAY) == frozenset(
            {DerivedStatus.GOOD}
        )


class TestSummary:
    """Özet sayıları yalnızca görünür alt küme üzerinden."""

    def test_counts_are_independent(self):
        items = [
            _item("x", qty=1, expiry=TODAY - timedelta(days=1)),
            _item("y", qty=1, expiry=TODAY + timedelta(days=10)),
            _item("z", qty=99, expiry=TODAY + timedelta(days=300)),
        ]
        summary = compute_view(items, FilterCriteria(), TODAY).summary
        assert summary.total == 3
        assert summary.low_stock == 2
        assert summary.expired == 1
        assert summary.expiring_soon == 1

    def test_counts_follow_filter(self):
        items = [
            _item("x", name="Expired Low", qty=1, expiry=TODAY - timedelta(days=1)),
            _item("y", name="Fine", qty=99, expiry=TODAY + timedelta(days=300)),
        ]
        view = compute_view(items, FilterCriteria(search_term="fine"), TODAY)
        assert view.summary.total == 1
        assert view.summary.low_stock == 0
        assert view.summary.expired == 0
        assert set(view.statuses) == {"y"}

    @pytest.mark.parametrize("offset,expected", [(-1, "expired"), (1, "expiring_soon"), (31, "good")])
    def test_status_per_visible_item(self, offset, expected):
        item = _item(qty=50, expiry=TODAY + timedelta(days=offset))
        view = compute_view([item], FilterCriteria(), TODAY)
        assert view.statuses[item.id] == frozenset({DerivedStatus(expected)})

    def test_statuses_are_read_only(self):
        view = compute_view(_sample_items(), FilterCriteria(), TODAY)
        with pytest.raises(TypeError):
            view.statuses["inv-1"] = frozenset({DerivedStatus.GOOD})
