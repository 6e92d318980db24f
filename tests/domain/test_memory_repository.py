"""Behavioral tests for the in-memory product repository."""

import asyncio
from datetime import datetime, timezone

import pytest

from catalog.domain.models.product import PriceStatistics
from catalog.domain.repositories.memory_product_repo import InMemoryProductRepository
from catalog.domain.seed_data import seed_products
from tests.factories import make_product, new_product

pytestmark = pytest.mark.anyio


class TestCreate:

    async def test_assigns_next_sequence_id(self, seeded_repo):
        product = await seeded_repo.create(new_product())
        assert product.id == "9"
        assert await seeded_repo.count() == 9

    async def test_sets_creation_time(self, seeded_repo):
        before = datetime.now(timezone.utc)
        product = await seeded_repo.create(new_product())
        assert product.created_at >= before

    async def test_new_id_is_unique(self, seeded_repo):
        existing = {p.id for p in await seeded_repo.find_all()}
        product = await seeded_repo.create(new_product())
        assert product.id not in existing

    async def test_ids_are_never_reused_after_delete(self, seeded_repo):
        first = await seeded_repo.create(new_product())
        assert await seeded_repo.delete(first.id)
        second = await seeded_repo.create(new_product())
        assert int(second.id) == int(first.id) + 1

    async def test_concurrent_creates_get_distinct_ids(self):
        repo = InMemoryProductRepository()
        products = await asyncio.gather(*(repo.create(new_product(name=f"P{i}")) for i in range(20)))
        assert sorted(int(p.id) for p in products) == list(range(1, 21))
        assert await repo.count() == 20

    async def test_empty_repository_starts_at_one(self):
        repo = InMemoryProductRepository()
        assert (await repo.create(new_product())).id == "1"

    async def test_unicode_digit_ids_do_not_advance_the_sequence(self):
        repo = InMemoryProductRepository([make_product("²"), make_product("3")])
        assert (await repo.create(new_product())).id == "4"
        await repo.replace_all([make_product("⁹"), make_product("07")])
        assert (await repo.create(new_product())).id == "5"


class TestRead:

    async def test_find_all_returns_a_copy(self, seeded_repo):
        products = await seeded_repo.find_all()
        products.clear()
        assert await seeded_repo.count() == 8

    async def test_find_by_id(self, seeded_repo):
        product = await seeded_repo.find_by_id("4")
        assert product.name == "Sony WH-1000XM5"
        assert await seeded_repo.find_by_id("999") is None

    @pytest.mark.parametrize("product_id", ["²", "01", " 1", "+1"])
    async def test_non_canonical_id_is_not_found(self, seeded_repo, product_id):
        assert await seeded_repo.find_by_id(product_id) is None
        assert await seeded_repo.exists(product_id) is False
        assert await seeded_repo.delete(product_id) is False

    async def test_find_by_category_is_case_insensitive(self, seeded_repo):
        assert len(await seeded_repo.find_by_category("electronics")) == 4
        assert len(await seeded_repo.find_by_category("HOME & KITCHEN")) == 1

    async def test_search_covers_name_and_description_only(self, seeded_repo):
        assert [p.id for p in await seeded_repo.search("HEADPHONES")] == ["4"]
        assert {p.id for p in await seeded_repo.search("running")} == {"3", "7"}
        assert await seeded_repo.search("sports") == []

    async def test_price_range_is_inclusive(self, seeded_repo):
        result = await seeded_repo.find_by_price_range(150, 379.99)
        assert sorted(p.price for p in result) == [150.0, 180.0, 379.99]

    async def test_find_in_stock(self):
        repo = InMemoryProductRepository([make_product(1, stock=0), make_product(2, stock=3)])
        assert [p.id for p in await repo.find_in_stock()] == ["2"]

    async def test_categories_sorted_and_distinct(self, seeded_repo):
        assert await seeded_repo.get_categories() == ["Clothing", "Electronics", "Home & Kitchen", "Sports"]


class TestUpdate:

    async def test_merges_only_given_fields(self, seeded_repo):
        original = await seeded_repo.find_by_id("3")
        updated = await seeded_repo.update("3", {"price": 120.0, "stock": 0})
        assert updated.price == 120.0
        assert updated.stock == 0
        assert updated.name == original.name
        assert updated.created_at == original.created_at
        assert (await seeded_repo.find_by_id("3")).price == 120.0

    async def test_empty_patch_changes_nothing(self, seeded_repo):
        original = await seeded_repo.find_by_id("5")
        assert await seeded_repo.update("5", {}) == original

    async def test_id_and_created_at_are_immutable(self, seeded_repo):
        original = await seeded_repo.find_by_id("5")
        updated = await seeded_repo.update("5", {"id": "77", "created_at": datetime.now(timezone.utc), "name": "Jeans"})
        assert updated.id == "5"
        assert updated.created_at == original.created_at
        assert updated.name == "Jeans"

    async def test_unknown_id(self, seeded_repo):
        assert await seeded_repo.update("404", {"price": 1.0}) is None

    async def test_previous_copies_are_unaffected(self, seeded_repo):
        before = await seeded_repo.find_by_id("1")
        await seeded_repo.update("1", {"price": 1.0})
        assert before.price == 999.99


class TestDelete:

    async def test_delete_then_gone(self, seeded_repo):
        assert await seeded_repo.delete("2") is True
        assert await seeded_repo.exists("2") is False
        assert await seeded_repo.find_by_id("2") is None

    async def test_second_delete_reports_failure(self, seeded_repo):
        assert await seeded_repo.delete("2") is True
        assert await seeded_repo.delete("2") is False

    async def test_replace_all(self, seeded_repo):
        deleted, inserted = await seeded_repo.replace_all([make_product(3), make_product(4)])
        assert (deleted, inserted) == (8, 2)
        assert [p.id for p in await seeded_repo.find_all()] == ["3", "4"]
        # sequence stays past every id ever issued
        assert (await seeded_repo.create(new_product())).id == "9"


class TestStats:

    async def test_count(self, seeded_repo):
        assert await seeded_repo.count() == 8

    async def test_average_price(self, seeded_repo):
        assert await seeded_repo.get_average_price() == pytest.approx(624.9925)

    async def test_average_price_of_empty_store(self):
        assert await InMemoryProductRepository().get_average_price() == 0

    async def test_category_stats(self, seeded_repo):
        assert await seeded_repo.get_category_stats() == {
            "Electronics": 4, "Sports": 2, "Clothing": 1, "Home & Kitchen": 1,
        }

    async def test_price_statistics_are_recomputed(self, seeded_repo):
        assert (await seeded_repo.get_price_statistics()).min == 89.99
        await seeded_repo.delete("5")
        stats = await seeded_repo.get_price_statistics()
        assert stats.min == 150.0
        assert stats.median == 399.99

    async def test_price_statistics_of_empty_store(self):
        assert await InMemoryProductRepository().get_price_statistics() == PriceStatistics()

    async def test_catalog_stats_match_the_seed(self, seeded_repo):
        stats = await seeded_repo.get_catalog_stats()
        assert stats.total_products == 8
        assert stats.average_price == pytest.approx(624.9925)
        assert stats.price_stats == PriceStatistics(min=89.99, max=1499.99, average=624.99, median=389.99)
        assert stats.category_counts == {"Electronics": 4, "Sports": 2, "Clothing": 1, "Home & Kitchen": 1}

    async def test_catalog_stats_are_one_consistent_view(self):
        repo = InMemoryProductRepository(seed_products(), latency=0.001)
        results = await asyncio.gather(
            repo.get_catalog_stats(),
            *(repo.create(new_product(category="Toys")) for _ in range(5)),
            repo.get_catalog_stats(),
        )
        for stats in (results[0], results[-1]):
            assert sum(stats.category_counts.values()) == stats.total_products
            assert stats.category_counts.get("Toys", 0) == stats.total_products - 8
