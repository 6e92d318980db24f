"""Unit tests for price statistics."""

import pytest

from catalog.domain.models.product import PriceStatistics
from catalog.domain.seed_data import seed_products
from catalog.domain.services.product_query import catalog_stats, median, price_statistics
from tests.factories import make_product


def _priced(*prices):
    return [make_product(i, price=p) for i, p in enumerate(prices, start=1)]


class TestPriceStatistics:

    def test_four_prices(self):
        stats = price_statistics(_priced(50.00, 10.99, 199.99, 15.99))
        assert stats.min == 10.99
        assert stats.max == 199.99
        assert stats.average == pytest.approx(69.2425)
        assert stats.median == pytest.approx(32.995)

    def test_empty_set_is_all_zero(self):
        assert price_statistics([]) == PriceStatistics(min=0, max=0, average=0, median=0)

    def test_single_product(self):
        stats = price_statistics(_priced(42.5))
        assert (stats.min, stats.max, stats.average, stats.median) == (42.5, 42.5, 42.5, 42.5)

    def test_odd_count_takes_middle_value(self):
        assert price_statistics(_priced(3, 100, 7)).median == 7

    def test_seed_catalog(self):
        stats = price_statistics(seed_products()).rounded()
        assert stats == PriceStatistics(min=89.99, max=1499.99, average=624.99, median=389.99)

    @pytest.mark.parametrize("prices", [
        (0.1, 0.1, 0.1),
        (19.99, 19.99, 19.99, 19.99, 19.99, 19.99, 19.99),
        (1.0, 1000.0),
        (5.5, 2.25, 9.75, 2.25),
    ])
    def test_order_invariants(self, prices):
        stats = price_statistics(_priced(*prices))
        assert stats.min <= stats.median <= stats.max
        assert stats.min <= stats.average <= stats.max


class TestMedian:

    def test_even(self):
        assert median([1, 2, 3, 4]) == 2.5

    def test_odd(self):
        assert median([1, 2, 9]) == 2

    def test_empty(self):
        assert median([]) == 0


class TestRounding:

    def test_rounds_every_field_to_cents(self):
        stats = PriceStatistics(min=1.004, max=2.006, average=1.23456, median=1.5).rounded()
        assert stats == PriceStatistics(min=1.0, max=2.01, average=1.23, median=1.5)


class TestCatalogStats:

    def test_empty_catalog(self):
        stats = catalog_stats([])
        assert (stats.total_products, stats.average_price, stats.category_counts) == (0, 0, {})
        assert stats.price_stats == PriceStatistics()

    def test_figures_come_from_the_same_list(self):
        products = [make_product(1, price=10, category="A"), make_product(2, price=30, category="B"),
                    make_product(3, price=20, category="A")]
        stats = catalog_stats(products)
        assert stats.total_products == 3
        assert stats.average_price == 20
        assert stats.category_counts == {"A": 2, "B": 1}
        assert stats.price_stats == PriceStatistics(min=10, max=30, average=20, median=20)
