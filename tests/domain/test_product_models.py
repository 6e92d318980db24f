"""Unit tests for the Product model and request payload validation."""

import pytest
from pydantic import ValidationError

from catalog.api.errors import describe_validation_errors
from catalog.domain.models.product import Product, ProductCreate, ProductUpdate
from catalog.domain.seed_data import SEED_PRODUCTS, seed_products
from tests.factories import make_product, new_product_payload


class TestProduct:

    def test_is_immutable(self):
        product = make_product(1)
        with pytest.raises(ValidationError):
            product.price = 1.0

    def test_created_at_round_trips_through_alias(self):
        product = make_product(1, created_at="2024-03-10T00:00:00.000Z")
        dumped = product.model_dump(mode="json", by_alias=True)
        assert "createdAt" in dumped and "created_at" not in dumped
        assert Product.model_validate(dumped) == product

    def test_available_means_positive_stock(self):
        assert make_product(1, stock=3).available
        assert not make_product(2, stock=0).available

    def test_every_seed_record_is_valid(self):
        products = seed_products()
        assert len(products) == len(SEED_PRODUCTS) == 8
        assert len({p.id for p in products}) == 8


class TestProductCreate:

    def test_strips_strings(self):
        data = ProductCreate(**new_product_payload(name="  Lamp  ", category=" Home "))
        assert data.name == "Lamp"
        assert data.category == "Home"

    def test_accepts_integer_price(self):
        assert ProductCreate(**new_product_payload(price=20)).price == 20

    def test_collects_every_failure(self):
        payload = new_product_payload(price=0, stock=-1, rating=7, name="   ")
        with pytest.raises(ValidationError) as exc:
            ProductCreate(**payload)
        fields = {err["loc"][0] for err in exc.value.errors()}
        assert fields == {"price", "stock", "rating", "name"}

    def test_missing_fields_are_all_reported(self):
        with pytest.raises(ValidationError) as exc:
            ProductCreate(name="Only a name")
        fields = {err["loc"][0] for err in exc.value.errors()}
        assert fields == {"description", "price", "category", "image", "stock", "rating"}

    def test_numbers_must_be_numbers(self):
        with pytest.raises(ValidationError):
            ProductCreate(**new_product_payload(price="99.99"))
        with pytest.raises(ValidationError):
            ProductCreate(**new_product_payload(stock=2.5))

    def test_id_and_created_at_cannot_be_supplied(self):
        with pytest.raises(ValidationError):
            ProductCreate(**new_product_payload(id="42"))
        with pytest.raises(ValidationError):
            ProductCreate(**new_product_payload(createdAt="2024-01-01T00:00:00Z"))


class TestProductUpdate:

    def test_only_sent_fields_are_changes(self):
        assert ProductUpdate(price=12.5, stock=0).changes() == {"price": 12.5, "stock": 0}

    def test_empty_patch_has_no_changes(self):
        assert ProductUpdate().changes() == {}

    def test_unknown_field_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            ProductUpdate(colour="red")
        assert describe_validation_errors(exc.value.errors()) == [
            "Invalid field: colour. Allowed fields: name, description, price, category, image, stock, rating"
        ]

    def test_explicit_null_is_rejected(self):
        with pytest.raises(ValidationError):
            ProductUpdate(price=None)

    def test_range_rules_match_creation(self):
        with pytest.raises(ValidationError) as exc:
            ProductUpdate(price=-1, rating=5.5, description="")
        assert len(exc.value.errors()) == 3
