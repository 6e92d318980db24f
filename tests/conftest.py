import pytest

from catalog.domain.repositories.memory_product_repo import InMemoryProductRepository
from catalog.domain.seed_data import seed_products


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def seeded_repo() -> InMemoryProductRepository:
    """A fresh in-memory repository holding the 8 canonical products."""
    return InMemoryProductRepository(seed_products())
