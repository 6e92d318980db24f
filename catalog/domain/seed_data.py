# Canonical catalog used to initialize the in-memory store and reseed Mongo.
from typing import Any, Dict, List

from catalog.domain.models.product import Product

SEED_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "name": "iPhone 14 Pro",
        "description": "Latest Apple smartphone with Pro camera system",
        "price": 999.99,
        "category": "Electronics",
        "image": "https://example.com/iphone14pro.jpg",
        "stock": 25,
        "rating": 4.8,
        "createdAt": "2024-01-15T00:00:00.000Z",
    },
    {
        "id": "2",
        "name": "MacBook Air M2",
        "description": "Lightweight laptop with Apple M2 chip",
        "price": 1299.99,
        "category": "Electronics",
        "image": "https://example.com/macbook-air.jpg",
        "stock": 15,
        "rating": 4.9,
        "createdAt": "2024-01-20T00:00:00.000Z",
    },
    {
        "id": "3",
        "name": "Nike Air Max 270",
        "description": "Comfortable running shoes with Air Max technology",
        "price": 150.0,
        "category": "Sports",
        "image": "https://example.com/nike-airmax.jpg",
        "stock": 50,
        "rating": 4.5,
        "createdAt": "2024-02-01T00:00:00.000Z",
    },
    {
        "id": "4",
        "name": "Sony WH-1000XM5",
        "description": "Premium noise-canceling wireless headphones",
        "price": 399.99,
        "category": "Electronics",
        "image": "https://example.com/sony-headphones.jpg",
        "stock": 30,
        "rating": 4.7,
        "createdAt": "2024-02-10T00:00:00.000Z",
    },
    {
        "id": "5",
        "name": "Levi's 501 Original Jeans",
        "description": "Classic straight-leg jeans",
        "price": 89.99,
        "category": "Clothing",
        "image": "https://example.com/levis-jeans.jpg",
        "stock": 100,
        "rating": 4.3,
        "createdAt": "2024-02-15T00:00:00.000Z",
    },
    {
        "id": "6",
        "name": "KitchenAid Stand Mixer",
        "description": "Professional 5-quart stand mixer",
        "price": 379.99,
        "category": "Home & Kitchen",
        "image": "https://example.com/kitchenaid-mixer.jpg",
        "stock": 12,
        "rating": 4.8,
        "createdAt": "2024-03-01T00:00:00.000Z",
    },
    {
        "id": "7",
        "name": "Adidas Ultraboost 22",
        "description": "Energy-returning running shoes",
        "price": 180.0,
        "category": "Sports",
        "image": "https://example.com/adidas-ultraboost.jpg",
        "stock": 40,
        "rating": 4.6,
        "createdAt": "2024-03-05T00:00:00.000Z",
    },
    {
        "id": "8",
        "name": 'Samsung 65" QLED TV',
        "description": "4K Smart TV with Quantum Dot technology",
        "price": 1499.99,
        "category": "Electronics",
        "image": "https://example.com/samsung-tv.jpg",
        "stock": 8,
        "rating": 4.7,
        "createdAt": "2024-03-10T00:00:00.000Z",
    },
]


def seed_products() -> List[Product]:
    """Validated Product objects for the canonical dataset."""
    return [Product.model_validate(raw) for raw in SEED_PRODUCTS]
