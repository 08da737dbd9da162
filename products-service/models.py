from typing import List, Optional
from pydantic import BaseModel

class Product(BaseModel):
    id: int
    name: Optional[str] = None
    price: float = 0.0

# Données initiales, rechargées à chaque démarrage
SEED_PRODUCTS: List[Product] = [
    Product(id=1, name="Laptop", price=1200),
    Product(id=2, name="Phone", price=800),
]


def seed_products() -> List[Product]:
    """Fresh copies of the seed records."""
    return [p.model_copy() for p in SEED_PRODUCTS]
