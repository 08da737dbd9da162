from typing import Optional
from pydantic import BaseModel

# Pas de validation métier: un champ absent est accepté tel quel.
# Un éventuel "id" envoyé par le client est ignoré.
class ProductCreate(BaseModel):
    name: Optional[str] = None
    price: float = 0.0

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    price: float = 0.0

class ProductResponse(BaseModel):
    id: int
    name: Optional[str] = None
    price: float

    class Config:
        from_attributes = True
