# electra/schemas/product.py

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from electra.schemas.common import CamelModel

Dimension = Literal[
    "Bag", "Bundle", "Box", "Carton", "Coils", "Dozen", "Ft",
    "Gross", "Kg", "Mtr", "Pc", "Pkt", "Set", "Not Applicable",
]


class ProductBase(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    stock: Optional[int] = None
    dimension: Optional[Dimension] = None
    threshold: Optional[int] = None


class ProductCreate(ProductBase):
    name: str = Field(..., min_length=1)
    stock: int = 0
    dimension: Dimension = "Pc"


class ProductUpdate(ProductBase):
    pass


class Product(ProductCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductDeleted(CamelModel):
    message: str
    product: Product
