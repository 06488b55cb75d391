# product_api/schemas.py
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

# prices are stored as Numeric(18, 2); anything below MAX_PRICE still fits after rounding
PRICE_QUANTUM = Decimal("0.01")
MAX_PRICE = Decimal("9999999999999999.995")


def round_price(price: Decimal) -> Decimal:
    return price.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str
    price: Decimal = Field(..., ge=0, lt=MAX_PRICE)

    @field_validator("price")
    @classmethod
    def _round_price(cls, v: Decimal) -> Decimal:
        return round_price(v)


class ProductIn(ProductBase):
    # clients may echo the id back; the path/store decides it
    id: Optional[int] = None


class ProductOut(ProductBase):
    id: int

    class Config:
        from_attributes = True

    @field_serializer("price")
    def _price_to_number(self, price: Decimal) -> float:
        return float(price)


class Message(BaseModel):
    message: str


class ValidationErrorOut(Message):
    errors: Dict[str, List[str]]
