from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, Field as PydanticField, constr

from common.numbers import MAX_MONEY, MAX_QUANTITY
from common.types import Money, Quantity


class ArticleCreate(BaseModel):
    code: constr(strip_whitespace=True, min_length=1, max_length=50)
    name: constr(strip_whitespace=True, min_length=1, max_length=255)
    description: Optional[str] = None
    article_type: Literal["Product", "Service"] = PydanticField(default="Product", alias="articleType")
    unit_price: Decimal = PydanticField(default=Decimal("0"), ge=0, le=MAX_MONEY, alias="unitPrice")
    quantity_on_hand: Decimal = PydanticField(default=Decimal("0"), ge=0, le=MAX_QUANTITY, alias="quantityOnHand")

    class Config:
        populate_by_name = True


class ArticleUpdate(BaseModel):
    code: Optional[constr(strip_whitespace=True, min_length=1, max_length=50)] = None
    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    description: Optional[str] = None
    article_type: Optional[Literal["Product", "Service"]] = PydanticField(default=None, alias="articleType")
    unit_price: Optional[Decimal] = PydanticField(default=None, ge=0, le=MAX_MONEY, alias="unitPrice")
    quantity_on_hand: Optional[Decimal] = PydanticField(default=None, ge=0, le=MAX_QUANTITY, alias="quantityOnHand")

    class Config:
        populate_by_name = True


class ArticleResponse(BaseModel):
    id: int
    code: str
    name: str
    description: Optional[str] = None
    article_type: str = PydanticField(alias="articleType")
    unit_price: Money = PydanticField(alias="unitPrice")
    quantity_on_hand: Quantity = PydanticField(alias="quantityOnHand")
    is_active: bool = PydanticField(alias="isActive")
    created_at: datetime = PydanticField(alias="createdAt")
    updated_at: datetime = PydanticField(alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class ArticleListResponse(BaseModel):
    items: List[ArticleResponse]
    pagination: dict
