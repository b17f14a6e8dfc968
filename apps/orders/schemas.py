from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field as PydanticField, constr

from apps.payments.schemas import PaymentSummaryResponse
from common.types import Money, Quantity
from constants.catalog import PRODUCT


# -------------------------------
# Requests
# -------------------------------

class OrderLineCreate(BaseModel):
    line_type: constr(strip_whitespace=True, min_length=1, max_length=20) = PydanticField(default=PRODUCT, alias="lineType")
    article_id: Optional[int] = PydanticField(default=None, alias="articleId")
    description: Optional[constr(strip_whitespace=True, max_length=1000)] = None
    # Range checks happen in the ledger so they surface as InvalidLine
    quantity: Optional[Decimal] = None
    unit_cost: Optional[Decimal] = PydanticField(default=None, alias="unitCost")
    taxes: Optional[Decimal] = Decimal("0")

    class Config:
        populate_by_name = True


class OrderCreate(BaseModel):
    supplier_id: int = PydanticField(alias="supplierId")
    order_date: Optional[date] = PydanticField(default=None, alias="orderDate")
    delivery_date: Optional[date] = PydanticField(default=None, alias="deliveryDate")
    payment_terms: Optional[constr(strip_whitespace=True, max_length=255)] = PydanticField(default=None, alias="paymentTerms")
    shipping_method: Optional[constr(strip_whitespace=True, max_length=255)] = PydanticField(default=None, alias="shippingMethod")
    delivery_location: Optional[constr(strip_whitespace=True, max_length=500)] = PydanticField(default=None, alias="deliveryLocation")
    notes: Optional[str] = None
    lines: List[OrderLineCreate] = PydanticField(default_factory=list)

    class Config:
        populate_by_name = True


# -------------------------------
# Responses
# -------------------------------

class OrderLineResponse(BaseModel):
    id: int
    line_type: str = PydanticField(alias="lineType")
    article_id: Optional[int] = PydanticField(default=None, alias="articleId")
    article_code: Optional[str] = PydanticField(default=None, alias="articleCode")
    article_name: Optional[str] = PydanticField(default=None, alias="articleName")
    description: Optional[str] = None
    quantity: Quantity
    unit_cost: Money = PydanticField(alias="unitCost")
    taxes: Money
    line_total: Money = PydanticField(alias="lineTotal")
    quantity_received: Quantity = PydanticField(alias="quantityReceived")
    quantity_pending: Quantity = PydanticField(alias="quantityPending")

    class Config:
        populate_by_name = True


class ReceivingResponse(BaseModel):
    total_ordered: Quantity = PydanticField(alias="totalOrdered")
    total_received: Quantity = PydanticField(alias="totalReceived")
    total_pending: Quantity = PydanticField(alias="totalPending")
    reception_complete: bool = PydanticField(alias="receptionComplete")

    class Config:
        populate_by_name = True


class OrderResponse(BaseModel):
    id: int
    supplier_id: int = PydanticField(alias="supplierId")
    supplier_name: Optional[str] = PydanticField(default=None, alias="supplierName")
    supplier_tax_id: Optional[str] = PydanticField(default=None, alias="supplierTaxId")
    order_date: date = PydanticField(alias="orderDate")
    delivery_date: Optional[date] = PydanticField(default=None, alias="deliveryDate")
    payment_terms: Optional[str] = PydanticField(default=None, alias="paymentTerms")
    shipping_method: Optional[str] = PydanticField(default=None, alias="shippingMethod")
    delivery_location: Optional[str] = PydanticField(default=None, alias="deliveryLocation")
    notes: Optional[str] = None
    status: str
    payment_status: str = PydanticField(alias="paymentStatus")
    subtotal: Money
    taxes: Money
    total: Money
    created_by_name: Optional[str] = PydanticField(default=None, alias="createdByName")
    created_at: Optional[datetime] = PydanticField(default=None, alias="createdAt")
    lines: List[OrderLineResponse]
    receiving: ReceivingResponse
    payments: PaymentSummaryResponse

    class Config:
        populate_by_name = True


class OrderListItem(BaseModel):
    id: int
    supplier_id: int = PydanticField(alias="supplierId")
    supplier_name: Optional[str] = PydanticField(default=None, alias="supplierName")
    order_date: date = PydanticField(alias="orderDate")
    status: str
    payment_status: str = PydanticField(alias="paymentStatus")
    total: Money
    total_paid: Money = PydanticField(alias="totalPaid")
    remaining: Money
    created_at: Optional[datetime] = PydanticField(default=None, alias="createdAt")

    class Config:
        populate_by_name = True


class OrderListResponse(BaseModel):
    items: List[OrderListItem]
    pagination: dict
