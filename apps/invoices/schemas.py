from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field as PydanticField, constr

from apps.payments.schemas import PaymentSummaryResponse
from common.types import Money, Quantity
from constants.catalog import PRODUCT


class InvoiceLineCreate(BaseModel):
    line_type: constr(strip_whitespace=True, min_length=1, max_length=20) = PydanticField(default=PRODUCT, alias="lineType")
    article_id: Optional[int] = PydanticField(default=None, alias="articleId")
    description: Optional[constr(strip_whitespace=True, max_length=1000)] = None
    # Checked by the ledger so failures surface as InvalidLine
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = PydanticField(default=None, alias="unitPrice")
    taxes: Optional[Decimal] = Decimal("0")

    class Config:
        populate_by_name = True


class InvoiceCreate(BaseModel):
    folio: constr(strip_whitespace=True, min_length=1, max_length=50)
    client_id: int = PydanticField(alias="clientId")
    issue_date: Optional[date] = PydanticField(default=None, alias="issueDate")
    due_date: Optional[date] = PydanticField(default=None, alias="dueDate")
    payment_terms: Optional[constr(strip_whitespace=True, max_length=255)] = PydanticField(default=None, alias="paymentTerms")
    notes: Optional[str] = None
    lines: List[InvoiceLineCreate] = PydanticField(default_factory=list)

    class Config:
        populate_by_name = True


class InvoiceLineResponse(BaseModel):
    id: int
    line_type: str = PydanticField(alias="lineType")
    article_id: Optional[int] = PydanticField(default=None, alias="articleId")
    article_code: Optional[str] = PydanticField(default=None, alias="articleCode")
    article_name: Optional[str] = PydanticField(default=None, alias="articleName")
    description: Optional[str] = None
    quantity: Quantity
    unit_price: Money = PydanticField(alias="unitPrice")
    taxes: Money
    line_total: Money = PydanticField(alias="lineTotal")

    class Config:
        populate_by_name = True


class InvoiceResponse(BaseModel):
    id: int
    folio: str
    client_id: int = PydanticField(alias="clientId")
    client_name: Optional[str] = PydanticField(default=None, alias="clientName")
    client_tax_id: Optional[str] = PydanticField(default=None, alias="clientTaxId")
    issue_date: date = PydanticField(alias="issueDate")
    due_date: Optional[date] = PydanticField(default=None, alias="dueDate")
    payment_terms: Optional[str] = PydanticField(default=None, alias="paymentTerms")
    subtotal: Money
    taxes: Money
    total: Money
    amount_pending: Money = PydanticField(alias="amountPending")
    status: str
    notes: Optional[str] = None
    created_by_name: Optional[str] = PydanticField(default=None, alias="createdByName")
    created_at: Optional[datetime] = PydanticField(default=None, alias="createdAt")

    class Config:
        populate_by_name = True


class InvoiceDetailResponse(InvoiceResponse):
    lines: List[InvoiceLineResponse]
    payments: PaymentSummaryResponse


class InvoiceListResponse(BaseModel):
    items: List[InvoiceResponse]
    pagination: dict
