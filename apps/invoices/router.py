from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from apps.invoices.schemas import (
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceLineResponse,
    InvoiceListResponse,
    InvoiceResponse,
)
from apps.invoices.service import InvoiceDetail, InvoiceService
from apps.payments.schemas import PaymentCreate, payment_summary_response
from models.base import get_db
from models.invoice import Invoice
from security.actor import Actor, get_actor


router = APIRouter(prefix="/api/invoices", tags=["Invoices"])


def _invoice_fields(invoice: Invoice) -> dict:
    client = invoice.client
    return dict(
        id=invoice.id,
        folio=invoice.folio,
        client_id=invoice.client_id,
        client_name=client.name if client else None,
        client_tax_id=client.tax_id if client else None,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        payment_terms=invoice.payment_terms,
        subtotal=invoice.subtotal,
        taxes=invoice.taxes,
        total=invoice.total,
        amount_pending=invoice.amount_pending,
        status=invoice.status,
        notes=invoice.notes,
        created_by_name=invoice.created_by_name,
        created_at=invoice.created_at,
    )


def _line_response(line) -> InvoiceLineResponse:
    article = line.article
    return InvoiceLineResponse(
        id=line.id,
        line_type=line.line_type,
        article_id=line.article_id,
        article_code=article.code if article else None,
        article_name=article.name if article else None,
        description=line.description,
        quantity=line.quantity,
        unit_price=line.unit_price,
        taxes=line.taxes,
        line_total=line.line_total,
    )


def _serialize_detail(detail: InvoiceDetail) -> InvoiceDetailResponse:
    return InvoiceDetailResponse(
        **_invoice_fields(detail.invoice),
        lines=[_line_response(line) for line in detail.invoice.lines],
        payments=payment_summary_response(detail.payments),
    )


@router.post("", response_model=InvoiceDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(payload: InvoiceCreate, db: AsyncSession = Depends(get_db), actor: Actor = Depends(get_actor)):
    invoice = await InvoiceService.create_invoice(db, payload, actor)
    return _serialize_detail(await InvoiceService.get_invoice_detail(db, invoice.id))


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    search: Optional[str] = Query(default=None, description="Search by folio, client name or tax identifier"),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    client_id: Optional[int] = Query(default=None, alias="clientId"),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    items, pagination = await InvoiceService.list_invoices(db, page, size, search, status_filter, client_id)
    return InvoiceListResponse(items=[InvoiceResponse(**_invoice_fields(i)) for i in items], pagination=pagination)


@router.get("/{invoice_id}", response_model=InvoiceDetailResponse)
async def get_invoice(invoice_id: int, db: AsyncSession = Depends(get_db)):
    return _serialize_detail(await InvoiceService.get_invoice_detail(db, invoice_id))


@router.post("/{invoice_id}/payments", response_model=InvoiceDetailResponse, status_code=status.HTTP_201_CREATED)
async def record_invoice_payment(
    invoice_id: int,
    payload: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return _serialize_detail(await InvoiceService.record_payment(db, invoice_id, payload, actor))
