from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field as PydanticField

from apps.receivables.aging import AgingReport, ClientAging
from common.types import Money


class LastInvoiceResponse(BaseModel):
    folio: Optional[str] = None
    issue_date: Optional[date] = PydanticField(default=None, alias="issueDate")
    due_date: Optional[date] = PydanticField(default=None, alias="dueDate")
    pending_amount: Money = PydanticField(alias="pendingAmount")

    class Config:
        populate_by_name = True


class ClientAgingResponse(BaseModel):
    client_id: Optional[int] = PydanticField(default=None, alias="clientId")
    name: Optional[str] = None
    identifier: Optional[str] = None
    total_pending: Money = PydanticField(alias="totalPending")
    bucket_0_30: Money = PydanticField(alias="bucket0to30")
    bucket_31_60: Money = PydanticField(alias="bucket31to60")
    bucket_61_90: Money = PydanticField(alias="bucket61to90")
    bucket_over_90: Money = PydanticField(alias="bucketOver90")
    overdue_amount: Money = PydanticField(alias="overdueAmount")
    invoice_count: int = PydanticField(alias="invoiceCount")
    max_days_overdue: int = PydanticField(alias="maxDaysOverdue")
    last_invoice: Optional[LastInvoiceResponse] = PydanticField(default=None, alias="lastInvoice")

    class Config:
        populate_by_name = True


class AgingSummaryResponse(BaseModel):
    total_clients: int = PydanticField(alias="totalClients")
    overdue_amount: Money = PydanticField(alias="overdueAmount")
    not_yet_due_amount: Money = PydanticField(alias="notYetDueAmount")

    class Config:
        populate_by_name = True


class AgingReportResponse(BaseModel):
    generated_at: datetime = PydanticField(alias="generatedAt")
    cutoff_date: date = PydanticField(alias="cutoffDate")
    currency: str
    total_pending: Money = PydanticField(alias="totalPending")
    summary: AgingSummaryResponse
    clients: List[ClientAgingResponse]

    class Config:
        populate_by_name = True


def _client_response(client: ClientAging) -> ClientAgingResponse:
    last = client.last_invoice
    return ClientAgingResponse(
        client_id=client.client_id,
        name=client.name,
        identifier=client.identifier,
        total_pending=client.total_pending,
        bucket_0_30=client.bucket_0_30,
        bucket_31_60=client.bucket_31_60,
        bucket_61_90=client.bucket_61_90,
        bucket_over_90=client.bucket_over_90,
        overdue_amount=client.overdue_amount,
        invoice_count=client.invoice_count,
        max_days_overdue=client.max_days_overdue,
        last_invoice=LastInvoiceResponse(
            folio=last.folio,
            issue_date=last.issue_date,
            due_date=last.due_date,
            pending_amount=last.pending_amount,
        ) if last else None,
    )


def aging_report_response(report: AgingReport) -> AgingReportResponse:
    return AgingReportResponse(
        generated_at=report.generated_at,
        cutoff_date=report.cutoff_date,
        currency=report.currency,
        total_pending=report.total_pending,
        summary=AgingSummaryResponse(
            total_clients=report.total_clients,
            overdue_amount=report.overdue_amount,
            not_yet_due_amount=report.not_yet_due_amount,
        ),
        clients=[_client_response(c) for c in report.clients],
    )
