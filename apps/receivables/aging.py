"""
Accounts-receivable aging.

Buckets each open receivable by how many whole days it is past due at the
cutoff date, then aggregates per client and for the whole report.

Buckets (days overdue = cutoff - due date):
- 0-30   (also holds everything not yet due)
- 31-60
- 61-90
- over 90

A receivable with no usable due date is treated as due on the cutoff date.
Receivables with nothing pending are left out entirely.
"""
import csv
import io
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Hashable, Iterable, List, Optional

from common.numbers import ZERO, round_currency, to_decimal

BUCKET_0_30 = "0-30"
BUCKET_31_60 = "31-60"
BUCKET_61_90 = "61-90"
BUCKET_OVER_90 = "90+"

CSV_HEADERS = [
    "Client",
    "Identifier",
    "Total pending",
    "0 - 30 days",
    "31 - 60 days",
    "61 - 90 days",
    "+ 90 days",
    "Overdue",
    "Open invoices",
    "Max days overdue",
    "Last invoice",
    "Last invoice issued",
    "Last invoice due",
    "Last invoice pending",
]


def coerce_date(value: Any) -> Optional[date]:
    """
    Accept a date, datetime or ISO string; anything else (or garbage) yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class ReceivableSnapshot:
    client_id: Optional[int]
    client_name: Optional[str]
    client_identifier: Optional[str]
    pending_amount: Decimal
    due_date: Optional[date] = None
    issue_date: Optional[date] = None
    invoice_id: Optional[int] = None
    folio: Optional[str] = None

    @classmethod
    def from_invoice(cls, invoice) -> "ReceivableSnapshot":
        client = getattr(invoice, "client", None)
        return cls(
            client_id=invoice.client_id,
            client_name=client.name if client else None,
            client_identifier=client.tax_id if client else None,
            pending_amount=round_currency(invoice.amount_pending),
            due_date=coerce_date(invoice.due_date),
            issue_date=coerce_date(invoice.issue_date),
            invoice_id=invoice.id,
            folio=invoice.folio,
        )


@dataclass
class LastInvoice:
    folio: Optional[str]
    issue_date: Optional[date]
    due_date: Optional[date]
    pending_amount: Decimal


@dataclass
class ClientAging:
    client_id: Optional[int]
    name: Optional[str]
    identifier: Optional[str]
    total_pending: Decimal = ZERO
    bucket_0_30: Decimal = ZERO
    bucket_31_60: Decimal = ZERO
    bucket_61_90: Decimal = ZERO
    bucket_over_90: Decimal = ZERO
    overdue_amount: Decimal = ZERO
    invoice_count: int = 0
    max_days_overdue: int = 0
    last_invoice: Optional[LastInvoice] = None
    _last_key: tuple = field(default=(), repr=False, compare=False)

    def add(self, receivable: ReceivableSnapshot, days: int) -> None:
        amount = receivable.pending_amount
        bucket = bucket_for(days)
        if bucket == BUCKET_0_30:
            self.bucket_0_30 += amount
        elif bucket == BUCKET_31_60:
            self.bucket_31_60 += amount
        elif bucket == BUCKET_61_90:
            self.bucket_61_90 += amount
        else:
            self.bucket_over_90 += amount
        self.total_pending += amount
        if days > 0:
            self.overdue_amount += amount
        self.invoice_count += 1
        self.max_days_overdue = max(self.max_days_overdue, days)

        key = (receivable.issue_date or date.min, receivable.invoice_id or 0)
        if self.last_invoice is None or key >= self._last_key:
            self._last_key = key
            self.last_invoice = LastInvoice(
                folio=receivable.folio,
                issue_date=receivable.issue_date,
                due_date=receivable.due_date,
                pending_amount=amount,
            )

    def matches(self, term: str) -> bool:
        haystack = f"{self.name or ''} {self.identifier or ''}".lower()
        return term in haystack


@dataclass
class AgingReport:
    generated_at: datetime
    cutoff_date: date
    currency: str
    total_pending: Decimal
    total_clients: int
    overdue_amount: Decimal
    not_yet_due_amount: Decimal
    clients: List[ClientAging]


def days_overdue(cutoff_date: date, due_date: Optional[date]) -> int:
    """Whole days past due; negative when not yet due, 0 when due on the cutoff."""
    if due_date is None:
        return 0
    return (cutoff_date - due_date).days


def bucket_for(days: int) -> str:
    if days <= 30:
        return BUCKET_0_30
    if days <= 60:
        return BUCKET_31_60
    if days <= 90:
        return BUCKET_61_90
    return BUCKET_OVER_90


def _summarize(clients: List[ClientAging], cutoff_date: date, currency: str, generated_at: datetime) -> AgingReport:
    total_pending = sum((c.total_pending for c in clients), ZERO)
    overdue = sum((c.overdue_amount for c in clients), ZERO)
    return AgingReport(
        generated_at=generated_at,
        cutoff_date=cutoff_date,
        currency=currency,
        total_pending=total_pending,
        total_clients=len(clients),
        overdue_amount=overdue,
        not_yet_due_amount=total_pending - overdue,
        clients=clients,
    )


def build_aging_report(
    receivables: Iterable[ReceivableSnapshot],
    cutoff_date: Optional[date] = None,
    currency: str = "USD",
    generated_at: Optional[datetime] = None,
) -> AgingReport:
    cutoff_date = cutoff_date or date.today()
    generated_at = generated_at or datetime.now(timezone.utc)

    clients: Dict[Hashable, ClientAging] = {}
    for receivable in receivables:
        amount = round_currency(to_decimal(receivable.pending_amount))
        if amount <= 0:
            continue
        if amount != receivable.pending_amount:
            receivable = replace(receivable, pending_amount=amount)

        key = receivable.client_id if receivable.client_id is not None else (
            receivable.client_name,
            receivable.client_identifier,
        )
        client = clients.get(key)
        if client is None:
            client = clients[key] = ClientAging(
                client_id=receivable.client_id,
                name=receivable.client_name,
                identifier=receivable.client_identifier,
            )
        client.add(receivable, days_overdue(cutoff_date, coerce_date(receivable.due_date)))

    ordered = sorted(clients.values(), key=lambda c: (-c.total_pending, (c.name or "").lower()))
    return _summarize(ordered, cutoff_date, currency, generated_at)


def filter_report(report: AgingReport, term: Optional[str]) -> AgingReport:
    """
    Keep clients whose name or identifier contains `term` (case-insensitive)
    and recompute the report totals over what is left.
    """
    term = (term or "").strip().lower()
    if not term:
        return report
    kept = [c for c in report.clients if c.matches(term)]
    return _summarize(kept, report.cutoff_date, report.currency, report.generated_at)


def report_to_csv(report: AgingReport) -> str:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(CSV_HEADERS)
    for client in report.clients:
        last = client.last_invoice
        writer.writerow(
            [
                client.name or "Unidentified client",
                client.identifier or "",
                client.total_pending,
                client.bucket_0_30,
                client.bucket_31_60,
                client.bucket_61_90,
                client.bucket_over_90,
                client.overdue_amount,
                client.invoice_count,
                client.max_days_overdue,
                last.folio if last and last.folio else "",
                last.issue_date.isoformat() if last and last.issue_date else "",
                last.due_date.isoformat() if last and last.due_date else "",
                last.pending_amount if last else 0,
            ]
        )
    return output.getvalue()
