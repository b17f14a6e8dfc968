from datetime import date
from typing import Any, List, Optional
from pydantic import BaseModel, Field as PydanticField, constr

from common.types import Money


class PaymentCreate(BaseModel):
    # Validated by the payment processor so failures carry the InvalidAmount kind
    amount: Any = None
    paid_on: Optional[date] = PydanticField(default=None, alias="date")
    method: Optional[constr(strip_whitespace=True, max_length=100)] = None
    reference: Optional[constr(strip_whitespace=True, max_length=255)] = None
    notes: Optional[str] = None
    actor_id: Optional[constr(strip_whitespace=True, max_length=100)] = PydanticField(default=None, alias="actorId")
    actor_name: Optional[constr(strip_whitespace=True, max_length=255)] = PydanticField(default=None, alias="actorName")

    class Config:
        populate_by_name = True


class PaymentResponse(BaseModel):
    id: Optional[int] = None
    amount: Money
    paid_on: date = PydanticField(alias="date")
    method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    actor_id: Optional[str] = PydanticField(default=None, alias="actorId")
    actor_name: Optional[str] = PydanticField(default=None, alias="actorName")

    class Config:
        populate_by_name = True


class PaymentSummaryResponse(BaseModel):
    total: Money
    total_paid: Money = PydanticField(alias="totalPaid")
    remaining: Money
    status: str
    payments: List[PaymentResponse]

    class Config:
        populate_by_name = True


def payment_summary_response(summary) -> PaymentSummaryResponse:
    """
    Map a processor PaymentSummary onto the API view model.
    """
    return PaymentSummaryResponse(
        total=summary.total,
        total_paid=summary.total_paid,
        remaining=summary.remaining,
        status=summary.status,
        payments=[
            PaymentResponse(
                id=p.payment_id,
                amount=p.amount,
                paid_on=p.paid_on,
                method=p.method,
                reference=p.reference,
                notes=p.notes,
                actor_id=p.actor_id,
                actor_name=p.actor_name,
            )
            for p in summary.payments
        ],
    )
