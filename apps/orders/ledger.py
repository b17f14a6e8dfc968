"""
Purchase order ledger.

Derives an order's financial totals and its receiving state from the order
lines and the warehouse-entry lines recorded against them. Every function in
this module is pure: services build the snapshots from ORM rows, call in here,
and decide what to persist.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from common.errors import InvalidLine
from common.numbers import MAX_MONEY, MAX_QUANTITY, QUANTITY_STEP, ZERO, exceeds, round_currency, to_decimal
from constants.catalog import LINE_TYPE_VALUES, PRODUCT, SERVICE
from constants.statuses import (
    ORDER_FINALIZED,
    ORDER_PARTIALLY_PAID,
    ORDER_PARTIALLY_RECEIVED,
    ORDER_PENDING,
    ORDER_RECEIVED,
    PAID,
    PARTIALLY_PAID,
)

QUANTITY_EPSILON = QUANTITY_STEP


@dataclass(frozen=True)
class OrderLineSnapshot:
    line_id: Optional[int]
    quantity: Decimal
    unit_cost: Decimal
    taxes: Decimal = ZERO
    line_type: str = PRODUCT
    article_id: Optional[int] = None
    description: Optional[str] = None

    @classmethod
    def from_model(cls, line) -> "OrderLineSnapshot":
        return cls(
            line_id=line.id,
            quantity=to_decimal(line.quantity),
            unit_cost=to_decimal(line.unit_cost),
            taxes=to_decimal(line.taxes),
            line_type=line.line_type or PRODUCT,
            article_id=line.article_id,
            description=line.description,
        )


@dataclass(frozen=True)
class ReceiptSnapshot:
    order_line_id: int
    quantity: Decimal

    @classmethod
    def from_model(cls, entry_line) -> "ReceiptSnapshot":
        return cls(order_line_id=entry_line.order_line_id, quantity=to_decimal(entry_line.quantity))


@dataclass(frozen=True)
class LineTotals:
    line_id: Optional[int]
    subtotal: Decimal
    taxes: Decimal
    total: Decimal


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    taxes: Decimal
    total: Decimal
    lines: Tuple[LineTotals, ...] = ()


@dataclass(frozen=True)
class LineReceivingState:
    line_id: Optional[int]
    line_type: str
    article_id: Optional[int]
    description: Optional[str]
    quantity_ordered: Decimal
    quantity_received: Decimal
    quantity_pending: Decimal

    @property
    def is_stockable(self) -> bool:
        return self.line_type == PRODUCT


@dataclass(frozen=True)
class ReceivingSummary:
    lines: Tuple[LineReceivingState, ...]
    total_ordered: Decimal
    total_received: Decimal
    total_pending: Decimal
    reception_complete: bool


def validate_lines(lines: Sequence[OrderLineSnapshot]) -> None:
    """
    Reject malformed order lines with InvalidLine.
    Product lines must reference an article; service lines may not have one.
    Quantities, amounts and the resulting totals must fit the stored columns.
    """
    if not lines:
        raise InvalidLine("At least one line is required.")
    raw_total = ZERO
    for position, line in enumerate(lines, start=1):
        if line.line_type not in LINE_TYPE_VALUES:
            raise InvalidLine(f"Line {position}: unknown line type '{line.line_type}'.")
        quantity = to_decimal(line.quantity, default=None)
        if quantity is None or quantity <= 0:
            raise InvalidLine(f"Line {position}: quantity must be greater than zero.")
        unit_cost = to_decimal(line.unit_cost, default=None)
        if unit_cost is None or unit_cost < 0:
            raise InvalidLine(f"Line {position}: unit cost cannot be negative.")
        taxes = to_decimal(line.taxes, default=None)
        if taxes is None or taxes < 0:
            raise InvalidLine(f"Line {position}: taxes cannot be negative.")
        if exceeds(quantity, MAX_QUANTITY):
            raise InvalidLine(f"Line {position}: quantity cannot exceed {MAX_QUANTITY}.")
        line_total = quantity * unit_cost + taxes
        if exceeds(unit_cost, MAX_MONEY) or exceeds(taxes, MAX_MONEY) or exceeds(line_total, MAX_MONEY):
            raise InvalidLine(f"Line {position}: line total cannot exceed {MAX_MONEY}.")
        raw_total += line_total
        if line.line_type == PRODUCT and line.article_id is None:
            raise InvalidLine(f"Line {position} is a Product line and requires an article.")
    if exceeds(raw_total, MAX_MONEY):
        raise InvalidLine(f"Total cannot exceed {MAX_MONEY}.")


def compute_line_totals(line: OrderLineSnapshot) -> LineTotals:
    subtotal = round_currency(to_decimal(line.quantity) * to_decimal(line.unit_cost))
    taxes = round_currency(line.taxes)
    return LineTotals(line_id=line.line_id, subtotal=subtotal, taxes=taxes, total=subtotal + taxes)


def compute_order_totals(lines: Sequence[OrderLineSnapshot]) -> OrderTotals:
    """
    subtotal = sum(quantity * unit_cost) rounded half-up to cents,
    total = subtotal + sum(taxes).
    """
    raw_subtotal = sum((to_decimal(l.quantity) * to_decimal(l.unit_cost) for l in lines), ZERO)
    subtotal = round_currency(raw_subtotal)
    taxes = round_currency(sum((to_decimal(l.taxes) for l in lines), ZERO))
    return OrderTotals(
        subtotal=subtotal,
        taxes=taxes,
        total=subtotal + taxes,
        lines=tuple(compute_line_totals(l) for l in lines),
    )


def compute_receiving(
    lines: Sequence[OrderLineSnapshot],
    receipts: Iterable[ReceiptSnapshot],
    epsilon: Decimal = QUANTITY_EPSILON,
) -> ReceivingSummary:
    """
    Sum receipts per order line and derive what is still pending.
    Service lines are not stocked, so they count as received in full.
    """
    received_by_line: Dict[Optional[int], Decimal] = {}
    for receipt in receipts:
        received_by_line[receipt.order_line_id] = (
            received_by_line.get(receipt.order_line_id, ZERO) + to_decimal(receipt.quantity)
        )

    states: List[LineReceivingState] = []
    for line in lines:
        ordered = to_decimal(line.quantity)
        if line.line_type == SERVICE:
            received = ordered
        else:
            received = received_by_line.get(line.line_id, ZERO)
        pending = max(ZERO, ordered - received)
        states.append(
            LineReceivingState(
                line_id=line.line_id,
                line_type=line.line_type,
                article_id=line.article_id,
                description=line.description,
                quantity_ordered=ordered,
                quantity_received=received,
                quantity_pending=pending,
            )
        )

    total_ordered = sum((s.quantity_ordered for s in states), ZERO)
    total_received = sum((s.quantity_received for s in states), ZERO)
    total_pending = sum((s.quantity_pending for s in states), ZERO)
    return ReceivingSummary(
        lines=tuple(states),
        total_ordered=total_ordered,
        total_received=total_received,
        total_pending=total_pending,
        reception_complete=total_pending <= epsilon,
    )


def allocate_receipt(
    summary: ReceivingSummary,
    article_id: Optional[int],
    quantity: Decimal,
    order_line_id: Optional[int] = None,
    epsilon: Decimal = QUANTITY_EPSILON,
) -> List[ReceiptSnapshot]:
    """
    Bind a received quantity to the order lines it fulfils.

    With `order_line_id` the whole quantity goes to that line. Otherwise it is
    spread over the order's product lines for `article_id` in line order,
    filling each line's pending quantity before moving to the next.
    """
    quantity = to_decimal(quantity, default=None)
    if quantity is None or quantity <= 0:
        raise InvalidLine("Received quantity must be greater than zero.")

    if order_line_id is not None:
        candidates = [s for s in summary.lines if s.line_id == order_line_id]
        if not candidates:
            raise InvalidLine(f"Order line {order_line_id} does not belong to this order.")
        if not candidates[0].is_stockable:
            raise InvalidLine(f"Order line {order_line_id} is a service line and cannot be received.")
        if article_id is not None and candidates[0].article_id != article_id:
            raise InvalidLine(f"Order line {order_line_id} is not for article {article_id}.")
    else:
        candidates = [s for s in summary.lines if s.is_stockable and s.article_id == article_id]
        if not candidates:
            raise InvalidLine(f"Article {article_id} is not on this order.")

    available = sum((s.quantity_pending for s in candidates), ZERO)
    if quantity - available > epsilon:
        raise InvalidLine(
            f"Received quantity {quantity} exceeds the pending quantity {available}.",
            details={"articleId": article_id, "pending": str(available)},
        )

    allocations: List[ReceiptSnapshot] = []
    remaining = quantity
    for state in candidates:
        if remaining <= 0:
            break
        take = min(remaining, state.quantity_pending)
        if take <= 0:
            continue
        allocations.append(ReceiptSnapshot(order_line_id=state.line_id, quantity=take))
        remaining -= take
    if remaining > 0:
        # within epsilon of the pending quantity
        if allocations:
            last = allocations.pop()
            allocations.append(ReceiptSnapshot(order_line_id=last.order_line_id, quantity=last.quantity + remaining))
        else:
            allocations.append(ReceiptSnapshot(order_line_id=candidates[-1].line_id, quantity=remaining))
    return allocations


def derive_order_status(summary: ReceivingSummary, payment_status: str) -> str:
    if payment_status == PAID:
        return ORDER_FINALIZED
    if payment_status == PARTIALLY_PAID:
        return ORDER_PARTIALLY_PAID
    if summary.reception_complete:
        return ORDER_RECEIVED
    if any(s.is_stockable and s.quantity_received > 0 for s in summary.lines):
        return ORDER_PARTIALLY_RECEIVED
    return ORDER_PENDING
