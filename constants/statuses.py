"""
Status constants for purchase orders, payments and invoices.
Stored as display strings so API payloads and table rows read the same.
"""

# Purchase order fulfilment (derived from receiving + payment state)
ORDER_PENDING = "Pending"
ORDER_PARTIALLY_RECEIVED = "Partially Received"
ORDER_RECEIVED = "Received"
ORDER_PARTIALLY_PAID = "Partially Paid"
ORDER_FINALIZED = "Finalized"

ORDER_STATUS_VALUES = (
    ORDER_PENDING,
    ORDER_PARTIALLY_RECEIVED,
    ORDER_RECEIVED,
    ORDER_PARTIALLY_PAID,
    ORDER_FINALIZED,
)

# Payment state machine: Unpaid -> PartiallyPaid -> Paid (terminal)
UNPAID = "Unpaid"
PARTIALLY_PAID = "PartiallyPaid"
PAID = "Paid"

PAYMENT_STATUS_VALUES = (UNPAID, PARTIALLY_PAID, PAID)

# Issued invoices
INVOICE_PENDING = "Pending"
INVOICE_PARTIALLY_PAID = "Partially Paid"
INVOICE_PAID = "Paid"
