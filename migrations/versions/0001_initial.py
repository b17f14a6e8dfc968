"""initial schema: admins, catalog, purchase orders, receiving, payments, invoices

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated: bool = True):
    cols = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()))
    return cols


def _payment_columns():
    return [
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("paid_on", sa.Date(), nullable=False),
        sa.Column("method", sa.String(length=100), nullable=True),
        sa.Column("reference", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("actor_id", sa.String(length=100), nullable=True),
        sa.Column("actor_name", sa.String(length=255), nullable=True),
    ]


def upgrade():
    # admins (panel login)
    op.create_table(
        "admins",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_admins_email"),
    )
    op.create_index("ix_admins_id", "admins", ["id"], unique=False)
    op.create_index("ix_admins_email", "admins", ["email"], unique=False)

    # third parties: clients and suppliers
    op.create_table(
        "third_parties",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("tax_id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("relation", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_third_parties_id", "third_parties", ["id"], unique=False)
    op.create_index("ix_third_parties_tax_id", "third_parties", ["tax_id"], unique=True)
    op.create_index("ix_third_parties_name", "third_parties", ["name"], unique=False)
    op.create_index("ix_third_parties_relation", "third_parties", ["relation"], unique=False)
    op.create_index("ix_third_parties_is_active", "third_parties", ["is_active"], unique=False)

    # articles
    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("article_type", sa.String(length=20), nullable=False, server_default="Product"),
        sa.Column("unit_price", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("quantity_on_hand", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_articles_id", "articles", ["id"], unique=False)
    op.create_index("ix_articles_code", "articles", ["code"], unique=True)
    op.create_index("ix_articles_name", "articles", ["name"], unique=False)
    op.create_index("ix_articles_is_active", "articles", ["is_active"], unique=False)

    # warehouses
    op.create_table(
        "warehouses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_warehouses_id", "warehouses", ["id"], unique=False)
    op.create_index("ix_warehouses_code", "warehouses", ["code"], unique=True)
    op.create_index("ix_warehouses_is_active", "warehouses", ["is_active"], unique=False)

    # purchase orders and their lines
    op.create_table(
        "purchase_orders",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("supplier_id", sa.Integer(), sa.ForeignKey("third_parties.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("order_date", sa.Date(), nullable=False),
        sa.Column("delivery_date", sa.Date(), nullable=True),
        sa.Column("payment_terms", sa.String(length=255), nullable=True),
        sa.Column("shipping_method", sa.String(length=255), nullable=True),
        sa.Column("delivery_location", sa.String(length=500), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="Pending"),
        sa.Column("payment_status", sa.String(length=32), nullable=False, server_default="Unpaid"),
        sa.Column("subtotal", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("taxes", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("total", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("created_by", sa.String(length=100), nullable=True),
        sa.Column("created_by_name", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_purchase_orders_id", "purchase_orders", ["id"], unique=False)
    op.create_index("ix_purchase_orders_supplier_id", "purchase_orders", ["supplier_id"], unique=False)
    op.create_index("ix_purchase_orders_status", "purchase_orders", ["status"], unique=False)
    op.create_index("ix_purchase_orders_payment_status", "purchase_orders", ["payment_status"], unique=False)

    op.create_table(
        "purchase_order_lines",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("line_type", sa.String(length=20), nullable=False, server_default="Product"),
        sa.Column("article_id", sa.Integer(), sa.ForeignKey("articles.id", ondelete="RESTRICT"), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Numeric(14, 4), nullable=False),
        sa.Column("unit_cost", sa.Numeric(14, 2), nullable=False),
        sa.Column("taxes", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("line_total", sa.Numeric(14, 2), nullable=False),
    )
    op.create_index("ix_purchase_order_lines_id", "purchase_order_lines", ["id"], unique=False)
    op.create_index("ix_purchase_order_lines_order_id", "purchase_order_lines", ["order_id"], unique=False)
    op.create_index("ix_purchase_order_lines_article_id", "purchase_order_lines", ["article_id"], unique=False)

    # warehouse entries (receiving)
    op.create_table(
        "warehouse_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("purchase_orders.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_warehouse_entries_id", "warehouse_entries", ["id"], unique=False)
    op.create_index("ix_warehouse_entries_order_id", "warehouse_entries", ["order_id"], unique=False)
    op.create_index("ix_warehouse_entries_warehouse_id", "warehouse_entries", ["warehouse_id"], unique=False)

    op.create_table(
        "warehouse_entry_lines",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("entry_id", sa.Integer(), sa.ForeignKey("warehouse_entries.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "order_line_id",
            sa.Integer(),
            sa.ForeignKey("purchase_order_lines.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("article_id", sa.Integer(), sa.ForeignKey("articles.id", ondelete="RESTRICT"), nullable=True),
        sa.Column("quantity", sa.Numeric(14, 4), nullable=False),
        sa.Column("unit_cost", sa.Numeric(14, 2), nullable=False, server_default="0"),
    )
    op.create_index("ix_warehouse_entry_lines_id", "warehouse_entry_lines", ["id"], unique=False)
    op.create_index("ix_warehouse_entry_lines_entry_id", "warehouse_entry_lines", ["entry_id"], unique=False)
    op.create_index("ix_warehouse_entry_lines_order_line_id", "warehouse_entry_lines", ["order_line_id"], unique=False)
    op.create_index("ix_warehouse_entry_lines_article_id", "warehouse_entry_lines", ["article_id"], unique=False)

    # purchase order payments (append-only)
    op.create_table(
        "purchase_order_payments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("purchase_orders.id", ondelete="RESTRICT"), nullable=False),
        *_payment_columns(),
        *_timestamps(updated=False),
    )
    op.create_index("ix_purchase_order_payments_id", "purchase_order_payments", ["id"], unique=False)
    op.create_index("ix_purchase_order_payments_order_id", "purchase_order_payments", ["order_id"], unique=False)
    op.create_index("ix_purchase_order_payments_paid_on", "purchase_order_payments", ["paid_on"], unique=False)

    # invoices and collections
    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("folio", sa.String(length=50), nullable=False),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("third_parties.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("payment_terms", sa.String(length=255), nullable=True),
        sa.Column("subtotal", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("taxes", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("total", sa.Numeric(14, 2), nullable=False),
        sa.Column("amount_pending", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="Pending"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=100), nullable=True),
        sa.Column("created_by_name", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_invoices_id", "invoices", ["id"], unique=False)
    op.create_index("ix_invoices_folio", "invoices", ["folio"], unique=True)
    op.create_index("ix_invoices_client_id", "invoices", ["client_id"], unique=False)
    op.create_index("ix_invoices_issue_date", "invoices", ["issue_date"], unique=False)
    op.create_index("ix_invoices_due_date", "invoices", ["due_date"], unique=False)
    op.create_index("ix_invoices_status", "invoices", ["status"], unique=False)

    op.create_table(
        "invoice_lines",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("line_type", sa.String(length=20), nullable=False, server_default="Product"),
        sa.Column("article_id", sa.Integer(), sa.ForeignKey("articles.id", ondelete="RESTRICT"), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Numeric(14, 4), nullable=False),
        sa.Column("unit_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("taxes", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("line_total", sa.Numeric(14, 2), nullable=False),
    )
    op.create_index("ix_invoice_lines_id", "invoice_lines", ["id"], unique=False)
    op.create_index("ix_invoice_lines_invoice_id", "invoice_lines", ["invoice_id"], unique=False)
    op.create_index("ix_invoice_lines_article_id", "invoice_lines", ["article_id"], unique=False)

    op.create_table(
        "invoice_payments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False),
        *_payment_columns(),
        *_timestamps(updated=False),
    )
    op.create_index("ix_invoice_payments_id", "invoice_payments", ["id"], unique=False)
    op.create_index("ix_invoice_payments_invoice_id", "invoice_payments", ["invoice_id"], unique=False)


def downgrade():
    op.drop_table("invoice_payments")
    op.drop_table("invoice_lines")
    op.drop_table("invoices")
    op.drop_table("purchase_order_payments")
    op.drop_table("warehouse_entry_lines")
    op.drop_table("warehouse_entries")
    op.drop_table("purchase_order_lines")
    op.drop_table("purchase_orders")
    op.drop_table("warehouses")
    op.drop_table("articles")
    op.drop_table("third_parties")
    op.drop_table("admins")
