"""Create core tenant tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates customers, locations, services, work orders (+ items),
       invoices (+ items), payments and notifications.
How:   Every table carries the tenant scope columns (tenant_id, is_deleted,
       deleted_at) and audit timestamps; money is NUMERIC(12,2), quantities
       NUMERIC(10,2) and tax rates NUMERIC(5,2) percentages.

Rollback: downgrade() drops every table (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid(name: str, nullable: bool = True, **kwargs) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), nullable=nullable, **kwargs)


def _money(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(12, 2), nullable=False, server_default=sa.text("0"))


def _rate(name: str = "tax_rate") -> sa.Column:
    return sa.Column(name, sa.Numeric(5, 2), nullable=False, server_default=sa.text("0"))


def _tenant_columns() -> list:
    """Columns shared by every tenant-owned table."""
    return [
        _uuid("id", nullable=False, server_default=sa.text("gen_random_uuid()")),
        _uuid("tenant_id", nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
    ]


def _address_columns() -> list:
    return [
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("zip_code", sa.String(20), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "customers",
        *_tenant_columns(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("mobile", sa.String(20), nullable=True),
        *_address_columns(),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _money("total_spent"),
        sa.Column("total_visits", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_visit_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_customers_tenant_deleted", "customers", ["tenant_id", "is_deleted"])
    op.create_index("ix_customers_tenant_last_name", "customers", ["tenant_id", "last_name"])

    op.create_table(
        "locations",
        *_tenant_columns(),
        sa.Column("name", sa.String(200), nullable=False),
        *_address_columns(),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_locations_tenant_deleted", "locations", ["tenant_id", "is_deleted"])

    op.create_table(
        "services",
        *_tenant_columns(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _money("price"),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        _rate(),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_services_tenant_deleted", "services", ["tenant_id", "is_deleted"])
    op.create_index("ix_services_tenant_category", "services", ["tenant_id", "category"])

    op.create_table(
        "work_orders",
        *_tenant_columns(),
        sa.Column("work_order_number", sa.String(50), nullable=False),
        _uuid("customer_id", nullable=False),
        _uuid("location_id", nullable=False),
        _uuid("appointment_id"),
        _uuid("assigned_to_user_id"),
        _uuid("invoice_id"),
        sa.Column("status", sa.String(50), nullable=False, server_default=sa.text("'Draft'")),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("internal_notes", sa.Text(), nullable=True),
        _money("total_amount"),
        sa.Column("started_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("completed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"]),
    )
    op.create_index("ix_work_orders_tenant_deleted", "work_orders", ["tenant_id", "is_deleted"])
    op.create_index(
        "ix_work_orders_tenant_number",
        "work_orders",
        ["tenant_id", "work_order_number"],
        unique=True,
    )
    op.create_index("ix_work_orders_tenant_created", "work_orders", ["tenant_id", "created_at"])

    op.create_table(
        "work_order_items",
        *_tenant_columns(),
        _uuid("work_order_id", nullable=False),
        sa.Column("item_type", sa.String(50), nullable=False),
        _uuid("service_id"),
        _uuid("product_id"),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        _rate(),
        _money("total_amount"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["work_order_id"], ["work_orders.id"]),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"]),
    )
    op.create_index("ix_work_order_items_order", "work_order_items", ["work_order_id"])

    op.create_table(
        "invoices",
        *_tenant_columns(),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        _uuid("customer_id", nullable=False),
        _uuid("work_order_id"),
        _uuid("location_id", nullable=False),
        sa.Column(
            "invoice_date",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("due_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default=sa.text("'Draft'")),
        _money("subtotal"),
        _money("tax_amount"),
        _money("discount_amount"),
        _money("total_amount"),
        _money("paid_amount"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("terms", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.ForeignKeyConstraint(["work_order_id"], ["work_orders.id"]),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"]),
    )
    op.create_index("ix_invoices_tenant_deleted", "invoices", ["tenant_id", "is_deleted"])
    op.create_index(
        "ix_invoices_tenant_number", "invoices", ["tenant_id", "invoice_number"], unique=True
    )
    op.create_index("ix_invoices_work_order", "invoices", ["work_order_id"])

    op.create_table(
        "invoice_items",
        *_tenant_columns(),
        _uuid("invoice_id", nullable=False),
        sa.Column("item_type", sa.String(50), nullable=False),
        _uuid("service_id"),
        _uuid("product_id"),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        _rate(),
        _money("discount_amount"),
        _money("total_amount"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"]),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"]),
    )
    op.create_index("ix_invoice_items_invoice", "invoice_items", ["invoice_id"])

    op.create_table(
        "payments",
        *_tenant_columns(),
        _uuid("invoice_id", nullable=False),
        sa.Column("payment_number", sa.String(50), nullable=False),
        sa.Column(
            "payment_date",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(50), nullable=False),
        sa.Column("reference_number", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _uuid("processed_by_user_id"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"]),
    )
    op.create_index("ix_payments_tenant_deleted", "payments", ["tenant_id", "is_deleted"])
    op.create_index("ix_payments_invoice", "payments", ["invoice_id"])

    op.create_table(
        "notifications",
        *_tenant_columns(),
        _uuid("user_id"),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("link_url", sa.String(500), nullable=True),
        sa.Column("related_entity_type", sa.String(50), nullable=True),
        _uuid("related_entity_id"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notifications_tenant_deleted", "notifications", ["tenant_id", "is_deleted"]
    )
    op.create_index("ix_notifications_tenant_unread", "notifications", ["tenant_id", "is_read"])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in (
        "notifications",
        "payments",
        "invoice_items",
        "invoices",
        "work_order_items",
        "work_orders",
        "services",
        "locations",
        "customers",
    ):
        op.drop_table(table)
