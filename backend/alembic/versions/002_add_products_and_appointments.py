"""Add products and appointments

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the products and appointments tables and turns the
       previously free-standing references into foreign keys:
       work_orders.appointment_id → appointments.id,
       work_order_items.product_id / invoice_items.product_id → products.id.

Rollback: downgrade() drops the foreign keys, then both tables.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PRODUCT_REFERENCES = (
    ("fk_work_order_items_product", "work_order_items"),
    ("fk_invoice_items_product", "invoice_items"),
)


def _uuid(name: str, nullable: bool = True, **kwargs) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), nullable=nullable, **kwargs)


def _money(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(12, 2), nullable=False, server_default=sa.text("0"))


def _tenant_columns() -> list:
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


def upgrade() -> None:
    op.create_table(
        "products",
        *_tenant_columns(),
        _uuid("location_id", nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sku", sa.String(100), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        _money("unit_price"),
        _money("cost_price"),
        sa.Column("stock_quantity", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "low_stock_threshold", sa.Integer(), nullable=False, server_default=sa.text("10")
        ),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"]),
    )
    op.create_index("ix_products_tenant_deleted", "products", ["tenant_id", "is_deleted"])
    op.create_index("ix_products_tenant_location", "products", ["tenant_id", "location_id"])

    op.create_table(
        "appointments",
        *_tenant_columns(),
        _uuid("customer_id", nullable=False),
        _uuid("service_id"),
        _uuid("staff_id"),
        _uuid("location_id", nullable=False),
        sa.Column("scheduled_start", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("scheduled_end", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "status", sa.String(50), nullable=False, server_default=sa.text("'Scheduled'")
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("internal_notes", sa.Text(), nullable=True),
        sa.Column("is_reminder_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reminder_sent_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"]),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"]),
    )
    op.create_index("ix_appointments_tenant_deleted", "appointments", ["tenant_id", "is_deleted"])
    op.create_index(
        "ix_appointments_tenant_start", "appointments", ["tenant_id", "scheduled_start"]
    )
    op.create_index(
        "ix_appointments_tenant_location", "appointments", ["tenant_id", "location_id"]
    )

    op.create_foreign_key(
        "fk_work_orders_appointment", "work_orders", "appointments", ["appointment_id"], ["id"]
    )
    for name, table in PRODUCT_REFERENCES:
        op.create_foreign_key(name, table, "products", ["product_id"], ["id"])


def downgrade() -> None:
    for name, table in PRODUCT_REFERENCES:
        op.drop_constraint(name, table, type_="foreignkey")
    op.drop_constraint("fk_work_orders_appointment", "work_orders", type_="foreignkey")
    op.drop_table("appointments")
    op.drop_table("products")
