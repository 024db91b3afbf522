"""fulfillment_core: orders / order_lines / qc_submissions

Revision ID: a1c4e2f0b7d3
Revises:
Create Date: 2026-10-19 10:12:40.118273

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a1c4e2f0b7d3"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=True),
        sa.Column("seller_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_orders_seller_id", "orders", ["seller_id"])

    # lifecycle / 两个 QC 子状态都存字符串，读侧做规范化
    op.create_table(
        "order_lines",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "order_id",
            sa.Integer(),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("product_name", sa.String(length=255), nullable=True),
        sa.Column("qty", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("lifecycle_status", sa.String(length=32), nullable=False, server_default="new"),
        sa.Column("mfg_qc_status", sa.String(length=32), nullable=False, server_default="unset"),
        sa.Column("pkg_qc_status", sa.String(length=32), nullable=False, server_default="unset"),
    )
    op.create_index("ix_order_lines_order_id", "order_lines", ["order_id"])
    op.create_index("ix_order_lines_qc", "order_lines", ["mfg_qc_status", "pkg_qc_status"])

    # append-only：驳回后重提 = 新行
    op.create_table(
        "qc_submissions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "order_line_id",
            sa.Integer(),
            sa.ForeignKey("order_lines.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_qc_submissions_line_type", "qc_submissions", ["order_line_id", "type"])
    op.create_index("ix_qc_submissions_status", "qc_submissions", ["status"])


def downgrade() -> None:
    op.drop_index("ix_qc_submissions_status", table_name="qc_submissions")
    op.drop_index("ix_qc_submissions_line_type", table_name="qc_submissions")
    op.drop_table("qc_submissions")

    op.drop_index("ix_order_lines_qc", table_name="order_lines")
    op.drop_index("ix_order_lines_order_id", table_name="order_lines")
    op.drop_table("order_lines")

    op.drop_index("ix_orders_seller_id", table_name="orders")
    op.drop_table("orders")
