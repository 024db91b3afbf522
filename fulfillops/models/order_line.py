# fulfillops/models/order_line.py
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fulfillops.db.base import Base
from fulfillops.models.enums import LifecycleStage, QcStatus

if TYPE_CHECKING:
    from .order import Order
    from .qc_submission import QcSubmission


class OrderLine(Base):
    """
    订单行：

      - lifecycle_status : 粗粒度履约阶段（仅由订单推进流程修改）
      - mfg_qc_status    : 生产质检子状态（仅由 QC 提交 / 审核修改）
      - pkg_qc_status    : 包装质检子状态（同上）

    不变量：mfg_qc_status 未 approved 时，pkg_qc_status 不得变为 approved。
    """

    __tablename__ = "order_lines"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    product_name: Mapped[Optional[str]] = mapped_column(sa.String(255), nullable=True)
    qty: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=1)

    lifecycle_status: Mapped[str] = mapped_column(
        sa.String(32), nullable=False, default=LifecycleStage.NEW.value
    )
    mfg_qc_status: Mapped[str] = mapped_column(
        sa.String(32), nullable=False, default=QcStatus.UNSET.value
    )
    pkg_qc_status: Mapped[str] = mapped_column(
        sa.String(32), nullable=False, default=QcStatus.UNSET.value
    )

    order: Mapped["Order"] = relationship("Order", back_populates="lines", lazy="selectin")
    qc_submissions: Mapped[List["QcSubmission"]] = relationship(
        "QcSubmission",
        back_populates="order_line",
        order_by="QcSubmission.id",
        lazy="selectin",
    )

    __table_args__ = (sa.Index("ix_order_lines_qc", "mfg_qc_status", "pkg_qc_status"),)

    def __repr__(self) -> str:
        return (
            f"<OrderLine id={self.id} order_id={self.order_id} "
            f"lifecycle={self.lifecycle_status} mfg={self.mfg_qc_status} pkg={self.pkg_qc_status}>"
        )
