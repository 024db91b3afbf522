# fulfillops/models/qc_submission.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fulfillops.db.base import Base
from fulfillops.models.enums import QcSubmissionStatus

if TYPE_CHECKING:
    from .order_line import OrderLine


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QcSubmission(Base):
    """
    QC 提交记录（append-only）：

      - type      : mfg_qc / pkg_qc
      - status    : pending → approved | rejected，只迁移一次；驳回后重提 = 新建一行
      - note      : 驳回原因（仅 rejected 时有值）
      - remark    : 卖家提交时附带的说明
      - images    : 证据图片 URL 列表（有序，只追加）
      - reviewed_at : 审核时间（pending 时为空）
    """

    __tablename__ = "qc_submissions"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    order_line_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("order_lines.id", ondelete="RESTRICT"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    status: Mapped[str] = mapped_column(
        sa.String(16), nullable=False, default=QcSubmissionStatus.PENDING.value
    )
    note: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    remark: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    images: Mapped[List[str]] = mapped_column(sa.JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True), nullable=True)

    order_line: Mapped["OrderLine"] = relationship(
        "OrderLine", back_populates="qc_submissions", lazy="selectin"
    )

    __table_args__ = (
        sa.Index("ix_qc_submissions_line_type", "order_line_id", "type"),
        sa.Index("ix_qc_submissions_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<QcSubmission id={self.id} line={self.order_line_id} type={self.type} status={self.status}>"
