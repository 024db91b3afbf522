# fulfillops/models/order.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fulfillops.db.base import Base

if TYPE_CHECKING:
    from .order_line import OrderLine


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(Base):
    """
    订单头：
      - 订单拥有有序的订单行（order_lines），行不脱离订单独立存在；
      - 整单进度是派生值，每次读取时由行重新计算，不落库。
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    customer_name: Mapped[Optional[str]] = mapped_column(sa.String(255), nullable=True)
    seller_id: Mapped[Optional[int]] = mapped_column(sa.Integer, nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow
    )

    lines: Mapped[List["OrderLine"]] = relationship(
        "OrderLine",
        back_populates="order",
        order_by="OrderLine.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} name={self.name!r} lines={len(self.lines or [])}>"
