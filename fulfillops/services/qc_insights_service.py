# fulfillops/services/qc_insights_service.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fulfillops.models.enums import LifecycleStage, QcStatus
from fulfillops.models.order import Order
from fulfillops.models.order_line import OrderLine


@dataclass(frozen=True)
class QcInsights:
    pending_mfg_qc: int = 0
    pending_pkg_qc: int = 0
    mfg_rejected: int = 0
    pkg_qc_rejected: int = 0
    ready_to_ship: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_AWAITING = (QcStatus.PENDING.value, QcStatus.IN_PROGRESS.value)


class QcInsightsService:
    """
    QC 看板计数（按订单行当前子状态统计，不扫提交历史）：

      - pending_mfg_qc / pending_pkg_qc : 等待审核
      - mfg_rejected / pkg_qc_rejected  : 当前处于驳回态
      - ready_to_ship                   : lifecycle=pkg_qc 且包装质检已通过
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def summary(self, *, seller_id: Optional[int] = None) -> QcInsights:
        def _count(cond):
            return func.coalesce(func.sum(case((cond, 1), else_=0)), 0)

        stmt = select(
            _count(OrderLine.mfg_qc_status.in_(_AWAITING)).label("pending_mfg_qc"),
            _count(OrderLine.pkg_qc_status.in_(_AWAITING)).label("pending_pkg_qc"),
            _count(OrderLine.mfg_qc_status == QcStatus.REJECTED.value).label("mfg_rejected"),
            _count(OrderLine.pkg_qc_status == QcStatus.REJECTED.value).label("pkg_qc_rejected"),
            _count(
                and_(
                    OrderLine.lifecycle_status == LifecycleStage.PKG_QC.value,
                    OrderLine.pkg_qc_status == QcStatus.APPROVED.value,
                )
            ).label("ready_to_ship"),
        ).select_from(OrderLine)

        if seller_id is not None:
            stmt = stmt.join(Order, Order.id == OrderLine.order_id).where(Order.seller_id == int(seller_id))

        row = (await self.session.execute(stmt)).mappings().one()
        return QcInsights(**{k: int(v or 0) for k, v in row.items()})
