# fulfillops/services/fulfillment_progress_service_impl.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fulfillops.models.enums import LifecycleStage, ProgressView, QcStatus, ViewerRole
from fulfillops.models.order import Order
from fulfillops.models.order_line import OrderLine
from fulfillops.services.fulfillment_errors import OrderLineNotFound, OrderNotFound
from fulfillops.services.fulfillment_progress_aggregate import min_lifecycle, resolve_order_progress
from fulfillops.services.fulfillment_progress_single import resolve_line
from fulfillops.services.fulfillment_progress_types import LineSnapshot, ProgressVector, RejectionInfo
from fulfillops.services.fulfillment_snapshot import snapshot_from_line
from fulfillops.services.fulfillment_status_label import NextAction, current_status_label, next_actions
from fulfillops.services.fulfillment_view_reconciler import reconcile_view
from fulfillops.services.qc_rejection_history import merge_rejections, track_line_rejections


@dataclass
class LineProgress:
    order_line_id: int
    product_name: Optional[str]
    lifecycle: LifecycleStage
    mfg_qc_status: QcStatus
    pkg_qc_status: QcStatus
    progress: ProgressVector
    rejection: RejectionInfo
    label: str
    actions: List[NextAction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_line_id": self.order_line_id,
            "product_name": self.product_name,
            "lifecycle_status": self.lifecycle.value,
            "mfg_qc_status": self.mfg_qc_status.value,
            "pkg_qc_status": self.pkg_qc_status.value,
            "progress": self.progress.to_dict(),
            "rejection": self.rejection.to_dict(),
            "label": self.label,
            "actions": [a.to_dict() for a in self.actions],
        }


@dataclass
class OrderProgress:
    order_id: int
    name: str
    view: ProgressView
    lifecycle: LifecycleStage
    progress: ProgressVector
    rejection: RejectionInfo
    lines: List[LineProgress] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "name": self.name,
            "view": self.view.value,
            "lifecycle_status": self.lifecycle.value,
            "progress": self.progress.to_dict(),
            "rejection": self.rejection.to_dict(),
            "lines": [ln.to_dict() for ln in self.lines],
        }


def build_line_progress(snap: LineSnapshot, *, role: ViewerRole, product_name: Optional[str] = None) -> LineProgress:
    vector = resolve_line(snap)
    return LineProgress(
        order_line_id=snap.order_line_id,
        product_name=product_name,
        lifecycle=snap.lifecycle,
        mfg_qc_status=snap.mfg_qc_status,
        pkg_qc_status=snap.pkg_qc_status,
        progress=vector,
        rejection=track_line_rejections(snap),
        label=current_status_label(vector, snap.mfg_qc_status, snap.pkg_qc_status),
        actions=next_actions(snap.lifecycle, snap.mfg_qc_status, snap.pkg_qc_status, role),
    )


class FulfillmentProgressService:
    """
    履约进度读服务：

    - 每次读取都在当前会话内重新加载订单 / 行 / QC 历史，取一次性快照后交给纯函数计算；
    - 整单进度（合并视图）与逐行进度同时返回，view 只决定前端默认展示哪一个。
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _load_order(self, order_id: int) -> Order:
        order = await self.session.get(Order, int(order_id), populate_existing=True)
        if order is None:
            raise OrderNotFound(f"order {order_id} not found")
        return order

    async def _load_line(self, order_line_id: int) -> OrderLine:
        line = await self.session.get(OrderLine, int(order_line_id), populate_existing=True)
        if line is None:
            raise OrderLineNotFound(f"order line {order_line_id} not found")
        return line

    async def for_order_line(self, order_line_id: int, *, role: ViewerRole) -> LineProgress:
        line = await self._load_line(order_line_id)
        return build_line_progress(snapshot_from_line(line), role=role, product_name=line.product_name)

    async def for_order(
        self,
        order_id: int,
        *,
        role: ViewerRole,
        view: Any = None,
    ) -> OrderProgress:
        order = await self._load_order(order_id)
        rows = list(order.lines or [])
        snaps = [snapshot_from_line(ln) for ln in rows]
        lines = [
            build_line_progress(s, role=role, product_name=ln.product_name) for s, ln in zip(snaps, rows)
        ]
        return OrderProgress(
            order_id=int(order.id),
            name=order.name,
            view=reconcile_view(len(snaps), view),
            lifecycle=min_lifecycle(snaps),
            progress=resolve_order_progress(snaps),
            rejection=merge_rejections(lp.rejection for lp in lines),
            lines=lines,
        )

    async def for_order_as_dict(self, order_id: int, *, role: ViewerRole, view: Any = None) -> Dict[str, Any]:
        return (await self.for_order(order_id, role=role, view=view)).to_dict()

    async def for_order_line_as_dict(self, order_line_id: int, *, role: ViewerRole) -> Dict[str, Any]:
        return (await self.for_order_line(order_line_id, role=role)).to_dict()
