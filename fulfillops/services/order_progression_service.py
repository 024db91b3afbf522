# fulfillops/services/order_progression_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from fulfillops.models.enums import LifecycleStage, QcStatus, ViewerRole
from fulfillops.models.order import Order
from fulfillops.models.order_line import OrderLine
from fulfillops.obs.metrics import lifecycle_advances_total
from fulfillops.services.fulfillment_errors import (
    LifecycleTransitionError,
    OrderLineNotFound,
    BadInput,
    RoleForbidden,
)
from fulfillops.services.fulfillment_status_normalizer import (
    match_lifecycle_status,
    normalize_lifecycle_status,
    normalize_qc_status,
)

log = logging.getLogger("fulfillops.orders")


@dataclass(frozen=True)
class Transition:
    """
    一条允许的前进跃迁：
    - requires_mfg / requires_pkg：对应质检必须已 approved（质检门）
    """

    source: LifecycleStage
    target: LifecycleStage
    requires_mfg: bool = False
    requires_pkg: bool = False


# 进入 mfg_qc / pkg_qc 只能走 QC 提交（QcReviewService.submit），这里不开放
TRANSITIONS: Dict[LifecycleStage, Transition] = {
    t.target: t
    for t in (
        Transition(LifecycleStage.NEW, LifecycleStage.MANUFACTURE),
        Transition(LifecycleStage.MFG_QC, LifecycleStage.PACKAGING, requires_mfg=True),
        Transition(LifecycleStage.PKG_QC, LifecycleStage.SHIPPING, requires_pkg=True),
        Transition(LifecycleStage.SHIPPING, LifecycleStage.SHIPPED),
        Transition(LifecycleStage.SHIPPED, LifecycleStage.DELIVERED),
    )
}


class OrderProgressionService:
    """
    订单推进：

    - create_order()：落订单头 + 行（lifecycle 入库前先规范化）；
    - advance()     ：卖家推进某一行的 lifecycle，只允许表内的前进跃迁；
                      推进到当前阶段视为幂等 no-op。
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_order(
        self,
        *,
        name: str,
        lines: Sequence[Mapping[str, Any]],
        customer_name: Optional[str] = None,
        seller_id: Optional[int] = None,
    ) -> Order:
        if not lines:
            raise BadInput(details=[{"type": "validation", "path": "lines", "reason": "order needs at least one line"}])

        order = Order(name=str(name).strip(), customer_name=customer_name, seller_id=seller_id)
        rows: List[OrderLine] = []
        for raw in lines:
            rows.append(
                OrderLine(
                    product_name=raw.get("product_name"),
                    qty=int(raw.get("qty") or 1),
                    lifecycle_status=normalize_lifecycle_status(raw.get("lifecycle_status")).value,
                    mfg_qc_status=normalize_qc_status(raw.get("mfg_qc_status")).value,
                    pkg_qc_status=normalize_qc_status(raw.get("pkg_qc_status")).value,
                )
            )
        order.lines = rows
        self.session.add(order)
        await self.session.flush()

        log.info("order created: id=%s name=%s lines=%d", order.id, order.name, len(rows))
        return order

    async def advance(self, order_line_id: int, *, target: Any, role: ViewerRole) -> OrderLine:
        if role is not ViewerRole.SELLER:
            raise RoleForbidden(f"lifecycle advance requires role=seller, got {role.value}")

        line = await self.session.get(OrderLine, int(order_line_id))
        if line is None:
            raise OrderLineNotFound(f"order line {order_line_id} not found")

        current = normalize_lifecycle_status(line.lifecycle_status)
        dest = match_lifecycle_status(target)
        if dest is None:
            raise BadInput(details=[{"type": "validation", "path": "target", "reason": f"unknown lifecycle stage {target!r}"}])

        if dest is current:
            log.info("lifecycle advance replay ignored: line=%s stage=%s", line.id, current.value)
            return line

        rule = TRANSITIONS.get(dest)
        if rule is None or rule.source is not current:
            raise LifecycleTransitionError(
                f"order line {line.id}: {current.value} -> {dest.value} is not an allowed transition"
            )
        if rule.requires_mfg and normalize_qc_status(line.mfg_qc_status) is not QcStatus.APPROVED:
            raise LifecycleTransitionError(f"order line {line.id}: mfg_qc must be approved before {dest.value}")
        if rule.requires_pkg and normalize_qc_status(line.pkg_qc_status) is not QcStatus.APPROVED:
            raise LifecycleTransitionError(f"order line {line.id}: pkg_qc must be approved before {dest.value}")

        line.lifecycle_status = dest.value
        await self.session.flush()

        lifecycle_advances_total.labels(dest.value).inc()
        log.info("lifecycle advanced: line=%s %s -> %s", line.id, current.value, dest.value)
        return line
