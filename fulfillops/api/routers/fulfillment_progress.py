# fulfillops/api/routers/fulfillment_progress.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fulfillops.api.deps import get_viewer_role
from fulfillops.api.problem import SERVICE_ERRORS, raise_service_problem
from fulfillops.db.session import get_session
from fulfillops.models.enums import ViewerRole
from fulfillops.services.fulfillment_progress import FulfillmentProgressService

router = APIRouter(tags=["fulfillment-progress"])


@router.get("/orders/{order_id}/progress")
async def order_progress(
    order_id: int,
    view: Optional[str] = Query(
        None,
        description="combined / item_wise；单行订单永远 combined，多行默认 item_wise",
    ),
    role: ViewerRole = Depends(get_viewer_role),
    session: AsyncSession = Depends(get_session),
) -> Dict[str, Any]:
    """
    整单履约进度：

    - progress：所有行合并后的五节点进度（最慢的行决定整体）；
    - lines：逐行进度 + 状态文案 + 可操作按钮；
    - rejection：整单累计驳回次数与原因。
    """
    svc = FulfillmentProgressService(session)
    try:
        return await svc.for_order_as_dict(order_id, role=role, view=view)
    except SERVICE_ERRORS as e:
        raise_service_problem(e, context={"order_id": order_id})


@router.get("/order-lines/{order_line_id}/progress")
async def order_line_progress(
    order_line_id: int,
    role: ViewerRole = Depends(get_viewer_role),
    session: AsyncSession = Depends(get_session),
) -> Dict[str, Any]:
    svc = FulfillmentProgressService(session)
    try:
        return await svc.for_order_line_as_dict(order_line_id, role=role)
    except SERVICE_ERRORS as e:
        raise_service_problem(e, context={"order_line_id": order_line_id})
