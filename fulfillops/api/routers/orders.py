# fulfillops/api/routers/orders.py
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fulfillops.api.deps import get_viewer_role
from fulfillops.api.problem import SERVICE_ERRORS, raise_service_problem
from fulfillops.db.session import get_session
from fulfillops.models.enums import ViewerRole
from fulfillops.schemas.order import LifecycleAdvanceIn, OrderCreate, OrderOut
from fulfillops.services.fulfillment_progress import FulfillmentProgressService
from fulfillops.services.order_progression_service import OrderProgressionService

router = APIRouter(tags=["orders"])


@router.post("/orders", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    session: AsyncSession = Depends(get_session),
) -> OrderOut:
    svc = OrderProgressionService(session)
    try:
        order = await svc.create_order(
            name=payload.name,
            customer_name=payload.customer_name,
            seller_id=payload.seller_id,
            lines=[ln.model_dump() for ln in payload.lines],
        )
    except SERVICE_ERRORS as e:
        raise_service_problem(e)
    await session.commit()
    return OrderOut.model_validate(order)


@router.post("/order-lines/{order_line_id}/advance")
async def advance_order_line(
    order_line_id: int,
    payload: LifecycleAdvanceIn,
    role: ViewerRole = Depends(get_viewer_role),
    session: AsyncSession = Depends(get_session),
) -> Dict[str, Any]:
    """
    卖家推进 lifecycle（new→manufacture、mfg_qc→packaging、pkg_qc→shipping、shipping→shipped→delivered）。
    进入质检阶段请走 POST /order-lines/{id}/qc。返回推进后的行进度。
    """
    try:
        await OrderProgressionService(session).advance(order_line_id, target=payload.target, role=role)
        await session.commit()
        return await FulfillmentProgressService(session).for_order_line_as_dict(order_line_id, role=role)
    except SERVICE_ERRORS as e:
        raise_service_problem(e, context={"order_line_id": order_line_id, "target": payload.target})
