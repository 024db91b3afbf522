# fulfillops/api/routers/qc_review.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fulfillops.api.deps import get_viewer_role
from fulfillops.api.problem import SERVICE_ERRORS, raise_service_problem
from fulfillops.db.session import get_session
from fulfillops.models.enums import ViewerRole
from fulfillops.schemas.qc import QcRejectIn, QcSubmissionOut, QcSubmitIn
from fulfillops.services.qc_insights_service import QcInsightsService
from fulfillops.services.qc_review_service import QcReviewService

router = APIRouter(tags=["qc"])


@router.post(
    "/order-lines/{order_line_id}/qc",
    response_model=QcSubmissionOut,
    status_code=status.HTTP_201_CREATED,
)
async def submit_qc(
    order_line_id: int,
    payload: QcSubmitIn,
    role: ViewerRole = Depends(get_viewer_role),
    session: AsyncSession = Depends(get_session),
) -> QcSubmissionOut:
    """卖家提交质检证据（首次提交 / 驳回后重提都走这里）。"""
    try:
        sub = await QcReviewService(session).submit(
            order_line_id,
            qc_type=payload.type,
            images=payload.images,
            remark=payload.note,
            role=role,
        )
    except SERVICE_ERRORS as e:
        raise_service_problem(e, context={"order_line_id": order_line_id, "qc_type": payload.type.value})
    await session.commit()
    return QcSubmissionOut.model_validate(sub)


@router.get("/order-lines/{order_line_id}/qc")
async def qc_history(
    order_line_id: int,
    session: AsyncSession = Depends(get_session),
) -> Dict[str, Any]:
    try:
        hist = await QcReviewService(session).history(order_line_id)
    except SERVICE_ERRORS as e:
        raise_service_problem(e, context={"order_line_id": order_line_id})
    return {
        "order_line_id": hist.order_line_id,
        "mfg_qc": [QcSubmissionOut.model_validate(s).model_dump(mode="json") for s in hist.mfg],
        "pkg_qc": [QcSubmissionOut.model_validate(s).model_dump(mode="json") for s in hist.pkg],
        "rejection": hist.rejection.to_dict(),
    }


@router.post("/qc/{qc_id}/approve", response_model=QcSubmissionOut)
async def approve_qc(
    qc_id: int,
    role: ViewerRole = Depends(get_viewer_role),
    session: AsyncSession = Depends(get_session),
) -> QcSubmissionOut:
    try:
        sub = await QcReviewService(session).approve(qc_id, role=role)
    except SERVICE_ERRORS as e:
        raise_service_problem(e, context={"qc_id": qc_id})
    await session.commit()
    return QcSubmissionOut.model_validate(sub)


@router.post("/qc/{qc_id}/reject", response_model=QcSubmissionOut)
async def reject_qc(
    qc_id: int,
    payload: QcRejectIn,
    role: ViewerRole = Depends(get_viewer_role),
    session: AsyncSession = Depends(get_session),
) -> QcSubmissionOut:
    """管理员驳回；note 必填（驳回原因会进入该行的驳回历史）。"""
    try:
        sub = await QcReviewService(session).reject(qc_id, note=payload.note, role=role)
    except SERVICE_ERRORS as e:
        raise_service_problem(e, context={"qc_id": qc_id})
    await session.commit()
    return QcSubmissionOut.model_validate(sub)


@router.get("/qc/insights")
async def qc_insights(
    seller_id: Optional[int] = Query(None, ge=1),
    session: AsyncSession = Depends(get_session),
) -> Dict[str, Any]:
    summary = await QcInsightsService(session).summary(seller_id=seller_id)
    return summary.to_dict()
