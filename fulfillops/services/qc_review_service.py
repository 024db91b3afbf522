# fulfillops/services/qc_review_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fulfillops.core.config import AppSettings, get_settings
from fulfillops.models.enums import LifecycleStage, QcStatus, QcSubmissionStatus, QcType, ViewerRole
from fulfillops.models.order_line import OrderLine
from fulfillops.models.qc_submission import QcSubmission
from fulfillops.obs.metrics import qc_decisions_total, qc_submissions_total
from fulfillops.services.fulfillment_errors import (
    LifecycleTransitionError,
    OrderLineNotFound,
    BadInput,
    QcNotFound,
    QcStateConflict,
    RoleForbidden,
)
from fulfillops.services.fulfillment_progress_types import RejectionInfo
from fulfillops.services.fulfillment_snapshot import submission_snapshots
from fulfillops.services.fulfillment_status_normalizer import (
    normalize_lifecycle_status,
    normalize_qc_status,
)
from fulfillops.services.qc_rejection_history import track_rejections

log = logging.getLogger("fulfillops.qc")

UTC = timezone.utc

# 每道门：允许提交的 lifecycle、提交后 lifecycle 落到哪
_SUBMIT_FROM: Dict[QcType, tuple[LifecycleStage, ...]] = {
    QcType.MFG_QC: (LifecycleStage.MANUFACTURE, LifecycleStage.MFG_QC),
    QcType.PKG_QC: (LifecycleStage.PACKAGING, LifecycleStage.PKG_QC),
}
_SUBMIT_TO: Dict[QcType, LifecycleStage] = {
    QcType.MFG_QC: LifecycleStage.MFG_QC,
    QcType.PKG_QC: LifecycleStage.PKG_QC,
}


def _status_attr(qc_type: QcType) -> str:
    return "mfg_qc_status" if qc_type is QcType.MFG_QC else "pkg_qc_status"


def _require_role(role: ViewerRole, needed: ViewerRole, op: str) -> None:
    if role is not needed:
        raise RoleForbidden(f"{op} requires role={needed.value}, got {role.value}")


@dataclass
class QcHistory:
    order_line_id: int
    mfg: List[QcSubmission]
    pkg: List[QcSubmission]
    rejection: RejectionInfo


class QcReviewService:
    """
    QC 审核流：

    - submit()  卖家提交证据：新建 pending 提交，行子状态置 pending，lifecycle 落到对应质检阶段；
    - approve() 管理员通过：pending → approved（幂等：已通过再通过 = no-op）；
    - reject()  管理员驳回：pending → rejected，必须给原因（幂等：已驳回再驳回 = no-op）；
    - history() 按类型分组的提交历史 + 驳回统计。

    本服务只 flush，不 commit；事务边界由调用方（路由）控制。
    """

    def __init__(self, session: AsyncSession, *, settings: Optional[AppSettings] = None) -> None:
        self.session = session
        self.settings = settings or get_settings()

    async def _load_line(self, order_line_id: int) -> OrderLine:
        line = await self.session.get(OrderLine, int(order_line_id))
        if line is None:
            raise OrderLineNotFound(f"order line {order_line_id} not found")
        return line

    async def _load_submission(self, qc_id: int) -> QcSubmission:
        sub = await self.session.get(QcSubmission, int(qc_id))
        if sub is None:
            raise QcNotFound(f"qc submission {qc_id} not found")
        return sub

    # ------------------------------------------------------------------
    # 卖家提交
    # ------------------------------------------------------------------
    async def submit(
        self,
        order_line_id: int,
        *,
        qc_type: QcType,
        images: Sequence[str],
        remark: Optional[str] = None,
        role: ViewerRole = ViewerRole.SELLER,
    ) -> QcSubmission:
        _require_role(role, ViewerRole.SELLER, "qc submit")

        clean_images = [str(i).strip() for i in images or [] if str(i or "").strip()]
        if not clean_images:
            raise BadInput(details=[{"type": "validation", "path": "images", "reason": "at least one image is required"}])

        line = await self._load_line(order_line_id)
        stage = normalize_lifecycle_status(line.lifecycle_status)
        if stage not in _SUBMIT_FROM[qc_type]:
            raise LifecycleTransitionError(
                f"cannot submit {qc_type.value} while order line {line.id} is at {stage.value}"
            )

        attr = _status_attr(qc_type)
        current = normalize_qc_status(getattr(line, attr))
        if current.awaiting_review:
            raise QcStateConflict(f"{qc_type.value} for order line {line.id} is already waiting for review")
        if current is QcStatus.APPROVED:
            raise QcStateConflict(f"{qc_type.value} for order line {line.id} is already approved")
        if qc_type is QcType.PKG_QC and normalize_qc_status(line.mfg_qc_status) is not QcStatus.APPROVED:
            raise QcStateConflict(f"order line {line.id}: pkg_qc requires mfg_qc to be approved first")

        resubmission = current is QcStatus.REJECTED
        sub = QcSubmission(
            order_line=line,
            type=qc_type.value,
            status=QcSubmissionStatus.PENDING.value,
            remark=(remark or "").strip() or None,
            images=clean_images,
        )
        self.session.add(sub)

        setattr(line, attr, QcStatus.PENDING.value)
        line.lifecycle_status = _SUBMIT_TO[qc_type].value
        await self.session.flush()

        qc_submissions_total.labels(qc_type.value, str(resubmission).lower()).inc()
        log.info(
            "qc submitted: qc_id=%s line=%s type=%s resubmission=%s images=%d",
            sub.id,
            line.id,
            qc_type.value,
            resubmission,
            len(clean_images),
        )
        return sub

    # ------------------------------------------------------------------
    # 管理员审核
    # ------------------------------------------------------------------
    async def approve(self, qc_id: int, *, role: ViewerRole) -> QcSubmission:
        _require_role(role, ViewerRole.ADMIN, "qc approve")
        sub = await self._load_submission(qc_id)
        qc_type = QcType(sub.type)

        if sub.status == QcSubmissionStatus.APPROVED.value:
            qc_decisions_total.labels(qc_type.value, "noop").inc()
            log.info("qc approve replay ignored: qc_id=%s", sub.id)
            return sub
        if sub.status == QcSubmissionStatus.REJECTED.value:
            raise QcStateConflict(f"qc submission {sub.id} is already rejected; resubmit instead")

        line = await self._load_line(sub.order_line_id)
        if qc_type is QcType.PKG_QC and normalize_qc_status(line.mfg_qc_status) is not QcStatus.APPROVED:
            raise QcStateConflict(f"order line {line.id}: cannot approve pkg_qc before mfg_qc is approved")

        sub.status = QcSubmissionStatus.APPROVED.value
        sub.reviewed_at = datetime.now(UTC)
        setattr(line, _status_attr(qc_type), QcStatus.APPROVED.value)
        await self.session.flush()

        qc_decisions_total.labels(qc_type.value, "approve").inc()
        log.info("qc approved: qc_id=%s line=%s type=%s", sub.id, line.id, qc_type.value)
        return sub

    def _clean_note(self, note: Optional[str]) -> str:
        text = (note or "").strip()
        if not text:
            raise BadInput(details=[{"type": "validation", "path": "note", "reason": "rejection reason is required"}])
        limit = self.settings.REJECTION_NOTE_MAX_LEN
        if len(text) > limit:
            raise BadInput(
                details=[{"type": "validation", "path": "note", "reason": f"rejection reason exceeds {limit} chars"}]
            )
        return text

    async def reject(self, qc_id: int, *, note: Optional[str], role: ViewerRole) -> QcSubmission:
        _require_role(role, ViewerRole.ADMIN, "qc reject")
        text = self._clean_note(note)
        sub = await self._load_submission(qc_id)
        qc_type = QcType(sub.type)

        if sub.status == QcSubmissionStatus.REJECTED.value:
            qc_decisions_total.labels(qc_type.value, "noop").inc()
            log.info("qc reject replay ignored: qc_id=%s", sub.id)
            return sub
        if sub.status == QcSubmissionStatus.APPROVED.value:
            raise QcStateConflict(f"qc submission {sub.id} is already approved")

        line = await self._load_line(sub.order_line_id)
        sub.status = QcSubmissionStatus.REJECTED.value
        sub.note = text
        sub.reviewed_at = datetime.now(UTC)
        setattr(line, _status_attr(qc_type), QcStatus.REJECTED.value)
        await self.session.flush()

        qc_decisions_total.labels(qc_type.value, "reject").inc()
        log.info("qc rejected: qc_id=%s line=%s type=%s", sub.id, line.id, qc_type.value)
        return sub

    # ------------------------------------------------------------------
    # 历史
    # ------------------------------------------------------------------
    async def history(self, order_line_id: int) -> QcHistory:
        line = await self._load_line(order_line_id)
        rows = (
            await self.session.execute(
                select(QcSubmission)
                .where(QcSubmission.order_line_id == line.id)
                .order_by(QcSubmission.id.asc())
            )
        ).scalars().all()

        mfg = [r for r in rows if r.type == QcType.MFG_QC.value]
        pkg = [r for r in rows if r.type == QcType.PKG_QC.value]
        return QcHistory(
            order_line_id=int(line.id),
            mfg=list(mfg),
            pkg=list(pkg),
            rejection=track_rejections(submission_snapshots(mfg), submission_snapshots(pkg)),
        )


def submission_to_dict(sub: QcSubmission) -> Dict[str, Any]:
    return {
        "id": int(sub.id),
        "order_line_id": int(sub.order_line_id),
        "type": sub.type,
        "status": sub.status,
        "note": sub.note,
        "remark": sub.remark,
        "images": list(sub.images or []),
        "created_at": sub.created_at,
        "reviewed_at": sub.reviewed_at,
    }
