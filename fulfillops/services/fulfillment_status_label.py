# fulfillops/services/fulfillment_status_label.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from fulfillops.models.enums import LifecycleStage, QcStatus, StageState, ViewerRole
from fulfillops.services.fulfillment_progress_types import ProgressVector
from fulfillops.services.fulfillment_status_normalizer import (
    normalize_lifecycle_status,
    normalize_qc_status,
)

C = StageState.COMPLETED
I = StageState.IN_PROGRESS
P = StageState.PENDING


@dataclass(frozen=True)
class NextAction:
    action: str
    label: str
    disabled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def current_status_label(progress: ProgressVector, mfg_qc_status: Any = None, pkg_qc_status: Any = None) -> str:
    """
    当前状态文案：已全部完成的行直接 Completed；
    其余驳回优先，再按进度从后往前找第一个命中的节点。
    """
    if progress.shipped is C:
        return "Completed"
    if normalize_qc_status(mfg_qc_status) is QcStatus.REJECTED:
        return "MFG QC Rejected"
    if normalize_qc_status(pkg_qc_status) is QcStatus.REJECTED:
        return "PKG QC Rejected"

    p = progress
    if p.shipped is I:
        return "Shipping in Progress"
    if p.pkg_qc is C and p.shipped is P:
        return "Ready to Ship"
    if p.pkg_qc is I:
        return "PKG QC Pending"
    if p.packaging is C and p.pkg_qc is P:
        return "Pending PKG QC"
    if p.packaging is I:
        return "Packing in Progress"
    if p.mfg_qc is C and p.packaging is P:
        return "MFG QC Approved"
    if p.mfg_qc is I:
        return "MFG QC Pending"
    if p.manufacturing is C and p.mfg_qc is P:
        return "Pending MFG QC"
    if p.manufacturing is I:
        return "Manufacturing in Progress"
    return "New Order"


def _seller_actions(stage: LifecycleStage, mfg: QcStatus, pkg: QcStatus) -> List[NextAction]:
    if stage is LifecycleStage.NEW:
        return [NextAction("finalize_manufacturing", "Manufacturing Finalized")]

    if stage in (LifecycleStage.MANUFACTURE, LifecycleStage.MFG_QC):
        if mfg is QcStatus.REJECTED:
            return [NextAction("resubmit_mfg_qc", "Resubmit for QC")]
        if mfg.awaiting_review:
            return [NextAction("waiting_mfg_approval", "Waiting for Approval", disabled=True)]
        if mfg is QcStatus.APPROVED:
            return [NextAction("start_packaging", "Start Packaging")]
        return [NextAction("submit_mfg_qc", "Submit for QC")]

    if stage in (LifecycleStage.PACKAGING, LifecycleStage.PKG_QC):
        if pkg is QcStatus.REJECTED:
            return [NextAction("resubmit_pkg_qc", "Resubmit for QC")]
        if pkg.awaiting_review:
            return [NextAction("waiting_pkg_approval", "Waiting for Approval", disabled=True)]
        if pkg is QcStatus.APPROVED:
            return [NextAction("create_shipping_order", "Create Shipping Order")]
        return [NextAction("submit_pkg_qc", "Submit for QC")]

    return []


def _admin_actions(mfg: QcStatus, pkg: QcStatus) -> List[NextAction]:
    out: List[NextAction] = []
    if mfg.awaiting_review:
        out += [NextAction("approve_mfg_qc", "Approve"), NextAction("reject_mfg_qc", "Reject")]
    if pkg.awaiting_review:
        out += [NextAction("approve_pkg_qc", "Approve"), NextAction("reject_pkg_qc", "Reject")]
    return out


def next_actions(
    lifecycle_status: Any,
    mfg_qc_status: Any,
    pkg_qc_status: Any,
    role: ViewerRole,
) -> List[NextAction]:
    """
    行级可操作按钮（按查看者角色区分；发货之后没有任何操作）。
    """
    stage = normalize_lifecycle_status(lifecycle_status)
    mfg = normalize_qc_status(mfg_qc_status)
    pkg = normalize_qc_status(pkg_qc_status)

    if stage.rank >= LifecycleStage.SHIPPING.rank:
        return []
    if role is ViewerRole.ADMIN:
        return _admin_actions(mfg, pkg)
    return _seller_actions(stage, mfg, pkg)
