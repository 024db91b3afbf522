# fulfillops/services/fulfillment_progress_single.py
from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Any, Optional, Tuple

from fulfillops.models.enums import LifecycleStage, QcStatus, StageState
from fulfillops.services.fulfillment_progress_table import base_vector_for
from fulfillops.services.fulfillment_progress_types import LineSnapshot, ProgressVector, StageKey
from fulfillops.services.fulfillment_status_normalizer import (
    normalize_lifecycle_status,
    normalize_qc_status,
)


@dataclass(frozen=True)
class QcGate:
    """
    一道质检门：

    - qc_stage          : 质检本身对应的进度段
    - next_stage        : 被这道门挡住的下一段
    - settled_at        : lifecycle 到达该阶段即视为门已放行，
                          此后 pending / in_progress 子状态不再回拨进度
    - reject_settled_at : lifecycle 到达该阶段后驳回也不再压住下一段；
                          None 表示驳回在任何 lifecycle 下都生效
    """

    qc_stage: StageKey
    next_stage: StageKey
    settled_at: LifecycleStage
    reject_settled_at: Optional[LifecycleStage] = None

    def is_settled(self, lifecycle: LifecycleStage) -> bool:
        return lifecycle.rank >= self.settled_at.rank

    def rejection_holds(self, lifecycle: LifecycleStage) -> bool:
        return self.reject_settled_at is None or lifecycle.rank < self.reject_settled_at.rank


# 已发运的行不再被生产质检驳回拨回；包装质检驳回始终压住 shipped
MFG_GATE = QcGate(
    qc_stage="mfg_qc",
    next_stage="packaging",
    settled_at=LifecycleStage.PACKAGING,
    reject_settled_at=LifecycleStage.SHIPPED,
)
PKG_GATE = QcGate(qc_stage="pkg_qc", next_stage="shipped", settled_at=LifecycleStage.SHIPPING)


def apply_qc_override(
    progress: ProgressVector,
    gate: QcGate,
    status: QcStatus,
    lifecycle: LifecycleStage,
) -> ProgressVector:
    """
    单道门的覆盖规则（纯函数，返回新值）：

    - pending / in_progress → qc 段 in-progress，下一段强制 pending（门已放行则不动）
    - approved              → qc 段 completed，下一段若 pending 则放行为 in-progress
    - rejected              → qc 段保持表内值，下一段强制 pending（驳回已失效则不动）
    """
    if status is QcStatus.UNSET:
        return progress

    if status is QcStatus.REJECTED:
        if not gate.rejection_holds(lifecycle):
            return progress
        return progress.with_stage(gate.next_stage, StageState.PENDING)

    if status is QcStatus.APPROVED:
        out = progress.with_stage(gate.qc_stage, StageState.COMPLETED)
        if out.get(gate.next_stage) is StageState.PENDING:
            out = out.with_stage(gate.next_stage, StageState.IN_PROGRESS)
        return out

    # pending / in_progress：门已放行的行不再回拨
    if gate.is_settled(lifecycle):
        return progress
    return progress.with_stage(gate.qc_stage, StageState.IN_PROGRESS).with_stage(
        gate.next_stage, StageState.PENDING
    )


def resolve_single_item(
    lifecycle_status: Any,
    mfg_qc_status: Any = None,
    pkg_qc_status: Any = None,
) -> ProgressVector:
    """
    单行进度：基础表 → 依次折叠 mfg / pkg 两道门的覆盖规则。

    入参可以是原始字符串（任意大小写），也可以是已规范化的枚举。
    """
    lifecycle = normalize_lifecycle_status(lifecycle_status)
    overrides: Tuple[Tuple[QcGate, QcStatus], ...] = (
        (MFG_GATE, normalize_qc_status(mfg_qc_status)),
        (PKG_GATE, normalize_qc_status(pkg_qc_status)),
    )
    return reduce(
        lambda acc, rule: apply_qc_override(acc, rule[0], rule[1], lifecycle),
        overrides,
        base_vector_for(lifecycle),
    )


def resolve_line(line: LineSnapshot) -> ProgressVector:
    return resolve_single_item(line.lifecycle, line.mfg_qc_status, line.pkg_qc_status)
