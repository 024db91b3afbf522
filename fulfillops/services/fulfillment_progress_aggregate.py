# fulfillops/services/fulfillment_progress_aggregate.py
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Sequence, Union

from fulfillops.models.enums import LifecycleStage, QcStatus
from fulfillops.services.fulfillment_progress_single import MFG_GATE, PKG_GATE, QcGate, apply_qc_override
from fulfillops.services.fulfillment_progress_table import base_vector_for
from fulfillops.services.fulfillment_progress_types import LineSnapshot, ProgressVector

LineLike = Union[LineSnapshot, Mapping[str, Any]]


def _as_snapshots(lines: Iterable[LineLike]) -> List[LineSnapshot]:
    return [ln if isinstance(ln, LineSnapshot) else LineSnapshot.from_mapping(ln) for ln in lines]


def min_lifecycle(lines: Sequence[LineSnapshot]) -> LifecycleStage:
    """订单进度由最慢的一行决定；空集合按 NEW 处理。"""
    if not lines:
        return LifecycleStage.NEW
    return min((ln.lifecycle for ln in lines), key=lambda s: s.rank)


def _merge_gate(
    progress: ProgressVector,
    gate: QcGate,
    statuses: List[QcStatus],
    lifecycle: LifecycleStage,
) -> ProgressVector:
    # 驳回与待审可以同时生效；全部通过才放行下一段
    rejected = [s for s in statuses if s is QcStatus.REJECTED]
    awaiting = [s for s in statuses if s.awaiting_review]
    out = progress
    if rejected:
        out = apply_qc_override(out, gate, rejected[0], lifecycle)
    if awaiting:
        out = apply_qc_override(out, gate, awaiting[0], lifecycle)
    if statuses and all(s is QcStatus.APPROVED for s in statuses):
        out = apply_qc_override(out, gate, QcStatus.APPROVED, lifecycle)
    return out


def resolve_order_progress(lines: Iterable[LineLike]) -> ProgressVector:
    """
    订单级（合并视图）进度：

    1) 空订单 → 全 pending，不抛异常；
    2) 取所有行 lifecycle 的最小值，查基础表；
    3) 任一行 mfg 驳回 → packaging 强制 pending；任一行 pkg 驳回 → shipped 强制 pending
       （与单行一致：最慢行已 shipped 时 mfg 驳回不再生效）；
    4) 任一行 mfg 待审 → mfg_qc in-progress，packaging 保持 pending；pkg 同理
       （最慢行已越过该门时不再回拨）；
    5) 所有行同一道门都 approved → qc 段 completed，下一段 pending 则放行为 in-progress。

    每道门都按最慢行的 lifecycle 走 apply_qc_override，
    所以只有一行时结果与 resolve_single_item 完全一致。
    """
    snaps = _as_snapshots(lines)
    if not snaps:
        return ProgressVector.all_pending()

    lifecycle = min_lifecycle(snaps)
    progress = base_vector_for(lifecycle)
    progress = _merge_gate(progress, MFG_GATE, [ln.mfg_qc_status for ln in snaps], lifecycle)
    progress = _merge_gate(progress, PKG_GATE, [ln.pkg_qc_status for ln in snaps], lifecycle)
    return progress
