# fulfillops/services/fulfillment_snapshot.py
from __future__ import annotations

from typing import Iterable, List, Tuple

from fulfillops.models.enums import QcType
from fulfillops.models.order_line import OrderLine
from fulfillops.models.qc_submission import QcSubmission
from fulfillops.services.fulfillment_progress_types import LineSnapshot, QcSubmissionSnapshot
from fulfillops.services.fulfillment_status_normalizer import (
    normalize_lifecycle_status,
    normalize_qc_status,
)


def submission_snapshots(rows: Iterable[QcSubmission]) -> Tuple[QcSubmissionSnapshot, ...]:
    return tuple(
        QcSubmissionSnapshot(
            id=int(s.id),
            status=normalize_qc_status(s.status),
            note=s.note,
            images=tuple(s.images or ()),
        )
        for s in rows
    )


def _sub_snapshots(subs: List[QcSubmission], qc_type: QcType) -> Tuple[QcSubmissionSnapshot, ...]:
    return submission_snapshots(sorted((s for s in subs if s.type == qc_type.value), key=lambda s: s.id))


def snapshot_from_line(line: OrderLine) -> LineSnapshot:
    """ORM 行 → 核心算法输入（读事务内一次性取快照，之后与会话无关）。"""
    subs = list(line.qc_submissions or [])
    return LineSnapshot(
        order_line_id=int(line.id),
        lifecycle=normalize_lifecycle_status(line.lifecycle_status),
        mfg_qc_status=normalize_qc_status(line.mfg_qc_status),
        pkg_qc_status=normalize_qc_status(line.pkg_qc_status),
        mfg_submissions=_sub_snapshots(subs, QcType.MFG_QC),
        pkg_submissions=_sub_snapshots(subs, QcType.PKG_QC),
    )
