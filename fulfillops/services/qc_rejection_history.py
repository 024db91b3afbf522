# fulfillops/services/qc_rejection_history.py
from __future__ import annotations

from typing import Iterable, List, Tuple

from fulfillops.models.enums import QcStatus
from fulfillops.services.fulfillment_progress_types import (
    LineSnapshot,
    QcSubmissionSnapshot,
    RejectionInfo,
)


def _rejected(subs: Iterable[QcSubmissionSnapshot]) -> List[QcSubmissionSnapshot]:
    return [s for s in subs if s.status is QcStatus.REJECTED]


def _notes(rejected: List[QcSubmissionSnapshot]) -> Tuple[str, ...]:
    return tuple(s.note.strip() for s in rejected if s.note and s.note.strip())


def track_rejections(
    mfg_submissions: Iterable[QcSubmissionSnapshot] = (),
    pkg_submissions: Iterable[QcSubmissionSnapshot] = (),
) -> RejectionInfo:
    """
    驳回统计：只数 status=rejected 的提交（同一行多次驳回、多次重提都会累加）。
    提交历史 append-only，因此计数与原因列表只增不减。
    """
    mfg_rejected = _rejected(mfg_submissions)
    pkg_rejected = _rejected(pkg_submissions)
    mfg_notes = _notes(mfg_rejected)
    pkg_notes = _notes(pkg_rejected)
    return RejectionInfo(
        mfg_rejection_count=len(mfg_rejected),
        pkg_rejection_count=len(pkg_rejected),
        rejection_notes=mfg_notes + pkg_notes,
        mfg_notes=mfg_notes,
        pkg_notes=pkg_notes,
    )


def track_line_rejections(line: LineSnapshot) -> RejectionInfo:
    return track_rejections(line.mfg_submissions, line.pkg_submissions)


def merge_rejections(infos: Iterable[RejectionInfo]) -> RejectionInfo:
    """订单级汇总：逐行累加，原因按行顺序拼接。"""
    mfg_count = pkg_count = 0
    notes: Tuple[str, ...] = ()
    mfg_notes: Tuple[str, ...] = ()
    pkg_notes: Tuple[str, ...] = ()
    for info in infos:
        mfg_count += info.mfg_rejection_count
        pkg_count += info.pkg_rejection_count
        notes += info.rejection_notes
        mfg_notes += info.mfg_notes
        pkg_notes += info.pkg_notes
    return RejectionInfo(
        mfg_rejection_count=mfg_count,
        pkg_rejection_count=pkg_count,
        rejection_notes=notes,
        mfg_notes=mfg_notes,
        pkg_notes=pkg_notes,
    )
