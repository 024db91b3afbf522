# fulfillops/services/fulfillment_status_normalizer.py
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from fulfillops.models.enums import LifecycleStage, QcStatus

log = logging.getLogger("fulfillops.progress")

_SEP_RE = re.compile(r"[\s\-]+")

# 外部系统偶发的别名 → 规范 QC 子状态
_QC_ALIASES: Dict[str, QcStatus] = {
    "pending": QcStatus.PENDING,
    "in_progress": QcStatus.IN_PROGRESS,
    "approved": QcStatus.APPROVED,
    "completed": QcStatus.APPROVED,
    "rejected": QcStatus.REJECTED,
}

_LIFECYCLE_BY_KEY: Dict[str, LifecycleStage] = {s.value: s for s in LifecycleStage}


def _key(raw: Any) -> str:
    return _SEP_RE.sub("_", str(raw or "").strip().lower())


def match_lifecycle_status(raw: Any) -> Optional[LifecycleStage]:
    """严格匹配：无法识别返回 None（写操作用，不做 fail-open）。"""
    if isinstance(raw, LifecycleStage):
        return raw
    return _LIFECYCLE_BY_KEY.get(_key(raw))


def normalize_lifecycle_status(raw: Any) -> LifecycleStage:
    """
    原始阶段字符串 → LifecycleStage。

    - 大小写不敏感，两侧空白忽略，'-' / 空格视同 '_'（"Mfg-QC" == "mfg_qc"）；
    - 无法识别 → NEW（fail-open：宁可少报进度，也不让看板因脏数据报错）。
    """
    if isinstance(raw, LifecycleStage):
        return raw
    key = _key(raw)
    stage = _LIFECYCLE_BY_KEY.get(key)
    if stage is None:
        if key:
            log.debug("unknown lifecycle status %r, falling back to %s", raw, LifecycleStage.NEW)
        return LifecycleStage.NEW
    return stage


def normalize_qc_status(raw: Any) -> QcStatus:
    """原始 QC 子状态 → QcStatus；空值 / 无法识别一律视为 UNSET。"""
    if isinstance(raw, QcStatus):
        return raw
    key = _key(raw)
    if not key:
        return QcStatus.UNSET
    status = _QC_ALIASES.get(key)
    if status is None:
        log.debug("unknown qc status %r, treating as unset", raw)
        return QcStatus.UNSET
    return status
