# fulfillops/services/fulfillment_progress_types.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple

from fulfillops.models.enums import LifecycleStage, QcStatus, QcType, StageState
from fulfillops.services.fulfillment_status_normalizer import normalize_lifecycle_status, normalize_qc_status

StageKey = Literal["manufacturing", "mfg_qc", "packaging", "pkg_qc", "shipped"]

STAGE_KEYS: Tuple[StageKey, ...] = ("manufacturing", "mfg_qc", "packaging", "pkg_qc", "shipped")

# 对外 JSON 键名（前端沿用 camelCase）
_JSON_KEYS: Dict[StageKey, str] = {
    "manufacturing": "manufacturing",
    "mfg_qc": "mfgQc",
    "packaging": "packaging",
    "pkg_qc": "pkgQc",
    "shipped": "shipped",
}


@dataclass(frozen=True)
class ProgressVector:
    """
    五段履约进度（派生值，不落库）：

    - manufacturing : 生产
    - mfg_qc        : 生产质检
    - packaging     : 包装
    - pkg_qc        : 包装质检
    - shipped       : 发运

    每段取值 completed / in-progress / pending。
    正常流转下从左到右单调；仅在驳回门控压住后续阶段时允许“后段 pending、前段未完成”的短暂例外。
    """

    manufacturing: StageState = StageState.PENDING
    mfg_qc: StageState = StageState.PENDING
    packaging: StageState = StageState.PENDING
    pkg_qc: StageState = StageState.PENDING
    shipped: StageState = StageState.PENDING

    @classmethod
    def all_pending(cls) -> "ProgressVector":
        return cls()

    def with_stage(self, key: StageKey, state: StageState) -> "ProgressVector":
        return replace(self, **{key: state})

    def get(self, key: StageKey) -> StageState:
        return getattr(self, key)

    def items(self) -> List[Tuple[StageKey, StageState]]:
        return [(k, self.get(k)) for k in STAGE_KEYS]

    def to_dict(self) -> Dict[str, str]:
        return {_JSON_KEYS[k]: str(v) for k, v in self.items()}


@dataclass(frozen=True)
class QcSubmissionSnapshot:
    """一次 QC 提交的只读快照（append-only 历史中的一条）。"""

    id: int
    status: QcStatus
    note: Optional[str] = None
    images: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RejectionInfo:
    """
    驳回历史汇总：
    - mfg_rejection_count / pkg_rejection_count：status=rejected 的提交数
    - rejection_notes：被驳回提交的原因（先 mfg 后 pkg，各自按提交先后）
    """

    mfg_rejection_count: int = 0
    pkg_rejection_count: int = 0
    rejection_notes: Tuple[str, ...] = ()
    mfg_notes: Tuple[str, ...] = ()
    pkg_notes: Tuple[str, ...] = ()

    def for_type(self, qc_type: QcType) -> Tuple[str, ...]:
        return self.mfg_notes if qc_type is QcType.MFG_QC else self.pkg_notes

    def count_for(self, qc_type: QcType) -> int:
        return self.mfg_rejection_count if qc_type is QcType.MFG_QC else self.pkg_rejection_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mfgRejectionCount": self.mfg_rejection_count,
            "pkgRejectionCount": self.pkg_rejection_count,
            "rejectionNotes": list(self.rejection_notes),
        }


def _as_int(value: Any) -> int:
    # 外部 id 可能是 "L-1" 这类非数字串，统一降级为 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class LineSnapshot:
    """
    核心算法的单行输入（数据层给出的稳定形状，已规范化）。
    """

    order_line_id: int
    lifecycle: LifecycleStage
    mfg_qc_status: QcStatus = QcStatus.UNSET
    pkg_qc_status: QcStatus = QcStatus.UNSET
    mfg_submissions: Tuple[QcSubmissionSnapshot, ...] = field(default_factory=tuple)
    pkg_submissions: Tuple[QcSubmissionSnapshot, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LineSnapshot":
        """
        兼容两种键名：
        - camelCase：orderLineId / lifecycleStatus / mfgQcStatus / pkgQcStatus / mfgQcSubmissions / pkgQcSubmissions
        - 旧接口 snake_case：order_line_id / status / mfg_qc_status / packaging_qc_status / mfg_qc_data / packaging_qc_data
        缺失字段一律降级为默认值，不抛异常。
        """
        def _pick(*keys: str) -> Any:
            for k in keys:
                if k in data and data[k] is not None:
                    return data[k]
            return None

        def _subs(raw: Optional[Sequence[Mapping[str, Any]]]) -> Tuple[QcSubmissionSnapshot, ...]:
            out: List[QcSubmissionSnapshot] = []
            for s in raw or ():
                images = s.get("images") or ()
                out.append(
                    QcSubmissionSnapshot(
                        id=_as_int(s.get("id")),
                        status=normalize_qc_status(s.get("status") or s.get("qc_status")),
                        note=s.get("note"),
                        images=tuple(
                            str(i.get("img_url") if isinstance(i, Mapping) else i) for i in images
                        ),
                    )
                )
            return tuple(out)

        return cls(
            order_line_id=_as_int(_pick("orderLineId", "order_line_id")),
            lifecycle=normalize_lifecycle_status(_pick("lifecycleStatus", "lifecycle_status", "status")),
            mfg_qc_status=normalize_qc_status(_pick("mfgQcStatus", "mfg_qc_status")),
            pkg_qc_status=normalize_qc_status(
                _pick("pkgQcStatus", "pkg_qc_status", "packaging_qc_status")
            ),
            mfg_submissions=_subs(_pick("mfgQcSubmissions", "mfg_qc_data")),
            pkg_submissions=_subs(_pick("pkgQcSubmissions", "packaging_qc_data")),
        )
