# fulfillops/services/fulfillment_progress_table.py
from __future__ import annotations

from typing import Dict

from fulfillops.models.enums import LifecycleStage, StageState
from fulfillops.services.fulfillment_progress_types import ProgressVector

C = StageState.COMPLETED
I = StageState.IN_PROGRESS
P = StageState.PENDING

# 表驱动：lifecycle → 基础进度（单行 / 聚合共用同一张表）
#                                manufacturing  mfg_qc  packaging  pkg_qc  shipped
BASE_PROGRESS: Dict[LifecycleStage, ProgressVector] = {
    LifecycleStage.NEW: ProgressVector(I, P, P, P, P),
    LifecycleStage.MANUFACTURE: ProgressVector(C, P, P, P, P),
    LifecycleStage.MFG_QC: ProgressVector(C, I, P, P, P),
    LifecycleStage.PACKAGING: ProgressVector(C, C, I, P, P),
    LifecycleStage.PKG_QC: ProgressVector(C, C, C, I, P),
    LifecycleStage.SHIPPING: ProgressVector(C, C, C, C, I),
    LifecycleStage.SHIPPED: ProgressVector(C, C, C, C, C),
    LifecycleStage.DELIVERED: ProgressVector(C, C, C, C, C),
}


def ensure_complete(table: Dict[LifecycleStage, ProgressVector]) -> None:
    # 导入期校验，-O 下同样生效
    missing = set(LifecycleStage) - set(table)
    if missing:
        raise RuntimeError(f"BASE_PROGRESS missing lifecycle stages: {sorted(missing)}")


ensure_complete(BASE_PROGRESS)


def base_vector_for(stage: LifecycleStage) -> ProgressVector:
    # ProgressVector 为不可变值，直接返回表内实例即可
    return BASE_PROGRESS[stage]
