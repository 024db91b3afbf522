# fulfillops/models/enums.py
from __future__ import annotations

from enum import StrEnum


class LifecycleStage(StrEnum):
    """
    订单行（order_lines.lifecycle_status）的粗粒度履约阶段，按声明顺序单调推进：

    - NEW          新订单，生产中
    - MANUFACTURE  生产已完成，等待提交生产质检
    - MFG_QC       生产质检（mfg_qc）进行中
    - PACKAGING    包装中
    - PKG_QC       包装质检（pkg_qc）进行中
    - SHIPPING     已建发货单，运输中
    - SHIPPED      已发运
    - DELIVERED    已送达

    注意：
    - 顺序即语义（rank），聚合视图按最小 rank 取“最慢的一行”。
    """

    NEW = "new"
    MANUFACTURE = "manufacture"
    MFG_QC = "mfg_qc"
    PACKAGING = "packaging"
    PKG_QC = "pkg_qc"
    SHIPPING = "shipping"
    SHIPPED = "shipped"
    DELIVERED = "delivered"

    @property
    def rank(self) -> int:
        return _LIFECYCLE_ORDER.index(self)


_LIFECYCLE_ORDER: tuple[LifecycleStage, ...] = tuple(LifecycleStage)


class QcType(StrEnum):
    MFG_QC = "mfg_qc"
    PKG_QC = "pkg_qc"


class QcStatus(StrEnum):
    """
    QC 子状态（订单行上的 mfg_qc_status / pkg_qc_status）：

    - UNSET        尚未提交过质检
    - PENDING      已提交，等待管理员审核
    - IN_PROGRESS  审核中（外部系统偶尔会给这个值，语义同 PENDING）
    - APPROVED     通过（外部的 completed 视为同义）
    - REJECTED     驳回（需重新提交）
    """

    UNSET = "unset"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def awaiting_review(self) -> bool:
        return self in (QcStatus.PENDING, QcStatus.IN_PROGRESS)


class QcSubmissionStatus(StrEnum):
    """qc_submissions.status：pending 只会迁移一次到 approved / rejected。"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StageState(StrEnum):
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    PENDING = "pending"


class ProgressView(StrEnum):
    COMBINED = "combined"
    ITEM_WISE = "item_wise"


class ViewerRole(StrEnum):
    SELLER = "seller"
    ADMIN = "admin"
