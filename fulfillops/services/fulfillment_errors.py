# fulfillops/services/fulfillment_errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class OrderNotFound(Exception):
    pass


class OrderLineNotFound(Exception):
    pass


class QcNotFound(Exception):
    pass


class QcStateConflict(Exception):
    """QC 提交已处于另一个终态（例如对已驳回的提交执行通过）"""


class LifecycleTransitionError(Exception):
    """非法的履约阶段跃迁（倒退 / 跳过质检门）"""


class RoleForbidden(Exception):
    """当前查看者角色无权执行该操作"""


@dataclass
class BadInput(Exception):
    details: list[dict[str, Any]] = field(default_factory=list)

    def __str__(self) -> str:
        return "; ".join(str(d.get("reason")) for d in self.details) or "bad input"
