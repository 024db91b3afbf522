# fulfillops/api/problem.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, NoReturn, Optional, Sequence, Tuple, Type, TypedDict

from fastapi import HTTPException

from fulfillops.services.fulfillment_errors import (
    BadInput,
    LifecycleTransitionError,
    OrderLineNotFound,
    OrderNotFound,
    QcNotFound,
    QcStateConflict,
    RoleForbidden,
)


class ProblemDetail(TypedDict, total=False):
    # 必填
    type: str  # validation|state|role
    # 可选：用于行内定位
    path: str  # e.g. images / note / target
    reason: str


class NextAction(TypedDict, total=False):
    action: str
    label: str


@dataclass(frozen=True)
class Problem:
    error_code: str
    message: str
    http_status: int
    context: Optional[Dict[str, Any]] = None
    details: Optional[List[ProblemDetail]] = None
    next_actions: Optional[List[NextAction]] = None
    trace_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "error_code": self.error_code,
            "message": self.message,
            "http_status": int(self.http_status),
        }
        if self.context:
            out["context"] = self.context
        if self.details:
            out["details"] = self.details
        if self.next_actions:
            out["next_actions"] = self.next_actions
        if self.trace_id:
            out["trace_id"] = self.trace_id
        return out


def make_problem(
    *,
    status_code: int,
    error_code: str,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    details: Optional[Sequence[ProblemDetail]] = None,
    next_actions: Optional[Sequence[NextAction]] = None,
    trace_id: Optional[str] = None,
) -> Dict[str, Any]:
    p = Problem(
        error_code=str(error_code),
        message=str(message),
        http_status=int(status_code),
        context=context,
        details=list(details) if details else None,
        next_actions=list(next_actions) if next_actions else None,
        trace_id=trace_id,
    )
    return p.to_dict()


def raise_problem(
    *,
    status_code: int,
    error_code: str,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    details: Optional[Sequence[ProblemDetail]] = None,
    next_actions: Optional[Sequence[NextAction]] = None,
    trace_id: Optional[str] = None,
) -> NoReturn:
    raise HTTPException(
        status_code=int(status_code),
        detail=make_problem(
            status_code=int(status_code),
            error_code=error_code,
            message=message,
            context=context,
            details=details,
            next_actions=next_actions,
            trace_id=trace_id,
        ),
    )


# 服务层异常 → (HTTP 状态码, error_code)
_SERVICE_ERRORS: Tuple[Tuple[Type[Exception], int, str], ...] = (
    (OrderNotFound, 404, "order_not_found"),
    (OrderLineNotFound, 404, "order_line_not_found"),
    (QcNotFound, 404, "qc_not_found"),
    (QcStateConflict, 409, "qc_state_conflict"),
    (LifecycleTransitionError, 409, "lifecycle_transition_invalid"),
    (RoleForbidden, 403, "role_forbidden"),
)

SERVICE_ERRORS: Tuple[Type[Exception], ...] = tuple(t for t, _, _ in _SERVICE_ERRORS) + (BadInput,)


def raise_service_problem(exc: Exception, *, context: Optional[Dict[str, Any]] = None) -> NoReturn:
    """把服务层异常翻译成 Problem；未登记的异常原样抛出，交给全局 500 处理。"""
    if isinstance(exc, BadInput):
        raise_problem(
            status_code=422,
            error_code="request_validation_error",
            message="请求参数不合法",
            context=context,
            details=exc.details,
        )
    for exc_type, status_code, error_code in _SERVICE_ERRORS:
        if isinstance(exc, exc_type):
            details: List[ProblemDetail] = [{"type": "role" if status_code == 403 else "state", "reason": str(exc)}]
            raise_problem(
                status_code=status_code,
                error_code=error_code,
                message=str(exc),
                context=context,
                details=details,
            )
    raise exc
