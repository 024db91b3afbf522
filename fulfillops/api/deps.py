# fulfillops/api/deps.py
from __future__ import annotations

from fastapi import Header

from fulfillops.api.problem import raise_problem
from fulfillops.models.enums import ViewerRole


async def get_viewer_role(
    x_viewer_role: str | None = Header(default=None, alias="X-Viewer-Role"),
) -> ViewerRole:
    """
    查看者角色：
    - 不带头 → seller
    - seller / admin（大小写不敏感）
    - 其它值 → 422
    """
    raw = (x_viewer_role or "").strip().lower()
    if not raw:
        return ViewerRole.SELLER
    try:
        return ViewerRole(raw)
    except ValueError:
        raise_problem(
            status_code=422,
            error_code="request_validation_error",
            message="请求参数不合法",
            details=[{"type": "validation", "path": "X-Viewer-Role", "reason": f"unknown viewer role {raw!r}"}],
        )
