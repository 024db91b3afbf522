# tests/_problem.py
from __future__ import annotations

from typing import Any, Dict


def assert_problem(resp, status_code: int, error_code: str) -> Dict[str, Any]:
    """断言错误响应为 Problem 形状，并返回 body 供后续断言。"""
    assert resp.status_code == status_code, resp.text
    body = resp.json()
    assert body["error_code"] == error_code, body
    assert body["http_status"] == status_code
    assert isinstance(body.get("message"), str) and body["message"]
    assert body.get("trace_id", "").startswith("t_")
    return body
