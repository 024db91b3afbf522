# fulfillops/http_problem_handlers.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fulfillops.api.problem import make_problem

logger = logging.getLogger("fulfillops")


def _new_trace_id() -> str:
    return f"t_{uuid.uuid4().hex[:12]}"


def _ctx(req: Request) -> Dict[str, Any]:
    return {"path": getattr(req.url, "path", ""), "method": req.method}


def _problem_from_http_exc(req: Request, exc: StarletteHTTPException) -> Dict[str, Any]:
    """
    统一将 HTTPException.detail 翻译为 Problem 形状：
    - {"error_code","message",...}（已是 Problem）→ 补齐 http_status / trace_id / context
    - str / 其它 → 兜底为 state
    """
    status_code = int(exc.status_code)
    trace_id = _new_trace_id()
    ctx = _ctx(req)

    d = exc.detail

    if isinstance(d, dict) and "error_code" in d and "message" in d:
        out = dict(d)
        out.setdefault("http_status", status_code)
        out.setdefault("trace_id", trace_id)
        if isinstance(out.get("context"), dict):
            merged = dict(ctx)
            merged.update(out["context"])
            out["context"] = merged
        else:
            out["context"] = ctx
        return out

    msg = str(d) if d is not None else "请求被拒绝"
    return make_problem(
        status_code=status_code,
        error_code="not_found" if status_code == 404 else "http_error",
        message=msg,
        context=ctx,
        details=[{"type": "state", "reason": msg}],
        trace_id=trace_id,
    )


def _validation_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    details: List[Dict[str, Any]] = []
    for e in exc.errors():
        if not isinstance(e, dict):
            continue
        loc = [str(p) for p in (e.get("loc") or ()) if p != "body"]
        details.append(
            {
                "type": "validation",
                "path": ".".join(loc) or "body",
                "reason": str(e.get("msg") or e.get("type") or "invalid"),
            }
        )
    return details


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def _unhandled_exc(req: Request, exc: Exception):
        trace_id = _new_trace_id()
        logger.exception("UNHANDLED_EXC[%s]: %s", trace_id, exc)
        content = make_problem(
            status_code=500,
            error_code="internal_error",
            message="系统异常，请稍后重试",
            context=_ctx(req),
            trace_id=trace_id,
        )
        return JSONResponse(status_code=500, content=content)

    @app.exception_handler(RequestValidationError)
    async def _validation_exc(req: Request, exc: RequestValidationError):
        content = make_problem(
            status_code=422,
            error_code="request_validation_error",
            message="请求参数不合法",
            context=_ctx(req),
            details=_validation_details(exc),
            trace_id=_new_trace_id(),
        )
        return JSONResponse(status_code=422, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc(req: Request, exc: StarletteHTTPException):
        content = _problem_from_http_exc(req, exc)
        if int(exc.status_code) >= 500:
            logger.error("HTTP_%s[%s]: %s", exc.status_code, content.get("trace_id"), content.get("message"))
        return JSONResponse(status_code=int(exc.status_code), content=content)


__all__ = ["register_exception_handlers"]
