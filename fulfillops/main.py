# fulfillops/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fulfillops.core.config import AppSettings, get_settings
from fulfillops.core.logging import setup_logging
from fulfillops.db.session import close_engines, create_all
from fulfillops.http_problem_handlers import register_exception_handlers
from fulfillops.obs.metrics import PrometheusMiddleware
from fulfillops.router_mount import mount_routers

settings = get_settings()
setup_logging(settings.LOG_LEVEL, json=settings.JSON_LOG)
logger = logging.getLogger("fulfillops")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # 本地 / 测试环境未跑 Alembic 时直接建表
    if settings.AUTO_CREATE_TABLES:
        await create_all()
        logger.info("tables ensured via create_all (env=%s)", settings.ENV)
    yield
    await close_engines()


def create_app(cfg: AppSettings = settings) -> FastAPI:
    # prod 环境不暴露交互式文档
    docs_enabled = not cfg.is_prod
    return FastAPI(
        title="FulfillOps",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )


app = create_app()

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
        "http://127.0.0.1:8000",
        "http://localhost:8000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(PrometheusMiddleware)

register_exception_handlers(app)
mount_routers(app)


@app.get("/")
async def root():
    return {"name": "FulfillOps", "version": "0.1.0"}
