# fulfillops/db/session.py
# 统一的异步会话工厂 + FastAPI 依赖（get_session）
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from fulfillops.core.config import get_settings

log = logging.getLogger("fulfillops.db")


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """
    - sqlite 内存库：StaticPool，保证所有会话看到同一个库
    - 其它：常规连接池 + pre_ping
    """
    kwargs: Dict[str, Any] = {"echo": echo, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_async_engine(url, **kwargs)


_settings = get_settings()
ASYNC_URL = _settings.DATABASE_URL

log.info("Using DSN (async): %s", ASYNC_URL)

async_engine: AsyncEngine = build_engine(ASYNC_URL, echo=_settings.SQL_ECHO)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---- FastAPI 依赖 ----
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


async def create_all(engine: AsyncEngine | None = None) -> None:
    """未接 Alembic 的环境（本地 / 测试）直接按模型建表。"""
    from fulfillops.db.base import Base, init_models

    init_models()
    async with (engine or async_engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ---- 关闭引擎（测试/生命周期） ----
async def close_engines() -> None:
    await async_engine.dispose()
