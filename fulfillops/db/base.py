# fulfillops/db/base.py
from __future__ import annotations

import importlib
import logging
from typing import Iterable, List

from sqlalchemy.orm import DeclarativeBase, configure_mappers

log = logging.getLogger("fulfillops.models")


class Base(DeclarativeBase):
    """全局唯一 ORM Base"""

    pass


_INITIALIZED: bool = False  # 防重复初始化

MODEL_MODULES = (
    "fulfillops.models.order",
    "fulfillops.models.order_line",
    "fulfillops.models.qc_submission",
)


def init_models(*, extra_modules: Iterable[str] | None = None, force: bool = False) -> None:
    """
    集中导入模型 + 固化关系映射：
      1) 显式导入主线模型（保证字符串关系目标类已注册）
      2) 再导入调用方追加的模块
      3) 最后统一 configure_mappers()
    """
    global _INITIALIZED
    if _INITIALIZED and not force:
        log.debug("init_models() called again; already initialized, skipping.")
        return

    loaded: List[str] = []
    for mod in [*MODEL_MODULES, *(extra_modules or [])]:
        importlib.import_module(mod)
        loaded.append(mod)

    configure_mappers()
    _INITIALIZED = True
    log.debug("models initialized: %s", loaded)
