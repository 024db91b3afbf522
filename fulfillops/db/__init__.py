# fulfillops/db/__init__.py
# 包级只导出 Base；引擎 / 会话请显式 from fulfillops.db.session import ...
from __future__ import annotations

from fulfillops.db.base import Base, init_models

__all__ = ["Base", "init_models"]
