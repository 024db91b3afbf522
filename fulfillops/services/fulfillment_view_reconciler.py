# fulfillops/services/fulfillment_view_reconciler.py
from __future__ import annotations

from typing import Any, Optional

from fulfillops.models.enums import ProgressView


def _parse_view(raw: Any) -> Optional[ProgressView]:
    if raw is None or isinstance(raw, ProgressView):
        return raw
    key = str(raw).strip().lower().replace("-", "_")
    try:
        return ProgressView(key)
    except ValueError:
        return None


def reconcile_view(line_count: int, requested: Any = None) -> ProgressView:
    """
    合并视图 / 逐行视图的选择（纯展示决策，不改数据）：

    - 0 或 1 行：永远 combined；
    - 多行：默认 item_wise，查看者可切到 combined（无法识别的请求值按默认处理）。
    """
    if line_count <= 1:
        return ProgressView.COMBINED
    return _parse_view(requested) or ProgressView.ITEM_WISE
