# tests/services/_helpers.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fulfillops.models.order import Order
from fulfillops.services.order_progression_service import OrderProgressionService


async def seed_order(
    session: AsyncSession,
    *lifecycles: str,
    name: str = "UT-ORDER",
    seller_id: Optional[int] = None,
) -> Order:
    """建一个订单，每个 lifecycle 对应一行（默认一行 new）。"""
    lines: List[Dict[str, Any]] = [
        {"product_name": f"UT-ITEM-{i}", "qty": 1, "lifecycle_status": lc}
        for i, lc in enumerate(lifecycles or ("new",), start=1)
    ]
    order = await OrderProgressionService(session).create_order(name=name, lines=lines, seller_id=seller_id)
    await session.commit()
    return order
