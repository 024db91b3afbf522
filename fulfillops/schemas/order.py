# fulfillops/schemas/order.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ===== 通用基类：允许 ORM、忽略多余字段 =====
class _Base(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


# ===== 行项目 入参 =====
class OrderLineIn(_Base):
    """
    订单行：lifecycle / QC 子状态可选，缺省为 new / unset；
    入库前会做一次规范化（大小写、连字符、completed → approved）。
    """

    product_name: Annotated[str | None, Field(max_length=255)] = None
    qty: Annotated[int, Field(ge=1, description="数量，必须>=1")] = 1
    lifecycle_status: str | None = None
    mfg_qc_status: str | None = None
    pkg_qc_status: str | None = None


# ===== 创建订单 入参 =====
class OrderCreate(_Base):
    name: Annotated[str, Field(min_length=1, max_length=64)]
    customer_name: Annotated[str | None, Field(max_length=128)] = None
    seller_id: Annotated[int | None, Field(ge=1)] = None
    lines: list[OrderLineIn]

    @field_validator("name")
    @classmethod
    def _trim_name(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("订单名不能为空")
        return s

    @field_validator("lines")
    @classmethod
    def _lines_non_empty(cls, v: list[OrderLineIn]):
        if not v:
            raise ValueError("订单行不能为空")
        return v


class LifecycleAdvanceIn(_Base):
    target: Annotated[str, Field(min_length=1, max_length=32, description="目标 lifecycle，例如 manufacture / packaging")]


# ===== 出参 =====
class OrderLineOut(_Base):
    id: int
    order_id: int
    product_name: str | None = None
    qty: int
    lifecycle_status: str
    mfg_qc_status: str
    pkg_qc_status: str


class OrderOut(_Base):
    id: int
    name: str
    customer_name: str | None = None
    seller_id: int | None = None
    created_at: datetime | None = None
    lines: list[OrderLineOut] = Field(default_factory=list)
