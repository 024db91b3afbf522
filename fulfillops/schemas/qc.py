# fulfillops/schemas/qc.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fulfillops.models.enums import QcType


class _Base(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class QcSubmitIn(_Base):
    """卖家提交质检证据；note 是卖家备注，不是驳回原因。"""

    type: QcType
    images: list[str] = Field(default_factory=list)
    note: Annotated[str | None, Field(max_length=2000)] = None

    @field_validator("images")
    @classmethod
    def _trim_images(cls, v: list[str]) -> list[str]:
        return [s.strip() for s in v if s and s.strip()]


class QcRejectIn(_Base):
    # 长度上限在服务层按配置校验（FULFILL_REJECTION_NOTE_MAX_LEN）
    note: str | None = None


class QcSubmissionOut(_Base):
    id: int
    order_line_id: int
    type: str
    status: str
    note: str | None = None
    remark: str | None = None
    images: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    reviewed_at: datetime | None = None
