# tests/services/test_order_progression_service.py
from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from fulfillops.models.enums import LifecycleStage, QcType, ViewerRole
from fulfillops.services.fulfillment_errors import BadInput, LifecycleTransitionError, OrderLineNotFound, RoleForbidden
from fulfillops.services.order_progression_service import OrderProgressionService
from fulfillops.services.qc_review_service import QcReviewService
from tests.services._helpers import seed_order

pytestmark = pytest.mark.asyncio


async def test_create_order_normalizes_statuses(session: AsyncSession):
    order = await OrderProgressionService(session).create_order(
        name=" UT-1 ",
        lines=[
            {"product_name": "chair", "lifecycle_status": "Mfg-QC", "mfg_qc_status": "Completed"},
            {"product_name": "desk", "lifecycle_status": "???"},
        ],
    )
    assert order.id is not None
    assert order.name == "UT-1"
    a, b = order.lines
    assert a.lifecycle_status == "mfg_qc"
    assert a.mfg_qc_status == "approved"
    assert b.lifecycle_status == "new"
    assert b.pkg_qc_status == "unset"


async def test_create_order_requires_lines(session: AsyncSession):
    with pytest.raises(BadInput):
        await OrderProgressionService(session).create_order(name="EMPTY", lines=[])


async def test_advance_new_to_manufacture(session: AsyncSession):
    order = await seed_order(session)
    line = await OrderProgressionService(session).advance(
        order.lines[0].id, target="Manufacture", role=ViewerRole.SELLER
    )
    assert line.lifecycle_status == LifecycleStage.MANUFACTURE.value


async def test_advance_same_stage_is_noop(session: AsyncSession):
    order = await seed_order(session, "packaging")
    line = await OrderProgressionService(session).advance(order.lines[0].id, target="packaging", role=ViewerRole.SELLER)
    assert line.lifecycle_status == "packaging"


async def test_advance_cannot_skip_qc_gate(session: AsyncSession):
    order = await seed_order(session, "mfg_qc")
    with pytest.raises(LifecycleTransitionError):
        await OrderProgressionService(session).advance(order.lines[0].id, target="packaging", role=ViewerRole.SELLER)


async def test_advance_cannot_go_backwards(session: AsyncSession):
    order = await seed_order(session, "packaging")
    with pytest.raises(LifecycleTransitionError):
        await OrderProgressionService(session).advance(order.lines[0].id, target="new", role=ViewerRole.SELLER)


async def test_advance_after_mfg_approval(session: AsyncSession):
    order = await seed_order(session, "manufacture")
    line_id = order.lines[0].id
    qc = QcReviewService(session)
    sub = await qc.submit(line_id, qc_type=QcType.MFG_QC, images=["m1.jpg"])
    await qc.approve(sub.id, role=ViewerRole.ADMIN)

    line = await OrderProgressionService(session).advance(line_id, target="packaging", role=ViewerRole.SELLER)
    assert line.lifecycle_status == "packaging"


async def test_advance_rejects_unknown_target_and_admin_role(session: AsyncSession):
    order = await seed_order(session)
    svc = OrderProgressionService(session)
    with pytest.raises(BadInput):
        await svc.advance(order.lines[0].id, target="teleport", role=ViewerRole.SELLER)
    with pytest.raises(RoleForbidden):
        await svc.advance(order.lines[0].id, target="manufacture", role=ViewerRole.ADMIN)
    with pytest.raises(OrderLineNotFound):
        await svc.advance(999999, target="manufacture", role=ViewerRole.SELLER)
