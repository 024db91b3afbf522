# fulfillops/router_mount.py
from __future__ import annotations

from fastapi import FastAPI


def mount_routers(app: FastAPI) -> None:
    # ---------------------------------------------------------------------------
    # routers imports
    # ---------------------------------------------------------------------------
    from fulfillops.api.routers.fulfillment_progress import router as fulfillment_progress_router
    from fulfillops.api.routers.health import router as health_router
    from fulfillops.api.routers.orders import router as orders_router
    from fulfillops.api.routers.qc_review import router as qc_review_router
    from fulfillops.obs.metrics import router as metrics_router

    # ---------------------------------------------------------------------------
    # include
    # ---------------------------------------------------------------------------
    # 订单 / 推进
    app.include_router(orders_router)
    # 履约进度（整单 / 逐行）
    app.include_router(fulfillment_progress_router)
    # QC 提交 / 审核 / 看板
    app.include_router(qc_review_router)

    # 运维
    app.include_router(health_router)
    app.include_router(metrics_router)
