# fulfillops/services/fulfillment_progress.py
from __future__ import annotations

# Thin re-export

from fulfillops.services.fulfillment_progress_aggregate import min_lifecycle, resolve_order_progress
from fulfillops.services.fulfillment_progress_service_impl import (
    FulfillmentProgressService,
    LineProgress,
    OrderProgress,
)
from fulfillops.services.fulfillment_progress_single import resolve_line, resolve_single_item
from fulfillops.services.fulfillment_progress_types import (
    LineSnapshot,
    ProgressVector,
    QcSubmissionSnapshot,
    RejectionInfo,
)
from fulfillops.services.fulfillment_status_normalizer import (
    normalize_lifecycle_status,
    normalize_qc_status,
)
from fulfillops.services.fulfillment_view_reconciler import reconcile_view
from fulfillops.services.qc_rejection_history import track_line_rejections, track_rejections

__all__ = [
    "FulfillmentProgressService",
    "LineProgress",
    "OrderProgress",
    "LineSnapshot",
    "ProgressVector",
    "QcSubmissionSnapshot",
    "RejectionInfo",
    "min_lifecycle",
    "normalize_lifecycle_status",
    "normalize_qc_status",
    "reconcile_view",
    "resolve_line",
    "resolve_order_progress",
    "resolve_single_item",
    "track_line_rejections",
    "track_rejections",
]
