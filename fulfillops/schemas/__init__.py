# fulfillops/schemas/__init__.py
from fulfillops.schemas.order import OrderCreate, OrderLineIn, OrderLineOut, OrderOut, LifecycleAdvanceIn
from fulfillops.schemas.qc import QcRejectIn, QcSubmissionOut, QcSubmitIn

__all__ = [
    "OrderCreate",
    "OrderLineIn",
    "OrderLineOut",
    "OrderOut",
    "LifecycleAdvanceIn",
    "QcRejectIn",
    "QcSubmissionOut",
    "QcSubmitIn",
]
