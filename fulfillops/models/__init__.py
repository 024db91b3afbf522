# fulfillops/models/__init__.py
"""
统一导出 ORM 模型。
"""

from importlib import import_module


def _export(module_name: str, class_name: str) -> None:
    module = import_module(module_name)
    globals()[class_name] = getattr(module, class_name)


MODEL_SPECS = [
    ("fulfillops.models.order", "Order"),
    ("fulfillops.models.order_line", "OrderLine"),
    ("fulfillops.models.qc_submission", "QcSubmission"),
]

for _mod, _cls in MODEL_SPECS:
    _export(_mod, _cls)

__all__ = [cls for _, cls in MODEL_SPECS]
