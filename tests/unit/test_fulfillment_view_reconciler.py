import pytest

from fulfillops.models.enums import ProgressView
from fulfillops.services.fulfillment_view_reconciler import reconcile_view


@pytest.mark.parametrize("count", [0, 1])
@pytest.mark.parametrize("requested", [None, "item_wise", "combined"])
def test_single_line_orders_are_always_combined(count, requested):
    assert reconcile_view(count, requested) is ProgressView.COMBINED


def test_multi_line_defaults_to_item_wise():
    assert reconcile_view(3) is ProgressView.ITEM_WISE


def test_multi_line_can_switch_to_combined():
    assert reconcile_view(2, "Combined") is ProgressView.COMBINED
    assert reconcile_view(2, ProgressView.COMBINED) is ProgressView.COMBINED


def test_item_wise_accepts_hyphen():
    assert reconcile_view(2, "item-wise") is ProgressView.ITEM_WISE


def test_unrecognized_request_falls_back_to_default():
    assert reconcile_view(2, "grid") is ProgressView.ITEM_WISE
