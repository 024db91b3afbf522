from fulfillops.models.enums import ViewerRole
from fulfillops.services.fulfillment_progress_single import resolve_single_item
from fulfillops.services.fulfillment_status_label import current_status_label, next_actions


def _label(lifecycle, mfg=None, pkg=None):
    return current_status_label(resolve_single_item(lifecycle, mfg, pkg), mfg, pkg)


def _actions(lifecycle, mfg=None, pkg=None, role=ViewerRole.SELLER):
    return [a.action for a in next_actions(lifecycle, mfg, pkg, role)]


def test_labels_follow_progress():
    assert _label("new") == "Manufacturing in Progress"
    assert _label("manufacture") == "Pending MFG QC"
    assert _label("mfg_qc", "pending") == "MFG QC Pending"
    assert _label("mfg_qc", "approved") == "Packing in Progress"
    assert _label("pkg_qc", "approved", "pending") == "PKG QC Pending"
    assert _label("pkg_qc", "approved", "approved") == "Shipping in Progress"
    assert _label("delivered", "approved", "approved") == "Completed"


def test_rejection_label_wins():
    assert _label("mfg_qc", "rejected") == "MFG QC Rejected"
    assert _label("pkg_qc", "approved", "rejected") == "PKG QC Rejected"


def test_shipped_line_with_late_mfg_rejection_reads_completed():
    assert _label("shipped", "rejected", "approved") == "Completed"
    assert _label("shipped", "approved", "rejected") == "PKG QC Rejected"


def test_seller_actions_by_stage():
    assert _actions("new") == ["finalize_manufacturing"]
    assert _actions("manufacture") == ["submit_mfg_qc"]
    assert _actions("mfg_qc", "rejected") == ["resubmit_mfg_qc"]
    assert _actions("mfg_qc", "approved") == ["start_packaging"]
    assert _actions("packaging", "approved") == ["submit_pkg_qc"]
    assert _actions("pkg_qc", "approved", "approved") == ["create_shipping_order"]


def test_waiting_action_is_disabled():
    (action,) = next_actions("mfg_qc", "pending", None, ViewerRole.SELLER)
    assert action.action == "waiting_mfg_approval"
    assert action.disabled is True


def test_admin_sees_review_actions_only_when_awaiting():
    assert _actions("mfg_qc", "pending", role=ViewerRole.ADMIN) == ["approve_mfg_qc", "reject_mfg_qc"]
    assert _actions("pkg_qc", "approved", "in_progress", role=ViewerRole.ADMIN) == [
        "approve_pkg_qc",
        "reject_pkg_qc",
    ]
    assert _actions("mfg_qc", "rejected", role=ViewerRole.ADMIN) == []


def test_no_actions_once_shipping():
    for stage in ("shipping", "shipped", "delivered"):
        assert _actions(stage, "approved", "approved") == []
        assert _actions(stage, "approved", "pending", role=ViewerRole.ADMIN) == []
