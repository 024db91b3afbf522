import pytest

from fulfillops.models.enums import LifecycleStage, StageState
from fulfillops.services.fulfillment_progress_single import resolve_line, resolve_single_item
from fulfillops.services.fulfillment_progress_table import BASE_PROGRESS, base_vector_for, ensure_complete
from fulfillops.services.fulfillment_progress_types import STAGE_KEYS, LineSnapshot

C = StageState.COMPLETED
I = StageState.IN_PROGRESS
P = StageState.PENDING


def _vec(v):
    return tuple(v.get(k) for k in STAGE_KEYS)


def test_base_table_covers_every_stage():
    assert set(BASE_PROGRESS) == set(LifecycleStage)
    ensure_complete(BASE_PROGRESS)


def test_incomplete_base_table_raises():
    partial = {k: v for k, v in BASE_PROGRESS.items() if k is not LifecycleStage.DELIVERED}
    with pytest.raises(RuntimeError, match="delivered"):
        ensure_complete(partial)


def test_mfg_qc_pending_holds_packaging():
    v = resolve_single_item("mfg_qc", "pending")
    assert _vec(v) == (C, I, P, P, P)
    assert v.to_dict() == {
        "manufacturing": "completed",
        "mfgQc": "in-progress",
        "packaging": "pending",
        "pkgQc": "pending",
        "shipped": "pending",
    }


def test_mfg_qc_approved_unblocks_packaging():
    v = resolve_single_item("mfg_qc", "approved")
    assert _vec(v) == (C, C, I, P, P)


def test_completed_alias_behaves_like_approved():
    assert resolve_single_item("MFG_QC", "Completed") == resolve_single_item("mfg_qc", "approved")


def test_mfg_rejected_keeps_table_value_and_forces_packaging_pending():
    v = resolve_single_item("mfg_qc", "rejected")
    assert v.mfg_qc is base_vector_for(LifecycleStage.MFG_QC).mfg_qc
    assert v.packaging is P


def test_mfg_rejected_forces_packaging_pending_even_when_lifecycle_is_ahead():
    v = resolve_single_item("packaging", "rejected")
    assert v.packaging is P


@pytest.mark.parametrize("lifecycle", ["pkg_qc", "shipping"])
def test_mfg_rejected_still_holds_packaging_before_shipment(lifecycle):
    assert resolve_single_item(lifecycle, "rejected").packaging is P


@pytest.mark.parametrize("lifecycle", ["shipped", "delivered"])
def test_mfg_rejection_no_longer_rewinds_shipped_line(lifecycle):
    v = resolve_single_item(lifecycle, "rejected", "approved")
    assert _vec(v) == (C, C, C, C, C)


@pytest.mark.parametrize("lifecycle", ["new", "mfg_qc", "packaging", "pkg_qc", "shipping", "shipped", "delivered"])
def test_pkg_rejected_always_holds_shipped(lifecycle):
    v = resolve_single_item(lifecycle, "approved", "rejected")
    assert v.shipped is P


def test_shipped_line_ignores_pending_overrides():
    v = resolve_single_item("shipped", "pending", "in_progress")
    assert _vec(v) == (C, C, C, C, C)


def test_pkg_qc_pending_after_mfg_approved():
    v = resolve_single_item("pkg_qc", "approved", "pending")
    assert _vec(v) == (C, C, C, I, P)


def test_pkg_approved_unblocks_shipped():
    v = resolve_single_item("pkg_qc", "approved", "approved")
    assert _vec(v) == (C, C, C, C, I)


def test_unset_statuses_return_base_vector():
    for stage in LifecycleStage:
        assert resolve_single_item(stage) == base_vector_for(stage)


def test_unknown_lifecycle_resolves_like_new():
    assert resolve_single_item("not-a-stage") == base_vector_for(LifecycleStage.NEW)


def test_resolver_is_pure():
    before = base_vector_for(LifecycleStage.MFG_QC)
    resolve_single_item("mfg_qc", "approved")
    assert base_vector_for(LifecycleStage.MFG_QC) == before


def test_resolve_line_uses_snapshot_statuses():
    snap = LineSnapshot.from_mapping({"orderLineId": 7, "lifecycleStatus": "mfg_qc", "mfgQcStatus": "approved"})
    assert resolve_line(snap) == resolve_single_item("mfg_qc", "approved")
