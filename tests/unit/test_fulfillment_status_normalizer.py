import pytest

from fulfillops.models.enums import LifecycleStage, QcStatus
from fulfillops.services.fulfillment_status_normalizer import (
    match_lifecycle_status,
    normalize_lifecycle_status,
    normalize_qc_status,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Mfg_QC", LifecycleStage.MFG_QC),
        ("PACKAGING ", LifecycleStage.PACKAGING),
        ("  shipped", LifecycleStage.SHIPPED),
        ("pkg-qc", LifecycleStage.PKG_QC),
        ("Pkg QC", LifecycleStage.PKG_QC),
        (LifecycleStage.DELIVERED, LifecycleStage.DELIVERED),
    ],
)
def test_lifecycle_case_and_separator_insensitive(raw, expected):
    assert normalize_lifecycle_status(raw) is expected


@pytest.mark.parametrize("raw", [None, "", "   ", "garbage", "shipped!!", 42])
def test_unknown_lifecycle_fails_open_to_new(raw):
    assert normalize_lifecycle_status(raw) is LifecycleStage.NEW


def test_match_lifecycle_is_strict():
    assert match_lifecycle_status("Packaging") is LifecycleStage.PACKAGING
    assert match_lifecycle_status("garbage") is None
    assert match_lifecycle_status("") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("pending", QcStatus.PENDING),
        ("In-Progress", QcStatus.IN_PROGRESS),
        ("APPROVED", QcStatus.APPROVED),
        ("completed", QcStatus.APPROVED),
        ("Rejected ", QcStatus.REJECTED),
        (None, QcStatus.UNSET),
        ("", QcStatus.UNSET),
        ("whatever", QcStatus.UNSET),
    ],
)
def test_qc_status_normalization(raw, expected):
    assert normalize_qc_status(raw) is expected


def test_lifecycle_rank_follows_declaration_order():
    ranks = [s.rank for s in LifecycleStage]
    assert ranks == sorted(ranks)
    assert LifecycleStage.NEW.rank == 0
    assert LifecycleStage.DELIVERED.rank == len(LifecycleStage) - 1
