from fulfillops.models.enums import QcStatus, QcType
from fulfillops.services.fulfillment_progress_single import resolve_line
from fulfillops.services.fulfillment_progress_types import LineSnapshot, QcSubmissionSnapshot, RejectionInfo
from fulfillops.services.qc_rejection_history import merge_rejections, track_line_rejections, track_rejections


def _sub(i, status, note=None):
    return QcSubmissionSnapshot(id=i, status=QcStatus(status), note=note)


def test_only_rejected_submissions_are_counted():
    line = LineSnapshot.from_mapping(
        {
            "orderLineId": 1,
            "lifecycleStatus": "shipped",
            "mfgQcStatus": "approved",
            "pkgQcStatus": "rejected",
            "pkgQcSubmissions": [
                {"id": 1, "status": "rejected", "note": "torn box"},
                {"id": 2, "status": "rejected", "note": "wrong label"},
                {"id": 3, "status": "pending"},
            ],
        }
    )
    info = track_line_rejections(line)
    assert info.pkg_rejection_count == 2
    assert info.mfg_rejection_count == 0
    assert info.rejection_notes == ("torn box", "wrong label")
    assert resolve_line(line).shipped == "pending"


def test_notes_are_stripped_and_blank_notes_skipped():
    info = track_rejections(
        [_sub(1, "rejected", "  scratches  "), _sub(2, "rejected", "   "), _sub(3, "rejected")],
        [_sub(4, "rejected", "dent")],
    )
    assert info.mfg_rejection_count == 3
    assert info.rejection_notes == ("scratches", "dent")
    assert info.for_type(QcType.MFG_QC) == ("scratches",)
    assert info.count_for(QcType.PKG_QC) == 1


def test_count_grows_by_one_per_rejected_submission():
    history = [_sub(1, "rejected", "a"), _sub(2, "approved"), _sub(3, "rejected", "b"), _sub(4, "pending")]
    counts = [track_rejections(history[:n]).mfg_rejection_count for n in range(len(history) + 1)]
    assert counts == [0, 1, 1, 2, 2]
    assert [b - a for a, b in zip(counts, counts[1:])] == [1, 0, 1, 0]


def test_pkg_history_counts_only_its_own_rejections():
    pkg = [_sub(5, "rejected", "x"), _sub(6, "rejected", "y")]
    counts = [track_rejections([_sub(1, "rejected")], pkg[:n]).pkg_rejection_count for n in range(len(pkg) + 1)]
    assert counts == [0, 1, 2]


def test_merge_sums_counts_in_line_order():
    a = RejectionInfo(1, 0, ("x",), ("x",), ())
    b = RejectionInfo(0, 2, ("y", "z"), (), ("y", "z"))
    merged = merge_rejections([a, b])
    assert merged.to_dict() == {
        "mfgRejectionCount": 1,
        "pkgRejectionCount": 2,
        "rejectionNotes": ["x", "y", "z"],
    }


def test_empty_history():
    assert track_rejections() == RejectionInfo()
