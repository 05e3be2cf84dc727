from qr_attendance.attendance.ledger import (
    build_class_groups,
    classify_rows,
    fold_sessions,
    sort_attendees,
)
from qr_attendance.attendance.model import AttendeeRow, MetaRow, classify_row
from qr_attendance.core.constants import META_FLAG, UNGROUPED_CLASS


def meta(record_id, class_name, session_name, ts, teacher_id="t-1"):
    return [record_id, teacher_id, class_name, session_name, META_FLAG, META_FLAG, ts]


def mark(record_id, student_id, name, ts, class_name="", session_name="", teacher_id="t-1"):
    return [record_id, teacher_id, class_name, session_name, student_id, name, ts]


def test_classify_row_variants():
    assert isinstance(classify_row(meta("r1", "CS", "W1", "2026-01-05T09:00:00.000Z")), MetaRow)
    assert isinstance(classify_row(mark("r1", "007", "Bond", "x")), AttendeeRow)
    assert classify_row(["", "t-1", "CS", "W1", "S1", "A", "x"]) is None
    assert classify_row(["r1", "", "CS", "W1", "S1", "A", "x"]) is None
    assert classify_row(["r1", "t-1", "CS", "W1", "", "A", "x"]) is None
    assert classify_row([]) is None


def test_classify_row_pads_short_rows():
    row = classify_row(["r1", "t-1", "", "", "S1"])

    assert isinstance(row, AttendeeRow)
    assert row.student_name == ""
    assert row.timestamp == ""


def test_grouping_by_class_with_sessions_newest_first():
    rows = classify_rows(
        [
            meta("r1", "Math", "Week 1", "2026-01-01T09:00:00.000Z"),
            meta("r2", "Math", "Week 2", "2026-01-08T09:00:00.000Z"),
            meta("r3", "art", "Intro", "2026-01-02T09:00:00.000Z"),
            mark("r1", "S1", "Alice", "2026-01-01T09:05:00.000Z", "Math", "Week 1"),
            mark("r2", "S2", "Bob", "2026-01-08T09:05:00.000Z", "Math", "Week 2"),
        ]
    )

    groups = build_class_groups(rows)

    assert [g.class_name for g in groups] == ["art", "Math"]
    assert [s.record_id for s in groups[1].sessions] == ["r2", "r1"]
    assert [a.student_id for a in groups[1].sessions[1].attendees] == ["S1"]
    assert groups[0].sessions[0].attendees == []


def test_session_without_meta_row_has_no_created_at_and_sorts_last():
    rows = classify_rows(
        [
            mark("orphan", "S1", "Alice", "2026-01-03T09:00:00.000Z", "Math", "Lost"),
            meta("r1", "Math", "Week 1", "2026-01-01T09:00:00.000Z"),
        ]
    )

    (group,) = build_class_groups(rows)

    assert [s.record_id for s in group.sessions] == ["r1", "orphan"]
    assert group.sessions[1].created_at is None
    assert group.sessions[1].session_name == "Lost"


def test_empty_class_label_is_ungrouped():
    rows = classify_rows([meta("r1", "", "Week 1", "2026-01-01T09:00:00.000Z")])

    assert build_class_groups(rows)[0].class_name == UNGROUPED_CLASS


def test_include_filter_limits_rows():
    rows = classify_rows(
        [
            meta("r1", "Math", "W1", "2026-01-01T09:00:00.000Z", teacher_id="t-1"),
            meta("r2", "Math", "W2", "2026-01-02T09:00:00.000Z", teacher_id="t-2"),
        ]
    )

    groups = build_class_groups(rows, include=lambda r: r.teacher_id == "t-2")

    assert [s.record_id for g in groups for s in g.sessions] == ["r2"]


def test_fold_keeps_first_appearance_order_and_later_labels():
    rows = classify_rows(
        [
            meta("r2", "Old", "W", "2026-01-02T09:00:00.000Z"),
            meta("r1", "Math", "W1", "2026-01-01T09:00:00.000Z"),
            mark("r2", "S1", "A", "2026-01-02T09:01:00.000Z", "New", ""),
        ]
    )

    sessions = fold_sessions(rows)

    assert [s.record_id for s in sessions] == ["r2", "r1"]
    assert sessions[0].class_name == "New"
    assert sessions[0].session_name == "W"


def test_sort_attendees_puts_unparseable_first():
    rows = classify_rows(
        [
            mark("r1", "S2", "B", "2026-01-01T09:10:00.000Z"),
            mark("r1", "S1", "A", "2026-01-01T09:05:00.000Z"),
            mark("r1", "S3", "C", "garbage"),
        ]
    )

    attendees = sort_attendees(fold_sessions(rows)[0].attendees)

    assert [a.student_id for a in attendees] == ["S3", "S1", "S2"]
