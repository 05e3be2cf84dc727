import pytest

from qr_attendance.attendance.model import AttendeeMark
from qr_attendance.core.exceptions import InvalidQrError, StoreUnavailableError
from qr_attendance.scanner.client import AttendanceApiClient
from qr_attendance.scanner.session import ScanOutcome, ScanSession


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class RecordingMark:
    def __init__(self, fail_with=None):
        self.calls = []
        self.fail_with = fail_with

    def __call__(self, raw):
        self.calls.append(raw)
        if self.fail_with is not None:
            raise self.fail_with
        student_id, name = raw.split("|")
        return AttendeeMark(student_id=student_id, student_name=name, timestamp="2026-01-05T09:00:00.000Z")


@pytest.fixture
def clock():
    return FakeClock()


def test_inactive_session_ignores_scans(clock):
    mark = RecordingMark()
    session = ScanSession(mark, clock=clock)

    assert session.handle("S1|Alice").outcome == ScanOutcome.INACTIVE
    session.start()
    assert session.handle("").outcome == ScanOutcome.INACTIVE
    assert mark.calls == []


def test_debounce_then_processed_set(clock):
    mark = RecordingMark()
    session = ScanSession(mark, debounce_seconds=1.0, clock=clock)
    session.start()

    first = session.handle("S1|Alice")
    clock.now = 0.5
    again = session.handle("S1|Alice")
    clock.now = 5.0
    later = session.handle("S1|Alice")

    assert [first.outcome, again.outcome, later.outcome] == [
        ScanOutcome.MARKED,
        ScanOutcome.DEBOUNCED,
        ScanOutcome.ALREADY_PROCESSED,
    ]
    assert first.message == "Marked Alice (S1)"
    assert mark.calls == ["S1|Alice"]
    assert session.is_processed("S1|Alice")


def test_different_students_are_not_debounced(clock):
    mark = RecordingMark()
    session = ScanSession(mark, clock=clock)
    session.start()

    session.handle("S1|Alice")
    session.handle("S2|Bob")

    assert mark.calls == ["S1|Alice", "S2|Bob"]
    assert [c.student_id for c in session.confirmations] == ["S2", "S1"]


def test_failed_mark_can_be_retried_after_debounce(clock):
    mark = RecordingMark(fail_with=StoreUnavailableError("offline"))
    session = ScanSession(mark, clock=clock)
    session.start()

    failed = session.handle("S1|Alice")
    assert failed.outcome == ScanOutcome.FAILED
    assert failed.message == "offline"
    assert not session.is_processed("S1|Alice")

    clock.now = 0.2
    assert session.handle("S1|Alice").outcome == ScanOutcome.DEBOUNCED

    mark.fail_with = None
    clock.now = 1.5
    assert session.handle("S1|Alice").outcome == ScanOutcome.MARKED
    assert len(mark.calls) == 2


def test_scan_during_in_flight_mark_is_busy(clock):
    nested = []
    session = None

    def mark(raw):
        nested.append(session.handle("S2|Bob"))
        return AttendeeMark(student_id="S1", student_name="Alice", timestamp="")

    session = ScanSession(mark, clock=clock)
    session.start()

    assert session.handle("S1|Alice").outcome == ScanOutcome.MARKED
    assert [r.outcome for r in nested] == [ScanOutcome.BUSY]
    assert not session.is_processed("S2|Bob")


def test_stop_during_in_flight_mark_drops_result(clock):
    session = None

    def mark(raw):
        session.stop()
        return AttendeeMark(student_id="S1", student_name="Alice", timestamp="")

    session = ScanSession(mark, clock=clock)
    session.start()

    result = session.handle("S1|Alice")

    assert result.outcome == ScanOutcome.MARKED
    assert session.confirmations == []
    assert not session.is_processed("S1|Alice")
    assert not session.active


def test_restart_clears_state(clock):
    session = ScanSession(RecordingMark(), clock=clock)
    session.start()
    session.handle("S1|Alice")

    session.stop()
    session.start()

    assert session.confirmations == []
    assert session.handle("S1|Alice").outcome == ScanOutcome.MARKED


def test_session_against_ledger(ledger, clock):
    record = ledger.create_record("t-1", "CS101", "Week 1")
    session = ScanSession(lambda raw: ledger.mark_attendance(record.record_id, "t-1", raw), clock=clock)
    session.start()

    assert session.handle("007|Bond").outcome == ScanOutcome.MARKED
    bad = session.handle("garbage")
    assert bad.outcome == ScanOutcome.FAILED
    assert isinstance(bad.error, InvalidQrError)
    assert len(ledger.get_record(record.record_id, "t-1").attendees) == 1


class GarbledHttp:
    """HTTP double whose success responses carry no usable body."""

    def __init__(self, body):
        self.headers = {}
        self.body = body

    def post(self, url, json, timeout):
        body = self.body

        class Response:
            ok = True
            status_code = 200

            def json(self):
                if body is None:
                    raise ValueError("no json")
                return body

        return Response()


@pytest.mark.parametrize("body", [None, {}, {"attendance": ["007"]}])
def test_unexpected_server_response_fails_without_stopping(clock, body):
    client = AttendanceApiClient("http://api", "tok", http=GarbledHttp(body))
    session = ScanSession(client.marker("rec-1"), clock=clock)
    session.start()

    result = session.handle("007|Bond")

    assert result.outcome == ScanOutcome.FAILED
    assert isinstance(result.error, StoreUnavailableError)
    assert not session.is_processed("007|Bond")
    assert session.active


def test_non_domain_error_from_mark_is_reported(clock):
    def mark(raw):
        raise RuntimeError("decoder crashed")

    session = ScanSession(mark, clock=clock)
    session.start()

    result = session.handle("007|Bond")

    assert result.outcome == ScanOutcome.FAILED
    assert isinstance(result.error, StoreUnavailableError)
    assert "decoder crashed" in result.message
    assert not session.is_processed("007|Bond")

    clock.now = 2.0
    assert session.handle("S1|Alice").outcome == ScanOutcome.FAILED
