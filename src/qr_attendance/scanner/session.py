from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..common.app_logger import get_logger
from ..core.constants import DEFAULT_SCAN_DEBOUNCE_SECONDS
from ..core.exceptions import DomainError, StoreUnavailableError
from ..attendance.model import AttendeeMark

logger = get_logger(__name__)

MarkFn = Callable[[str], AttendeeMark]


class ScanOutcome(str, Enum):
    INACTIVE = "inactive"
    DEBOUNCED = "debounced"
    ALREADY_PROCESSED = "already_processed"
    BUSY = "busy"
    MARKED = "marked"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanResult:
    outcome: ScanOutcome
    raw: str
    mark: Optional[AttendeeMark] = None
    error: Optional[DomainError] = None

    @property
    def message(self) -> str:
        if self.outcome == ScanOutcome.MARKED and self.mark:
            return f"Marked {self.mark.student_name} ({self.mark.student_id})"
        if self.outcome == ScanOutcome.FAILED and self.error:
            return str(self.error)
        return ""


class ScanSession:
    """Turns a stream of decoded QR texts into at most one mark call per student.

    Two independent filters sit in front of ``mark``:

    - debounce: the same text seen again within ``debounce_seconds`` is the
      camera re-reading one physical scan;
    - processed set: texts already marked in this session are never sent
      again. Failed marks leave the set so the student can retry.

    The ledger still rejects duplicates on its own; this only saves round trips.
    State lives on the instance and is reset by ``start()`` / ``stop()``.
    """

    def __init__(
        self,
        mark: MarkFn,
        *,
        debounce_seconds: float = DEFAULT_SCAN_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._mark = mark
        self._debounce = float(debounce_seconds)
        self._clock = clock
        self._in_flight = threading.Lock()
        self._generation = 0
        self.active = False
        self._reset()

    def _reset(self) -> None:
        self._processed: set[str] = set()
        self._last_raw: Optional[str] = None
        self._last_seen = 0.0
        self.confirmations: list[AttendeeMark] = []

    def start(self) -> None:
        self._generation += 1
        self._reset()
        self.active = True
        logger.info("scan session started")

    def stop(self) -> None:
        # An in-flight mark keeps running; its result is dropped by the generation check
        self._generation += 1
        self.active = False
        self._reset()
        logger.info("scan session stopped")

    def is_processed(self, raw: str) -> bool:
        return raw in self._processed

    def handle(self, raw: str) -> ScanResult:
        if not raw or not self.active:
            return ScanResult(ScanOutcome.INACTIVE, raw or "")

        now = self._clock()
        if raw == self._last_raw and (now - self._last_seen) < self._debounce:
            return ScanResult(ScanOutcome.DEBOUNCED, raw)

        if raw in self._processed:
            return ScanResult(ScanOutcome.ALREADY_PROCESSED, raw)

        # One scan event runs to completion before the next is accepted
        if not self._in_flight.acquire(blocking=False):
            return ScanResult(ScanOutcome.BUSY, raw)

        generation = self._generation
        try:
            self._last_raw = raw
            self._last_seen = now
            self._processed.add(raw)

            try:
                mark = self._mark(raw)
            except DomainError as e:
                if generation == self._generation:
                    self._processed.discard(raw)
                logger.warning("scan rejected (%s): %s", e.code, e)
                return ScanResult(ScanOutcome.FAILED, raw, error=e)
            except Exception as e:
                if generation == self._generation:
                    self._processed.discard(raw)
                logger.exception("scan failed unexpectedly")
                error = StoreUnavailableError(f"Unable to mark attendance: {e}")
                return ScanResult(ScanOutcome.FAILED, raw, error=error)

            if generation == self._generation:
                self.confirmations.insert(0, mark)
            logger.info("scan accepted: %s (%s)", mark.student_name, mark.student_id)
            return ScanResult(ScanOutcome.MARKED, raw, mark=mark)
        finally:
            self._in_flight.release()
