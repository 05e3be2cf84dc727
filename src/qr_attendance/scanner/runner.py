from __future__ import annotations

import time
from typing import Callable, Optional

from ..common.app_logger import get_logger
from .camera import Camera, CameraState
from .session import ScanResult, ScanSession

logger = get_logger(__name__)


def run_scanner(
    camera: Camera,
    session: ScanSession,
    *,
    should_stop: Callable[[], bool],
    on_result: Optional[Callable[[ScanResult], None]] = None,
    device_index: Optional[int] = None,
    idle_delay: float = 0.05,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Feed decoded frames into ``session`` until ``should_stop()`` is true.

    The camera is released on exit, whatever stopped the loop.
    """

    with camera:
        if camera.start(device_index) != CameraState.READY:
            logger.error("scanner not started: %s", camera.error)
            return

        session.start()
        try:
            while not should_stop():
                codes = camera.read_codes()
                if not codes:
                    sleep(idle_delay)
                    continue
                for raw in codes:
                    result = session.handle(raw)
                    if on_result is not None:
                        on_result(result)
        finally:
            session.stop()
