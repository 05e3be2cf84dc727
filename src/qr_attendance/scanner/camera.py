from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import cv2
from PIL import Image

from ..common.app_logger import get_logger
from ..qr.images import decode_pil_image

logger = get_logger(__name__)

Opener = Callable[[int], Any]


class CameraState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class CameraDevice:
    index: int
    label: str


def enumerate_devices(opener: Opener = cv2.VideoCapture, *, max_probe: int = 5) -> list[CameraDevice]:
    """Probe capture indices; OpenCV has no portable device listing."""
    devices = []
    for index in range(max_probe):
        cap = opener(index)
        try:
            if cap is not None and cap.isOpened():
                devices.append(CameraDevice(index=index, label=f"Camera {index + 1}"))
        finally:
            if cap is not None:
                cap.release()
    return devices


def decode_frame(frame) -> list[str]:
    """OpenCV BGR frame -> QR texts."""
    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    return decode_pil_image(Image.fromarray(rgb))


class Camera:
    """Owns one capture handle.

    States: idle -> loading -> ready -> (loading | error). ``stop()`` always
    releases the handle; use the instance as a context manager so a crashed
    scan loop cannot leak the device.
    """

    def __init__(
        self,
        *,
        opener: Opener = cv2.VideoCapture,
        enumerator: Optional[Callable[[], list[CameraDevice]]] = None,
        frame_decoder: Callable[[Any], list[str]] = decode_frame,
        open_retries: int = 2,
        retry_delay: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._opener = opener
        self._enumerator = enumerator or (lambda: enumerate_devices(opener))
        self._decode = frame_decoder
        self._open_retries = max(0, int(open_retries))
        self._retry_delay = float(retry_delay)
        self._sleep = sleep

        self._capture: Any = None
        self.state = CameraState.IDLE
        self.devices: list[CameraDevice] = []
        self.device: Optional[CameraDevice] = None
        self.error: Optional[str] = None

    def __enter__(self) -> "Camera":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _set_state(self, state: CameraState) -> None:
        if state != self.state:
            logger.debug("camera %s -> %s", self.state.value, state.value)
        self.state = state

    def _fail(self, message: str) -> CameraState:
        self.error = message
        logger.error("camera error: %s", message)
        self._set_state(CameraState.ERROR)
        return self.state

    def _release(self) -> None:
        capture, self._capture = self._capture, None
        if capture is not None:
            capture.release()

    def _open_with_retry(self, index: int) -> Any:
        for attempt in range(self._open_retries + 1):
            capture = self._opener(index)
            if capture is not None and capture.isOpened():
                return capture
            if capture is not None:
                capture.release()
            if attempt < self._open_retries:
                # exponential backoff: delay, 2*delay, 4*delay, ...
                self._sleep(self._retry_delay * (2 ** attempt))
        return None

    def _find(self, index: Optional[int]) -> Optional[CameraDevice]:
        for device in self.devices:
            if device.index == index:
                return device
        return None

    def refresh_devices(self) -> list[CameraDevice]:
        # probing opens devices; never do it while holding one
        if self._capture is None:
            self.devices = list(self._enumerator())
        return self.devices

    def start(self, device_index: Optional[int] = None) -> CameraState:
        if self._capture is not None:
            return self.state

        self.error = None
        self._set_state(CameraState.LOADING)
        self.refresh_devices()
        if not self.devices:
            return self._fail("No camera found")

        target = self._find(device_index) or self._find(getattr(self.device, "index", None)) or self.devices[0]
        capture = self._open_with_retry(target.index)
        if capture is None:
            return self._fail(f"Unable to open {target.label}")

        self._capture = capture
        self.device = target
        self._set_state(CameraState.READY)
        logger.info("camera ready: %s", target.label)
        return self.state

    def switch(self, device_index: Optional[int] = None) -> CameraState:
        """Switch to ``device_index`` or, without one, to the next device in the list."""

        if self._capture is None:
            return self.start(device_index)

        if device_index is None:
            if len(self.devices) < 2:
                return self.state
            position = self.devices.index(self.device) if self.device in self.devices else -1
            target = self.devices[(position + 1) % len(self.devices)]
        else:
            target = self._find(device_index)
            if target is None:
                logger.warning("camera %s is not available", device_index)
                return self.state

        if self.device == target:
            return self.state

        previous = self.device
        self._set_state(CameraState.LOADING)
        self._release()

        capture = self._open_with_retry(target.index)
        if capture is not None:
            self._capture = capture
            self.device = target
            self._set_state(CameraState.READY)
            logger.info("switched camera to %s", target.label)
            return self.state

        logger.warning("unable to switch to %s; falling back", target.label)
        fallback = self._open_with_retry(previous.index) if previous else None
        if fallback is None:
            self.device = None
            return self._fail(f"Unable to switch to {target.label}")

        self._capture = fallback
        self._set_state(CameraState.READY)
        return self.state

    def read_codes(self) -> list[str]:
        if self.state != CameraState.READY or self._capture is None:
            return []
        ok, frame = self._capture.read()
        if not ok or frame is None:
            return []
        return self._decode(frame)

    def stop(self) -> None:
        self._release()
        self.error = None
        self._set_state(CameraState.IDLE)
