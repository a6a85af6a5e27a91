"""Mock camera: serves JPEGs from MOCK_CAMERA_DIR, or a synthetic frame when none are found."""
import os
import random
from pathlib import Path

import cv2
import numpy as np

from plant_identifier.adapters.camera.base import CameraAdapter
from plant_identifier.orchestrator.errors import DeviceUnavailable

class MockCamera(CameraAdapter):
    def __init__(self, status_store, frames_dir: str | None = None, available: bool = True,
                 fail_capture: bool = False):
        self.status = status_store
        self.frames_dir = Path(frames_dir or os.getenv("MOCK_CAMERA_DIR", "samples"))
        self.available = available
        self.fail_capture = fail_capture
        self.open_count = 0
        self.release_count = 0
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        if not self.available:
            self.status.log("mock_camera: device unavailable")
            raise DeviceUnavailable("mock camera unavailable")
        self._open = True
        self.open_count += 1

    def capture_bytes(self) -> bytes | None:
        if not self._open or self.fail_capture:
            self.status.log("mock_camera: frame capture failed")
            return None
        jpegs = sorted(self.frames_dir.glob("*.jpg")) if self.frames_dir.is_dir() else []
        if jpegs:
            chosen = random.choice(jpegs)
            self.status.log(f"mock_camera: serving {chosen.name}")
            return chosen.read_bytes()
        return self._synthetic_frame()

    def release(self) -> None:
        if self._open:
            self._open = False
            self.release_count += 1

    def _synthetic_frame(self) -> bytes:
        frame = np.zeros((240, 320, 3), dtype=np.uint8)
        frame[:, :] = (60, 140, 40)  # leafy green, BGR
        ok, buf = cv2.imencode(".jpg", frame)
        if not ok:
            raise DeviceUnavailable("mock camera could not encode frame")
        return bytes(buf)
