"""
OpenCV webcam capture adapter.
CAMERA_INDEX env var (default 0) selects the webcam device.
"""
import os
import cv2
from plant_identifier.adapters.camera.base import CameraAdapter
from plant_identifier.orchestrator.errors import DeviceUnavailable

JPEG_QUALITY = 85

class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def open(self) -> None:
        if self.is_open:
            return
        self._cap = cv2.VideoCapture(self._index)
        if not self._cap.isOpened():
            self.status.log(f"cv2_camera: failed to open device {self._index}")
            self.release()
            raise DeviceUnavailable(f"camera device {self._index} unavailable")
        self.status.log(f"cv2_camera: device {self._index} open")

    def capture_bytes(self) -> bytes | None:
        if not self.is_open:
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self.status.log("cv2_camera: frame capture failed")
            return None
        ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
        if not ok:
            return None
        return bytes(buf)

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            self.status.log(f"cv2_camera: device {self._index} released")
