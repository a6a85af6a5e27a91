"""
Image acquisition: file upload ("picker") and camera capture behind one
current ImageArtifact + PreviewHandle.

The camera session is scoped: every path that leaves capture_from_session,
including errors, releases the device.
"""
import asyncio
import mimetypes
from contextlib import contextmanager
from typing import Optional

from plant_identifier.adapters.camera.base import CameraAdapter
from plant_identifier.orchestrator.contracts import ImageArtifact, PreviewHandle
from plant_identifier.orchestrator.errors import (
    DeviceUnavailable, InvalidInput, PreconditionViolation,
)

CAPTURE_FILENAME = "captured_image.jpg"
CAPTURE_MEDIA_TYPE = "image/jpeg"


class ImageSource:
    def __init__(self, camera: CameraAdapter, status_store, max_bytes: int = 10 * 1024 * 1024):
        self.camera = camera
        self.status = status_store
        self.max_bytes = max_bytes
        self._artifact: Optional[ImageArtifact] = None
        self._preview: Optional[PreviewHandle] = None
        self._session_open = False
        self._camera_lock = asyncio.Lock()

    @property
    def artifact(self) -> Optional[ImageArtifact]:
        return self._artifact

    @property
    def preview(self) -> Optional[PreviewHandle]:
        return self._preview

    @property
    def camera_open(self) -> bool:
        return self._session_open

    def _set_current(self, artifact: ImageArtifact):
        # artifact and preview always move together
        self._artifact, self._preview = artifact, PreviewHandle.from_artifact(artifact)

    # ── picker ──────────────────────────────────────────────────────────────

    def select_from_picker(self, data: bytes, media_type: str | None,
                           filename: str | None = None) -> ImageArtifact:
        if not media_type and filename:
            media_type, _ = mimetypes.guess_type(filename)
        if not data:
            self.status.log("image_source: picker rejected empty file")
            raise InvalidInput("empty file")
        if not media_type or not media_type.startswith("image/"):
            self.status.log(f"image_source: picker rejected media type {media_type!r}")
            raise InvalidInput(f"not an image: {media_type or 'unknown type'}")
        if len(data) > self.max_bytes:
            self.status.log(f"image_source: picker rejected {len(data)} bytes")
            raise InvalidInput(f"image too large ({len(data)} bytes, limit {self.max_bytes})")

        artifact = ImageArtifact(data=data, media_type=media_type, source="picker", filename=filename)
        self._set_current(artifact)
        self.status.log(f"image_source: picker {filename or '<unnamed>'} {media_type} {len(data)}B")
        return artifact

    # ── camera ──────────────────────────────────────────────────────────────

    @contextmanager
    def _session(self):
        """Scope of an open camera session; always releases on exit."""
        try:
            yield self.camera
        finally:
            self._release()

    def _release(self):
        self.camera.release()
        if self._session_open:
            self.status.log("image_source: camera session released")
        self._session_open = False

    async def open_camera(self):
        async with self._camera_lock:
            if self._session_open:
                self.status.log("image_source: camera already open")
                return
            try:
                await asyncio.to_thread(self.camera.open)
            except DeviceUnavailable:
                self._release()
                raise
            except Exception as e:
                self._release()
                raise DeviceUnavailable(str(e)) from e
            self._session_open = True
            self.status.log("image_source: camera session open")

    async def _read_frame(self) -> bytes:
        try:
            frame = await asyncio.to_thread(self.camera.capture_bytes)
        except DeviceUnavailable:
            raise
        except Exception as e:
            self.status.log(f"image_source: device error {type(e).__name__}: {e}")
            raise DeviceUnavailable(str(e)) from e
        if not frame:
            raise DeviceUnavailable("frame read failed")
        return frame

    async def preview_frame(self) -> bytes:
        async with self._camera_lock:
            if not self._session_open:
                raise PreconditionViolation("camera is not open")
            return await self._read_frame()

    async def capture_from_session(self) -> ImageArtifact:
        async with self._camera_lock:
            if not self._session_open:
                self.status.log("image_source: capture without open camera")
                raise PreconditionViolation("camera is not open")
            with self._session():
                frame = await self._read_frame()
                artifact = ImageArtifact(
                    data=frame, media_type=CAPTURE_MEDIA_TYPE, source="camera", filename=CAPTURE_FILENAME,
                )
                self._set_current(artifact)
                self.status.log(f"image_source: captured {len(frame)}B")
            return artifact

    async def close_camera(self):
        # waits for an in-progress read before the device is released
        async with self._camera_lock:
            if not self._session_open:
                return
            self._release()
