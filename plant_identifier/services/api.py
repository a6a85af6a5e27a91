import os
from dataclasses import asdict

from fastapi import FastAPI, File, UploadFile
from fastapi.responses import JSONResponse, Response
from dotenv import load_dotenv

from plant_identifier.services.models import (
    StatusResponse, ImageResponse, CameraResponse, IdentifyResponse, PlantInfoOut,
)
from plant_identifier.services.status_store import StatusStore
from plant_identifier.orchestrator.contracts import PlantInfo
from plant_identifier.orchestrator.errors import PipelineError, PreconditionViolation
from plant_identifier.orchestrator.image_source import ImageSource
from plant_identifier.orchestrator.normalizer import noise_patterns_from_env
from plant_identifier.orchestrator.state_machine import Orchestrator

load_dotenv(dotenv_path="plant_identifier/.env", override=False)

app = FastAPI(title="plant-identifier api")

status = StatusStore()

# Vision adapter: controlled by VISION_ADAPTER env var
# Values: gemini | claude | mock  (default: gemini)
_vision_adapter = os.getenv("VISION_ADAPTER", "gemini").lower()

if _vision_adapter == "claude":
    from plant_identifier.adapters.vision.claude_vision import ClaudeVision
    vision = ClaudeVision(status)
elif _vision_adapter == "mock":
    from plant_identifier.adapters.vision.mock_vision import MockVision
    vision = MockVision(status)
else:
    from plant_identifier.adapters.vision.gemini_vision import GeminiVision
    vision = GeminiVision(status)

if not vision.ready:
    status.log(f"vision: {type(vision).__name__} not ready, identify will report SERVICE_FAILURE")
status.log(f"vision adapter: {type(vision).__name__}")

# Camera adapter: CAMERA_ADAPTER=cv2 (default) | mock
_camera_adapter = os.getenv("CAMERA_ADAPTER", "cv2").lower()
if _camera_adapter == "mock":
    from plant_identifier.adapters.camera.mock_camera import MockCamera
    camera = MockCamera(status)
else:
    from plant_identifier.adapters.camera.cv2_camera import CV2Camera
    camera = CV2Camera(status)
status.log(f"camera adapter: {type(camera).__name__}")

_max_bytes = int(float(os.getenv("MAX_UPLOAD_MB", "10")) * 1024 * 1024)
_timeout_s = float(os.getenv("IDENTIFY_TIMEOUT_S", "60"))

source = ImageSource(camera=camera, status_store=status, max_bytes=_max_bytes)
orch = Orchestrator(
    vision=vision,
    status_store=status,
    timeout_s=_timeout_s,
    noise_patterns=noise_patterns_from_env(os.getenv("RESPONSE_NOISE_PATTERNS")),
)


def _plant_out(info: PlantInfo | None) -> PlantInfoOut | None:
    return PlantInfoOut(**asdict(info)) if info else None


def _image_out() -> ImageResponse:
    art = source.artifact
    if art is None:
        return ImageResponse(ok=False, error="no image selected")
    return ImageResponse(
        ok=True,
        source=art.source,
        media_type=art.media_type,
        size=len(art.data),
        preview=source.preview.data_uri,
    )


def _camera_out(e: PipelineError | None = None) -> CameraResponse:
    if e is None:
        return CameraResponse(ok=True, camera_open=source.camera_open)
    return CameraResponse(ok=False, camera_open=source.camera_open, error_code=e.code, error=str(e))


@app.get("/status", response_model=StatusResponse)
def get_status():
    art = source.artifact
    return StatusResponse(
        state=status.state.value,
        has_image=art is not None,
        image_source=art.source if art else None,
        media_type=art.media_type if art else None,
        camera_open=source.camera_open,
        result=_plant_out(status.last_result),
        last_error_code=status.last_error_code,
        last_error=status.last_error,
        logs=status.logs,
    )


@app.get("/health")
def health():
    """Adapter wiring + readiness."""
    return {
        "api": True,
        "vision_adapter": type(vision).__name__,
        "vision_ready": vision.ready,
        "camera_adapter": type(camera).__name__,
        "camera_open": source.camera_open,
        "all_ok": vision.ready,
    }


@app.post("/image/upload", response_model=ImageResponse)
async def upload_image(file: UploadFile = File(...)):
    data = await file.read()
    try:
        source.select_from_picker(data, file.content_type, filename=file.filename)
    except PipelineError as e:
        status.record_error(e.code, str(e))
        return ImageResponse(ok=False, error_code=e.code, error=str(e))
    return _image_out()


@app.get("/image/preview", response_model=ImageResponse)
def image_preview():
    return _image_out()


@app.post("/camera/open", response_model=CameraResponse)
async def camera_open():
    try:
        await source.open_camera()
    except PipelineError as e:
        status.record_error(e.code, str(e))
        return _camera_out(e)
    return _camera_out()


@app.get("/camera/frame")
async def camera_frame():
    """Live preview: one JPEG frame from the open session."""
    try:
        frame = await source.preview_frame()
    except PreconditionViolation as e:
        return JSONResponse(status_code=409, content={"ok": False, "error_code": e.code, "error": str(e)})
    except PipelineError as e:
        return JSONResponse(status_code=503, content={"ok": False, "error_code": e.code, "error": str(e)})
    return Response(content=frame, media_type="image/jpeg", headers={"Cache-Control": "no-store"})


@app.post("/camera/capture", response_model=ImageResponse)
async def camera_capture():
    try:
        await source.capture_from_session()
    except PipelineError as e:
        status.record_error(e.code, str(e))
        return ImageResponse(ok=False, error_code=e.code, error=str(e))
    return _image_out()


@app.post("/camera/close", response_model=CameraResponse)
async def camera_close():
    await source.close_camera()
    return _camera_out()


@app.post("/identify", response_model=IdentifyResponse)
async def identify():
    try:
        outcome = await orch.identify(source.artifact)
    except PreconditionViolation as e:
        status.log(f"IDENTIFY rejected: {e}")
        return IdentifyResponse(ok=False, state=status.state.value, error_code=e.code, error=str(e))
    return IdentifyResponse(
        ok=outcome.ok,
        state=outcome.state.value,
        duration_ms=outcome.duration_ms,
        result=_plant_out(outcome.result),
        error_code=outcome.error_code,
        error=outcome.error,
    )
