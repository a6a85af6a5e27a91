from pydantic import BaseModel
from typing import Literal, Optional

class PlantInfoOut(BaseModel):
    name: str
    scientific_name: str
    family: str
    origin: str
    characteristics: str
    uses: str

StateName = Literal["idle", "in_flight", "succeeded", "failed"]

class StatusResponse(BaseModel):
    state: StateName
    has_image: bool
    image_source: Optional[Literal["picker", "camera"]] = None
    media_type: Optional[str] = None
    camera_open: bool
    result: Optional[PlantInfoOut] = None   # None unless the last identify succeeded
    last_error_code: Optional[str] = None
    last_error: Optional[str] = None
    logs: list[str]

class ImageResponse(BaseModel):
    ok: bool
    source: Optional[Literal["picker", "camera"]] = None
    media_type: Optional[str] = None
    size: Optional[int] = None
    preview: Optional[str] = None           # data URI
    error_code: Optional[str] = None
    error: Optional[str] = None

class CameraResponse(BaseModel):
    ok: bool
    camera_open: bool
    error_code: Optional[str] = None
    error: Optional[str] = None

class IdentifyResponse(BaseModel):
    ok: bool
    state: StateName
    duration_ms: int = 0
    result: Optional[PlantInfoOut] = None
    error_code: Optional[str] = None
    error: Optional[str] = None
