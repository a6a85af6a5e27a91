import base64
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Literal

SourceName = Literal["picker", "camera"]

@dataclass(frozen=True)
class ImageArtifact:
    data: bytes
    media_type: str              # e.g. "image/jpeg"
    source: SourceName
    filename: Optional[str] = None

    def b64(self) -> str:
        return base64.standard_b64encode(self.data).decode("utf-8")

@dataclass(frozen=True)
class PreviewHandle:
    data_uri: str

    @classmethod
    def from_artifact(cls, artifact: ImageArtifact) -> "PreviewHandle":
        return cls(data_uri=f"data:{artifact.media_type};base64,{artifact.b64()}")

# Wire keys as the inference service returns them -> record attribute
PLANT_FIELDS: dict[str, str] = {
    "name": "name",
    "scientificName": "scientific_name",
    "family": "family",
    "origin": "origin",
    "characteristics": "characteristics",
    "uses": "uses",
}

@dataclass(frozen=True)
class PlantInfo:
    name: str
    scientific_name: str
    family: str
    origin: str
    characteristics: str
    uses: str

class RequestState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

@dataclass
class IdentifyOutcome:
    ok: bool
    state: RequestState
    duration_ms: int
    result: Optional[PlantInfo] = None
    error_code: Optional[str] = None
    error: Optional[str] = None
