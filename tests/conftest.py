import asyncio

import pytest

from plant_identifier.adapters.camera.mock_camera import MockCamera
from plant_identifier.adapters.vision.base import VisionAdapter
from plant_identifier.orchestrator.contracts import ImageArtifact
from plant_identifier.orchestrator.errors import ServiceFailure
from plant_identifier.services.status_store import StatusStore

ROSE_REPLY = (
    '```json\n{"name":"Rose","scientificName":"Rosa","family":"Rosaceae",'
    '"origin":"Asia","characteristics":"Thorny shrub","uses":"Ornamental"}\n```'
)


class ScriptedVision(VisionAdapter):
    """Replies with a fixed text, raises, or blocks until released."""

    def __init__(self, reply: str = ROSE_REPLY, error: Exception | None = None, gate: bool = False):
        self.reply = reply
        self.error = error
        self.gate = asyncio.Event() if gate else None
        self.calls = []

    async def generate(self, prompt, image_b64, media_type):
        self.calls.append((prompt, image_b64, media_type))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def camera(status):
    return MockCamera(status, frames_dir="does-not-exist")


@pytest.fixture
def artifact():
    return ImageArtifact(data=b"\xff\xd8\xff\xe0leaf", media_type="image/jpeg", source="picker", filename="leaf.jpg")


@pytest.fixture
def scripted_vision():
    return ScriptedVision


@pytest.fixture
def service_failure():
    return ServiceFailure
