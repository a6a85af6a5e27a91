import asyncio
from plant_identifier.adapters.vision.base import VisionAdapter

CANNED_REPLY = (
    "```json\n"
    '{"name": "Rose", "scientificName": "Rosa", "family": "Rosaceae", '
    '"origin": "Asia", "characteristics": "Thorny shrub", "uses": "Ornamental"}\n'
    "```"
)

class MockVision(VisionAdapter):
    def __init__(self, status_store, reply: str = CANNED_REPLY, delay_s: float = 0.0):
        self.status = status_store
        self.reply = reply
        self.delay_s = delay_s
        self.calls: list[tuple[str, str, str]] = []

    async def generate(self, prompt: str, image_b64: str, media_type: str) -> str:
        # Mock: ignore image, return canned reply
        self.calls.append((prompt, image_b64, media_type))
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        self.status.log(f"mock_vision: reply {len(self.reply)} chars")
        return self.reply
