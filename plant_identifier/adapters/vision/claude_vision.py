"""
Claude Vision adapter (zero-shot, no calibration needed).

Sends the image plus the identification prompt through the Anthropic messages API.
Requires ANTHROPIC_API_KEY in environment (plant_identifier/.env or system env).
"""
import os
import anthropic
from plant_identifier.adapters.vision.base import VisionAdapter
from plant_identifier.orchestrator.errors import ServiceFailure

CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-haiku-4-5-20251001")


class ClaudeVision(VisionAdapter):
    def __init__(self, status_store, api_key: str | None = None, model: str | None = None):
        self.status = status_store
        self.model = model or CLAUDE_MODEL
        self._client = None
        self.ready = False
        api_key = api_key if api_key is not None else os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            self.status.log("claude_vision: ANTHROPIC_API_KEY not set")
            return
        self._client = anthropic.AsyncAnthropic(api_key=api_key)
        self.ready = True
        self.status.log(f"claude_vision: ready ({self.model})")

    async def generate(self, prompt: str, image_b64: str, media_type: str) -> str:
        if not self.ready or self._client is None:
            raise ServiceFailure("ANTHROPIC_API_KEY not set")

        try:
            message = await self._client.messages.create(
                model=self.model,
                max_tokens=1024,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": media_type,
                                    "data": image_b64,
                                },
                            },
                            {"type": "text", "text": prompt},
                        ],
                    }
                ],
            )
        except anthropic.APIError as e:
            self.status.log(f"claude_vision: API error: {e}")
            raise ServiceFailure(f"API error: {e}") from e

        raw = "".join(block.text for block in message.content if block.type == "text")
        if not raw.strip():
            raise ServiceFailure("empty response")
        self.status.log(f"claude_vision: raw='{raw[:120]}'")
        return raw
