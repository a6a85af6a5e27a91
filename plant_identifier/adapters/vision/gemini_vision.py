"""
Gemini multimodal adapter.
Calls the generateContent REST endpoint directly with httpx, one inline image per request.
Requires GEMINI_API_KEY in plant_identifier/.env (or the process env).
"""
import os
import httpx
from plant_identifier.adapters.vision.base import VisionAdapter
from plant_identifier.orchestrator.errors import ServiceFailure

GEMINI_API_URL = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_MODEL   = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")


class GeminiVision(VisionAdapter):
    def __init__(self, status_store, api_key: str | None = None, model: str | None = None,
                 base_url: str | None = None, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self.status = status_store
        self._api_key = api_key if api_key is not None else os.getenv("GEMINI_API_KEY")
        self.model = model or GEMINI_MODEL
        self.base_url = (base_url or GEMINI_API_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self.ready = bool(self._api_key)
        if self.ready:
            self.status.log(f"gemini_vision: ready (model={self.model})")
        else:
            self.status.log("gemini_vision: GEMINI_API_KEY not set")

    async def generate(self, prompt: str, image_b64: str, media_type: str) -> str:
        if not self.ready:
            raise ServiceFailure("GEMINI_API_KEY not set")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        {"inline_data": {"mime_type": media_type, "data": image_b64}},
                    ],
                }
            ],
        }
        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            self.status.log(f"gemini_vision: transport error: {e}")
            raise ServiceFailure(f"transport error: {e}") from e

        if not resp.is_success:
            self.status.log(f"gemini_vision: HTTP {resp.status_code}: {resp.text[:300]}")
            raise ServiceFailure(f"HTTP {resp.status_code}")

        raw = self._extract_text(resp)
        self.status.log(f"gemini_vision: raw='{raw[:120]}'")
        return raw

    def _extract_text(self, resp: httpx.Response) -> str:
        try:
            parts = resp.json()["candidates"][0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            self.status.log(f"gemini_vision: unexpected body {resp.text[:300]}")
            raise ServiceFailure("no candidate text in response") from e
        if not text.strip():
            raise ServiceFailure("empty response")
        return text
