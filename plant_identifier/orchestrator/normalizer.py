"""
Prompt + reply normalization for plant identification.

The service is asked for a flat JSON object but is free to wrap it in
markdown fences or pad it with whitespace. Cleaning is a list of regexes
stripped in order; callers can extend the list (RESPONSE_NOISE_PATTERNS).
"""
import json
import re
from typing import Iterable, Optional

from plant_identifier.orchestrator.contracts import PLANT_FIELDS, PlantInfo

PROMPT = """
Identify this plant and provide the following information:
1. Common name
2. Scientific name
3. Family
4. Origin
5. Key characteristics (in brief)
6. Common uses

Provide the information in a JSON format with the following keys:
{
  "name": "",
  "scientificName": "",
  "family": "",
  "origin": "",
  "characteristics": "",
  "uses": ""
}
""".strip()

DEFAULT_NOISE_PATTERNS: list[str] = [
    r"```[a-zA-Z]*[ \t]*\n?",   # opening fence, optional language tag
    r"\n?```",                  # closing fence
]


def noise_patterns_from_env(value: str | None) -> list[re.Pattern]:
    """Defaults plus extra `||`-separated regexes from configuration.

    Compiled here so a bad pattern raises re.error at startup, not mid-request.
    """
    extra = [p for p in (value or "").split("||") if p.strip()]
    return [re.compile(p) for p in DEFAULT_NOISE_PATTERNS + extra]


def clean_response(text: str, patterns: Optional[Iterable[str | re.Pattern]] = None) -> str:
    cleaned = text
    for pattern in (DEFAULT_NOISE_PATTERNS if patterns is None else patterns):
        cleaned = re.sub(pattern, "", cleaned)
    return cleaned.strip()


def parse_plant_info(text: str, patterns: Optional[Iterable[str | re.Pattern]] = None) -> Optional[PlantInfo]:
    """Return a fully-populated PlantInfo, or None. Never a partial record."""
    try:
        data = json.loads(clean_response(text, patterns))
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict):
        return None

    values = {}
    for key, attr in PLANT_FIELDS.items():
        value = data.get(key)
        if not isinstance(value, str):
            return None
        values[attr] = value
    return PlantInfo(**values)
