import re

import pytest

from plant_identifier.orchestrator.contracts import PlantInfo
from plant_identifier.orchestrator.normalizer import (
    DEFAULT_NOISE_PATTERNS, PROMPT, clean_response, noise_patterns_from_env, parse_plant_info,
)

ROSE = PlantInfo(
    name="Rose",
    scientific_name="Rosa",
    family="Rosaceae",
    origin="Asia",
    characteristics="Thorny shrub",
    uses="Ornamental",
)

BARE = ('{"name":"Rose","scientificName":"Rosa","family":"Rosaceae",'
        '"origin":"Asia","characteristics":"Thorny shrub","uses":"Ornamental"}')


def test_prompt_names_all_six_keys():
    for key in ("name", "scientificName", "family", "origin", "characteristics", "uses"):
        assert f'"{key}"' in PROMPT


def test_fenced_json_parses_to_full_record():
    assert parse_plant_info(f"```json\n{BARE}\n```") == ROSE


def test_bare_and_padded_json_parse():
    assert parse_plant_info(BARE) == ROSE
    assert parse_plant_info(f"\n\n   {BARE}  \n") == ROSE


def test_fence_without_language_tag():
    assert parse_plant_info(f"```\n{BARE}\n```") == ROSE


def test_clean_response_strips_fences_and_whitespace():
    assert clean_response("  ```json\n{}\n```  ") == "{}"


def test_not_json_is_no_result():
    assert parse_plant_info("I think this is a rose.") is None
    assert parse_plant_info("") is None


def test_missing_field_is_no_result():
    text = '{"name":"Rose","scientificName":"Rosa","family":"Rosaceae","origin":"Asia","characteristics":"x"}'
    assert parse_plant_info(text) is None


def test_non_string_field_is_no_result():
    text = BARE.replace('"Asia"', "null")
    assert parse_plant_info(text) is None


def test_json_array_is_no_result():
    assert parse_plant_info(f"[{BARE}]") is None


def test_extra_keys_are_ignored():
    text = BARE[:-1] + ',"confidence":"high"}'
    assert parse_plant_info(text) == ROSE


def test_extra_noise_patterns_from_env():
    patterns = noise_patterns_from_env(r"^Here is the JSON:||  ")
    assert [p.pattern for p in patterns[: len(DEFAULT_NOISE_PATTERNS)]] == DEFAULT_NOISE_PATTERNS
    assert patterns[-1].pattern == r"^Here is the JSON:"

    text = f"Here is the JSON:\n```json\n{BARE}\n```"
    assert parse_plant_info(text) is None
    assert parse_plant_info(text, patterns) == ROSE


def test_empty_env_value_keeps_defaults():
    assert [p.pattern for p in noise_patterns_from_env(None)] == DEFAULT_NOISE_PATTERNS
    assert [p.pattern for p in noise_patterns_from_env("")] == DEFAULT_NOISE_PATTERNS


def test_bad_configured_pattern_fails_at_load():
    with pytest.raises(re.error):
        noise_patterns_from_env(r"([unclosed")
