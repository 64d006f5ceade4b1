import json

import pytest

from heartsmiles.core.config import Settings
from heartsmiles.core.constants import EntityKind
from heartsmiles.pipeline.prompts import PARTICIPANT_SYSTEM_PROMPT, PROGRAM_SYSTEM_PROMPT
from heartsmiles.processing.extractors.llm_extractor import (
    LlmExtractor,
    backend_from_settings,
    parse_model_response,
)


class FakeBackend:
    model = "fake-model"

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, system_prompt, user_prompt, *, temperature, max_tokens):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return self.reply


ROWS = [{"Name": "Ana Diaz", "School": "Lincoln"}]


async def test_participant_call_uses_prompt_and_token_budget():
    backend = FakeBackend(json.dumps({"participants": [{"name": "Ana Diaz"}]}))
    extractor = LlmExtractor(backend)

    result = await extractor.extract(ROWS, EntityKind.PARTICIPANT)

    assert result.success
    assert result.data == [{"name": "Ana Diaz"}]
    call = backend.calls[0]
    assert call["system_prompt"] == PARTICIPANT_SYSTEM_PROMPT
    assert call["temperature"] == 0.1
    assert call["max_tokens"] == 4000
    assert '"Name": "Ana Diaz"' in call["user_prompt"]
    assert "YYYY-MM-DD" in call["user_prompt"]


async def test_program_call_uses_program_budget():
    backend = FakeBackend(json.dumps({"programs": []}))
    extractor = LlmExtractor(backend)

    result = await extractor.extract(ROWS, EntityKind.PROGRAM)

    assert result.success
    assert result.data == []
    assert backend.calls[0]["system_prompt"] == PROGRAM_SYSTEM_PROMPT
    assert backend.calls[0]["max_tokens"] == 2000


async def test_backend_failure_is_reported_not_raised():
    extractor = LlmExtractor(FakeBackend(error=RuntimeError("quota exceeded")))

    result = await extractor.extract(ROWS, EntityKind.PARTICIPANT)

    assert not result.success
    assert result.error == "quota exceeded"
    assert result.data == []


async def test_malformed_json_is_reported():
    extractor = LlmExtractor(FakeBackend("Sure! Here are the participants:"))

    result = await extractor.extract(ROWS, EntityKind.PARTICIPANT)

    assert not result.success
    assert "JSON" in result.error


def test_code_fence_is_stripped():
    reply = '```json\n{"participants": [{"name": "Ana"}]}\n```'
    result = parse_model_response(reply, EntityKind.PARTICIPANT)
    assert result.success
    assert result.data == [{"name": "Ana"}]


def test_bare_list_accepted():
    result = parse_model_response('[{"name": "Mentoring"}]', EntityKind.PROGRAM)
    assert result.data == [{"name": "Mentoring"}]


def test_object_without_expected_key_gives_no_records():
    result = parse_model_response('{"programs": [{"name": "x"}]}', EntityKind.PARTICIPANT)
    assert result.success
    assert result.data == []


def test_non_list_payload_is_failure():
    result = parse_model_response('{"participants": "none"}', EntityKind.PARTICIPANT)
    assert not result.success


def test_non_object_entries_dropped():
    result = parse_model_response('{"participants": [{"name": "Ana"}, "junk", 3]}', EntityKind.PARTICIPANT)
    assert result.data == [{"name": "Ana"}]


def test_unknown_provider_rejected():
    with pytest.raises(ValueError, match="Unknown LLM_PROVIDER"):
        backend_from_settings(Settings(LLM_PROVIDER="mystery"))
