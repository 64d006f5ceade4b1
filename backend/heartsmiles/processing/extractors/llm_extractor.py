"""
LLM-based record extraction.

Sends every parsed row to a hosted chat model in a single call and
parses the JSON it returns.  Two backends are supported, selected by
LLM_PROVIDER: OpenAI chat completions (default) and Google Gemini.

The call is made exactly once per import.  Any failure (network, quota,
malformed JSON) comes back as ExtractionResult(success=False) so the
orchestrator can report it as a single top-level error.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

from google import genai
from openai import AsyncOpenAI

from heartsmiles.core.config import Settings
from heartsmiles.core.constants import EntityKind
from heartsmiles.core.logging import get_logger
from heartsmiles.core.tracing import traceable_step
from heartsmiles.pipeline.prompts import RESPONSE_KEYS, build_prompt
from heartsmiles.processing.extractors.base import BaseExtractor, ExtractionResult

logger = get_logger(__name__)


# ═══════════════════════════════════════════════════════════
#  Completion backends
# ═══════════════════════════════════════════════════════════

class CompletionBackend(Protocol):
    model: str

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        ...


class OpenAIChatBackend:
    """Non-streaming OpenAI chat completion."""

    def __init__(self, api_key: str, model: str) -> None:
        self.model = model
        self._client = AsyncOpenAI(api_key=api_key)

    async def complete(self, system_prompt, user_prompt, *, temperature, max_tokens) -> str:
        completion = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return completion.choices[0].message.content or ""


class GeminiBackend:
    """Single generate_content call against Gemini."""

    def __init__(self, api_key: str, model: str) -> None:
        self.model = model
        self._client = genai.Client(api_key=api_key)

    async def complete(self, system_prompt, user_prompt, *, temperature, max_tokens) -> str:
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config=genai.types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=temperature,
                max_output_tokens=max_tokens,
            ),
        )
        return response.text or ""


def backend_from_settings(settings: Settings) -> CompletionBackend:
    provider = settings.LLM_PROVIDER.lower()
    if provider == "openai":
        return OpenAIChatBackend(settings.OPENAI_API_KEY, settings.OPENAI_MODEL)
    if provider == "gemini":
        return GeminiBackend(settings.GOOGLE_API_KEY, settings.GEMINI_MODEL)
    raise ValueError(f"Unknown LLM_PROVIDER: {settings.LLM_PROVIDER}")


# ═══════════════════════════════════════════════════════════
#  Response parsing
# ═══════════════════════════════════════════════════════════

def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        if lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines[1:])
    return text.strip()


def parse_model_response(text: str, kind: EntityKind) -> ExtractionResult:
    """
    Parse the model's reply into records.

    Accepts {"participants": [...]} / {"programs": [...]} or a bare
    JSON array.  An object without the expected key yields no records.
    """
    try:
        payload = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse LLM JSON", error=str(exc), preview=text[:300])
        return ExtractionResult(success=False, error=f"LLM JSON parse failed: {exc}")

    if isinstance(payload, dict):
        payload = payload.get(RESPONSE_KEYS[kind], [])

    if not isinstance(payload, list):
        return ExtractionResult(
            success=False,
            error=f"LLM response is not a list of {RESPONSE_KEYS[kind]}",
        )

    records = [item for item in payload if isinstance(item, dict)]
    if len(records) != len(payload):
        logger.warning(
            "Dropped non-object entries from LLM response",
            dropped=len(payload) - len(records),
        )
    return ExtractionResult(success=True, data=records)


# ═══════════════════════════════════════════════════════════
#  Extractor
# ═══════════════════════════════════════════════════════════

@traceable_step(
    name="extract_records",
    run_type="llm",
    tags=["extraction", "llm"],
)
async def _traced_completion(
    backend: CompletionBackend,
    system_prompt: str,
    user_prompt: str,
    *,
    temperature: float,
    max_tokens: int,
) -> str:
    return await backend.complete(
        system_prompt,
        user_prompt,
        temperature=temperature,
        max_tokens=max_tokens,
    )


class LlmExtractor(BaseExtractor):
    """Extract participants or programs with one hosted-model call."""

    def __init__(
        self,
        backend: CompletionBackend,
        *,
        temperature: float = 0.1,
        max_tokens: dict[EntityKind, int] | None = None,
    ) -> None:
        self.backend = backend
        self.temperature = temperature
        self.max_tokens = max_tokens or {
            EntityKind.PARTICIPANT: 4000,
            EntityKind.PROGRAM: 2000,
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "LlmExtractor":
        return cls(
            backend_from_settings(settings),
            temperature=settings.LLM_TEMPERATURE,
            max_tokens={
                EntityKind.PARTICIPANT: settings.LLM_PARTICIPANT_MAX_TOKENS,
                EntityKind.PROGRAM: settings.LLM_PROGRAM_MAX_TOKENS,
            },
        )

    async def extract(self, rows: list[dict[str, Any]], kind: EntityKind) -> ExtractionResult:
        system_prompt, user_prompt = build_prompt(kind, rows)
        max_tokens = self.max_tokens[kind]

        logger.info(
            "Calling LLM for extraction",
            kind=kind.value,
            model=self.backend.model,
            rows=len(rows),
            max_tokens=max_tokens,
        )

        try:
            response_text = await _traced_completion(
                self.backend,
                system_prompt,
                user_prompt,
                temperature=self.temperature,
                max_tokens=max_tokens,
            )
        except Exception as exc:
            # Provider SDKs raise their own hierarchies; all are reported the same way
            logger.error("LLM call failed", kind=kind.value, error=str(exc))
            return ExtractionResult(success=False, error=str(exc))

        logger.info("LLM response received", response_length=len(response_text))

        result = parse_model_response(response_text, kind)
        if result.success:
            logger.info("LLM extraction complete", kind=kind.value, records=len(result.data))
        return result
