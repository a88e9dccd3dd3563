"""Nutrition extraction service using LLMs."""

import json
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from macro_tracker.domain.extraction import ExtractionResult
from macro_tracker.errors import ExtractionError

EXTRACTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "quantity": {"type": "string"},
                    "calories": {"type": "number", "minimum": 0},
                    "protein": {"type": "number", "minimum": 0},
                    "carbs": {"type": "number", "minimum": 0},
                    "fat": {"type": "number", "minimum": 0},
                    "fiber": {"type": "number", "minimum": 0},
                    "confidence": {
                        "type": "string",
                        "enum": ["high", "medium", "low"],
                    },
                },
                "required": [
                    "name",
                    "quantity",
                    "calories",
                    "protein",
                    "carbs",
                    "fat",
                    "fiber",
                    "confidence",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

EXTRACTION_PROMPT = "\n".join(
    [
        "You are a nutrition analysis function.",
        "Given a description of food someone ate, return ONLY a valid JSON object.",
        "Do not wrap in markdown fences. Do not include commentary.",
        "",
        "Guidelines:",
        "- Break compound meals into individual items "
        "(e.g. burger -> bun + patty + cheese + lettuce)",
        "- Use reasonable estimates for home-cooked food",
        "- Set confidence to 'high' for well-known foods with clear quantities",
        "- Set confidence to 'medium' for reasonable estimates",
        "- Set confidence to 'low' for vague descriptions",
        "- All macro values should be in grams (except calories in kcal)",
        "- If quantity is unclear, assume a typical single serving",
        "- Round to reasonable precision (1 decimal place max)",
    ]
)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.IGNORECASE | re.DOTALL)


class ExtractionClient(Protocol):
    """Interface for LLM text extraction."""

    async def extract(
        self, *, model: str, store: bool, prompt: str, schema: dict[str, object]
    ) -> str:
        """Return the raw text produced by the model."""


@dataclass
class ExtractionService:
    """Service that prompts for structured food items and validates them."""

    client: ExtractionClient
    model: str
    store: bool = False

    async def extract(self, description: str) -> ExtractionResult:
        """Extract food items from a natural language description."""
        prompt = f"{EXTRACTION_PROMPT}\n\nFOOD DESCRIPTION:\n{description}\n"
        text = await self.client.extract(
            model=self.model,
            store=self.store,
            prompt=prompt,
            schema=EXTRACTION_SCHEMA,
        )
        return parse_extraction(text)


def parse_extraction(text: str) -> ExtractionResult:
    """Parse and validate model output into an extraction result."""
    raw = strip_code_fences(text or "")
    if not raw:
        raise ExtractionError("Model returned empty output for nutrition extraction")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ExtractionError(
            "Model returned invalid JSON for nutrition extraction"
        ) from exc
    try:
        return ExtractionResult.model_validate(payload)
    except PydanticValidationError as exc:
        raise ExtractionError(
            f"Nutrition extraction failed validation: {exc.error_count()} error(s)"
        ) from exc


def strip_code_fences(text: str) -> str:
    trimmed = text.strip()
    match = _FENCE_RE.match(trimmed)
    if match:
        return match.group(1).strip()
    return trimmed
