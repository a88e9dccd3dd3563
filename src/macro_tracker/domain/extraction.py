"""Models for structured nutrition extraction results."""

from pydantic import BaseModel, ConfigDict, Field

from macro_tracker.domain.entries import Confidence


class ExtractedItem(BaseModel):
    """Single food item returned by the extraction model."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    name: str = Field(min_length=1)
    quantity: str
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    fiber: float = Field(ge=0)
    confidence: Confidence


class ExtractionResult(BaseModel):
    """Structured output for a food description."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    items: list[ExtractedItem] = Field(min_length=1)
