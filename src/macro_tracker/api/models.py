"""Pydantic models for API request bodies."""

from pydantic import BaseModel, Field


class LogNutritionRequest(BaseModel):
    """Free-text food description to extract and log."""

    description: str = Field(min_length=1)
    date: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    source: str | None = None
