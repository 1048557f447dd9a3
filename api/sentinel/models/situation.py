"""Situation analysis request/response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sentinel.models.composition import CompositionDocument, IntentType, UrgencyLevel
from sentinel.models.placement import PlacementPlan


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    intent: IntentType
    urgency: UrgencyLevel
    confidence: float = Field(ge=0.0, le=0.95, description="Pre-synthesis confidence")
    keywords: list[str] = Field(default_factory=list)
    intent_scores: dict[IntentType, int] = Field(default_factory=dict)


class SituationRequest(BaseModel):
    """Request body for analyze/classify. Empty text is allowed and classifies as exploration."""

    situation: str = Field("", max_length=5000)

    @field_validator("situation", mode="before")
    @classmethod
    def situation_strip(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v


class SituationAnalysisResponse(BaseModel):
    document: CompositionDocument
    plan: PlacementPlan


class DocumentValidationReport(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
