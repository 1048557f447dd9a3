"""Pydantic models."""

from sentinel.models.composition import (
    ComponentEntry,
    ComponentType,
    CompositionContractError,
    CompositionDocument,
    IntentType,
    LayoutType,
    ReasoningBlock,
    UrgencyLevel,
    VisibilityState,
    validate_document,
)
from sentinel.models.error import ErrorDetail
from sentinel.models.placement import PlacementCell, PlacementPlan
from sentinel.models.situation import AnalysisResult

__all__ = [
    "AnalysisResult",
    "ComponentEntry",
    "ComponentType",
    "CompositionContractError",
    "CompositionDocument",
    "ErrorDetail",
    "IntentType",
    "LayoutType",
    "PlacementCell",
    "PlacementPlan",
    "ReasoningBlock",
    "UrgencyLevel",
    "VisibilityState",
    "validate_document",
]
