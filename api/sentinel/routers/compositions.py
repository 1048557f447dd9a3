"""Composition engine API routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from sentinel.models.composition import CompositionContractError, CompositionDocument, validate_document
from sentinel.models.placement import PlacementPlan
from sentinel.models.situation import DocumentValidationReport
from sentinel.services import component_registry, composition_engine

router = APIRouter()


@router.post("/compositions/compose", response_model=PlacementPlan)
async def compose(document: CompositionDocument) -> PlacementPlan:
    """Project a composition document into a placement plan. Malformed documents fail with 422."""
    return composition_engine.compose(document)


@router.post("/compositions/validate", response_model=DocumentValidationReport)
async def validate(payload: Any = Body(...)) -> DocumentValidationReport:
    """Report contract violations of a raw document without composing it."""
    try:
        validate_document(payload)
    except CompositionContractError as exc:
        return DocumentValidationReport(valid=False, errors=exc.errors)
    return DocumentValidationReport(valid=True)


@router.get("/components")
async def list_components() -> list[dict[str, Any]]:
    """Registered component types with their prop schemas."""
    return component_registry.describe()
