"""Situation analysis API routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from sentinel.models.composition import CompositionContractError
from sentinel.models.error import ErrorDetail
from sentinel.models.situation import AnalysisResult, SituationAnalysisResponse, SituationRequest
from sentinel.services import composition_engine, situation_analyzer
from sentinel.services.remote_provider_client import SituationProviderError
from sentinel.services.situation_service import SituationProvider, analyze_situation

router = APIRouter()
logger = logging.getLogger(__name__)


def _provider(request: Request) -> SituationProvider | None:
    return getattr(request.app.state, "situation_provider", None)


@router.post(
    "/situations/analyze",
    response_model=SituationAnalysisResponse,
    responses={502: {"model": ErrorDetail}},
)
async def analyze(body: SituationRequest, request: Request) -> SituationAnalysisResponse:
    """Analyze a situation and return the composition document with its placement plan."""
    try:
        document = await analyze_situation(body.situation, provider=_provider(request))
    except CompositionContractError as exc:
        logger.warning("situation_provider_contract_violation errors=%s", exc.errors)
        raise HTTPException(status_code=502, detail=f"provider returned an invalid composition: {exc}")
    except SituationProviderError as exc:
        logger.warning("situation_provider_failed error=%s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    return SituationAnalysisResponse(document=document, plan=composition_engine.compose(document))


@router.post("/situations/classify", response_model=AnalysisResult)
async def classify(body: SituationRequest) -> AnalysisResult:
    """Classification only: intent, urgency, pre-synthesis confidence and keywords."""
    return situation_analyzer.analyze(body.situation)
