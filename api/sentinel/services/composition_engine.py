"""Composition engine: project a document into an ordered placement plan.

compose() never mutates the document. Steps:
1. keep visible entries only (conditional counts as hidden)
2. stable sort by ascending priority
3. dispatch on layout through a fixed strategy table, grid for unknown layouts
Entries whose type has no registered capability keep their slot while the
layout partitions (split midpoint, overlay threshold) and are then skipped, not
fatal. Every cell gets its own deep copy of the entry props.
"""

from __future__ import annotations

import copy
import logging
import math
from enum import Enum
from typing import Callable, Optional

from sentinel.models.composition import (
    ComponentEntry,
    CompositionDocument,
    LayoutType,
    VisibilityState,
)
from sentinel.models.placement import CellWidth, ConfidenceBand, PlacementCell, PlacementPlan, Region
from sentinel.services.component_registry import DEFAULT_REGISTRY, ComponentCapability, ComponentRegistry

log = logging.getLogger(__name__)

ANIMATION_STAGGER_MS = 60
OVERLAY_PRIORITY_THRESHOLD = 2
HIGH_CONFIDENCE = 0.8
MODERATE_CONFIDENCE = 0.5

# Visible entries in priority order; capability is None when the type is unregistered.
Resolved = list[tuple[ComponentEntry, Optional[ComponentCapability]]]
Placement = tuple[ComponentEntry, Optional[ComponentCapability], Region, CellWidth]
LayoutStrategy = Callable[[Resolved], list[Placement]]


def _grid(resolved: Resolved) -> list[Placement]:
    return [(entry, cap, Region.MAIN, cap.grid_width if cap else CellWidth.HALF) for entry, cap in resolved]


def _stack(resolved: Resolved) -> list[Placement]:
    return [(entry, cap, Region.MAIN, CellWidth.FULL) for entry, cap in resolved]


def _split(resolved: Resolved) -> list[Placement]:
    mid = math.ceil(len(resolved) / 2)
    left = [(entry, cap, Region.LEFT, CellWidth.FULL) for entry, cap in resolved[:mid]]
    right = [(entry, cap, Region.RIGHT, CellWidth.FULL) for entry, cap in resolved[mid:]]
    return left + right


def _overlay(resolved: Resolved) -> list[Placement]:
    base = [
        (entry, cap, Region.BASE, CellWidth.HALF)
        for entry, cap in resolved
        if entry.priority > OVERLAY_PRIORITY_THRESHOLD
    ]
    overlay = [
        (entry, cap, Region.OVERLAY, CellWidth.FULL)
        for entry, cap in resolved
        if entry.priority <= OVERLAY_PRIORITY_THRESHOLD
    ]
    return base + overlay


LAYOUT_STRATEGIES: dict[LayoutType, LayoutStrategy] = {
    LayoutType.GRID: _grid,
    LayoutType.STACK: _stack,
    LayoutType.SPLIT: _split,
    LayoutType.OVERLAY: _overlay,
}
FALLBACK_LAYOUT = LayoutType.GRID


def visible_entries(document: CompositionDocument) -> list[ComponentEntry]:
    return [entry for entry in document.components if entry.visibility == VisibilityState.VISIBLE]


def order_by_priority(entries: list[ComponentEntry]) -> list[ComponentEntry]:
    # sorted() is stable: equal priorities keep input order.
    return sorted(entries, key=lambda entry: entry.priority)


def resolve_layout(layout: object) -> LayoutType:
    if isinstance(layout, LayoutType):
        return layout
    if isinstance(layout, str):
        try:
            return LayoutType(layout.strip().lower())
        except ValueError:
            pass
    log.warning("composition_unknown_layout layout=%r fallback=%s", layout, FALLBACK_LAYOUT.value)
    return FALLBACK_LAYOUT


def confidence_band(confidence: float) -> ConfidenceBand:
    if confidence >= HIGH_CONFIDENCE:
        return ConfidenceBand.HIGH
    if confidence >= MODERATE_CONFIDENCE:
        return ConfidenceBand.MODERATE
    return ConfidenceBand.LOW


def _label(value: object) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def compose(document: CompositionDocument, registry: Optional[ComponentRegistry] = None) -> PlacementPlan:
    """Return a new placement plan for document. Pure given document and registry."""
    registry = registry or DEFAULT_REGISTRY
    ordered = order_by_priority(visible_entries(document))

    resolved: Resolved = [(entry, registry.resolve(entry.type)) for entry in ordered]
    layout = resolve_layout(document.layout)
    placements = LAYOUT_STRATEGIES[layout](resolved)

    cells: list[PlacementCell] = []
    skipped: list[str] = []
    for entry, capability, region, width in placements:
        if capability is None:
            log.warning("composition_unregistered_type id=%s type=%s", entry.id, _label(entry.type))
            skipped.append(entry.id)
            continue
        cells.append(
            PlacementCell(
                id=entry.id,
                type=capability.type,
                props=copy.deepcopy(entry.props),
                priority=entry.priority,
                region=region,
                width=width,
                order=len(cells),
                animation_delay_ms=entry.priority * ANIMATION_STAGGER_MS,
            )
        )
    confidence = max(0.0, min(1.0, float(document.confidence)))
    return PlacementPlan(
        requested_layout=_label(document.layout),
        layout=layout,
        confidence=confidence,
        confidence_percent=round(confidence * 100),
        confidence_band=confidence_band(confidence),
        cells=cells,
        skipped=skipped,
    )
