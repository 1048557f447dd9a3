"""Closed registry of renderable component types.

Each ComponentType maps to one capability descriptor. Lookups never raise:
an unregistered tag resolves to None and callers decide what to skip.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from pydantic import BaseModel

from sentinel.models.composition import PROPS_MODELS, ComponentType
from sentinel.models.placement import CellWidth


@dataclass(frozen=True)
class ComponentCapability:
    type: ComponentType
    description: str
    category: str
    grid_width: CellWidth
    props_model: type[BaseModel]

    def to_dict(self) -> dict[str, Any]:
        schema = self.props_model.model_json_schema(by_alias=True)
        return {
            "type": self.type.value,
            "description": self.description,
            "category": self.category,
            "gridWidth": self.grid_width.value,
            "requiredProps": sorted(schema.get("required", [])),
            "propsSchema": schema,
        }


def _capability(
    component_type: ComponentType, description: str, category: str, grid_width: CellWidth
) -> ComponentCapability:
    return ComponentCapability(
        type=component_type,
        description=description,
        category=category,
        grid_width=grid_width,
        props_model=PROPS_MODELS[component_type],
    )


_DEFAULT_CAPABILITIES: tuple[ComponentCapability, ...] = (
    _capability(
        ComponentType.METRIC_CARD,
        "Single KPI with optional trend. Use for numeric indicators.",
        "metric",
        CellWidth.QUARTER,
    ),
    _capability(
        ComponentType.ALERT_PANEL,
        "Severity-coded alert list. Use for incidents and active warnings.",
        "signal",
        CellWidth.HALF,
    ),
    _capability(
        ComponentType.TIMELINE_VIEW,
        "Vertical timeline of events. Use for incident timelines and audit trails.",
        "evidence",
        CellWidth.HALF,
    ),
    _capability(
        ComponentType.LOG_VIEWER,
        "Log pane with level coloring. Use for system logs and debugging.",
        "evidence",
        CellWidth.HALF,
    ),
    _capability(
        ComponentType.CHART_VIEW,
        "Bar, line or area chart. Use for trends, comparisons and distributions.",
        "metric",
        CellWidth.HALF,
    ),
    _capability(
        ComponentType.ACTION_CHECKLIST,
        "Checklist for incident response. Use for action items and procedures.",
        "action",
        CellWidth.HALF,
    ),
    _capability(
        ComponentType.INSIGHT_SUMMARY,
        "Insights with confidence bars. Use for analysis, hypotheses and findings.",
        "analysis",
        CellWidth.HALF,
    ),
    _capability(
        ComponentType.RECOMMENDATION_STRIP,
        "Horizontal recommendation cards. Use for suggested next actions.",
        "action",
        CellWidth.FULL,
    ),
    _capability(
        ComponentType.GEO_MAP,
        "Abstract geographic view. Use for regional status and distribution.",
        "analysis",
        CellWidth.HALF,
    ),
    _capability(
        ComponentType.STATUS_BANNER,
        "Full-width system status indicator. Use at the top of any situational view.",
        "signal",
        CellWidth.FULL,
    ),
)


class ComponentRegistry:
    """Immutable type -> capability table, resolved once at import time."""

    def __init__(self, capabilities: Iterable[ComponentCapability]):
        self._by_type: dict[ComponentType, ComponentCapability] = {}
        for capability in capabilities:
            if capability.type in self._by_type:
                raise ValueError(f"duplicate registry entry for {capability.type.value}")
            self._by_type[capability.type] = capability

    def __contains__(self, component_type: object) -> bool:
        return self.resolve(component_type) is not None

    def __iter__(self) -> Iterator[ComponentCapability]:
        return iter(self._by_type.values())

    def __len__(self) -> int:
        return len(self._by_type)

    def resolve(self, component_type: object) -> Optional[ComponentCapability]:
        if isinstance(component_type, ComponentType):
            return self._by_type.get(component_type)
        if isinstance(component_type, str):
            try:
                return self._by_type.get(ComponentType(component_type))
            except ValueError:
                return None
        return None

    def registered_types(self) -> list[ComponentType]:
        return list(self._by_type)

    def props_model_for(self, component_type: object) -> Optional[type[BaseModel]]:
        capability = self.resolve(component_type)
        return capability.props_model if capability else None

    def without(self, *component_types: ComponentType) -> ComponentRegistry:
        excluded = set(component_types)
        return ComponentRegistry(c for c in self._by_type.values() if c.type not in excluded)

    def describe(self) -> list[dict[str, Any]]:
        return [capability.to_dict() for capability in self._by_type.values()]


DEFAULT_REGISTRY = ComponentRegistry(_DEFAULT_CAPABILITIES)


def resolve(component_type: object) -> Optional[ComponentCapability]:
    return DEFAULT_REGISTRY.resolve(component_type)


def registered_types() -> list[ComponentType]:
    return DEFAULT_REGISTRY.registered_types()


def describe() -> list[dict[str, Any]]:
    return DEFAULT_REGISTRY.describe()
