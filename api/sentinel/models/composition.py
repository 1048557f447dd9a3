"""Composition document models: the only contract between analysis and rendering.

Wire names are camelCase; every model also accepts the Python field name.
Documents are frozen once built and their sequences are tuples. Component props
stay an opaque mapping on the entry, checked against the props model registered
for the entry type and deep-copied from the input so no caller shares them.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class LayoutType(str, Enum):
    GRID = "grid"
    STACK = "stack"
    SPLIT = "split"
    OVERLAY = "overlay"


class VisibilityState(str, Enum):
    VISIBLE = "visible"
    HIDDEN = "hidden"
    CONDITIONAL = "conditional"


class IntentType(str, Enum):
    OVERVIEW = "overview"
    INVESTIGATION = "investigation"
    INCIDENT = "incident"
    ESCALATION = "escalation"
    EXPLORATION = "exploration"


class UrgencyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComponentType(str, Enum):
    METRIC_CARD = "MetricCard"
    ALERT_PANEL = "AlertPanel"
    TIMELINE_VIEW = "TimelineView"
    LOG_VIEWER = "LogViewer"
    CHART_VIEW = "ChartView"
    ACTION_CHECKLIST = "ActionChecklist"
    INSIGHT_SUMMARY = "InsightSummary"
    RECOMMENDATION_STRIP = "RecommendationStrip"
    GEO_MAP = "GeoMap"
    STATUS_BANNER = "StatusBanner"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class SystemStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    CRITICAL = "critical"
    INVESTIGATING = "investigating"
    MAINTENANCE = "maintenance"


class SignalStatus(str, Enum):
    """Status of a single metric or map point."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class ChartType(str, Enum):
    BAR = "bar"
    LINE = "line"
    AREA = "area"


class CompositionContractError(ValueError):
    """Raised when a composition document breaks the structural contract."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid composition document")


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ─── Component props (tagged by ComponentEntry.type) ──────────────


class MetricCardProps(_WireModel):
    title: str
    value: Union[str, float]
    change: Optional[float] = None
    change_direction: Optional[TrendDirection] = Field(default=None, alias="changeDirection")
    unit: Optional[str] = None
    status: Optional[SignalStatus] = None


class Alert(_WireModel):
    id: str
    severity: Severity
    message: str
    timestamp: str
    source: str


class AlertPanelProps(_WireModel):
    alerts: list[Alert]
    title: Optional[str] = None


class TimelineEvent(_WireModel):
    id: str
    timestamp: str
    title: str
    description: str
    severity: Severity


class TimelineViewProps(_WireModel):
    events: list[TimelineEvent]
    title: Optional[str] = None


class LogEntry(_WireModel):
    id: str
    timestamp: str
    level: LogLevel
    message: str
    source: str


class LogViewerProps(_WireModel):
    logs: list[LogEntry]
    title: Optional[str] = None


class ChartDataPoint(_WireModel):
    label: str
    value: float


class ChartViewProps(_WireModel):
    title: str
    data: list[ChartDataPoint]
    chart_type: ChartType = Field(alias="chartType")
    color: Optional[str] = None


class ChecklistItem(_WireModel):
    id: str
    label: str
    completed: bool
    priority: UrgencyLevel


class ActionChecklistProps(_WireModel):
    title: str
    items: list[ChecklistItem]


class Insight(_WireModel):
    id: str
    text: str
    confidence: float = Field(ge=0.0, le=1.0)
    category: str


class InsightSummaryProps(_WireModel):
    title: str
    insights: list[Insight]


class Recommendation(_WireModel):
    id: str
    title: str
    description: str
    urgency: UrgencyLevel
    action: str


class RecommendationStripProps(_WireModel):
    recommendations: list[Recommendation]


class GeoPoint(_WireModel):
    id: str
    label: str
    x: float = Field(ge=0.0, le=100.0, description="Abstract position 0-100")
    y: float = Field(ge=0.0, le=100.0, description="Abstract position 0-100")
    status: SignalStatus


class GeoMapProps(_WireModel):
    title: str
    points: list[GeoPoint]


class StatusBannerProps(_WireModel):
    status: SystemStatus
    title: str
    message: str
    timestamp: str


PROPS_MODELS: dict[ComponentType, type[BaseModel]] = {
    ComponentType.METRIC_CARD: MetricCardProps,
    ComponentType.ALERT_PANEL: AlertPanelProps,
    ComponentType.TIMELINE_VIEW: TimelineViewProps,
    ComponentType.LOG_VIEWER: LogViewerProps,
    ComponentType.CHART_VIEW: ChartViewProps,
    ComponentType.ACTION_CHECKLIST: ActionChecklistProps,
    ComponentType.INSIGHT_SUMMARY: InsightSummaryProps,
    ComponentType.RECOMMENDATION_STRIP: RecommendationStripProps,
    ComponentType.GEO_MAP: GeoMapProps,
    ComponentType.STATUS_BANNER: StatusBannerProps,
}


# ─── Document ─────────────────────────────────────────────────────


class ComponentEntry(_WireModel):
    """One addressable unit of a composition. priority 1 = highest."""

    id: str = Field(min_length=1)
    type: ComponentType
    props: dict[str, Any] = Field(default_factory=dict)
    priority: int = Field(ge=1)
    visibility: VisibilityState = VisibilityState.VISIBLE
    visibility_condition: Optional[str] = Field(default=None, alias="visibilityCondition")

    @field_validator("props")
    @classmethod
    def props_detached(cls, v: dict[str, Any]) -> dict[str, Any]:
        return copy.deepcopy(v)

    @model_validator(mode="after")
    def props_match_type(self) -> ComponentEntry:
        props_model = PROPS_MODELS[self.type]
        try:
            props_model.model_validate(self.props)
        except ValidationError as exc:
            problems = ", ".join(
                f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
                for err in exc.errors()
            )
            raise ValueError(f"props do not match {self.type.value}: {problems}") from exc
        return self


class HiddenComponentExplanation(_WireModel):
    type: ComponentType
    reason: str


class ReasoningBlock(_WireModel):
    intent: IntentType
    urgency: UrgencyLevel
    uncertainty_areas: tuple[str, ...] = Field(default=(), alias="uncertaintyAreas")
    hidden_components: tuple[HiddenComponentExplanation, ...] = Field(default=(), alias="hiddenComponents")


class CompositionDocument(_WireModel):
    """Layout, components, confidence and reasoning for one analysis."""

    layout: Union[LayoutType, str] = Field(
        description="grid | stack | split | overlay; unknown values compose as grid"
    )
    components: tuple[ComponentEntry, ...] = ()
    confidence: float = Field(ge=0.0, le=1.0)
    explanation: str
    reasoning: ReasoningBlock

    @field_validator("layout")
    @classmethod
    def layout_normalized(cls, v: Union[LayoutType, str]) -> Union[LayoutType, str]:
        """Known layouts become LayoutType; anything else is kept for the engine's grid fallback."""
        if isinstance(v, LayoutType):
            return v
        cleaned = v.strip().lower()
        if cleaned in (e.value for e in LayoutType):
            return LayoutType(cleaned)
        return v

    @model_validator(mode="after")
    def ids_unique_and_explained(self) -> CompositionDocument:
        seen: set[str] = set()
        duplicates: list[str] = []
        for entry in self.components:
            if entry.id in seen and entry.id not in duplicates:
                duplicates.append(entry.id)
            seen.add(entry.id)
        if duplicates:
            raise ValueError(f"duplicate component ids: {', '.join(duplicates)}")
        has_visible = any(entry.visibility == VisibilityState.VISIBLE for entry in self.components)
        if has_visible and not self.explanation.strip():
            raise ValueError("explanation must be non-empty when components are visible")
        return self

    @property
    def layout_type(self) -> Optional[LayoutType]:
        return self.layout if isinstance(self.layout, LayoutType) else None


def validate_document(payload: Any) -> CompositionDocument:
    """Validate a raw mapping (local or remote) into a CompositionDocument.

    Raises CompositionContractError listing every violation; nothing is repaired.
    """
    if isinstance(payload, CompositionDocument):
        return payload
    if not isinstance(payload, dict):
        raise CompositionContractError([f"document must be an object, got {type(payload).__name__}"])
    try:
        return CompositionDocument.model_validate(payload)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise CompositionContractError(errors) from exc
