"""Placement plan models produced by the composition engine.

Wire names are camelCase like the composition document; Python field names are
accepted too.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sentinel.models.composition import ComponentType, LayoutType


class CellWidth(str, Enum):
    FULL = "full"
    HALF = "half"
    QUARTER = "quarter"


class Region(str, Enum):
    MAIN = "main"
    LEFT = "left"
    RIGHT = "right"
    BASE = "base"
    OVERLAY = "overlay"


class ConfidenceBand(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class PlacementCell(BaseModel):
    """One renderable unit. props are passed through to the renderer untouched."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    type: ComponentType
    props: dict[str, Any] = Field(default_factory=dict)
    priority: int
    region: Region
    width: CellWidth
    order: int = Field(ge=0, description="Position of the cell within the whole plan")
    animation_delay_ms: int = Field(ge=0, description="Stagger hint: priority * 60")


class PlacementPlan(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    requested_layout: str
    layout: LayoutType = Field(description="Strategy actually used")
    confidence: float = Field(ge=0.0, le=1.0)
    confidence_percent: int = Field(ge=0, le=100)
    confidence_band: ConfidenceBand
    cells: list[PlacementCell] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list, description="Entry ids with no registered renderer")

    def region(self, name: Region | str) -> list[PlacementCell]:
        wanted = Region(name)
        return [cell for cell in self.cells if cell.region == wanted]

    @property
    def ids(self) -> list[str]:
        return [cell.id for cell in self.cells]
