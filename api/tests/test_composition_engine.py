from __future__ import annotations

import pytest

from sentinel.models.composition import (
    ComponentEntry,
    ComponentType,
    CompositionDocument,
    IntentType,
    LayoutType,
    validate_document,
)
from sentinel.models.placement import CellWidth, ConfidenceBand, Region
from sentinel.services import component_registry, composition_engine, response_library


@pytest.fixture
def mixed_document(make_document, make_entry) -> CompositionDocument:
    return validate_document(
        make_document(
            [
                make_entry("m-late", 3),
                make_entry("banner", 1, component_type="StatusBanner"),
                make_entry("m-a", 2),
                make_entry("hidden", 1, visibility="hidden"),
                make_entry("m-b", 2),
                make_entry("cond", 1, visibility="conditional"),
                make_entry("recs", 4, component_type="RecommendationStrip"),
                make_entry("logs", 3, component_type="LogViewer"),
            ]
        )
    )


def _with_layout(document: CompositionDocument, layout: str) -> CompositionDocument:
    return document.model_copy(update={"layout": layout})


def test_visibility_filter_and_stable_priority_order(mixed_document: CompositionDocument) -> None:
    plan = composition_engine.compose(mixed_document)
    assert plan.ids == ["banner", "m-a", "m-b", "m-late", "logs", "recs"]
    assert "hidden" not in plan.ids
    assert "cond" not in plan.ids


@pytest.mark.parametrize("layout", ["grid", "stack", "split", "overlay", "mosaic"])
def test_every_layout_places_each_visible_entry_exactly_once(
    mixed_document: CompositionDocument, layout: str
) -> None:
    plan = composition_engine.compose(_with_layout(mixed_document, layout))
    assert sorted(plan.ids) == sorted(["banner", "m-a", "m-b", "m-late", "logs", "recs"])
    assert len(plan.ids) == len(set(plan.ids))
    assert [cell.order for cell in plan.cells] == list(range(len(plan.cells)))


@pytest.mark.parametrize("layout", ["grid", "stack", "split", "overlay"])
def test_equal_priorities_keep_input_order_in_every_layout(
    make_document, make_entry, layout: str
) -> None:
    document = validate_document(
        make_document([make_entry(f"m{i}", 2) for i in range(6)], layout=layout)
    )
    plan = composition_engine.compose(document)
    assert plan.ids == [f"m{i}" for i in range(6)]


def test_grid_widths_follow_component_type(mixed_document: CompositionDocument) -> None:
    plan = composition_engine.compose(mixed_document)
    widths = {cell.id: cell.width for cell in plan.cells}
    assert widths["banner"] == CellWidth.FULL
    assert widths["recs"] == CellWidth.FULL
    assert widths["m-a"] == CellWidth.QUARTER
    assert widths["logs"] == CellWidth.HALF
    assert {cell.region for cell in plan.cells} == {Region.MAIN}


def test_stack_is_full_width_with_priority_stagger(mixed_document: CompositionDocument) -> None:
    plan = composition_engine.compose(_with_layout(mixed_document, "stack"))
    assert plan.layout == LayoutType.STACK
    assert all(cell.width == CellWidth.FULL for cell in plan.cells)
    assert [cell.animation_delay_ms for cell in plan.cells] == [60, 120, 120, 180, 180, 240]


@pytest.mark.parametrize(("count", "left_size"), [(0, 0), (1, 1), (5, 3), (6, 3)])
def test_split_partitions_at_ceil_midpoint(make_document, make_entry, count: int, left_size: int) -> None:
    document = validate_document(
        make_document([make_entry(f"m{i}", i + 1) for i in range(count)], layout="split")
    )
    plan = composition_engine.compose(document)
    left = plan.region(Region.LEFT)
    right = plan.region("right")
    assert [c.id for c in left] == [f"m{i}" for i in range(left_size)]
    assert [c.id for c in right] == [f"m{i}" for i in range(left_size, count)]
    assert all(cell.width == CellWidth.FULL for cell in plan.cells)


def test_overlay_partitions_by_priority_threshold(mixed_document: CompositionDocument) -> None:
    plan = composition_engine.compose(_with_layout(mixed_document, "overlay"))
    overlay = plan.region(Region.OVERLAY)
    base = plan.region(Region.BASE)
    assert [c.id for c in overlay] == ["banner", "m-a", "m-b"]
    assert [c.id for c in base] == ["m-late", "logs", "recs"]
    assert all(c.priority <= 2 and c.width == CellWidth.FULL for c in overlay)
    assert all(c.priority > 2 and c.width == CellWidth.HALF for c in base)
    assert not {c.id for c in overlay} & {c.id for c in base}


def test_unknown_layout_degrades_to_grid(mixed_document: CompositionDocument) -> None:
    grid_plan = composition_engine.compose(mixed_document)
    plan = composition_engine.compose(_with_layout(mixed_document, "mosaic"))
    assert plan.layout == LayoutType.GRID
    assert plan.requested_layout == "mosaic"
    assert plan.cells == grid_plan.cells


def test_unregistered_types_are_skipped_not_fatal(make_document, make_entry) -> None:
    document = validate_document(
        make_document(
            [
                make_entry("map", 1, component_type="GeoMap"),
                make_entry("m1", 2),
            ]
        )
    )
    registry = component_registry.DEFAULT_REGISTRY.without(ComponentType.GEO_MAP)
    plan = composition_engine.compose(document, registry=registry)
    assert plan.ids == ["m1"]
    assert plan.skipped == ["map"]


def test_unvalidated_entry_with_unknown_type_is_skipped(make_document, make_entry) -> None:
    good = ComponentEntry.model_validate(make_entry("m1", 1))
    bogus = ComponentEntry.model_construct(
        id="bogus", type="HologramView", props={}, priority=1, visibility="visible"
    )
    document = CompositionDocument.model_validate(make_document([])).model_copy(
        update={"components": [bogus, good]}
    )
    plan = composition_engine.compose(document)
    assert plan.ids == ["m1"]
    assert plan.skipped == ["bogus"]


def test_compose_is_idempotent_and_does_not_mutate(mixed_document: CompositionDocument) -> None:
    before = mixed_document.model_dump()
    first = composition_engine.compose(mixed_document)
    second = composition_engine.compose(mixed_document)
    assert first == second
    assert first is not second
    assert mixed_document.model_dump() == before


def test_props_pass_through_unmodified(mixed_document: CompositionDocument) -> None:
    plan = composition_engine.compose(mixed_document)
    by_id = {entry.id: entry for entry in mixed_document.components}
    for cell in plan.cells:
        assert cell.props == by_id[cell.id].props


@pytest.mark.parametrize(
    ("confidence", "band", "percent"),
    [(0.94, ConfidenceBand.HIGH, 94), (0.8, ConfidenceBand.HIGH, 80), (0.54, ConfidenceBand.MODERATE, 54), (0.3, ConfidenceBand.LOW, 30)],
)
def test_confidence_band(make_document, make_entry, confidence: float, band: ConfidenceBand, percent: int) -> None:
    document = validate_document(make_document([make_entry("m1", 1)], confidence=confidence))
    plan = composition_engine.compose(document)
    assert plan.confidence_band == band
    assert plan.confidence_percent == percent


@pytest.mark.parametrize("intent", list(IntentType))
def test_synthesized_templates_compose_completely(intent: IntentType) -> None:
    document = response_library.synthesize(intent, None, 0.7)
    plan = composition_engine.compose(document)
    assert len(plan.cells) == len(document.components)
    assert plan.skipped == []
    assert plan.layout == document.layout
    assert plan.cells[0].type == ComponentType.STATUS_BANNER


def test_investigation_split_puts_hypotheses_left_and_evidence_right() -> None:
    plan = composition_engine.compose(response_library.synthesize(IntentType.INVESTIGATION, None, 0.69))
    assert [c.id for c in plan.region(Region.LEFT)] == ["banner-1", "insights-1", "chart-1"]
    assert [c.id for c in plan.region(Region.RIGHT)] == ["timeline-1", "logs-1", "geo-1"]


def test_plan_props_are_independent_of_the_document() -> None:
    document = response_library.synthesize(IntentType.INCIDENT, None, 0.94)
    plan = composition_engine.compose(document)

    alert_cell = next(cell for cell in plan.cells if cell.id == "alert-1")
    alert_cell.props["alerts"].clear()
    alert_cell.props["title"] = "rewritten by a renderer"

    alert_entry = next(entry for entry in document.components if entry.id == "alert-1")
    assert len(alert_entry.props["alerts"]) > 0
    assert alert_entry.props.get("title") != "rewritten by a renderer"
    assert composition_engine.compose(document).cells != plan.cells


def test_split_midpoint_counts_unregistered_entries(make_document, make_entry) -> None:
    document = validate_document(
        make_document(
            [
                make_entry("m0", 1),
                make_entry("map", 2, component_type="GeoMap"),
                make_entry("m2", 3),
                make_entry("m3", 4),
            ],
            layout="split",
        )
    )
    registry = component_registry.DEFAULT_REGISTRY.without(ComponentType.GEO_MAP)
    plan = composition_engine.compose(document, registry=registry)

    assert [c.id for c in plan.region(Region.LEFT)] == ["m0"]
    assert [c.id for c in plan.region(Region.RIGHT)] == ["m2", "m3"]
    assert plan.skipped == ["map"]
    assert [cell.order for cell in plan.cells] == [0, 1, 2]


@pytest.mark.parametrize("priority", [1, 5, 12])
def test_animation_delay_is_priority_times_stagger(make_document, make_entry, priority: int) -> None:
    plan = composition_engine.compose(validate_document(make_document([make_entry("m1", priority)])))
    assert plan.cells[0].animation_delay_ms == priority * 60
