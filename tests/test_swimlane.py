"""Tests for swimlane construction."""

from diagram_gen.models import Component, Position
from diagram_gen.swimlane import SwimlanePadding, build_swimlanes


def test_lane_bounds_enclose_members() -> None:
    comps = [Component(name=n, swimlane="Backend") for n in ("a", "b", "c")]
    positions = {
        "a": Position(100, 100),
        "b": Position(200, 100),
        "c": Position(300, 100),
    }
    lanes = build_swimlanes(comps, positions)
    assert len(lanes) == 1
    lane = lanes[0]
    assert lane.id == "swimlane-Backend"
    assert lane.name == "Backend"
    assert lane.x == 50
    assert lane.y == 20
    assert lane.width >= 220
    assert lane.width == 420
    assert lane.height == 180
    assert lane.children == ["a", "b", "c"]


def test_no_lane_labels_gives_no_lanes() -> None:
    comps = [Component(name="a"), Component(name="b")]
    positions = {"a": Position(100, 100), "b": Position(300, 100)}
    assert build_swimlanes(comps, positions) == []


def test_lanes_in_first_seen_order() -> None:
    comps = [
        Component(name="a", swimlane="Edge"),
        Component(name="b", swimlane="Core"),
        Component(name="c", swimlane="Edge"),
        Component(name="d"),
    ]
    positions = {n: Position(100, 100) for n in "abcd"}
    lanes = build_swimlanes(comps, positions)
    assert [lane.name for lane in lanes] == ["Edge", "Core"]
    assert lanes[0].children == ["a", "c"]


def test_missing_position_counts_as_origin() -> None:
    comps = [Component(name="a", swimlane="L"), Component(name="ghost", swimlane="L")]
    lanes = build_swimlanes(comps, {"a": Position(200, 200)})
    lane = lanes[0]
    assert lane.x == -50
    assert lane.y == -80
    assert lane.width == 420


def test_custom_padding() -> None:
    comps = [Component(name="a", swimlane="L")]
    pad = SwimlanePadding(left=10, top=20, extra_width=30, extra_height=40)
    lane = build_swimlanes(comps, {"a": Position(100, 100)}, pad)[0]
    assert (lane.x, lane.y, lane.width, lane.height) == (90, 80, 30, 40)


def test_empty_input() -> None:
    assert build_swimlanes([], {}) == []
