"""
Swimlane containers derived from component lane labels and positions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from diagram_gen.models import Component, Position


@dataclass(frozen=True)
class SwimlanePadding:
    """Margins added around the members' position span.

    Sized to enclose 120x60 nodes plus the lane's title bar.
    """
    left: float = 50
    top: float = 80
    extra_width: float = 220
    extra_height: float = 180


@dataclass
class Swimlane:
    """A labelled container enclosing its member components."""
    id: str
    name: str
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    children: list[str] = field(default_factory=list)


def build_swimlanes(
    components: Sequence[Component],
    positions: Mapping[str, Position],
    padding: Optional[SwimlanePadding] = None,
) -> list[Swimlane]:
    """Group components by ``swimlane`` label and size each lane.

    Lanes come out in first-seen order and list members in input order.
    A member missing from *positions* is treated as sitting at (0, 0).
    """
    pad = padding or SwimlanePadding()
    lanes: dict[str, Swimlane] = {}

    for comp in components:
        if not comp.swimlane:
            continue
        lane = lanes.get(comp.swimlane)
        if lane is None:
            lane = Swimlane(id=f"swimlane-{comp.swimlane}", name=comp.swimlane)
            lanes[comp.swimlane] = lane
        lane.children.append(comp.name)

    origin = Position(0, 0)
    result: list[Swimlane] = []
    for lane in lanes.values():
        if not lane.children:
            continue
        member_positions = [positions.get(name, origin) for name in lane.children]
        min_x = min(p.x for p in member_positions)
        max_x = max(p.x for p in member_positions)
        min_y = min(p.y for p in member_positions)
        max_y = max(p.y for p in member_positions)

        lane.x = min_x - pad.left
        lane.y = min_y - pad.top
        lane.width = max_x - min_x + pad.extra_width
        lane.height = max_y - min_y + pad.extra_height
        result.append(lane)

    return result
