"""
Layout strategies for positioning diagram components.

Each strategy maps ``(components, connections)`` to a fresh
``{name: Position}`` dict and keeps no state between calls:

- ``grid``     : row-major grid, column count chosen by component count
- ``layered``  : rows by dependency depth (bounded longest-path relaxation)
- ``isometric``: the same layering projected through an isometric transform

Strategies are picked by name with :func:`new_layout`; unknown names fall
back to ``layered``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from diagram_gen.models import Component, Connection, Position

logger = logging.getLogger("diagram-gen.layout")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GridConfig:
    """Spacing for the grid layout."""
    start_x: float = 100
    start_y: float = 100
    spacing_x: float = 180
    spacing_y: float = 120


@dataclass(frozen=True)
class LayeredConfig:
    """Spacing for the layered layout."""
    start_x: float = 100
    start_y: float = 100
    spacing_x: float = 200
    spacing_y: float = 120


@dataclass(frozen=True)
class IsometricConfig:
    """Planar grid fed into the isometric projection."""
    base_x: float = 300
    base_y: float = 100
    spacing_x: float = 200
    spacing_y: float = 150
    # Columns used by the row-major fallback placement
    fallback_columns: int = 3


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def iso_project(x: float, y: float) -> tuple[float, float]:
    """Project a planar point onto the isometric plane."""
    return x - y, (x + y) / 2


def assign_layers(
    components: Sequence[Component],
    connections: Sequence[Connection],
) -> dict[str, int]:
    """Rank components by longest-path relaxation over the connections.

    Every component starts at layer 0. Each pass promotes the target of any
    connection whose layer is not below its source. Passes stop once nothing
    changes or after ``len(components) ** 2`` passes, so cyclic graphs
    terminate with whatever ranks the bound leaves them.
    Connections naming unknown components are ignored.
    """
    layers: dict[str, int] = {comp.name: 0 for comp in components}

    max_iterations = len(components) * len(components)
    for _ in range(max_iterations):
        changed = False
        for conn in connections:
            if conn.source not in layers or conn.target not in layers:
                continue
            src_layer = layers[conn.source]
            if layers[conn.target] <= src_layer:
                layers[conn.target] = src_layer + 1
                changed = True
        if not changed:
            break
    else:
        if max_iterations:
            logger.debug(
                "Layer assignment hit its bound of %d passes (cyclic graph?)",
                max_iterations,
            )

    return layers


def group_by_layer(
    components: Sequence[Component],
    layers: dict[str, int],
) -> dict[int, list[str]]:
    """Group component names by layer, keeping input order within a layer."""
    groups: dict[int, list[str]] = {}
    for comp in components:
        groups.setdefault(layers.get(comp.name, 0), []).append(comp.name)
    return groups


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class Layout:
    """Base class for layout strategies."""

    name = ""

    def calculate(
        self,
        components: Sequence[Component],
        connections: Sequence[Connection],
    ) -> dict[str, Position]:
        raise NotImplementedError


class GridLayout(Layout):
    """Row-major grid; connections are ignored."""

    name = "grid"

    def __init__(self, config: Optional[GridConfig] = None) -> None:
        self.config = config or GridConfig()

    @staticmethod
    def columns_for(count: int) -> int:
        if count <= 4:
            return count
        if count <= 6:
            return 3
        return 4

    def calculate(
        self,
        components: Sequence[Component],
        connections: Sequence[Connection] = (),
    ) -> dict[str, Position]:
        cfg = self.config
        cols = self.columns_for(len(components))
        positions: dict[str, Position] = {}
        for i, comp in enumerate(components):
            row = i // cols
            col = i % cols
            positions[comp.name] = Position(
                x=cfg.start_x + col * cfg.spacing_x,
                y=cfg.start_y + row * cfg.spacing_y,
            )
        return positions


class LayeredLayout(Layout):
    """One row per dependency layer, sources at the top."""

    name = "layered"

    def __init__(self, config: Optional[LayeredConfig] = None) -> None:
        self.config = config or LayeredConfig()

    def calculate(
        self,
        components: Sequence[Component],
        connections: Sequence[Connection] = (),
    ) -> dict[str, Position]:
        cfg = self.config
        layers = assign_layers(components, connections)

        # The cursor advances before placement, so each row starts one
        # spacing step right of start_x.
        cursors: dict[int, float] = {layer: cfg.start_x for layer in layers.values()}

        positions: dict[str, Position] = {}
        for comp in components:
            layer = layers[comp.name]
            cursors[layer] += cfg.spacing_x
            positions[comp.name] = Position(
                x=cursors[layer],
                y=cfg.start_y + layer * cfg.spacing_y,
            )
        return positions


class IsometricLayout(Layout):
    """Layered ranking projected onto an isometric plane."""

    name = "isometric"

    def __init__(self, config: Optional[IsometricConfig] = None) -> None:
        self.config = config or IsometricConfig()

    def calculate(
        self,
        components: Sequence[Component],
        connections: Sequence[Connection] = (),
    ) -> dict[str, Position]:
        cfg = self.config
        layers = assign_layers(components, connections)

        positions: dict[str, Position] = {}
        for layer, names in group_by_layer(components, layers).items():
            for index, name in enumerate(names):
                iso_x, iso_y = iso_project(
                    cfg.base_x + index * cfg.spacing_x,
                    cfg.base_y + layer * cfg.spacing_y,
                )
                # Pull deeper layers back up to offset the projection skew
                positions[name] = Position(
                    x=iso_x,
                    y=iso_y - layer * cfg.spacing_y * 0.5,
                )

        if not positions:
            positions = self._fallback_positions(components)
        return positions

    def _fallback_positions(self, components: Sequence[Component]) -> dict[str, Position]:
        """Row-major projected placement used when layering yields nothing."""
        cfg = self.config
        cols = cfg.fallback_columns
        positions: dict[str, Position] = {}
        for i, comp in enumerate(components):
            iso_x, iso_y = iso_project(
                cfg.base_x + (i % cols) * cfg.spacing_x,
                cfg.base_y + (i // cols) * cfg.spacing_y,
            )
            positions[comp.name] = Position(x=iso_x, y=iso_y)
        return positions


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------

LAYOUTS: dict[str, type[Layout]] = {
    GridLayout.name: GridLayout,
    LayeredLayout.name: LayeredLayout,
    IsometricLayout.name: IsometricLayout,
}

DEFAULT_LAYOUT = LayeredLayout.name


def new_layout(layout_type: str) -> Layout:
    """Return the strategy called *layout_type*; unknown names get ``layered``."""
    cls = LAYOUTS.get(layout_type or "", LayeredLayout)
    return cls()
