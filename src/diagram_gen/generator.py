"""
draw.io document generation.

Drives the full pipeline for one diagram:

    layout (by name) -> positions -> swimlanes -> pages -> per-page cells
    -> <mxfile> document (optionally with compressed pages)
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from diagram_gen.layout import DEFAULT_LAYOUT, new_layout
from diagram_gen.models import Diagram, Page, Position, ShapeType
from diagram_gen.mxgraph import MxDiagram, MxFile
from diagram_gen.styles import SWIMLANE_STYLE, build_component_style, build_edge_style
from diagram_gen.swimlane import Swimlane, build_swimlanes

logger = logging.getLogger("diagram-gen.generator")

DEFAULT_PAGE = "default"

NODE_WIDTH = 120
NODE_HEIGHT = 60
TALL_NODE_HEIGHT = 80
_TALL_SHAPES = frozenset({ShapeType.ISO_SERVER.value, ShapeType.ISO_DATABASE.value})

# Stagger for components that arrive without a usable position
_FALLBACK_ORIGIN = 100
_FALLBACK_STEP_X = 50
_FALLBACK_STEP_Y = 30


def build_pages(diagram: Diagram) -> list[Page]:
    """Partition a diagram into pages.

    Explicit ``diagram.pages`` are returned unchanged. Otherwise components
    and connections are grouped by their ``page`` field; an unset page maps
    to ``"default"``. Pages are created on first reference and keep that
    order; members keep diagram input order.
    """
    if diagram.pages:
        return diagram.pages

    pages: dict[str, Page] = {}

    def page_for(name: str) -> Page:
        key = name or DEFAULT_PAGE
        if key not in pages:
            pages[key] = Page(name=key)
        return pages[key]

    for comp in diagram.components:
        page_for(comp.page).components.append(comp)
    for conn in diagram.connections:
        page_for(conn.page).connections.append(conn)

    return list(pages.values())


class DrawioGenerator:
    """Generates draw.io XML documents from a :class:`Diagram`."""

    format = "drawio"

    def __init__(self, layout_type: str = DEFAULT_LAYOUT, compress: bool = False) -> None:
        self.layout_type = layout_type
        self.compress = compress

    def generate(self, diagram: Diagram) -> str:
        layout_type = diagram.layout or self.layout_type
        engine = new_layout(layout_type)
        positions = engine.calculate(diagram.components, diagram.connections)
        swimlanes = build_swimlanes(diagram.components, positions)
        pages = build_pages(diagram)

        compressed = self.compress or diagram.compress
        logger.info(
            "Rendering %d component(s), %d connection(s) on %d page(s) with %s layout%s",
            len(diagram.components), len(diagram.connections), len(pages),
            engine.name, " (compressed)" if compressed else "",
        )

        mxfile = MxFile(
            diagrams=[
                self.render_page(page, swimlanes, positions, index)
                for index, page in enumerate(pages)
            ],
            compressed=compressed,
        )
        return mxfile.to_xml()

    def build_pages(self, diagram: Diagram) -> list[Page]:
        return build_pages(diagram)

    def render_page(
        self,
        page: Page,
        swimlanes: Sequence[Swimlane],
        positions: Mapping[str, Position],
        index: int = 0,
    ) -> MxDiagram:
        """Lay out the cells of one page.

        Ids run from 2: every swimlane container of the diagram, then this
        page's components, then its connections. Connections with an
        endpoint not rendered on this page are skipped.
        """
        mx = MxDiagram(name=page.name, id=f"page-{index + 1}")

        for lane in swimlanes:
            mx.add_vertex(
                lane.name,
                int(lane.x), int(lane.y), int(lane.width), int(lane.height),
                style=SWIMLANE_STYLE,
            )

        cell_ids: dict[str, str] = {}
        for comp in page.components:
            pos = positions.get(comp.name, Position(0, 0))
            x, y = int(pos.x), int(pos.y)
            if x == 0 and y == 0:
                offset = mx.pending_id - 2
                x = _FALLBACK_ORIGIN + offset * _FALLBACK_STEP_X
                y = _FALLBACK_ORIGIN + offset * _FALLBACK_STEP_Y
            height = TALL_NODE_HEIGHT if comp.shape in _TALL_SHAPES else NODE_HEIGHT
            cell_ids[comp.name] = mx.add_vertex(
                comp.name, x, y, NODE_WIDTH, height,
                style=build_component_style(comp),
                tooltip=comp.description or None,
            )

        for conn in page.connections:
            source_id = cell_ids.get(conn.source)
            target_id = cell_ids.get(conn.target)
            if source_id is None or target_id is None:
                logger.debug(
                    "Skipping connection %s -> %s: endpoint not on page %r",
                    conn.source, conn.target, page.name,
                )
                continue
            mx.add_edge(source_id, target_id, conn.label, style=build_edge_style(conn))

        return mx
