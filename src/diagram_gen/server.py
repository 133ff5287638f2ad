"""
diagram-gen MCP server: annotation-driven draw.io diagrams over Model Context Protocol.

Tools:
  1. diagram (pipeline): parse annotations, validate, generate .drawio XML
  2. layout (positioning): node positions, swimlane bounds, page partition
  3. style (appearance): resolved component, edge and shape style strings
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from diagram_gen.annotations import parse_annotation
from diagram_gen.errors import DiagramGenError
from diagram_gen.generator import DrawioGenerator, build_pages
from diagram_gen.layout import DEFAULT_LAYOUT, LAYOUTS, new_layout
from diagram_gen.models import Component, Connection, Diagram, DiagramType
from diagram_gen.source_parser import SourceParser
from diagram_gen.styles import build_component_style, build_edge_style, default_shape_for, get_shape_style
from diagram_gen.swimlane import build_swimlanes
from diagram_gen.validation import (
    ValidationError,
    validate_action,
    validate_component_dict,
    validate_connection_dict,
    validate_diagram,
    validate_dict,
    validate_enum,
    validate_list,
    validate_non_empty_string,
    validate_string,
    _DIAGRAM_ACTIONS,
    _LAYOUT_ACTIONS,
    _STYLE_ACTIONS,
)

# ---------------------------------------------------------------------------
# Logging: keep FastMCP's routine INFO chatter off stderr.
# ---------------------------------------------------------------------------
logging.getLogger("mcp.server").setLevel(logging.WARNING)
logger = logging.getLogger("diagram-gen")

# ---------------------------------------------------------------------------
# MCP Server
# ---------------------------------------------------------------------------
mcp = FastMCP(
    "diagram-gen",
    instructions=(
        "MCP server that turns diagram:\"...\" struct-tag annotations into\n"
        "draw.io (.drawio) documents.\n\n"
        "=== 3 TOOLS: use the 'action' parameter to pick the operation ===\n\n"
        "1. diagram(action, ...): parse, validate, generate.\n"
        "2. layout(action, ...): positions, swimlanes, pages.\n"
        "3. style(action, ...): component, edge, shape.\n\n"
        "Annotations look like:\n"
        "  type=service,name=Users,connectsTo=UsersDB;Queue,page=Backend\n"
        "Layouts: grid, layered (default), isometric.\n"
    ),
)


# ===================================================================
# Helpers
# ===================================================================

def _load_diagram(source_path: str, annotations: list[str] | None, diagram_type: str) -> Diagram:
    """Build a diagram from inline annotations or from Go sources on disk."""
    if annotations:
        validate_list(annotations, "annotations")
        diagram = Diagram(type=diagram_type)
        for i, tag in enumerate(annotations):
            validate_string(tag, f"annotations[{i}]")
            ann = parse_annotation(tag)
            diagram.add_component(ann.to_component())
            for conn in ann.to_connections():
                diagram.add_connection(conn)
        return diagram

    source_path = validate_non_empty_string(source_path, "source_path")
    return SourceParser(diagram_type).parse(source_path)


def _components_from(components: list[dict[str, Any]] | None) -> list[Component]:
    items = validate_list(components or [], "components", min_length=1)
    for i, c in enumerate(items):
        validate_component_dict(c, i)
    return [Component.from_dict(c) for c in items]


def _connections_from(connections: list[dict[str, Any]] | None) -> list[Connection]:
    items = validate_list(connections or [], "connections")
    for i, c in enumerate(items):
        validate_connection_dict(c, i)
    return [Connection.from_dict(c) for c in items]


# ===================================================================
# TOOL 1: diagram
# ===================================================================

@mcp.tool()
def diagram(
    action: str,
    source_path: str = "",
    annotations: list[str] | None = None,
    layout: str = DEFAULT_LAYOUT,
    compress: bool = False,
    diagram_type: str = DiagramType.ARCHITECTURE.value,
    output_path: str = "",
) -> str:
    """Annotation-to-diagram pipeline.

    Actions:
      parse: Parse annotations into the diagram model. Params: source_path
        or annotations, diagram_type.
      validate: Parse and check names, types and references.
      generate: Parse, validate and render a .drawio document. Params:
        layout, compress, output_path (returns the XML when empty).

    Args:
        action: One of: parse, validate, generate.
        source_path: Go source file or directory to scan.
        annotations: Annotation strings, used instead of source_path.
        layout: grid, layered or isometric.
        compress: Store pages deflated + base64 encoded.
        diagram_type: architecture, flowchart or network.
        output_path: Where generate writes the document.

    Returns:
        JSON model, a status line or draw.io XML depending on action.
    """
    try:
        action = validate_action(action, "diagram", _DIAGRAM_ACTIONS)
        diagram_type = validate_enum(diagram_type, "diagram_type", {t.value for t in DiagramType})
        layout = validate_enum(layout, "layout", set(LAYOUTS))
        model = _load_diagram(source_path, annotations, diagram_type)
    except DiagramGenError as exc:
        return f"Error: {exc.message}"

    if action == "parse":
        return json.dumps(model.to_dict(), indent=2)

    try:
        validate_diagram(model)
    except ValidationError as exc:
        return f"Error: {exc.message}"

    if action == "validate":
        return (
            f"Valid: {len(model.components)} component(s), "
            f"{len(model.connections)} connection(s)."
        )

    # ----- generate -----
    xml = DrawioGenerator(layout_type=layout, compress=compress).generate(model)
    if not output_path:
        return xml
    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(xml, encoding="utf-8")
    except OSError as exc:
        return f"Error: failed to write {output_path}: {exc}"
    logger.info("Wrote diagram to %s", path)
    return (
        f"Generated {model.type} diagram ({layout} layout) with "
        f"{len(model.components)} components and {len(model.connections)} "
        f"connections. Output written to: {path}"
    )


# ===================================================================
# TOOL 2: layout
# ===================================================================

@mcp.tool()
def layout(
    action: str,
    components: list[dict[str, Any]] | None = None,
    connections: list[dict[str, Any]] | None = None,
    layout_name: str = DEFAULT_LAYOUT,
) -> str:
    """Layout queries over a component list.

    Actions:
      positions: Node positions. Params: components, connections, layout_name.
      swimlanes: Swimlane container bounds around grouped components.
      pages: Partition components and connections by their page field.

    Components are {name, type?, shape?, page?, swimlane?, style?, ...};
    connections are {source, target, direction?, label?, page?, ...}.

    Returns:
        JSON results.
    """
    try:
        action = validate_action(action, "layout", _LAYOUT_ACTIONS)
        layout_name = validate_enum(layout_name, "layout_name", set(LAYOUTS))
        comps = _components_from(components)
        conns = _connections_from(connections)
    except ValidationError as exc:
        return f"Error: {exc.message}"

    if action == "pages":
        model = Diagram(components=comps, connections=conns)
        return json.dumps([p.to_dict() for p in build_pages(model)], indent=2)

    positions = new_layout(layout_name).calculate(comps, conns)
    if action == "positions":
        return json.dumps({name: asdict(pos) for name, pos in positions.items()}, indent=2)

    # ----- swimlanes -----
    return json.dumps([asdict(lane) for lane in build_swimlanes(comps, positions)], indent=2)


# ===================================================================
# TOOL 3: style
# ===================================================================

@mcp.tool()
def style(
    action: str,
    component: dict[str, Any] | None = None,
    connection: dict[str, Any] | None = None,
    shape: str = "",
) -> str:
    """Resolve draw.io style strings.

    Actions:
      component: Style of a component. Params: component ({name, type?,
        shape?, style?}).
      edge: Style of a connection. Params: connection ({source, target,
        direction?, edge_style?, start_arrow?, end_arrow?}).
      shape: Preset style of a shape name or component type. Params: shape.

    Returns:
        A draw.io style string.
    """
    try:
        action = validate_action(action, "style", _STYLE_ACTIONS)
        if action == "component":
            validate_dict(component, "component")
            validate_component_dict(component, 0)
            return build_component_style(Component.from_dict(component))
        if action == "edge":
            validate_dict(connection, "connection")
            validate_connection_dict(connection, 0)
            return build_edge_style(Connection.from_dict(connection))
        shape = validate_non_empty_string(shape, "shape")
    except ValidationError as exc:
        return f"Error: {exc.message}"
    return get_shape_style(default_shape_for(shape))


def main() -> None:
    """Run the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
