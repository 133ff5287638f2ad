"""Tests for the MCP server tools (3-tool architecture)."""

import json
import os
import tempfile

from diagram_gen.server import diagram, layout, style

ANNOTATIONS = [
    "type=gateway,name=Edge,connectsTo=Api",
    "type=service,name=Api,connectsTo=Db;Cache,swimlane=Core",
    "type=database,name=Db,swimlane=Core,page=Data",
    "type=cache,name=Cache",
]

COMPONENTS = [
    {"name": "A", "swimlane": "Lane"},
    {"name": "B", "type": "database", "swimlane": "Lane", "page": "Data"},
    {"name": "C"},
]
CONNECTIONS = [
    {"source": "A", "target": "B"},
    {"source": "B", "target": "C"},
]


# ===================================================================
# diagram tool
# ===================================================================

def test_parse_annotations() -> None:
    model = json.loads(diagram(action="parse", annotations=ANNOTATIONS))
    assert model["type"] == "architecture"
    assert [c["name"] for c in model["components"]] == ["Edge", "Api", "Db", "Cache"]
    assert len(model["connections"]) == 3


def test_parse_source_file() -> None:
    source = 'package x\n\ntype S struct {\n\tA int `diagram:"name=Solo,type=user"`\n}\n'
    with tempfile.NamedTemporaryFile("w", suffix=".go", delete=False, encoding="utf-8") as f:
        f.write(source)
        path = f.name
    try:
        model = json.loads(diagram(action="parse", source_path=path, diagram_type="network"))
        assert model["type"] == "network"
        assert model["components"] == [{"name": "Solo", "type": "user"}]
    finally:
        os.unlink(path)


def test_validate() -> None:
    assert diagram(action="validate", annotations=ANNOTATIONS).startswith("Valid: 4 component(s)")
    result = diagram(action="validate", annotations=["name=A,connectsTo=Nope"])
    assert result == "Error: connection references unknown target: Nope"


def test_generate_returns_xml() -> None:
    xml = diagram(action="generate", annotations=ANNOTATIONS, layout="isometric")
    assert xml.startswith("<?xml")
    assert "<mxfile" in xml
    assert 'name="default"' in xml
    assert 'name="Data"' in xml
    assert "mxgraph.isometric" not in xml


def test_generate_writes_file() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "nested", "arch.drawio")
        result = diagram(action="generate", annotations=ANNOTATIONS, compress=True, output_path=path)
        assert "Output written to" in result
        assert "with 4 components and 3 connections" in result
        with open(path, encoding="utf-8") as fh:
            assert 'compressed="true"' in fh.read()


def test_diagram_errors() -> None:
    assert diagram(action="draw").startswith("Error: Unknown diagram action")
    assert "source_path" in diagram(action="parse")
    assert "cannot access input path" in diagram(action="parse", source_path="/no/such/dir")
    assert "name is required" in diagram(action="parse", annotations=["type=service"])
    assert "'layout' must be one of" in diagram(action="generate", annotations=ANNOTATIONS, layout="spiral")
    assert "'diagram_type'" in diagram(action="parse", annotations=ANNOTATIONS, diagram_type="mindmap")


# ===================================================================
# layout tool
# ===================================================================

def test_layout_positions() -> None:
    positions = json.loads(layout(
        action="positions", components=COMPONENTS, connections=CONNECTIONS,
    ))
    assert positions["A"] == {"x": 300, "y": 100}
    assert positions["C"]["y"] > positions["B"]["y"] > positions["A"]["y"]


def test_layout_positions_grid() -> None:
    positions = json.loads(layout(action="positions", components=COMPONENTS, layout_name="grid"))
    assert [p["y"] for p in positions.values()] == [100, 100, 100]


def test_layout_swimlanes() -> None:
    lanes = json.loads(layout(
        action="swimlanes", components=COMPONENTS, connections=CONNECTIONS,
    ))
    assert len(lanes) == 1
    assert lanes[0]["id"] == "swimlane-Lane"
    assert lanes[0]["children"] == ["A", "B"]
    assert lanes[0]["x"] == 250


def test_layout_pages() -> None:
    pages = json.loads(layout(action="pages", components=COMPONENTS, connections=CONNECTIONS))
    assert [p["name"] for p in pages] == ["default", "Data"]
    assert [c["name"] for c in pages[1]["components"]] == ["B"]


def test_layout_errors() -> None:
    assert "at least 1" in layout(action="positions")
    assert "missing required key 'name'" in layout(action="positions", components=[{"type": "api"}])
    assert "missing required key 'target'" in layout(
        action="positions", components=COMPONENTS, connections=[{"source": "A"}],
    )
    assert "Error" in layout(action="positions", components=COMPONENTS, layout_name="spiral")


# ===================================================================
# style tool
# ===================================================================

def test_style_component() -> None:
    result = style(action="component", component={"name": "db", "type": "database"})
    assert result.startswith("shape=cylinder;fillColor=#ffe6cc;strokeColor=#d79b00")
    assert result.endswith("html=1")


def test_style_edge() -> None:
    result = style(action="edge", connection={
        "source": "a", "target": "b", "direction": "bidirectional",
    })
    assert result == "startArrow=classic;endArrow=classic;html=1"


def test_style_shape() -> None:
    assert style(action="shape", shape="queue").startswith("shape=parallelogram")
    assert style(action="shape", shape="iso:cloud") == "shape=mxgraph.isometric.cloud;"


def test_style_errors() -> None:
    assert style(action="component").startswith("Error:")
    assert "'source'" in style(action="edge", connection={"target": "b"})
    assert "'shape'" in style(action="shape")
    assert "Unknown style action" in style(action="theme")
