"""
draw.io (mxGraph) XML element builders.

Provides the small typed API the generator uses to emit ``<mxfile>``
documents: pages hold cells, cells hold geometry, and every class knows how
to turn itself into an ElementTree element.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional

from diagram_gen.compress import compress_xml
from diagram_gen.errors import CompressionError

logger = logging.getLogger("diagram-gen.mxgraph")


@dataclass
class Geometry:
    """Position + size for vertices; a relative placeholder for edges."""
    x: float = 0
    y: float = 0
    width: float = 120
    height: float = 60
    relative: bool = False

    def to_element(self) -> ET.Element:
        attrib: dict[str, str] = {}
        if self.relative:
            attrib["relative"] = "1"
        else:
            attrib["x"] = _num(self.x)
            attrib["y"] = _num(self.y)
            attrib["width"] = _num(self.width)
            attrib["height"] = _num(self.height)
        attrib["as"] = "geometry"
        return ET.Element("mxGeometry", attrib=attrib)


@dataclass
class MxCell:
    """One mxCell: a vertex, an edge or one of the two structural cells."""
    id: str
    value: str = ""
    style: str = ""
    parent: str = "1"
    vertex: bool = False
    edge: bool = False
    source: Optional[str] = None
    target: Optional[str] = None
    geometry: Optional[Geometry] = None
    # Rendered via an <object> wrapper when set
    tooltip: Optional[str] = None

    def to_element(self) -> ET.Element:
        attrib: dict[str, str] = {"id": self.id}
        if self.value:
            attrib["value"] = self.value
        if self.style:
            attrib["style"] = self.style
        if self.vertex:
            attrib["vertex"] = "1"
        if self.edge:
            attrib["edge"] = "1"
        if self.parent:
            attrib["parent"] = self.parent
        if self.source:
            attrib["source"] = self.source
        if self.target:
            attrib["target"] = self.target
        el = ET.Element("mxCell", attrib=attrib)
        if self.geometry:
            el.append(self.geometry.to_element())

        if self.tooltip:
            # id and label move to the <object> wrapper
            wrapper = ET.Element("object", attrib={
                "label": el.attrib.pop("value", ""),
                "tooltip": self.tooltip,
                "id": el.attrib.pop("id"),
            })
            wrapper.append(el)
            return wrapper

        return el


@dataclass
class MxDiagram:
    """A single page inside an mxfile."""
    name: str = "Page-1"
    id: str = ""
    cells: list[MxCell] = field(default_factory=list)
    # mxGraphModel settings
    dx: int = 1200
    dy: int = 800
    grid: bool = True
    grid_size: int = 10
    page_width: int = 1200
    page_height: int = 900

    # internal counter; 0 and 1 are the root and default layer
    _next_id: int = field(default=2, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [
                MxCell(id="0", parent=""),
                MxCell(id="1", parent="0"),
            ]

    @property
    def pending_id(self) -> int:
        """The id the next added cell will receive."""
        return self._next_id

    def next_id(self) -> str:
        """Generate a sequential cell ID."""
        cid = str(self._next_id)
        self._next_id += 1
        return cid

    # ----- builder helpers -----

    def add_vertex(
        self,
        value: str,
        x: float,
        y: float,
        width: float = 120,
        height: float = 60,
        style: str = "",
        tooltip: Optional[str] = None,
    ) -> str:
        cid = self.next_id()
        self.cells.append(MxCell(
            id=cid,
            value=value,
            style=style,
            vertex=True,
            geometry=Geometry(x=x, y=y, width=width, height=height),
            tooltip=tooltip,
        ))
        return cid

    def add_edge(
        self,
        source: str,
        target: str,
        value: str = "",
        style: str = "",
    ) -> str:
        cid = self.next_id()
        self.cells.append(MxCell(
            id=cid,
            value=value,
            style=style,
            edge=True,
            source=source,
            target=target,
            geometry=Geometry(relative=True),
        ))
        return cid

    @property
    def vertices(self) -> list[MxCell]:
        return [c for c in self.cells if c.vertex]

    @property
    def edges(self) -> list[MxCell]:
        return [c for c in self.cells if c.edge]

    def model_element(self) -> ET.Element:
        graph_attrs: dict[str, str] = {
            "dx": str(self.dx),
            "dy": str(self.dy),
            "grid": "1" if self.grid else "0",
            "gridSize": str(self.grid_size),
            "guides": "1",
            "tooltips": "1",
            "connect": "1",
            "arrows": "1",
            "fold": "1",
            "page": "1",
            "pageScale": "1",
            "pageWidth": str(self.page_width),
            "pageHeight": str(self.page_height),
            "math": "0",
            "shadow": "0",
        }
        model = ET.Element("mxGraphModel", attrib=graph_attrs)
        root = ET.SubElement(model, "root")
        for cell in self.cells:
            root.append(cell.to_element())
        return model

    def to_element(self, compressed: bool = False) -> ET.Element:
        """Build the ``<diagram>`` element.

        With *compressed*, the model is serialized, deflated and base64
        encoded into the element text instead of being nested. A page that
        fails to compress is nested uncompressed.
        """
        attrib = {"name": self.name}
        if self.id:
            attrib["id"] = self.id
        diagram = ET.Element("diagram", attrib=attrib)
        model = self.model_element()
        if compressed:
            try:
                diagram.text = compress_xml(ET.tostring(model, encoding="unicode"))
                return diagram
            except CompressionError as exc:
                logger.warning("Page %r left uncompressed: %s", self.name, exc.message)
        diagram.append(model)
        return diagram


@dataclass
class MxFile:
    """The <mxfile> document holding every page."""
    diagrams: list[MxDiagram] = field(default_factory=list)
    host: str = "app.diagrams.net"
    agent: str = "diagram-gen"
    compressed: bool = False

    def to_element(self) -> ET.Element:
        mxfile = ET.Element("mxfile", attrib={
            "host": self.host,
            "agent": self.agent,
            "compressed": "true" if self.compressed else "false",
        })
        for d in self.diagrams:
            mxfile.append(d.to_element(compressed=self.compressed))
        return mxfile

    def to_xml(self, pretty: bool = True) -> str:
        mxfile = self.to_element()
        if pretty:
            ET.indent(mxfile, space="  ")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(
            mxfile, encoding="unicode"
        )


def _num(value: float) -> str:
    """Format a coordinate without a trailing ``.0`` for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
