"""
Style composition for rendered components and edges.

A :class:`Style` holds every draw.io attribute the generator emits and
serializes them in a fixed order so that output stays diffable. Component
styles start from per-type defaults and are overlaid with the free-form
``style`` override carried by the component.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from diagram_gen.models import Component, ComponentType, Connection, ShapeType


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FONT_STYLE_BOLD = 1
FONT_STYLE_ITALIC = 2
FONT_STYLE_UNDERLINE = 4

WHITE_SPACE_WRAP = "wrap"

DEFAULT_FONT_SIZE = 12


class ArrowType:
    CLASSIC = "classic"
    BLOCK = "block"
    OPEN = "open"
    DIAMOND = "diamond"
    NONE = "none"


class EdgeRouting:
    ORTHOGONAL = "orthogonalEdgeStyle"
    ELBOW = "elbowEdgeStyle"
    CURVED = "curvedEdgeStyle"


class Shape:
    """draw.io shape names used by the generator."""
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    ROUNDED = "rounded"
    RHOMBUS = "rhombus"
    PARALLELOGRAM = "parallelogram"
    CYLINDER = "cylinder"
    DOCUMENT = "document"
    SWIMLANE = "swimlane"
    TRIANGLE = "triangle"
    HEXAGON = "hexagon"
    CLOUD = "cloud"
    INTERNAL = "internal"
    EXTERNAL = "external"
    FOLDER = "folder"

    ISO_CUBE = "mxgraph.isometric.cube"
    ISO_SERVER = "mxgraph.isometric.server"
    ISO_DATABASE = "mxgraph.isometric.database"
    ISO_CONTAINER = "mxgraph.isometric.container"
    ISO_CLOUD = "mxgraph.isometric.cloud"
    ISO_NETWORK = "mxgraph.isometric.network"
    ISO_CYLINDER = "mxgraph.isometric.cylinder"


BASIC_SHAPES = frozenset({
    Shape.RECTANGLE, Shape.ELLIPSE, Shape.ROUNDED, Shape.RHOMBUS,
    Shape.PARALLELOGRAM, Shape.CYLINDER, Shape.DOCUMENT, Shape.SWIMLANE,
    Shape.TRIANGLE, Shape.HEXAGON, Shape.CLOUD, Shape.INTERNAL,
    Shape.EXTERNAL, Shape.FOLDER,
})

# Full draw.io style strings per shape, for callers that want a ready preset
SHAPE_PRESETS: dict[str, str] = {
    Shape.RECTANGLE: "shape=rectangle;whiteSpace=wrap;html=1;",
    Shape.ELLIPSE: "shape=ellipse;whiteSpace=wrap;html=1;",
    Shape.ROUNDED: "shape=rounded;whiteSpace=wrap;html=1;rounded=1;",
    Shape.RHOMBUS: "shape=rhombus;whiteSpace=wrap;html=1;",
    Shape.PARALLELOGRAM: "shape=parallelogram;perimeter=parallelogramPerimeter;whiteSpace=wrap;html=1;",
    Shape.CYLINDER: "shape=cylinder;whiteSpace=wrap;html=1;boundedLbl=1;backgroundOutline=1;size=10;",
    Shape.DOCUMENT: "shape=document;whiteSpace=wrap;html=1;boundedLbl=1;",
    Shape.SWIMLANE: "shape=swimlane;horizontal=1;whiteSpace=wrap;html=1;",
    Shape.TRIANGLE: "shape=triangle;whiteSpace=wrap;html=1;",
    Shape.HEXAGON: "shape=hexagon;perimeter=hexagonPerimeter;whiteSpace=wrap;html=1;",
    Shape.CLOUD: "shape=cloud;whiteSpace=wrap;html=1;",
    Shape.INTERNAL: "shape=internal;whiteSpace=wrap;html=1;",
    Shape.EXTERNAL: "shape=external;whiteSpace=wrap;html=1;",
    Shape.FOLDER: "shape=folder;whiteSpace=wrap;html=1;",
    Shape.ISO_CUBE: "shape=mxgraph.isometric.cube;",
    Shape.ISO_SERVER: "shape=mxgraph.isometric.server;",
    Shape.ISO_DATABASE: "shape=mxgraph.isometric.database;",
    Shape.ISO_CONTAINER: "shape=mxgraph.isometric.container;",
    Shape.ISO_CLOUD: "shape=mxgraph.isometric.cloud;",
    Shape.ISO_NETWORK: "shape=mxgraph.isometric.network;",
    Shape.ISO_CYLINDER: "shape=mxgraph.isometric.cylinder;",
}

SWIMLANE_STYLE = (
    "shape=swimlane;horizontal=1;whiteSpace=wrap;html=1;"
    "fillColor=#f5f5f5;strokeColor=#666666;"
)

# Component type (or iso: shape alias) -> draw.io shape name
_DEFAULT_SHAPES: dict[str, str] = {
    ComponentType.SERVICE.value: Shape.ROUNDED,
    ComponentType.API.value: Shape.ROUNDED,
    ComponentType.GATEWAY.value: Shape.ROUNDED,
    ComponentType.DATABASE.value: Shape.CYLINDER,
    ComponentType.STORAGE.value: Shape.CYLINDER,
    ComponentType.QUEUE.value: Shape.PARALLELOGRAM,
    ComponentType.CACHE.value: Shape.ROUNDED,
    ComponentType.USER.value: Shape.ELLIPSE,
    ComponentType.EXTERNAL.value: Shape.DOCUMENT,
    "iso:server": Shape.ISO_SERVER,
    "iso:database": Shape.ISO_DATABASE,
    "iso:container": Shape.ISO_CONTAINER,
    "iso:cloud": Shape.ISO_CLOUD,
    "iso:network": Shape.ISO_NETWORK,
    "iso:cube": Shape.ISO_CUBE,
    "iso:cylinder": Shape.ISO_CYLINDER,
}

# Isometric shapes drawn with the service palette regardless of type
_ISO_BLUE_SHAPES = frozenset({
    ShapeType.ISO_SERVER.value, ShapeType.ISO_DATABASE.value,
    ShapeType.ISO_CONTAINER.value, ShapeType.ISO_CLOUD.value,
})


@dataclass(frozen=True)
class Palette:
    """Per-type visual defaults."""
    fill: str
    stroke: str
    font_style: int = 0
    dashed: bool = False


_BLUE = Palette("#dae8fc", "#6c8ebf", font_style=FONT_STYLE_BOLD)
_ORANGE = Palette("#ffe6cc", "#d79b00")

TYPE_PALETTES: dict[str, Palette] = {
    ComponentType.SERVICE.value: _BLUE,
    ComponentType.API.value: _BLUE,
    ComponentType.GATEWAY.value: _BLUE,
    ComponentType.DATABASE.value: _ORANGE,
    ComponentType.STORAGE.value: _ORANGE,
    ComponentType.QUEUE.value: Palette("#fff2cc", "#d6b656"),
    ComponentType.CACHE.value: Palette("#f8cecc", "#b85450", dashed=True),
    ComponentType.USER.value: Palette("#e1d5e7", "#9673a6"),
    ComponentType.EXTERNAL.value: Palette("#f5f5f5", "#666666"),
}

DEFAULT_PALETTE = Palette("#ffffff", "#000000")


# ---------------------------------------------------------------------------
# Style value object
# ---------------------------------------------------------------------------

@dataclass
class Style:
    """draw.io style attributes for a vertex or edge."""
    shape: str = ""
    fill_color: str = ""
    stroke_color: str = ""
    stroke_width: int = 0
    opacity: int = 0
    gradient_color: str = ""
    gradient_direction: str = ""
    font_size: int = 0
    font_family: str = ""
    font_color: str = ""
    font_style: int = 0
    rounded: bool = False
    dashed: bool = False
    dash_pattern: str = ""
    shadow: bool = False
    glass: bool = False
    white_space: str = ""
    align: str = ""
    vertical_align: str = ""
    image: str = ""
    image_width: int = 0
    image_height: int = 0
    image_aspect: bool = False
    edge_style: str = ""
    start_arrow: str = ""
    end_arrow: str = ""
    curved: bool = False
    elbow: str = ""
    orthogonal: bool = False

    def __str__(self) -> str:
        parts: list[str] = []

        def add(key: str, value: object) -> None:
            parts.append(f"{key}={value}")

        if self.shape:
            add("shape", self.shape)
        if self.fill_color:
            add("fillColor", self.fill_color)
        if self.stroke_color:
            add("strokeColor", self.stroke_color)
        if self.stroke_width > 0:
            add("strokeWidth", self.stroke_width)
        if 0 < self.opacity < 100:
            add("opacity", self.opacity)
        if self.gradient_color:
            add("gradientColor", self.gradient_color)
            if self.gradient_direction:
                add("gradientDirection", self.gradient_direction)
        if self.font_size > 0:
            add("fontSize", self.font_size)
        if self.font_family:
            add("fontFamily", self.font_family)
        if self.font_color:
            add("fontColor", self.font_color)
        if self.font_style > 0:
            add("fontStyle", self.font_style)
        if self.rounded:
            add("rounded", 1)
        if self.dashed:
            add("dashed", 1)
        if self.dash_pattern:
            add("dashPattern", self.dash_pattern)
        if self.shadow:
            add("shadow", 1)
        if self.glass:
            add("glass", 1)
        if self.white_space:
            add("whiteSpace", self.white_space)
        if self.align:
            add("align", self.align)
        if self.vertical_align:
            add("verticalAlign", self.vertical_align)
        if self.image:
            add("image", self.image)
            if self.image_width > 0:
                add("imageWidth", self.image_width)
            if self.image_height > 0:
                add("imageHeight", self.image_height)
            if self.image_aspect:
                add("imageAspect", 1)
        if self.edge_style:
            add("edgeStyle", self.edge_style)
        if self.start_arrow:
            add("startArrow", self.start_arrow)
        if self.end_arrow:
            add("endArrow", self.end_arrow)
        if self.curved:
            add("curved", 1)
        if self.elbow:
            add("elbow", self.elbow)
        if self.orthogonal:
            add("orthogonal", 1)

        parts.append("html=1")
        return ";".join(parts)


# draw.io key -> Style attribute
_STYLE_KEYS: dict[str, str] = {
    "shape": "shape",
    "fillColor": "fill_color",
    "strokeColor": "stroke_color",
    "strokeWidth": "stroke_width",
    "opacity": "opacity",
    "gradientColor": "gradient_color",
    "gradientDirection": "gradient_direction",
    "fontSize": "font_size",
    "fontFamily": "font_family",
    "fontColor": "font_color",
    "fontStyle": "font_style",
    "rounded": "rounded",
    "dashed": "dashed",
    "dashPattern": "dash_pattern",
    "shadow": "shadow",
    "glass": "glass",
    "whiteSpace": "white_space",
    "align": "align",
    "verticalAlign": "vertical_align",
    "image": "image",
    "imageWidth": "image_width",
    "imageHeight": "image_height",
    "imageAspect": "image_aspect",
    "edgeStyle": "edge_style",
    "startArrow": "start_arrow",
    "endArrow": "end_arrow",
    "curved": "curved",
    "elbow": "elbow",
    "orthogonal": "orthogonal",
}

_DEFAULTS = Style()


def _parse_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def parse_style(raw: str) -> Style:
    """Parse a semicolon-delimited ``key=value`` string into a :class:`Style`.

    Unknown keys and tokens without ``=`` are ignored; non-numeric values
    for numeric keys become 0.
    """
    style = Style()
    for token in raw.split(";"):
        if "=" not in token:
            continue
        key, value = token.split("=", 1)
        attr = _STYLE_KEYS.get(key.strip())
        if attr is None:
            continue
        value = value.strip()
        default = getattr(_DEFAULTS, attr)
        if isinstance(default, bool):
            setattr(style, attr, value == "1")
        elif isinstance(default, int):
            setattr(style, attr, _parse_int(value))
        else:
            setattr(style, attr, value)
    return style


def merge_styles(base: Style, override: Style) -> Style:
    """Overlay every set field of *override* onto *base*.

    Boolean flags are OR'd: an override can switch a flag on but never off.
    """
    changes: dict[str, object] = {}
    for f in fields(Style):
        value = getattr(override, f.name)
        if isinstance(value, bool):
            if value:
                changes[f.name] = True
        elif isinstance(value, int):
            if value > 0:
                changes[f.name] = value
        elif value:
            changes[f.name] = value
    return replace(base, **changes)


# ---------------------------------------------------------------------------
# Shape lookup
# ---------------------------------------------------------------------------

def default_shape_for(value: str) -> str:
    """Map a component type or shape alias to a draw.io shape name."""
    if value in BASIC_SHAPES:
        return value
    return _DEFAULT_SHAPES.get(value, Shape.RECTANGLE)


def get_shape_style(shape: str) -> str:
    """Return the full preset style string for a draw.io shape name."""
    return SHAPE_PRESETS.get(shape, SHAPE_PRESETS[Shape.RECTANGLE])


# ---------------------------------------------------------------------------
# Component / edge styles
# ---------------------------------------------------------------------------

def component_base_style(component: Component) -> Style:
    """Type defaults for *component*, before its own override is applied."""
    palette = TYPE_PALETTES.get(component.type, DEFAULT_PALETTE)
    if component.shape in _ISO_BLUE_SHAPES:
        palette = Palette(_BLUE.fill, _BLUE.stroke, palette.font_style, palette.dashed)
    return Style(
        shape=default_shape_for(component.shape or component.type),
        fill_color=palette.fill,
        stroke_color=palette.stroke,
        font_style=palette.font_style,
        dashed=palette.dashed,
    )


def build_component_style(component: Component) -> str:
    """Resolve the rendered style string of a component."""
    style = component_base_style(component)
    if component.style:
        style = merge_styles(style, parse_style(component.style))
    style.font_size = DEFAULT_FONT_SIZE
    style.white_space = WHITE_SPACE_WRAP
    return str(style)


def build_edge_style(connection: Connection) -> str:
    """Resolve the rendered style string of a connection."""
    style = Style(edge_style=connection.edge_style)

    if connection.start_arrow:
        style.start_arrow = connection.start_arrow
    elif connection.bidirectional:
        style.start_arrow = ArrowType.CLASSIC

    style.end_arrow = connection.end_arrow or ArrowType.CLASSIC
    return str(style)
