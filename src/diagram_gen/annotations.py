"""
Parsing of ``diagram:"..."`` struct-tag annotations.

An annotation is a comma separated list of ``key=value`` pairs::

    type=service,name=UserService,connectsTo=UserDatabase;MessageQueue

``;`` separates items of a list value (``connectsTo``); it only starts a
new pair when the text after it contains ``=``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from diagram_gen.errors import AnnotationError
from diagram_gen.models import Component, ComponentType, Connection, ConnectionDirection

# Keys copied verbatim into the component's style override
STYLE_KEYS = frozenset({
    "fillColor", "strokeColor", "fontColor", "gradientColor",
    "fontSize", "strokeWidth", "opacity", "rounded",
    "dashed", "shadow", "glass",
})


@dataclass
class Annotation:
    """A parsed annotation describing one component and its outgoing edges."""
    raw: str
    name: str = ""
    component_type: str = ""
    connects_to: list[str] = field(default_factory=list)
    description: str = ""
    direction: str = ""
    shape: str = ""
    page: str = ""
    swimlane: str = ""
    style: str = ""
    edge_style: str = ""
    start_arrow: str = ""
    end_arrow: str = ""

    def to_component(self) -> Component:
        return Component(
            name=self.name,
            type=self.component_type,
            description=self.description,
            direction=self.direction,
            shape=self.shape,
            page=self.page,
            swimlane=self.swimlane,
            style=self.style,
        )

    def to_connections(self) -> list[Connection]:
        direction = self.direction or ConnectionDirection.UNIDIRECTIONAL.value
        return [
            Connection(
                source=self.name,
                target=target,
                direction=direction,
                page=self.page,
                edge_style=self.edge_style,
                start_arrow=self.start_arrow,
                end_arrow=self.end_arrow,
            )
            for target in self.connects_to
            if target
        ]


def split_key_value_pairs(tag: str) -> list[str]:
    """Split an annotation into ``key=value`` tokens, keeping list values whole."""
    tokens: list[str] = []
    for chunk in tag.split(","):
        parts: list[str] = []
        for piece in chunk.split(";"):
            if "=" in piece or not parts:
                parts.append(piece)
            else:
                parts[-1] += ";" + piece
        tokens.extend(p.strip() for p in parts if p.strip())
    return tokens


def parse_annotation(tag: str) -> Annotation:
    """Parse an annotation string.

    Raises:
        AnnotationError: if *tag* is empty or names no component.
    """
    if not tag:
        raise AnnotationError("empty annotation tag")

    tag = tag.strip("`")
    ann = Annotation(raw=tag)
    style_parts: list[str] = []

    for token in split_key_value_pairs(tag):
        if token == "diagram" or "=" not in token:
            continue
        key, value = token.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"')

        if key == "type":
            ann.component_type = value
        elif key == "name":
            ann.name = value
        elif key == "connectsTo":
            ann.connects_to = [t.strip() for t in value.split(";")]
        elif key == "description":
            ann.description = value
        elif key == "direction":
            ann.direction = value
        elif key == "shape":
            ann.shape = value
        elif key == "page":
            ann.page = value
        elif key == "swimlane":
            ann.swimlane = value
        elif key == "edgeStyle":
            ann.edge_style = value
        elif key == "startArrow":
            ann.start_arrow = value
        elif key == "endArrow":
            ann.end_arrow = value
        elif key in STYLE_KEYS:
            style_parts.append(f"{key}={value}")

    if not ann.name:
        raise AnnotationError(f"name is required in annotation '{tag}'")
    if not ann.component_type:
        ann.component_type = ComponentType.SERVICE.value
    ann.style = ";".join(style_parts)
    return ann
