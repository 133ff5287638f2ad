"""
Domain model for annotated architecture diagrams.

Components and connections are plain dataclasses keyed by name. Enumerated
fields are stored as strings so that values coming from source annotations
survive untouched until validation decides whether they are acceptable.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class DiagramType(str, Enum):
    ARCHITECTURE = "architecture"
    FLOWCHART = "flowchart"
    NETWORK = "network"


class ComponentType(str, Enum):
    SERVICE = "service"
    DATABASE = "database"
    QUEUE = "queue"
    CACHE = "cache"
    API = "api"
    USER = "user"
    EXTERNAL = "external"
    STORAGE = "storage"
    GATEWAY = "gateway"
    UNKNOWN = "unknown"


class ShapeType(str, Enum):
    RECTANGLE = "rectangle"
    ROUNDED = "rounded"
    ELLIPSE = "ellipse"
    CYLINDER = "cylinder"
    ISO_SERVER = "iso:server"
    ISO_DATABASE = "iso:database"
    ISO_CLOUD = "iso:cloud"
    ISO_CUBE = "iso:cube"
    ISO_CONTAINER = "iso:container"


class ConnectionDirection(str, Enum):
    UNIDIRECTIONAL = "unidirectional"
    BIDIRECTIONAL = "bidirectional"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class Position:
    """A 2-D coordinate computed by a layout strategy."""
    x: float
    y: float


@dataclass
class Component:
    """A named diagram node."""
    name: str
    type: str = ComponentType.SERVICE.value
    description: str = ""
    direction: str = ""
    shape: str = ""
    page: str = ""
    swimlane: str = ""
    # Semicolon-delimited key=value overrides merged over the type defaults
    style: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _compact_dict(self, required=("name", "type"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Component:
        return cls(**_known_fields(cls, data))


@dataclass
class Connection:
    """An edge between two components, referenced by name."""
    source: str
    target: str
    direction: str = ConnectionDirection.UNIDIRECTIONAL.value
    label: str = ""
    page: str = ""
    edge_style: str = ""
    start_arrow: str = ""
    end_arrow: str = ""

    @property
    def bidirectional(self) -> bool:
        return self.direction == ConnectionDirection.BIDIRECTIONAL.value

    def to_dict(self) -> dict[str, Any]:
        return _compact_dict(self, required=("source", "target"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Connection:
        return cls(**_known_fields(cls, data))


@dataclass
class Page:
    """A named partition of a diagram rendered as its own draw.io page."""
    name: str
    components: list[Component] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "components": [c.to_dict() for c in self.components],
            "connections": [c.to_dict() for c in self.connections],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Page:
        return cls(
            name=data.get("name", ""),
            components=[Component.from_dict(c) for c in data.get("components") or []],
            connections=[Connection.from_dict(c) for c in data.get("connections") or []],
        )


@dataclass
class Diagram:
    """Aggregate root: every component and connection of one diagram."""
    type: str = DiagramType.ARCHITECTURE.value
    components: list[Component] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    pages: list[Page] = field(default_factory=list)
    layout: str = ""
    compress: bool = False

    def add_component(self, component: Component) -> None:
        self.components.append(component)

    def add_connection(self, connection: Connection) -> None:
        self.connections.append(connection)

    def get_component_by_name(self, name: str) -> Optional[Component]:
        """Return the first component called *name*, or None."""
        for comp in self.components:
            if comp.name == name:
                return comp
        return None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.type,
            "components": [c.to_dict() for c in self.components],
            "connections": [c.to_dict() for c in self.connections],
        }
        if self.pages:
            result["pages"] = [p.to_dict() for p in self.pages]
        if self.layout:
            result["layout"] = self.layout
        if self.compress:
            result["compress"] = True
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Diagram:
        return cls(
            type=data.get("type") or DiagramType.ARCHITECTURE.value,
            components=[Component.from_dict(c) for c in data.get("components") or []],
            connections=[Connection.from_dict(c) for c in data.get("connections") or []],
            pages=[Page.from_dict(p) for p in data.get("pages") or []],
            layout=data.get("layout", ""),
            compress=bool(data.get("compress", False)),
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _compact_dict(obj: Any, required: tuple[str, ...]) -> dict[str, Any]:
    """Serialize a dataclass, dropping empty optional fields."""
    out: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.name in required or value:
            out[f.name] = value
    return out


def _known_fields(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}
