"""
Extraction of diagram annotations from Go source files.

Only struct-field tags are inspected: a raw-string tag literal such as
``json:"id" diagram:"type=service,name=Users"`` contributes the value of
its ``diagram`` key. The scan is line based: a tag counts only when it
closes a field declaration line (``Name Type `...```, optionally with a
trailing comment). Raw strings in assignments, call arguments or
``return`` statements are ignored, as are one-line ``struct { ... }``
bodies.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Union

from diagram_gen.annotations import parse_annotation
from diagram_gen.errors import AnnotationError, SourceParseError
from diagram_gen.models import Diagram, DiagramType

logger = logging.getLogger("diagram-gen.source_parser")

# Field declaration ending in a tag: optional names, a type, then `...`
_FIELD_TAG_RE = re.compile(
    r"^[ \t]*(?!return\b)(?:\w+(?:[ \t]*,[ \t]*\w+)*[ \t]+)?"
    r"[*\w.\[\]]+[^\n`=:()]*`([^`\n]*)`[ \t\r]*(?://.*)?$",
    re.M,
)
# key:"value" pairs inside a struct tag (conventional Go tag syntax)
_TAG_PAIR_RE = re.compile(r'(\w+):"((?:[^"\\]|\\.)*)"')

SOURCE_SUFFIX = ".go"


def extract_struct_tag(tag: str, key: str = "diagram") -> str:
    """Return the value stored under *key* in a struct tag, or ``""``."""
    for match in _TAG_PAIR_RE.finditer(tag):
        if match.group(1) == key:
            return match.group(2).replace('\\"', '"')
    return ""


def iter_annotations(source: str) -> Iterator[str]:
    """Yield the ``diagram`` value of every struct-field tag in Go *source*."""
    for literal in _FIELD_TAG_RE.finditer(source):
        value = extract_struct_tag(literal.group(1))
        if value:
            yield value


class SourceParser:
    """Builds a :class:`Diagram` from annotated Go source files."""

    def __init__(self, diagram_type: str = DiagramType.ARCHITECTURE.value) -> None:
        self.diagram_type = diagram_type

    def parse_source(self, source: str, origin: str = "<string>") -> Diagram:
        """Parse annotations from in-memory source text."""
        diagram = Diagram(type=self.diagram_type)
        for tag in iter_annotations(source):
            try:
                ann = parse_annotation(tag)
            except AnnotationError as exc:
                logger.debug("Skipping annotation in %s: %s", origin, exc.message)
                continue
            diagram.add_component(ann.to_component())
            for conn in ann.to_connections():
                diagram.add_connection(conn)
        return diagram

    def parse_file(self, path: Union[str, Path]) -> Diagram:
        path = Path(path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceParseError(f"failed to read file {path}: {exc}") from exc
        return self.parse_source(source, origin=str(path))

    def parse_directory(self, path: Union[str, Path]) -> Diagram:
        """Parse every ``*.go`` file directly inside *path*, in name order.

        Files that cannot be read are skipped with a warning.
        """
        path = Path(path)
        diagram = Diagram(type=self.diagram_type)
        try:
            entries = sorted(path.iterdir())
        except OSError as exc:
            raise SourceParseError(f"failed to read directory {path}: {exc}") from exc

        for entry in entries:
            if not entry.is_file() or entry.suffix != SOURCE_SUFFIX:
                continue
            try:
                file_diagram = self.parse_file(entry)
            except SourceParseError as exc:
                logger.warning("%s", exc.message)
                continue
            diagram.components.extend(file_diagram.components)
            diagram.connections.extend(file_diagram.connections)
        return diagram

    def parse(self, path: Union[str, Path]) -> Diagram:
        """Parse a file or a directory."""
        path = Path(path)
        if not path.exists():
            raise SourceParseError(f"cannot access input path: {path}")
        if path.is_dir():
            return self.parse_directory(path)
        return self.parse_file(path)
