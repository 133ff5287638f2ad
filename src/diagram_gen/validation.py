"""
Validation of diagram models and MCP tool parameters.

Diagram validation is the gate callers pass before layout and rendering:
the rendering core itself tolerates duplicates and dangling references.
"""

from __future__ import annotations

from typing import Any

from diagram_gen.errors import ValidationError
from diagram_gen.models import ComponentType, Diagram

# ``unknown`` is a rendering fallback, not a type annotations may use
VALID_COMPONENT_TYPES = frozenset(
    t.value for t in ComponentType if t is not ComponentType.UNKNOWN
)


# ---------------------------------------------------------------------------
# Primitive validators
# ---------------------------------------------------------------------------

def validate_non_empty_string(value: Any, field_name: str) -> str:
    """Ensure *value* is a non-empty string after stripping whitespace."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field_name}' must be a non-empty string.")
    return value.strip()


def validate_string(value: Any, field_name: str) -> str:
    """Ensure *value* is a string."""
    if not isinstance(value, str):
        raise ValidationError(f"'{field_name}' must be a string, got {type(value).__name__}.")
    return value


def validate_enum(value: Any, field_name: str, allowed: set[str]) -> str:
    """Validate that *value* is one of *allowed* (case-insensitive), returned lower-cased."""
    if not isinstance(value, str):
        raise ValidationError(
            f"'{field_name}' must be a string, got {type(value).__name__}."
        )
    normalized = value.strip().lower()
    if normalized not in {a.lower() for a in allowed}:
        choices = ", ".join(sorted(allowed))
        raise ValidationError(
            f"'{field_name}' must be one of [{choices}], got '{value}'."
        )
    return normalized


def validate_list(value: Any, field_name: str, *, min_length: int = 0) -> list:
    """Ensure *value* is a list with at least *min_length* items."""
    if not isinstance(value, list):
        raise ValidationError(
            f"'{field_name}' must be a list, got {type(value).__name__}."
        )
    if len(value) < min_length:
        raise ValidationError(
            f"'{field_name}' must have at least {min_length} item(s), got {len(value)}."
        )
    return value


def validate_dict(value: Any, field_name: str) -> dict:
    """Ensure *value* is a dict."""
    if not isinstance(value, dict):
        raise ValidationError(
            f"'{field_name}' must be a dict/object, got {type(value).__name__}."
        )
    return value


# ---------------------------------------------------------------------------
# Tool parameter validators
# ---------------------------------------------------------------------------

_DIAGRAM_ACTIONS = {"PARSE", "VALIDATE", "GENERATE"}
_LAYOUT_ACTIONS = {"POSITIONS", "SWIMLANES", "PAGES"}
_STYLE_ACTIONS = {"COMPONENT", "EDGE", "SHAPE"}


def validate_action(value: Any, tool_name: str, allowed: set[str]) -> str:
    """Validate the action parameter for a tool."""
    if not isinstance(value, str) or not value.strip():
        choices = ", ".join(sorted(a.lower() for a in allowed))
        raise ValidationError(
            f"'{tool_name}' requires an 'action' parameter. Valid actions: {choices}."
        )
    normalized = value.strip().upper()
    if normalized not in allowed:
        choices = ", ".join(sorted(a.lower() for a in allowed))
        raise ValidationError(
            f"Unknown {tool_name} action '{value}'. Valid actions: {choices}."
        )
    return value.strip().lower()


def validate_component_dict(c: Any, index: int) -> None:
    """Validate a single component dict from a components list."""
    if not isinstance(c, dict):
        raise ValidationError(f"Component at index {index} must be a dict/object.")
    if "name" not in c:
        raise ValidationError(f"Component at index {index} missing required key 'name'.")
    if not isinstance(c["name"], str) or not c["name"].strip():
        raise ValidationError(f"Component at index {index}: 'name' must be a non-empty string.")
    for key in ("type", "shape", "page", "swimlane", "style", "description", "direction"):
        if key in c and not isinstance(c[key], str):
            raise ValidationError(f"Component at index {index}: '{key}' must be a string.")


def validate_connection_dict(c: Any, index: int) -> None:
    """Validate a single connection dict from a connections list."""
    if not isinstance(c, dict):
        raise ValidationError(f"Connection at index {index} must be a dict/object.")
    for key in ("source", "target"):
        if key not in c:
            raise ValidationError(f"Connection at index {index} missing required key '{key}'.")
        if not isinstance(c[key], str) or not c[key].strip():
            raise ValidationError(f"Connection at index {index}: '{key}' must be a non-empty string.")
    for key in ("direction", "label", "page", "edge_style", "start_arrow", "end_arrow"):
        if key in c and not isinstance(c[key], str):
            raise ValidationError(f"Connection at index {index}: '{key}' must be a string.")


# ---------------------------------------------------------------------------
# Diagram validation
# ---------------------------------------------------------------------------

def validate_component_type(component_type: str) -> bool:
    """Whether *component_type* may appear in an annotation."""
    return component_type in VALID_COMPONENT_TYPES


def validate_diagram(diagram: Diagram) -> None:
    """Check names, types and references of a parsed diagram.

    Raises:
        ValidationError: on the first problem found.
    """
    if diagram is None:
        raise ValidationError("no diagram given")
    if not diagram.components:
        raise ValidationError("no components found in diagram")

    names: set[str] = set()
    for comp in diagram.components:
        if not comp.name:
            raise ValidationError("component has empty name")
        if comp.name in names:
            raise ValidationError(f"duplicate component name: {comp.name}")
        names.add(comp.name)
        if not validate_component_type(comp.type):
            valid = ", ".join(t for t in (ct.value for ct in ComponentType) if t in VALID_COMPONENT_TYPES)
            raise ValidationError(
                f"unknown component type: {comp.type} (valid types: {valid})"
            )

    for conn in diagram.connections:
        if not conn.source or not conn.target:
            raise ValidationError("connection has empty source or target")
        if conn.source not in names:
            raise ValidationError(f"connection references unknown source: {conn.source}")
        if conn.target not in names:
            raise ValidationError(f"connection references unknown target: {conn.target}")
