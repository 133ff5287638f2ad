"""
Generator configuration files.

A project may keep its defaults in ``.diagram-gen.yaml`` (or ``.yml`` /
``.json``) next to its sources::

    layout: isometric
    compress: true
    output: docs/architecture.drawio

Command-line flags override file values, which override the defaults below.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from diagram_gen.errors import ConfigError

logger = logging.getLogger("diagram-gen.config")

CONFIG_FILENAMES = (".diagram-gen.yaml", ".diagram-gen.yml", ".diagram-gen.json")


@dataclass
class GeneratorConfig:
    layout: str = "layered"
    compress: bool = False
    diagram_type: str = "architecture"
    output: str = "diagram.drawio"
    shape: str = ""
    page: str = ""

    def merged(self, **overrides: Any) -> "GeneratorConfig":
        """Return a copy with every non-``None`` override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_FIELD_TYPES = {f.name: (bool if f.name == "compress" else str) for f in fields(GeneratorConfig)}


def _read_mapping(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed to read config {path}: {exc}") from exc

    if path.suffix == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON in config {path}: {exc}") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in config {path}: {exc}") from exc


def load_config(path: Union[str, Path]) -> GeneratorConfig:
    """Load a :class:`GeneratorConfig` from a YAML or JSON file.

    An empty file yields the defaults.

    Raises:
        ConfigError: if the file cannot be read or parsed, is not a
            mapping, or holds unknown keys or mistyped values.
    """
    path = Path(path)
    data = _read_mapping(path)
    if data is None:
        logger.debug("Config %s is empty, using defaults", path)
        return GeneratorConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must be a mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - set(_FIELD_TYPES), key=str)
    if unknown:
        raise ConfigError(f"unknown key(s) in config {path}: {', '.join(map(str, unknown))}")

    for key, value in data.items():
        expected = _FIELD_TYPES[key]
        if not isinstance(value, expected):
            raise ConfigError(
                f"'{key}' in config {path} must be a {expected.__name__}, "
                f"got {type(value).__name__}"
            )

    logger.info("Loaded config from %s", path)
    return GeneratorConfig(**data)


def find_config(directory: Union[str, Path]) -> Optional[Path]:
    """Return the first known config file inside *directory*, if any."""
    directory = Path(directory)
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None
