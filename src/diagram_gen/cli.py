"""Command-line interface: annotated Go sources in, .drawio document out."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from diagram_gen.config import GeneratorConfig, find_config, load_config
from diagram_gen.errors import DiagramGenError, SourceParseError
from diagram_gen.generator import DrawioGenerator
from diagram_gen.layout import IsometricLayout
from diagram_gen.models import Diagram, DiagramType
from diagram_gen.source_parser import SourceParser
from diagram_gen.validation import validate_diagram

logger = logging.getLogger("diagram-gen.cli")

__version__ = "0.1.0"

DEFAULT_OUTPUT = "diagram.drawio"


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="diagram-gen",
        description="Generate draw.io diagrams from diagram:\"...\" struct-tag annotations.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument("--debug", action="store_true", help="Log debugging detail to stderr")

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser("generate", help="Generate a diagram from annotated sources")
    gen_parser.add_argument("input", help="Go source file or directory")
    gen_parser.add_argument("-o", "--output", help=f"Output .drawio path (default {DEFAULT_OUTPUT})")
    gen_parser.add_argument(
        "-t", "--type",
        dest="diagram_type",
        choices=[t.value for t in DiagramType],
        help="Diagram type (default architecture)",
    )
    gen_parser.add_argument("--layout", help="Layout algorithm: grid, layered or isometric")
    gen_parser.add_argument(
        "--isometric", action="store_true", help="Shorthand for --layout isometric"
    )
    gen_parser.add_argument(
        "--compress", action="store_true", default=None, help="Compress page contents"
    )
    gen_parser.add_argument("--shape", help="Shape for components that do not name one")
    gen_parser.add_argument("--config", help="Config file (default: .diagram-gen.yaml lookup)")
    gen_parser.add_argument("--page", help="Only render this page (plus unpaged items)")
    # Also accepted after the subcommand; SUPPRESS keeps the top-level value otherwise
    gen_parser.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS)
    gen_parser.add_argument("--debug", action="store_true", default=argparse.SUPPRESS)

    subparsers.add_parser("version", help="Print the version")
    return parser


def _configure_logging(verbose: bool, debug: bool) -> None:
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def new_generator(layout_type: str, compress: bool) -> DrawioGenerator:
    return DrawioGenerator(layout_type=layout_type, compress=compress)


def _resolve_config(args: argparse.Namespace) -> GeneratorConfig:
    if args.config:
        config = load_config(args.config)
    else:
        input_path = Path(args.input)
        directory = input_path if input_path.is_dir() else input_path.parent
        found = find_config(directory)
        config = load_config(found) if found else GeneratorConfig()

    layout = IsometricLayout.name if args.isometric else args.layout
    return config.merged(
        layout=layout,
        compress=args.compress,
        diagram_type=args.diagram_type,
        output=args.output,
        shape=args.shape,
        page=args.page,
    )


def apply_default_shape(diagram: Diagram, shape: str) -> None:
    """Give *shape* to every component that does not name its own."""
    if not shape:
        return
    for comp in diagram.components:
        if not comp.shape:
            comp.shape = shape


def filter_page(diagram: Diagram, page: str) -> None:
    """Keep only components and connections on *page* or on no page."""
    if not page:
        return
    diagram.components = [c for c in diagram.components if not c.page or c.page == page]
    diagram.connections = [c for c in diagram.connections if not c.page or c.page == page]


def _handle_generate(args: argparse.Namespace) -> int:
    config = _resolve_config(args)

    diagram = SourceParser(config.diagram_type).parse(args.input)
    if not diagram.components:
        raise SourceParseError(f"no diagram annotations found in {args.input}")
    validate_diagram(diagram)

    diagram.layout = config.layout
    diagram.compress = config.compress
    apply_default_shape(diagram, config.shape)
    filter_page(diagram, config.page)

    generator = new_generator(config.layout, config.compress)
    xml = generator.generate(diagram)

    output = Path(config.output or DEFAULT_OUTPUT)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(xml, encoding="utf-8")
    logger.info("Wrote %d bytes to %s", len(xml), output)

    print(
        "Generated %s diagram (%s layout) with %d components and %d connections"
        % (diagram.type, config.layout, len(diagram.components), len(diagram.connections))
    )
    print(f"Output written to: {output}")
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    try:
        args = parser.parse_args(raw_argv)
        _configure_logging(args.verbose, args.debug)

        if args.command == "generate":
            return _handle_generate(args)
        if args.command == "version":
            print(f"diagram-gen version {__version__}")
            return 0

        raise UsageError("missing subcommand (use one of: generate, version)")
    except UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 2
    except (DiagramGenError, OSError) as exc:
        print(f"Error: {getattr(exc, 'message', exc)}", file=sys.stderr)
        logger.debug("Generation failed", exc_info=True)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
