"""Command line interface: render a JSON chart description to SVG or PNG."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import yaml
from pydantic import ValidationError

from .boot.logging import configure_logging
from .chart import Chart
from .config.settings import ChartOptions, load_settings
from .layout import ChartKind
from .model import ChartDataError
from .render.raster import SurfaceUnavailableError
from .responsive import ResizableContainer

LOG = logging.getLogger(__name__)

OUTPUT_FORMATS = ("svg", "png")

__all__ = ["build_parser", "main"]


def _add_render_subparser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = sub.add_parser(
        "render",
        help="Render a chart description to a file",
        description=(
            "Read chart options (kind, data, labels and per-kind sections) from a "
            "JSON file and write the rendered chart as SVG or PNG."
        ),
    )
    parser.add_argument("chart", type=Path, help="JSON file with the chart options")
    parser.add_argument("--out", "-o", type=Path, required=True, help="Output path (.svg or .png)")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, help="Override the format implied by --out")
    parser.add_argument("--width", type=float, default=0.0, help="Container width in pixels")
    parser.add_argument("--height", type=float, default=0.0, help="Container height in pixels")
    parser.add_argument("--config", type=Path, help="Engine settings YAML file")
    parser.set_defaults(func=run_render)


def _add_kinds_subparser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = sub.add_parser("kinds", help="List the supported chart kinds")
    parser.set_defaults(func=run_kinds)


def run_kinds(args: argparse.Namespace) -> int:
    for kind in ChartKind:
        print(kind.value)
    return 0


def _output_format(args: argparse.Namespace) -> str | None:
    if args.format:
        return args.format
    suffix = args.out.suffix.lower().lstrip(".")
    return suffix if suffix in OUTPUT_FORMATS else None


def run_render(args: argparse.Namespace) -> int:
    fmt = _output_format(args)
    if fmt is None:
        print(f"cannot infer an output format from {args.out}; use --format", file=sys.stderr)
        return 2
    try:
        settings = load_settings(args.config)
        payload = json.loads(args.chart.read_text(encoding="utf-8"))
        options = ChartOptions.model_validate(payload)
        container = ResizableContainer(args.width, args.height)
        with Chart(options, settings=settings, container=container) as chart:
            if fmt == "svg":
                data = chart.render_svg(include_tooltip=False).encode("utf-8")
            else:
                data = chart.render_png()
    except (
        OSError,
        json.JSONDecodeError,
        yaml.YAMLError,
        ValidationError,
        ChartDataError,
        SurfaceUnavailableError,
    ) as exc:
        LOG.debug("render failed", exc_info=True)
        print(f"render failed: {exc}", file=sys.stderr)
        return 1
    args.out.parent.mkdir(parents=True, exist_ok=True)
    args.out.write_bytes(data)
    print(f"wrote {args.out} ({len(data)} bytes)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="transitcharts", description="Transit dashboard chart renderer")
    sub = parser.add_subparsers(dest="command", required=True)
    _add_render_subparser(sub)
    _add_kinds_subparser(sub)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:
        return int(exc.code or 0)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
