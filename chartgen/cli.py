from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Sequence

from chartgen.api import CHART_TYPES, render
from chartgen.errors import ChartInputError
from chartgen.theme import DEFAULT_THEME, ChartTheme, validate_theme_overrides

LOGGER = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="chartgen")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...).")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("render", help="Render a JSON chart request to SVG.")
    run.add_argument("chart_type", choices=list(CHART_TYPES))
    run.add_argument("request", type=Path, help="Path to the JSON request body.")
    run.add_argument("-o", "--out", type=Path, default=None, help="Output SVG path. Default: stdout.")
    run.add_argument("--theme", type=Path, default=None, help="JSON object of theme token overrides.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        theme = _load_theme(args.theme)
        payload = json.loads(args.request.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            print("chartgen: request must be a JSON object", file=sys.stderr)
            return 2
        try:
            result = render(args.chart_type, payload, theme=theme)
        except (ChartInputError, ValueError, TypeError) as exc:
            LOGGER.debug("rejected %s request", args.chart_type, exc_info=True)
            print(f"chartgen: {exc}", file=sys.stderr)
            return 2
        if args.out is None:
            sys.stdout.write(result.svg)
            sys.stdout.write("\n")
        else:
            args.out.write_text(result.svg, encoding="utf-8")
            LOGGER.info("wrote %s (%sx%s)", args.out, result.width, result.height)
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _load_theme(path: Path | None) -> ChartTheme:
    if path is None:
        return DEFAULT_THEME
    overrides = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(overrides, dict):
        raise TypeError("Theme overrides must be a JSON object")
    return validate_theme_overrides(overrides)
