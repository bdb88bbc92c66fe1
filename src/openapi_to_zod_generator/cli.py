"""Command line interface for OpenAPI to Zod generation."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .generator import GenerationError, OpenAPILoadError, WriteError, run_generation


class CLIError(RuntimeError):
    """Raised when CLI execution fails."""


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="openapi-to-zod-generator",
        description="Generate Zod request validators from an OpenAPI document",
    )
    parser.add_argument("--input", required=True, help="Path to an OpenAPI YAML or JSON file")
    parser.add_argument("--output", required=True, help="TypeScript file to create")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log generation progress",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    output_path = Path(args.output)
    try:
        if output_path.suffix not in {".ts", ".mts"}:
            raise CLIError(f"Output must be a TypeScript file, got {output_path}")
        run = run_generation(
            input_path=Path(args.input),
            output_path=output_path,
        )
    except (OpenAPILoadError, GenerationError, WriteError, CLIError) as exc:
        parser.error(str(exc))
        return 2

    for warning in run.result.warnings:
        print(f"Warning: {warning}")
    print(f"Generated {len(run.result.route_names)} routes into {run.result.output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
