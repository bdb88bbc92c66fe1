"""Filesystem writer for the generated routes module."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class WriteError(RuntimeError):
    """Raised when output files cannot be written."""


def write_routes_module(*, output_path: Path, source: str) -> None:
    """Write the rendered module, refusing to replace an existing file.

    Args:
        output_path (Path): Destination ``.ts`` file.
        source (str): Rendered TypeScript source.
    """
    if output_path.exists():
        raise WriteError(f"Output file already exists: {output_path}")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(source, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Failed to write file {output_path}: {exc}") from exc
    logger.debug("Wrote %d bytes to %s", len(source), output_path)
