"""Line-delimited JSON-RPC transport over standard streams."""

from __future__ import annotations

import json
import logging
import sys
from typing import Iterator, Optional, TextIO

from ..logging import get_logger
from .protocol import ToolServer


def serve_stdio(
    server: Optional[ToolServer] = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> None:
    """Serve requests read from ``stdin`` until end of input.

    One JSON object per line in each direction. Responses are flushed
    immediately; logging stays on stderr. A line that cannot be decoded or
    handled is logged and skipped.
    """
    server = server or ToolServer()
    reader = stdin or sys.stdin
    writer = stdout or sys.stdout
    logger = get_logger("stdio")
    logger.info("Test generator server running on stdio")

    for line in _read_lines(reader, logger):
        if not line.strip():
            continue
        try:
            response = server.handle_line(line)
        except Exception:
            logger.exception("Skipping request that could not be handled")
            continue
        if response is None:
            continue
        writer.write(json.dumps(response) + "\n")
        writer.flush()

    logger.info("Input closed; shutting down")


def _read_lines(reader: TextIO, logger: logging.Logger) -> Iterator[str]:
    """Yield text lines, decoding UTF-8 from the byte buffer when one is available."""
    raw = getattr(reader, "buffer", None)
    if raw is None:
        yield from reader
        return
    for chunk in raw:
        try:
            yield chunk.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("Skipping undecodable line: %s", exc)


__all__ = ["serve_stdio"]
