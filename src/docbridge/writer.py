"""Scoped output file handle for the generator."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

from docbridge.observability.logging import get_logger

logger = get_logger(__name__)


@contextmanager
def open_output(path: str | Path) -> Iterator[TextIO]:
    """Create or truncate ``path`` and yield a UTF-8 text writer.

    The handle is flushed and closed when the block exits, whatever the outcome.
    """
    # newline="" keeps the generator's line endings byte-for-byte.
    writer = open(path, "w", encoding="utf-8", newline="")
    try:
        yield writer
    finally:
        writer.close()
        logger.debug("output_closed", path=str(path))


__all__ = ["open_output"]
