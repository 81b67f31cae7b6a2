"""Identifier allocation for border lines that lack an id.

An area references its border line by id.  When the editor never gave
the line one, the exporter draws a fresh random token per export run.
``IdAllocator`` is the seam tests use to substitute a deterministic stub.
"""

from __future__ import annotations

import logging
import uuid
from typing import Protocol

logger = logging.getLogger(__name__)


class IdAllocator(Protocol):
    """Callable returning a new, unique identifier token."""

    def __call__(self) -> str: ...


def random_id() -> str:
    """Return a random UUID4 string (cryptographically random source)."""
    token = str(uuid.uuid4())
    logger.debug("Allocated line id %s", token)
    return token
