"""
Identifier generators for new annotations.

Generators are injected into the document so tests can supply
deterministic identifiers.
"""

import itertools
import time
import uuid
from typing import Callable

IdGenerator = Callable[[], str]


def sequential_ids(prefix: str = "obj", start: int = 1,
                   clock: Callable[[], float] = time.time) -> IdGenerator:
    """
    Create a generator yielding ``<prefix>-<millis>-<n>`` identifiers.

    Args:
        prefix: Identifier prefix
        start: First sequence number
        clock: Time source in seconds

    Returns:
        Callable returning a new identifier on each call
    """
    counter = itertools.count(start)

    def _next_id() -> str:
        return f"{prefix}-{int(clock() * 1000)}-{next(counter)}"

    return _next_id


def uuid_ids(prefix: str = "obj") -> IdGenerator:
    """Create a generator yielding random uuid-based identifiers."""
    def _next_id() -> str:
        return f"{prefix}_{uuid.uuid4().hex[:12]}"

    return _next_id


__all__ = ['IdGenerator', 'sequential_ids', 'uuid_ids']
