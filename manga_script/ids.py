"""Identity and time capabilities injected into the parser and adapters.

Every node the core creates gets an id from an IdGenerator:

    def __call__(self) -> str: ...

and every Document gets its `parsed_at` from a Clock:

    def __call__(self) -> datetime: ...

Production code uses the module-level defaults (new_id, utc_now).
SequentialIds and FixedClock give deterministic output for tests and for
hosts that want reproducible documents.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Protocol


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

class IdGenerator(Protocol):
    def __call__(self) -> str: ...


class Clock(Protocol):
    def __call__(self) -> datetime: ...


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

def new_id() -> str:
    """Random UUID4 string."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Deterministic implementations
# ---------------------------------------------------------------------------

class SequentialIds:
    """Returns "<prefix>-1", "<prefix>-2", ... in call order.

    Each instance counts independently, so two parses given fresh instances
    produce identical ids.
    """

    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._count = 0

    def __call__(self) -> str:
        self._count += 1
        return f"{self._prefix}-{self._count}"


class FixedClock:
    """Always returns the same instant."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def __call__(self) -> datetime:
        return self._instant
