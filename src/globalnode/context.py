"""
Per-request resolution context.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ResolveContext:
    """Carries the surrounding request's timeout and cancellation signal to lookups.

    Lookups registered with ``pass_context=True`` receive this object as their
    second argument; ``info`` is forwarded untouched (typically the GraphQL Info).
    """

    timeout: float | None = None
    cancel_event: asyncio.Event | None = None
    info: Any = field(default=None, compare=False)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()
