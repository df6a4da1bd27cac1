from __future__ import annotations

import logging
from typing import Protocol

from sitecheck.app.events.models import EvaluationEvent

logger = logging.getLogger(__name__)


class EvaluationEventEmitter(Protocol):
    """
    Interface for broadcasting evaluation progress.

    Implementations must be:
    - non-blocking (or minimally blocking)
    - fail-safe (emission failures must not crash the run)
    - observational only
    """

    async def emit(self, event: EvaluationEvent) -> None:
        ...


class NullEventEmitter:
    """
    A safe no-op emitter.

    Used when nobody is listening: library callers, batch runs, and
    tests that do not care about events.
    """

    async def emit(self, event: EvaluationEvent) -> None:
        return


async def emit_safely(
    emitter: EvaluationEventEmitter,
    event: EvaluationEvent,
) -> None:
    """
    Emit through any emitter without letting a faulty one break the run.
    """
    try:
        await emitter.emit(event)
    except Exception as exc:
        logger.warning(
            "Event emitter %s failed on %s: %s",
            type(emitter).__name__,
            event.event_type.value,
            exc,
        )
