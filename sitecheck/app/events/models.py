from __future__ import annotations

from typing import Any, Dict, Optional
from enum import Enum
from datetime import datetime, timezone
from uuid import uuid4, UUID

from pydantic import BaseModel, Field, ConfigDict


# ----------------------------------------------------------------------
# Event Types (Finite and Versioned)
# ----------------------------------------------------------------------
class EvaluationEventType(str, Enum):
    """
    Progression events emitted during an evaluation run.

    NOTE:
    This enum is finite and versioned.
    New entries must preserve observational semantics.
    """

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------
    RUN_STARTED = "run_started"
    RUN_COMPLETED = "run_completed"
    RUN_FAILED = "run_failed"

    # ------------------------------------------------------------------
    # Per-check state machine
    # ------------------------------------------------------------------
    CHECK_STATE_CHANGED = "check_state_changed"

    # ------------------------------------------------------------------
    # Derived artifacts
    # ------------------------------------------------------------------
    DERIVATION_STARTED = "derivation_started"
    DERIVATION_COMPLETED = "derivation_completed"
    DERIVATION_FAILED = "derivation_failed"

    # ------------------------------------------------------------------
    # Presentation / Streaming Only (Non-terminal)
    # ------------------------------------------------------------------
    REPORT_READY = "report_ready"


# ----------------------------------------------------------------------
# Event Model
# ----------------------------------------------------------------------
class EvaluationEvent(BaseModel):
    """
    An immutable observation of a transition within a run.

    Events are:
    - strictly observational
    - transport-agnostic
    - not part of the report
    """

    event_id: UUID = Field(default_factory=uuid4)
    run_id: str = Field(..., description="The evaluation run identifier")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_type: EvaluationEventType

    # Optional contextual metadata (check name, state, artifact, counts)
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
