from .models import EvaluationEvent, EvaluationEventType
from .emitter import EvaluationEventEmitter, NullEventEmitter, emit_safely

__all__ = [
    "EvaluationEvent",
    "EvaluationEventType",
    "EvaluationEventEmitter",
    "NullEventEmitter",
    "emit_safely",
]
