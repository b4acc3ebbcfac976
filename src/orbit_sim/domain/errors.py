"""Rule violations and engine faults."""

from __future__ import annotations


class RuleViolation(ValueError):
    """An action batch broke a game rule; the batch is rejected as a whole."""

    kind = "rule"


class SequencingError(RuleViolation):
    kind = "sequencing"


class ResourceError(RuleViolation):
    kind = "resource"


class SubsystemStateError(RuleViolation):
    kind = "subsystem_state"


class PositionError(RuleViolation):
    kind = "position"


class TargetError(RuleViolation):
    kind = "target"


class EngineFault(RuntimeError):
    """State is structurally inconsistent. Never expected during normal play."""
