"""
Validation workflow state management.

Provides an immutable-by-default state container that walks one request
through the two rounds in a fixed order.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List

from content_validator.core.exceptions import StateTransitionError


class ValidationPhase(str, Enum):
    """Phases of one validation request."""
    INIT = "init"
    ROUND1_PENDING = "round1_pending"  # Independent scoring in flight
    ROUND1_DONE = "round1_done"
    ROUND2_PENDING = "round2_pending"  # Cross-validation in flight
    ROUND2_DONE = "round2_done"
    COMBINED = "combined"


ALLOWED_TRANSITIONS: Dict[ValidationPhase, ValidationPhase] = {
    ValidationPhase.INIT: ValidationPhase.ROUND1_PENDING,
    ValidationPhase.ROUND1_PENDING: ValidationPhase.ROUND1_DONE,
    ValidationPhase.ROUND1_DONE: ValidationPhase.ROUND2_PENDING,
    ValidationPhase.ROUND2_PENDING: ValidationPhase.ROUND2_DONE,
    ValidationPhase.ROUND2_DONE: ValidationPhase.COMBINED,
}


@dataclass(frozen=True)
class ValidationState:
    """
    Immutable state container for one validation request.

    Round 2 can never start before both Round-1 verdicts exist, and
    combination can never start before both Round-2 verdicts exist.

    Usage:
        state = ValidationState()
        state = state.with_phase(ValidationPhase.ROUND1_PENDING)
    """
    phase: ValidationPhase = ValidationPhase.INIT
    history: List[ValidationPhase] = field(default_factory=lambda: [ValidationPhase.INIT])
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def with_phase(self, phase: ValidationPhase) -> "ValidationState":
        """
        Create a new state with updated phase.

        Args:
            phase: Next validation phase

        Returns:
            New ValidationState instance

        Raises:
            StateTransitionError: If the phase does not follow the current one
        """
        expected = ALLOWED_TRANSITIONS.get(self.phase)
        if phase != expected:
            raise StateTransitionError(
                f"Illegal transition {self.phase.value} -> {phase.value}",
                details={"expected": expected.value if expected else None},
            )
        return replace(self, phase=phase, history=self.history + [phase])

    def with_error(self, kind: str, message: str, context: Dict[str, Any] = None) -> "ValidationState":
        """Create a new state with an added (already handled) error."""
        new_errors = self.errors + [{
            "error": message,
            "type": kind,
            "context": context or {},
        }]
        return replace(self, errors=new_errors)

    @property
    def is_complete(self) -> bool:
        return self.phase == ValidationPhase.COMBINED

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary for serialization."""
        return {
            "phase": self.phase.value,
            "history": [p.value for p in self.history],
            "errors": list(self.errors),
        }
