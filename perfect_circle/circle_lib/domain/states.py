"""Stroke state domain objects.

This module provides the enumerations that describe where a stroke stands
while it is being drawn and after it ends, together with the message keys
handed to the notification sink.

The module provides the following classes:
    DirectionLock: Rotational sense established early in a stroke.
    ValidationState: Outcome of the validation state machine.
    MessageKey: Discrete message identifiers for the notification sink.

Example usage:
    Mapping a failed state to its message::

        from circle_lib.domain.states import ValidationState

        state = ValidationState.FAILED_WRONG_WAY
        if state.is_failure:
            print(state.message_key.value)   # 'WrongWay'
"""

from __future__ import annotations
from enum import Enum
from typing import Optional


class DirectionLock(Enum):
    """Rotational sense of a stroke.

    The value is the sign of the angular delta that produces it. Rendering
    surfaces grow y downwards, so a positive delta turns clockwise on screen.

    Example:
        >>> DirectionLock.from_sign(-0.2)
        <DirectionLock.COUNTER_CLOCKWISE: -1>
    """
    UNKNOWN = 0
    CLOCKWISE = 1
    COUNTER_CLOCKWISE = -1

    @classmethod
    def from_sign(cls, delta: float) -> DirectionLock:
        """Direction matching the sign of ``delta`` (UNKNOWN for zero)."""
        if delta > 0:
            return cls.CLOCKWISE
        if delta < 0:
            return cls.COUNTER_CLOCKWISE
        return cls.UNKNOWN


class MessageKey(Enum):
    """Keys delivered to the notification sink."""
    TOO_SMALL = 'TooSmall'
    WRONG_WAY = 'WrongWay'
    INCOMPLETE_SWEEP = 'IncompleteSweep'
    NEW_HIGH_SCORE = 'NewHighScore'


class ValidationState(Enum):
    """States of the per-stroke validation state machine.

    ACTIVE is the only non-terminal state. Every FAILED_* state discards
    the stroke; COMPLETED strokes are scored and compared against the
    best score.
    """
    ACTIVE = 'active'
    FAILED_TOO_SMALL = 'failed_too_small'
    FAILED_WRONG_WAY = 'failed_wrong_way'
    FAILED_INCOMPLETE_SWEEP = 'failed_incomplete_sweep'
    COMPLETED = 'completed'

    @property
    def is_failure(self) -> bool:
        return self in _FAILURE_MESSAGES

    @property
    def is_terminal(self) -> bool:
        return self is not ValidationState.ACTIVE

    @property
    def message_key(self) -> Optional[MessageKey]:
        """Message key for a failure state, None otherwise."""
        return _FAILURE_MESSAGES.get(self)


_FAILURE_MESSAGES = {
    ValidationState.FAILED_TOO_SMALL: MessageKey.TOO_SMALL,
    ValidationState.FAILED_WRONG_WAY: MessageKey.WRONG_WAY,
    ValidationState.FAILED_INCOMPLETE_SWEEP: MessageKey.INCOMPLETE_SWEEP,
}
