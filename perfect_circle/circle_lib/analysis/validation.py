"""Stroke validation state machine.

This module provides the ValidationPolicy class and its configuration. The
policy inspects every new sample of a stroke (minimum radius, wrong-way
drawing, automatic completion) and decides at the end of a stroke whether
enough of a circle was drawn to be scored.

Two configurations are shipped as presets:
    LENIENT: Only enforces a minimum sweep at the end of the stroke. Size
        and direction problems are reported as warnings while drawing.
    STRICT: Fails a stroke as soon as it is too small or reverses, and
        finishes it automatically just past one full revolution.

Example usage::

    from circle_lib.analysis.validation import ValidationPolicy, get_preset

    policy = ValidationPolicy(get_preset('strict'))
    state, warning = policy.check_sample(point, center, delta, tracker)
    ...
    final_state = policy.check_end(tracker)
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Optional, Tuple

from ..domain.geometry import Point
from ..domain.states import DirectionLock, MessageKey, ValidationState
from ..utils.geometry import distance
from .angle_tracker import AngleTracker

MIN_RADIUS = 50.0
MIN_SWEEP_ANGLE = 5.0          # ~286 degrees
DIRECTION_TOLERANCE = 0.01     # radians; smaller reversals are noise
WARMUP_SAMPLES = 3


@dataclass(frozen=True)
class ValidationConfig:
    """Thresholds for the validation state machine.

    Attributes:
        min_radius: Minimum distance from the center for any sample.
        min_sweep_angle: Minimum unsigned sweep (radians) at stroke end.
        max_sweep_angle: Sweep at which the stroke finishes on its own, or
            None to let the player keep going.
        direction_tolerance: Reversals smaller than this are ignored.
        enforce_live_checks: When False, the too-small and wrong-way rules
            only warn and the stroke keeps going.
        warmup_samples: Live rules apply once the stroke holds this many
            samples.
    """
    min_radius: float = MIN_RADIUS
    min_sweep_angle: float = MIN_SWEEP_ANGLE
    max_sweep_angle: Optional[float] = None
    direction_tolerance: float = DIRECTION_TOLERANCE
    enforce_live_checks: bool = True
    warmup_samples: int = WARMUP_SAMPLES

    def __post_init__(self):
        if self.max_sweep_angle is not None and self.max_sweep_angle < self.min_sweep_angle:
            raise ValueError("max_sweep_angle must not be below min_sweep_angle")

    def to_dict(self) -> dict:
        return asdict(self)


LENIENT = ValidationConfig(enforce_live_checks=False)
STRICT = ValidationConfig(
    min_sweep_angle=5.9,
    max_sweep_angle=2 * math.pi + 0.35,
    enforce_live_checks=True,
)

PRESETS = {
    'lenient': LENIENT,
    'strict': STRICT,
}


def get_preset(name: str) -> ValidationConfig:
    """Look up a named ValidationConfig.

    Raises:
        ValueError: If ``name`` is not one of PRESETS.
    """
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown validation preset {name!r}; "
                         f"expected one of {sorted(PRESETS)}") from None


class ValidationPolicy:
    """Evaluates samples and stroke ends against a ValidationConfig.

    The policy itself is stateless; the current ValidationState lives with
    the caller, which only consults the policy while the stroke is ACTIVE.
    Without a config it uses ``ValidationConfig()``, which enforces the
    live rules; pass LENIENT for warn-only play.

    Example:
        >>> policy = ValidationPolicy(ValidationConfig(min_radius=60))
        >>> policy.check_sample(Point(10, 0), Point(0, 0), 0.1, AngleTracker(),
        ...                     stroke_length=3)
        (<ValidationState.FAILED_TOO_SMALL: 'failed_too_small'>, <MessageKey.TOO_SMALL: 'TooSmall'>)
    """

    def __init__(self, config: Optional[ValidationConfig] = None):
        self.config = config if config is not None else ValidationConfig()

    def check_sample(
        self,
        latest: Point,
        center: Point,
        delta: float,
        tracker: AngleTracker,
        stroke_length: Optional[int] = None,
    ) -> Tuple[ValidationState, Optional[MessageKey]]:
        """Apply the live rules to the newest sample.

        Rules, first match wins: too small, wrong way, sweep limit reached.

        Args:
            latest: Newest sample.
            center: Fixed center of the circle.
            delta: Angular delta returned by the tracker for this sample.
            tracker: Tracker holding sweep and direction.
            stroke_length: Samples in the stroke; when given and below
                ``warmup_samples`` only the sweep limit is checked.

        Returns:
            Tuple of (state, message). ``message`` names the violated rule,
            both when it failed the stroke and when it only warns.
        """
        cfg = self.config
        warmed_up = stroke_length is None or stroke_length >= cfg.warmup_samples

        violation = None
        if warmed_up:
            if distance(latest, center) < cfg.min_radius:
                violation = (ValidationState.FAILED_TOO_SMALL, MessageKey.TOO_SMALL)
            elif self._is_wrong_way(delta, tracker.direction):
                violation = (ValidationState.FAILED_WRONG_WAY, MessageKey.WRONG_WAY)

        if violation is not None:
            if cfg.enforce_live_checks:
                return violation
            warning = violation[1]
        else:
            warning = None

        if cfg.max_sweep_angle is not None and tracker.sweep >= cfg.max_sweep_angle:
            return ValidationState.COMPLETED, warning
        return ValidationState.ACTIVE, warning

    def check_end(self, tracker: AngleTracker) -> ValidationState:
        """Decide the outcome of a stroke that ended while ACTIVE."""
        if tracker.sweep < self.config.min_sweep_angle:
            return ValidationState.FAILED_INCOMPLETE_SWEEP
        return ValidationState.COMPLETED

    def _is_wrong_way(self, delta: float, direction: DirectionLock) -> bool:
        if direction is DirectionLock.UNKNOWN:
            return False
        if abs(delta) <= self.config.direction_tolerance:
            return False
        return DirectionLock.from_sign(delta) is not direction
