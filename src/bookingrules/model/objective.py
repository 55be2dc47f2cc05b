"""Scoring for booking verdicts."""

from __future__ import annotations

from typing import Sequence

import bookingrules.state as state

VIOLATION_PENALTY = 20


def booking_score(violations: Sequence[state.RuleViolation]) -> int:
    """Linear penalty of 20 points per violation, floored at 0.

    Every violation counts the same, warnings included.
    """
    return max(0, 100 - VIOLATION_PENALTY * len(violations))
