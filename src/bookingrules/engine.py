"""Booking validation engine.

This module exposes `SchedulingRuleEngine`, which holds the active rules and the
existing meetings of one booking session and answers three questions:
  - validate_booking(start, duration): is this proposal admissible, and if not,
    what are up to three alternatives?
  - generate_available_slots(start, end, ...): availability grid for a range
  - get_active_rules_description(): human summary of the enabled rules

The engine is synchronous and keeps no locks; hosts that share one instance
between threads must serialise updates themselves.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

import bookingrules.state as state
import bookingrules.timeutils as tu
from bookingrules.model.build import build_rules
from bookingrules.model.constraints import BaseRule
from bookingrules.model.objective import booking_score

logger = logging.getLogger(__name__)

# Same-day search window for alternatives: 09:00 .. 16:45 in 15 minute steps
ALTERNATIVE_HOURS = range(9, 17)
ALTERNATIVE_STEP = 15
ALTERNATIVE_DAYS = 7
MAX_SUGGESTIONS = 3

# Fixed window used by the availability grid
SLOT_DAY_START = 9
SLOT_DAY_END = 17


class InvalidBookingError(ValueError):
    """Raised when a booking request is malformed (not merely inadmissible)."""


def _check_start(start: object) -> None:
    if not isinstance(start, datetime):
        raise InvalidBookingError(
            f"Booking start must be a datetime, got {type(start).__name__}"
        )


def _check_minutes(value: object, what: str, *, allow_zero: bool = True) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidBookingError(f"{what} must be an integer number of minutes")
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidBookingError(f"{what} must be {'>= 0' if allow_zero else '> 0'}")


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def _as_day(value: object, what: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidBookingError(f"{what} must be a date or datetime")


class SchedulingRuleEngine:
    """Evaluate proposed bookings against a rule set and existing meetings.

    Parameters
    ----------
    rules : Iterable[state.SchedulingRule]
        Rules of the session; only enabled ones are kept.
    meetings : Iterable[state.Meeting]
        Existing meetings. Cancelled ones stay in the list but are ignored by
        every conflict check.
    """

    def __init__(
        self,
        rules: Iterable[state.SchedulingRule] = (),
        meetings: Iterable[state.Meeting] = (),
    ) -> None:
        self._rules: tuple[state.SchedulingRule, ...] = ()
        self._checkers: List[BaseRule] = []
        self._meetings: tuple[state.Meeting, ...] = ()
        self._aware: Optional[bool] = None
        self.update_rules(rules)
        self.update_meetings(meetings)

    # ---------- State ----------

    @property
    def rules(self) -> tuple[state.SchedulingRule, ...]:
        return self._rules

    @property
    def meetings(self) -> tuple[state.Meeting, ...]:
        return self._meetings

    def update_rules(self, rules: Iterable[state.SchedulingRule]) -> None:
        """Replace the rule set wholesale, keeping only enabled rules."""
        self._rules = tuple(r for r in rules if r.enabled)
        self._checkers = build_rules(self._rules)
        logger.debug("engine now holds %d enabled rules", len(self._rules))

    def update_meetings(self, meetings: Iterable[state.Meeting]) -> None:
        """Replace the meeting set wholesale (no filtering).

        All meeting times must be either timezone-aware or naive.
        """
        meetings = tuple(meetings)
        kinds = {_is_aware(t) for m in meetings for t in (m.start, m.end)}
        if len(kinds) > 1:
            raise InvalidBookingError("Meetings mix timezone-aware and naive datetimes")
        self._meetings = meetings
        self._aware = kinds.pop() if kinds else None

    # ---------- Validation ----------

    def validate_booking(
        self,
        start: datetime,
        duration: int,
        *,
        generate_suggestions: bool = True,
    ) -> state.BookingValidationResult:
        """Check a proposed booking against every enabled rule.

        Parameters
        ----------
        start : datetime
            Proposed start (wall clock).
        duration : int
            Length in minutes. Zero or very long durations are legal input and
            are simply judged by the duration / time-range rules.
        generate_suggestions : bool
            Search for alternatives when a violation is found. Internal callers
            pass False so that the search never recurses.

        Raises
        ------
        InvalidBookingError
            When `start` is not a datetime or `duration` is not a non-negative int,
            or when `start` and the stored meetings disagree on timezone awareness.
        """
        _check_start(start)
        _check_minutes(duration, "Duration")
        if self._aware is not None and _is_aware(start) != self._aware:
            raise InvalidBookingError(
                "Booking start and existing meetings must both be timezone-aware or both naive"
            )

        violations = self._violations(start, duration)
        valid = not any(v.severity == "error" for v in violations)
        suggestions: Optional[List[datetime]] = None
        if violations and generate_suggestions:
            suggestions = self.generate_alternative_times(start, duration)

        return state.BookingValidationResult(
            valid=valid,
            violations=violations,
            score=booking_score(violations),
            suggestions=suggestions,
        )

    def _violations(self, start: datetime, duration: int) -> List[state.RuleViolation]:
        booking = state.ProposedBooking(
            start=start, end=start + timedelta(minutes=duration), duration=duration
        )
        violations: List[state.RuleViolation] = []
        for checker in self._checkers:
            violation = checker.check(booking, self._meetings)
            if violation is not None:
                violations.append(violation)
        if violations:
            logger.debug(
                "booking %s (+%d min) broke: %s",
                start.isoformat(),
                duration,
                ", ".join(v.rule_id for v in violations),
            )
        return violations

    def _is_valid(self, start: datetime, duration: int) -> bool:
        return self.validate_booking(start, duration, generate_suggestions=False).valid

    def generate_alternative_times(
        self, original: datetime, duration: int
    ) -> List[datetime]:
        """Find up to three admissible starts near `original`.

        Search order:
          1) the same day, 09:00 to 16:45 in 15 minute steps, skipping `original`
          2) the following 7 days at the original hour and minute
        """
        _check_start(original)
        _check_minutes(duration, "Duration")

        alternatives: List[datetime] = []
        for hour in ALTERNATIVE_HOURS:
            for minute in range(0, 60, ALTERNATIVE_STEP):
                candidate = original.replace(
                    hour=hour, minute=minute, second=0, microsecond=0
                )
                if candidate == original:
                    continue
                if self._is_valid(candidate, duration):
                    alternatives.append(candidate)
                    if len(alternatives) >= MAX_SUGGESTIONS:
                        return alternatives

        for offset in range(1, ALTERNATIVE_DAYS + 1):
            candidate = (original + timedelta(days=offset)).replace(
                second=0, microsecond=0
            )
            if self._is_valid(candidate, duration):
                alternatives.append(candidate)
                if len(alternatives) >= MAX_SUGGESTIONS:
                    break

        return alternatives

    # ---------- Availability ----------

    def generate_available_slots(
        self,
        start_date: date,
        end_date: date,
        duration: int = 30,
        step_minutes: int = 15,
    ) -> List[state.TimeSlot]:
        """Availability grid for every calendar day in [start_date, end_date].

        Each day is scanned from 09:00 in `step_minutes` increments; a slot is
        emitted while it still ends by 17:00.
        """
        first = _as_day(start_date, "start_date")
        last = _as_day(end_date, "end_date")
        _check_minutes(duration, "Duration")
        _check_minutes(step_minutes, "Slot interval", allow_zero=False)

        slots: List[state.TimeSlot] = []
        for day in tu.iter_days(first, last):
            slots.extend(self._day_slots(day, duration, step_minutes))
        return slots

    def _day_slots(self, day: date, duration: int, step: int) -> List[state.TimeSlot]:
        day_end = tu.at_time(day, SLOT_DAY_END)
        length = timedelta(minutes=duration)
        current = tu.at_time(day, SLOT_DAY_START)

        slots: List[state.TimeSlot] = []
        while current + length <= day_end:
            result = self.validate_booking(
                current, duration, generate_suggestions=False
            )
            slots.append(
                state.TimeSlot(
                    start=current,
                    end=current + length,
                    available=result.valid,
                    conflict_reason=(
                        result.violations[0].description if result.violations else None
                    ),
                )
            )
            current += timedelta(minutes=step)
        return slots

    # ---------- Reporting ----------

    def get_active_rules_description(self) -> str:
        if not self._rules:
            return "No scheduling rules are currently active."
        return f"Active rules: {', '.join(r.natural_language for r in self._rules)}."

