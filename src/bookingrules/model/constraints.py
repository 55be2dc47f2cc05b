from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping, Optional, Sequence

import bookingrules.state as state
import bookingrules.timeutils as tu

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BaseRule:
    """Base class for all booking checkers.

    A checker wraps one admitted `state.SchedulingRule` and decides whether a
    proposed booking breaks it.

    Design notes
    ------------
    - `TYPE` (class var): the rule archetype this class checks. **Required**
      for every checker class; the registry is keyed on it.
    - `DEFAULTS` (class var): default config for the archetype. Defaults are
      merged once, when the checker is built, so `check` reads `self.config`
      without any fallbacks of its own.
    - `SEVERITY` (class var): severity of the violations this checker emits.
    - Checkers never modify the wrapped rule or the meetings they are given.
    """

    # Class-level metadata
    TYPE: ClassVar[str]
    DEFAULTS: ClassVar[Mapping[str, Any]] = {}
    SEVERITY: ClassVar[state.Severity] = "error"

    # Instance configuration
    spec: state.SchedulingRule
    config: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_rule(cls, rule: state.SchedulingRule) -> BaseRule:
        return cls(spec=rule, config=resolve_config(rule))

    def check(
        self, booking: state.ProposedBooking, meetings: Sequence[state.Meeting]
    ) -> Optional[state.RuleViolation]:
        """Return a violation when `booking` breaks this rule, else None."""
        raise NotImplementedError

    @property
    def rule_id(self) -> str:
        return self.spec.id

    def violation(
        self, description: str, suggestion: Optional[str] = None
    ) -> state.RuleViolation:
        return state.RuleViolation(
            rule_id=self.spec.id,
            rule_type=self.spec.type,
            description=description,
            severity=self.SEVERITY,
            suggestion=suggestion,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rule_id='{self.rule_id}', config={dict(self.config)})"


# ---------- Calendar constraints ----------


class WeekdaysRule(BaseRule):
    TYPE = "weekdays"
    DEFAULTS = {"days": [1, 2, 3, 4, 5]}

    def check(self, booking, meetings):
        if tu.weekday_number(booking.start) not in self.config["days"]:
            return self.violation(
                "Meetings are only allowed on weekdays",
                "Please select a weekday (Monday-Friday)",
            )
        return None


class HolidaysRule(BaseRule):
    TYPE = "holidays"
    DEFAULTS = {"country": "SE"}

    def check(self, booking, meetings):
        country = self.config["country"]
        if not tu.is_holiday(booking.start, country):
            return None
        adjective = tu.COUNTRY_ADJECTIVES.get(country.upper(), country)
        day = booking.start
        return self.violation(
            f"{day:%B} {day.day}, {day.year} is a {adjective} national holiday",
            "Please select a different date that is not a holiday",
        )


class TimeRangeRule(BaseRule):
    TYPE = "timeRange"
    DEFAULTS = {"startTime": "09:00", "endTime": "17:00"}

    def check(self, booking, meetings):
        start_time = self.config["startTime"]
        end_time = self.config["endTime"]
        # Wall-clock comparison only; a booking crossing midnight is not modelled
        if tu.minutes_of_day(booking.start) < tu.parse_hhmm(
            start_time
        ) or tu.minutes_of_day(booking.end) > tu.parse_hhmm(end_time):
            return self.violation(
                f"Meetings must be between {start_time} and {end_time}",
                f"Please select a time within working hours ({start_time} - {end_time})",
            )
        return None


# ---------- Load constraints ----------


class MaxMeetingsRule(BaseRule):
    TYPE = "maxMeetings"
    DEFAULTS = {"maxPerDay": 3}

    def check(self, booking, meetings):
        max_per_day = self.config["maxPerDay"]
        day = booking.start.date()
        on_day = sum(1 for m in meetings if not m.cancelled and m.start.date() == day)
        if on_day >= max_per_day:
            return self.violation(
                f"Maximum {max_per_day} meetings allowed per day ({on_day} already scheduled)",
                "Please select a different date or reschedule an existing meeting",
            )
        return None


class DurationRule(BaseRule):
    TYPE = "duration"
    DEFAULTS = {"allowedDurations": [15, 30, 45]}

    def check(self, booking, meetings):
        allowed = self.config["allowedDurations"]
        if booking.duration not in allowed:
            listed = ", ".join(str(d) for d in allowed)
            return self.violation(
                f"Meeting duration must be one of: {listed} minutes",
                f"Please select a duration of {listed} minutes",
            )
        return None


class BufferRule(BaseRule):
    """Require a gap between the booking and every live meeting.

    The test is gap-to-nearest-edge: |start - meeting.end| and
    |end - meeting.start| must both reach `bufferMinutes`. Overlaps are caught
    only insofar as one of those two distances falls under the buffer.
    """

    TYPE = "buffer"
    DEFAULTS = {"bufferMinutes": 15}

    def check(self, booking, meetings):
        buffer_minutes = self.config["bufferMinutes"]
        for meeting in meetings:
            if meeting.cancelled:
                continue
            gap_after = abs(tu.minutes_between(booking.start, meeting.end))
            gap_before = abs(tu.minutes_between(booking.end, meeting.start))
            if gap_after < buffer_minutes or gap_before < buffer_minutes:
                logger.debug(
                    "buffer rule %s: too close to meeting %s", self.rule_id, meeting.id
                )
                return self.violation(
                    f"Minimum {buffer_minutes}-minute gap required between meetings",
                    f"Please select a time at least {buffer_minutes} minutes away from existing meetings",
                )
        return None


# ---------- Free-text constraints ----------


class CustomRule(BaseRule):
    """Free-text rule. Only the "first monday" phrasing is enforced; any other
    text is kept for display and never fires."""

    TYPE = "custom"
    DEFAULTS = {"rule": ""}
    SEVERITY = "warning"

    def check(self, booking, meetings):
        text = str(self.config["rule"] or self.spec.natural_language).lower()
        if "first monday" in text and tu.is_first_monday(booking.start):
            return self.violation(
                "No meetings allowed on the first Monday of the month",
                "Please select a different date",
            )
        return None


# ---------- Auto registry & helpers ----------


def _all_rule_classes() -> list[type[BaseRule]]:
    # Recursively collect all subclasses so we don't miss indirect ones.
    out: list[type[BaseRule]] = []
    q = list(BaseRule.__subclasses__())
    seen: set[type[BaseRule]] = set()
    while q:
        cls = q.pop()
        if cls in seen:
            continue
        seen.add(cls)
        out.append(cls)
        q.extend(cls.__subclasses__())
    return out


# Map rule types -> checker classes
RULES_BY_TYPE: dict[str, type[BaseRule]] = {
    cls.TYPE: cls for cls in _all_rule_classes()
}

# Default config per rule type, in one auditable place
DEFAULT_CONFIGS: dict[str, Mapping[str, Any]] = {
    rtype: cls.DEFAULTS for rtype, cls in RULES_BY_TYPE.items()
}

assert set(RULES_BY_TYPE) == set(state.RULE_TYPES), "Every rule type needs a checker"


def get_rule_class(rule_type: str) -> type[BaseRule]:
    try:
        return RULES_BY_TYPE[rule_type]
    except KeyError as e:
        known = ", ".join(sorted(RULES_BY_TYPE))
        raise KeyError(f"Unknown rule type '{rule_type}'. Known: {known}") from e


def resolve_config(rule: state.SchedulingRule) -> dict[str, Any]:
    """Merge the archetype defaults under `rule.config`.

    Keys that are missing or None take the default; explicit values win.
    """
    resolved = {k: _copy(v) for k, v in DEFAULT_CONFIGS.get(rule.type, {}).items()}
    for key, value in rule.config.items():
        if value is not None:
            resolved[key] = value
    return resolved


def _copy(value: Any) -> Any:
    return list(value) if isinstance(value, (list, tuple)) else value
