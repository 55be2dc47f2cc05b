"""Structural checks on rules before they are admitted to the active set,
plus the static hint strings shown next to the rule input box."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

import bookingrules.state as state
import bookingrules.timeutils as tu


@dataclass(slots=True)
class RuleCheck:
    valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_rule(rule: state.SchedulingRule) -> RuleCheck:
    """Check that `rule.config` has the shape its type needs."""
    errors: List[str] = []
    config = rule.config

    if rule.type == "weekdays":
        days = config.get("days")
        if days is not None and (
            not isinstance(days, (list, tuple))
            or not days
            or not all(_is_int(d) and 0 <= d <= 6 for d in days)
        ):
            errors.append("Days must be a non-empty list of day numbers (0=Sunday..6=Saturday)")

    elif rule.type == "holidays":
        country = config.get("country")
        if country is not None and (not isinstance(country, str) or not country.strip()):
            errors.append("Holiday country must be a country code such as 'SE'")

    elif rule.type == "timeRange":
        start, end = config.get("startTime"), config.get("endTime")
        if not start or not end:
            errors.append("Time range must have both start and end times")
        else:
            try:
                if tu.parse_hhmm(start) >= tu.parse_hhmm(end):
                    errors.append("Time range must end after it starts")
            except ValueError as e:
                errors.append(f"Invalid time range: {e}")

    elif rule.type == "maxMeetings":
        max_per_day = config.get("maxPerDay")
        if not _is_int(max_per_day) or max_per_day < 1:
            errors.append("Maximum meetings per day must be at least 1")

    elif rule.type == "duration":
        durations = config.get("allowedDurations")
        if not isinstance(durations, (list, tuple)) or len(durations) == 0:
            errors.append("At least one duration must be specified")
        elif not all(_is_int(d) and d > 0 for d in durations):
            errors.append("Durations must be positive whole minutes")

    elif rule.type == "buffer":
        buffer_minutes = config.get("bufferMinutes")
        if not _is_int(buffer_minutes) or buffer_minutes < 0:
            errors.append("Buffer time must be at least 0 minutes")

    return RuleCheck(valid=not errors, errors=errors)


def generate_rule_suggestions(text: str) -> List[str]:
    """Example phrasings related to what the user typed. Advisory UI copy only."""
    suggestions: List[str] = []
    lower = (text or "").lower()

    if "time" in lower or "hour" in lower:
        suggestions.append('Try: "9am to 5pm only" or "Between 10:00 and 16:00"')
    if "day" in lower or "week" in lower:
        suggestions.append('Try: "Only weekdays" or "Maximum 3 meetings per day"')
    if "minute" in lower or "duration" in lower:
        suggestions.append(
            'Try: "Meetings can be 15, 30, or 45 minutes" or "15 minute buffer between meetings"'
        )
    if "holiday" in lower:
        suggestions.append('Try: "No Swedish national holidays" or "Exclude public holidays"')

    return suggestions


def require_valid(rule: state.SchedulingRule) -> state.SchedulingRule:
    """Return `rule` unchanged, or raise ValueError listing its config errors."""
    check = validate_rule(rule)
    if not check.valid:
        raise ValueError(f"Rule '{rule.id}' is invalid: {'; '.join(check.errors)}")
    return rule
