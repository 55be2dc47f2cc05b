"""Booking orchestration.

`BookingService` is the glue between user input and the engine: it turns
sentences into admitted rules, keeps the engine's meeting list free of
cancelled meetings, and books meetings the engine accepts. Calendar sync and
notifications are collaborators passed in by the host; nothing here is a
module-level singleton.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional, Protocol

import bookingrules.state as state
from bookingrules.engine import SchedulingRuleEngine
from bookingrules.rules.parser import RuleParser, RuleParsingResult
from bookingrules.rules.validation import require_valid, validate_rule

logger = logging.getLogger(__name__)


class CalendarSync(Protocol):
    def push_meeting(self, meeting: state.Meeting) -> None: ...


class Notifier(Protocol):
    def booking_confirmed(self, meeting: state.Meeting) -> None: ...


@dataclass(slots=True)
class BookingOutcome:
    result: state.BookingValidationResult
    meeting: Optional[state.Meeting] = None

    @property
    def booked(self) -> bool:
        return self.meeting is not None


class BookingService:
    """Front door for one calendar's booking session.

    Rules must pass `validate_rule` before they reach the engine, and only
    non-cancelled meetings are forwarded to it.
    """

    def __init__(
        self,
        rules: Iterable[state.SchedulingRule] = (),
        meetings: Iterable[state.Meeting] = (),
        *,
        calendar: Optional[CalendarSync] = None,
        notifier: Optional[Notifier] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.calendar = calendar
        self.notifier = notifier
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)
        self.parser = RuleParser(id_factory=self._new_id)
        self.engine = SchedulingRuleEngine()

        self._rules: List[state.SchedulingRule] = [require_valid(r) for r in rules]
        self._meetings: List[state.Meeting] = list(meetings)
        self._sync_rules()
        self._sync_meetings()

    # ---------- Rules ----------

    @property
    def rules(self) -> tuple[state.SchedulingRule, ...]:
        return tuple(self._rules)

    def add_rule(self, text: str) -> RuleParsingResult:
        """Parse `text` and admit the resulting rule if it is well formed."""
        parsed = self.parser.parse(text)
        if not parsed.success or parsed.rule is None:
            return parsed

        check = validate_rule(parsed.rule)
        if not check.valid:
            return RuleParsingResult(
                success=False, errors=check.errors, suggestions=parsed.suggestions
            )

        self._rules.append(parsed.rule)
        self._sync_rules()
        logger.info("added %s rule %s: %r", parsed.rule.type, parsed.rule.id, text)
        return parsed

    def toggle_rule(self, rule_id: str) -> state.SchedulingRule:
        idx = self._rule_index(rule_id)
        self._rules[idx] = self._rules[idx].toggled()
        self._sync_rules()
        return self._rules[idx]

    def update_rule_config(self, rule_id: str, **changes) -> state.SchedulingRule:
        """Patch a rule's config; the patched rule must still validate."""
        idx = self._rule_index(rule_id)
        patched = require_valid(self._rules[idx].with_config(**changes))
        self._rules[idx] = patched
        self._sync_rules()
        return patched

    def remove_rule(self, rule_id: str) -> None:
        del self._rules[self._rule_index(rule_id)]
        self._sync_rules()

    def describe_rules(self) -> str:
        return self.engine.get_active_rules_description()

    def _rule_index(self, rule_id: str) -> int:
        for idx, rule in enumerate(self._rules):
            if rule.id == rule_id:
                return idx
        raise KeyError(f"Unknown rule id '{rule_id}'")

    def _sync_rules(self) -> None:
        self.engine.update_rules(self._rules)

    # ---------- Meetings ----------

    @property
    def meetings(self) -> tuple[state.Meeting, ...]:
        return tuple(self._meetings)

    def set_meetings(self, meetings: Iterable[state.Meeting]) -> None:
        self._meetings = list(meetings)
        self._sync_meetings()

    def _sync_meetings(self) -> None:
        self.engine.update_meetings(m for m in self._meetings if not m.cancelled)

    def book(
        self,
        start: datetime,
        duration: int,
        *,
        title: str,
        attendee_email: str,
        meeting_type: state.MeetingType = "video",
    ) -> BookingOutcome:
        """Validate and, when admissible, record a confirmed meeting."""
        result = self.engine.validate_booking(start, duration)
        if not result.valid:
            logger.info(
                "rejected booking at %s: %s",
                start.isoformat(),
                "; ".join(v.description for v in result.violations),
            )
            return BookingOutcome(result=result)

        meeting = state.Meeting(
            id=self._new_id(),
            title=title,
            start=start,
            end=start + timedelta(minutes=duration),
            duration=duration,
            attendee_email=attendee_email,
            type=meeting_type,
            status="confirmed",
        )
        self._meetings.append(meeting)
        self._sync_meetings()
        logger.info("booked meeting %s at %s", meeting.id, start.isoformat())

        if self.calendar is not None:
            self.calendar.push_meeting(meeting)
        if self.notifier is not None:
            self.notifier.booking_confirmed(meeting)
        return BookingOutcome(result=result, meeting=meeting)

    def cancel(self, meeting_id: str) -> state.Meeting:
        for idx, meeting in enumerate(self._meetings):
            if meeting.id == meeting_id:
                cancelled = replace(meeting, status="cancelled")
                self._meetings[idx] = cancelled
                self._sync_meetings()
                return cancelled
        raise KeyError(f"Unknown meeting id '{meeting_id}'")

    def availability(
        self,
        start_date: date,
        end_date: date,
        duration: int = 30,
        interval: int = 15,
    ) -> List[state.TimeSlot]:
        return self.engine.generate_available_slots(start_date, end_date, duration, interval)
