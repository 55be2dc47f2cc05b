"""Module with dataclasses to hold the state for the main entities of the program"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Literal, Mapping, Optional

__all__ = [
    "RULE_TYPES",
    "RuleType",
    "Severity",
    "MeetingType",
    "MeetingStatus",
    "SchedulingRule",
    "Meeting",
    "RuleViolation",
    "BookingValidationResult",
    "TimeSlot",
    "ProposedBooking",
]

RULE_TYPES = (
    "weekdays",
    "holidays",
    "timeRange",
    "maxMeetings",
    "duration",
    "buffer",
    "custom",
)
MEETING_TYPES = ("video", "phone", "in-person")
MEETING_STATUSES = ("confirmed", "pending", "cancelled")

RuleType = Literal[
    "weekdays", "holidays", "timeRange", "maxMeetings", "duration", "buffer", "custom"
]
Severity = Literal["error", "warning"]
MeetingType = Literal["video", "phone", "in-person"]
MeetingStatus = Literal["confirmed", "pending", "cancelled"]


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise ValueError(f"Expected an ISO datetime, got {value!r}")


@dataclass(frozen=True, slots=True)
class SchedulingRule:
    """Class to represent a scheduling rule

    Attributes:
        id: Stable identifier of the rule
        type: The rule archetype, decides the shape of `config`
        enabled: Whether the rule takes part in validation
        description: Human-readable text for reports
        natural_language: The text the rule was parsed from
        config: Type-specific parameters (e.g. {"maxPerDay": 3})
        confidence: Advisory parser score, never read by the engine
    """

    id: str
    type: RuleType
    enabled: bool = True
    description: str = ""
    natural_language: str = ""
    config: Mapping[str, Any] = field(default_factory=dict)
    confidence: Optional[float] = None

    def __post_init__(self):
        if self.type not in RULE_TYPES:
            raise ValueError(
                f"Rule type must be one of {', '.join(RULE_TYPES)}; got '{self.type}'"
            )
        # Own a private copy so callers cannot mutate the rule through their dict
        object.__setattr__(self, "config", dict(self.config or {}))

    def toggled(self) -> SchedulingRule:
        return replace(self, enabled=not self.enabled)

    def with_config(self, **changes: Any) -> SchedulingRule:
        """Return a copy whose config is patched with `changes`."""
        return replace(self, config={**self.config, **changes})

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "type": self.type,
            "enabled": self.enabled,
            "description": self.description,
            "naturalLanguage": self.natural_language,
            "config": dict(self.config),
        }
        if self.confidence is not None:
            data["confidence"] = self.confidence
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SchedulingRule:
        if not isinstance(data, Mapping) or "id" not in data or "type" not in data:
            raise ValueError("A rule must be a mapping with at least 'id' and 'type'.")
        config = data.get("config") or {}
        if not isinstance(data["id"], str) or not data["id"].strip():
            raise ValueError(f"Rule id must be a non-empty string, got {data['id']!r}.")
        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError(f"Rule '{data['id']}': enabled must be true or false.")
        if not isinstance(config, Mapping):
            raise ValueError(f"Rule '{data['id']}': config must be a mapping.")
        return cls(
            id=data["id"],
            type=data["type"],
            enabled=enabled,
            description=data.get("description") or "",
            natural_language=_pick(data, "natural_language", "naturalLanguage", default="")
            or "",
            config=config,
            confidence=data.get("confidence"),
        )


@dataclass(frozen=True, slots=True)
class Meeting:
    """Class to represent an existing meeting

    `end` is taken as given; it is not recomputed from `start` and `duration`.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    duration: int
    attendee_email: str = ""
    type: MeetingType = "video"
    status: MeetingStatus = "confirmed"

    def __post_init__(self):
        if self.type not in MEETING_TYPES:
            raise ValueError("Meeting type must be one of 'video', 'phone', 'in-person'")
        if self.status not in MEETING_STATUSES:
            raise ValueError(
                "Meeting status must be one of 'confirmed', 'pending', 'cancelled'"
            )

    @property
    def cancelled(self) -> bool:
        return self.status == "cancelled"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration": self.duration,
            "attendeeEmail": self.attendee_email,
            "type": self.type,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Meeting:
        if not isinstance(data, Mapping):
            raise ValueError(f"A meeting must be a mapping, got {type(data).__name__}.")
        start = _as_datetime(data["start"])
        end = _as_datetime(data["end"])
        duration = data.get("duration")
        if duration is None:
            duration = int((end - start).total_seconds() // 60)
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            start=start,
            end=end,
            duration=int(duration),
            attendee_email=_pick(data, "attendee_email", "attendeeEmail", default="")
            or "",
            type=data.get("type") or "video",
            status=data.get("status") or "confirmed",
        )


@dataclass(frozen=True, slots=True)
class RuleViolation:
    rule_id: str
    rule_type: RuleType
    description: str
    severity: Severity = "error"
    suggestion: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "ruleId": self.rule_id,
            "ruleType": self.rule_type,
            "description": self.description,
            "severity": self.severity,
        }
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass(slots=True)
class BookingValidationResult:
    valid: bool
    violations: list[RuleViolation]
    score: int
    suggestions: Optional[list[datetime]] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "valid": self.valid,
            "violations": [v.to_dict() for v in self.violations],
            "score": self.score,
        }
        if self.suggestions is not None:
            data["suggestions"] = [s.isoformat() for s in self.suggestions]
        return data


@dataclass(frozen=True, slots=True)
class TimeSlot:
    start: datetime
    end: datetime
    available: bool
    conflict_reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "available": self.available,
        }
        if self.conflict_reason is not None:
            data["conflictReason"] = self.conflict_reason
        return data


@dataclass(frozen=True, slots=True)
class ProposedBooking:
    """The interval a booking request asks for.

    Attributes:
        start: Proposed start
        end: start + duration
        duration: Length in minutes
    """

    start: datetime
    end: datetime
    duration: int
