from __future__ import annotations

from datetime import datetime

import pytest

import bookingrules.state as state


def make_rule(rule_type, config=None, *, rule_id=None, enabled=True, text=""):
    return state.SchedulingRule(
        id=rule_id or rule_type,
        type=rule_type,
        enabled=enabled,
        description=f"{rule_type} rule",
        natural_language=text or f"{rule_type} rule",
        config=config or {},
    )


def make_meeting(start, end, *, meeting_id="m1", status="confirmed"):
    return state.Meeting(
        id=meeting_id,
        title="Existing",
        start=start,
        end=end,
        duration=int((end - start).total_seconds() // 60),
        attendee_email="someone@example.com",
        status=status,
    )


@pytest.fixture
def monday():
    # January 15, 2024 is a Monday
    return datetime(2024, 1, 15, 10, 0)


@pytest.fixture
def business_rules():
    return [
        make_rule("weekdays", {"days": [1, 2, 3, 4, 5]}, rule_id="weekdays-only"),
        make_rule(
            "timeRange", {"startTime": "09:00", "endTime": "17:00"}, rule_id="business-hours"
        ),
    ]


@pytest.fixture
def morning_meeting():
    return make_meeting(datetime(2024, 1, 15, 9, 0), datetime(2024, 1, 15, 9, 30))
