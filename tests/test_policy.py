from datetime import datetime

import pytest

from bookingrules.engine import SchedulingRuleEngine
from bookingrules.io.policy import (
    PolicyWarning,
    load_default_rules,
    load_meetings,
    load_rules,
    parse_rules,
)
from bookingrules.rules.validation import validate_rule


def write(tmp_path, text):
    path = tmp_path / "policy.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_default_rules():
    rules = load_default_rules()
    assert [r.type for r in rules] == [
        "weekdays",
        "holidays",
        "timeRange",
        "maxMeetings",
        "duration",
        "buffer",
    ]
    assert all(validate_rule(r).valid for r in rules)
    assert rules[2].config["timezone"] == "CET"


def test_default_rules_in_engine():
    engine = SchedulingRuleEngine(load_default_rules())
    assert engine.validate_booking(datetime(2024, 1, 16, 10, 0), 30).valid
    midsummer = engine.validate_booking(datetime(2024, 6, 21, 10, 0), 30)
    assert [v.rule_type for v in midsummer.violations] == ["holidays"]


def test_load_rules_and_meetings(tmp_path):
    path = write(
        tmp_path,
        """
rules:
  - id: hours
    type: timeRange
    natural_language: 10 to 4
    config: {startTime: "10:00", endTime: "16:00"}
  - id: "off"
    type: buffer
    enabled: false
meetings:
  - id: standup
    title: Standup
    start: 2024-01-15 09:00:00
    end: 2024-01-15 09:15:00
  - id: review
    start: "2024-01-15T14:00:00"
    end: "2024-01-15T15:00:00"
    status: cancelled
""",
    )
    rules = load_rules(path)
    assert [r.id for r in rules] == ["hours", "off"]
    assert not rules[1].enabled
    assert rules[0].natural_language == "10 to 4"

    meetings = load_meetings(path)
    assert meetings[0].start == datetime(2024, 1, 15, 9, 0)
    assert meetings[0].duration == 15
    assert meetings[1].cancelled


def test_unknown_rule_type_is_skipped_with_warning(tmp_path):
    path = write(
        tmp_path,
        """
rules:
  - {id: a, type: lunchBreak}
  - {id: b, type: weekdays}
""",
    )
    with pytest.warns(PolicyWarning, match="lunchBreak"):
        rules = load_rules(path)
    assert [r.id for r in rules] == ["b"]


@pytest.mark.parametrize(
    "document",
    [
        None,
        {"policy": []},
        {"rules": {"id": "a"}},
        {"rules": [{"id": "a"}]},
        {"rules": [{"id": "a", "type": "buffer", "config": [15]}]},
        {"rules": [{"id": 3, "type": "buffer"}]},
        {"rules": [{"id": "", "type": "buffer"}]},
        {"rules": [{"id": "a", "type": "buffer", "enabled": "no"}]},
    ],
)
def test_bad_shapes_raise(document):
    with pytest.raises(ValueError):
        parse_rules(document)


def test_missing_meetings_section_is_empty(tmp_path):
    assert load_meetings(write(tmp_path, "rules: []\n")) == []


def test_unquoted_yaml_boolean_id_is_refused(tmp_path):
    # YAML 1.1 reads a bare `off` as False
    path = write(
        tmp_path,
        """
rules:
  - id: off
    type: buffer
""",
    )
    with pytest.raises(ValueError, match=r"rules\[0\].id must be a non-empty string"):
        load_rules(path)
