import itertools

import pytest

from bookingrules.rules.parser import RuleParser, parse_natural_language_rule
from bookingrules.rules.patterns import list_archetypes
from bookingrules.rules.validation import generate_rule_suggestions, validate_rule


def parse(text):
    result = parse_natural_language_rule(text)
    assert result.success, result.errors
    return result.rule


def test_archetype_order_is_fixed():
    assert list_archetypes() == [
        "weekdays",
        "holidays",
        "timeRange",
        "maxMeetings",
        "duration",
        "buffer",
    ]


def test_weekdays_round_trip():
    rule = parse("Only book meetings on weekdays")
    assert rule.type == "weekdays"
    assert rule.config["days"] == [1, 2, 3, 4, 5]
    assert rule.natural_language == "Only book meetings on weekdays"
    assert rule.confidence == 0.8
    assert rule.enabled
    assert validate_rule(rule).valid


@pytest.mark.parametrize("text", ["Monday-Friday", "No weekends please", "business days only"])
def test_weekday_phrasings(text):
    assert parse(text).type == "weekdays"


@pytest.mark.parametrize(
    "text, country",
    [
        ("Not on Swedish national holidays", "SE"),
        ("No holidays", "US"),
        ("Exclude public holidays", "US"),
    ],
)
def test_holidays(text, country):
    rule = parse(text)
    assert rule.type == "holidays"
    assert rule.config == {"country": country}


@pytest.mark.parametrize(
    "text, start, end",
    [
        ("9am to 5pm CET only", "09:00", "17:00"),
        ("10:30 until 16:00", "10:30", "16:00"),
        ("12am - 11:45am", "00:00", "11:45"),
        ("8 to 12pm", "08:00", "12:00"),
    ],
)
def test_time_range(text, start, end):
    rule = parse(text)
    assert rule.type == "timeRange"
    assert rule.config == {"startTime": start, "endTime": end, "timezone": "CET"}
    assert rule.description == f"Working hours: {start} - {end}"


@pytest.mark.parametrize("text", ["Between 10:00 and 16:00", "During working hours"])
def test_time_range_without_to_falls_back_to_custom(text):
    rule = parse(text)
    assert rule.type == "custom"
    assert rule.config == {"rule": text}
    assert rule.confidence == 0.5


def test_failed_extraction_keeps_searching():
    # "between .. and .." matches timeRange but yields no times; the
    # maxMeetings pattern later in the table still gets its turn.
    rule = parse("between 10:00 and 16:00, max 4 meetings per day")
    assert rule.type == "maxMeetings"
    assert rule.config == {"maxPerDay": 4}


@pytest.mark.parametrize(
    "text, n",
    [("Max 3 meetings per day", 3), ("no more than 5 meetings daily", 5), ("limit 2 meetings per day", 2)],
)
def test_max_meetings(text, n):
    rule = parse(text)
    assert rule.type == "maxMeetings"
    assert rule.config == {"maxPerDay": n}
    assert rule.description == f"Maximum {n} meetings per day"


@pytest.mark.parametrize(
    "text, durations",
    [
        ("Meetings can be 15, 30, or 45 minutes", [15, 30, 45]),
        ("meetings 30 or 60 minutes", [30, 60]),
        ("durations of 20 minutes", [20]),
        # the first duration pattern fires on "45 minutes long" before the list form
        ("Meetings can be 15, 30, or 45 minutes long", [45]),
    ],
)
def test_duration(text, durations):
    rule = parse(text)
    assert rule.type == "duration"
    assert rule.config == {"allowedDurations": durations}


@pytest.mark.parametrize(
    "text, n",
    [
        ("15 minute buffer between meetings", 15),
        ("At least 10 minutes between meetings", 10),
        ("minimum 5 min gap", 5),
    ],
)
def test_buffer(text, n):
    rule = parse(text)
    assert rule.type == "buffer"
    assert rule.config == {"bufferMinutes": n}
    assert validate_rule(rule).valid


def test_custom_rule_keeps_raw_text_and_hints():
    text = "No meetings on the first Monday of the month"
    rule = parse(text)
    assert rule.type == "custom"
    assert rule.description == f"Custom rule: {text}"
    assert rule.config == {"rule": text}
    result = parse_natural_language_rule(text)
    assert result.suggestions == ['Try: "Only weekdays" or "Maximum 3 meetings per day"']


@pytest.mark.parametrize("text", ["", "   ", None])
def test_empty_input_fails(text):
    result = parse_natural_language_rule(text)
    assert not result.success
    assert result.rule is None
    assert result.errors == ["Please provide a rule description"]


def test_injected_ids():
    counter = itertools.count(1)
    parser = RuleParser(id_factory=lambda: f"rule-{next(counter)}")
    assert parser.parse("only weekdays").rule.id == "rule-1"
    assert parser.parse("something else entirely").rule.id == "rule-2"


def test_parse_result_wire_shape():
    data = parse_natural_language_rule("Max 2 meetings per day").to_dict()
    assert data["success"] is True
    assert data["rule"]["type"] == "maxMeetings"
    assert data["rule"]["naturalLanguage"] == "Max 2 meetings per day"
    assert "errors" not in data


def test_suggestion_hints():
    assert generate_rule_suggestions("what time?") == [
        'Try: "9am to 5pm only" or "Between 10:00 and 16:00"'
    ]
    assert len(generate_rule_suggestions("holiday duration during the week")) == 3
    assert generate_rule_suggestions("xyz") == []
