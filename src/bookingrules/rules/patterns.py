"""Ordered archetype table for the natural-language rule parser.

Each entry is (rule type, patterns, extractor). The parser walks the table top
to bottom and each entry's patterns left to right; the order decides which
archetype wins when a sentence matches several, so it must not be re-sorted.

Patterns are matched against the trimmed, lower-cased input. An extractor gets
the original text and the match, and returns (description, config) or None
when it cannot pull a usable config out of the text.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import bookingrules.timeutils as tu

Extracted = Tuple[str, Dict[str, Any]]
Extractor = Callable[[str, "re.Match[str]"], Optional[Extracted]]

_CLOCK = r"(\d{1,2}):?(\d{2})?\s*(am|pm)?"
TIME_RANGE = re.compile(_CLOCK + r"\s*(?:to|-|until)\s*" + _CLOCK, re.IGNORECASE)


# ---------- Extractors ----------


def weekdays(text, match):
    return "Only allow meetings on weekdays (Monday-Friday)", {"days": [1, 2, 3, 4, 5]}


def holidays(text, match):
    country = "SE" if "swedish" in text.lower() else "US"
    return "Exclude national holidays", {"country": country}


def time_range(text, match):
    # Only the "X to Y" phrasing carries usable times; "between X and Y" and
    # "working hours" fall through to the next candidates.
    found = TIME_RANGE.search(text)
    if found is None:
        return None
    h1, m1, p1, h2, m2, p2 = found.groups()
    start = tu.format_hhmm(*tu.to_24h(int(h1), int(m1 or 0), p1))
    end = tu.format_hhmm(*tu.to_24h(int(h2), int(m2 or 0), p2))
    return f"Working hours: {start} - {end}", {
        "startTime": start,
        "endTime": end,
        "timezone": "CET",
    }


def max_meetings(text, match):
    if not match.group(1):
        return None
    n = int(match.group(1))
    return f"Maximum {n} meetings per day", {"maxPerDay": n}


def duration(text, match):
    durations = [int(g) for g in match.groups()[:3] if g]
    if not durations:
        return None
    return (
        f"Meeting durations: {', '.join(str(d) for d in durations)} minutes",
        {"allowedDurations": durations},
    )


def buffer(text, match):
    if not match.group(1):
        return None
    n = int(match.group(1))
    return f"Minimum {n}-minute gap between meetings", {"bufferMinutes": n}


# ---------- Archetype table ----------

ARCHETYPES: List[Tuple[str, Tuple["re.Pattern[str]", ...], Extractor]] = [
    (
        "weekdays",
        (
            re.compile(r"only.*weekdays?"),
            re.compile(r"monday.*friday"),
            re.compile(r"work.*days"),
            re.compile(r"business.*days"),
            re.compile(r"no.*weekends?"),
        ),
        weekdays,
    ),
    (
        "holidays",
        (
            re.compile(r"no.*holidays?"),
            re.compile(r"not.*holidays?"),
            re.compile(r"exclude.*holidays?"),
            re.compile(r"skip.*holidays?"),
            re.compile(r"(swedish|national|public).*holidays?"),
        ),
        holidays,
    ),
    (
        "timeRange",
        (
            re.compile(_CLOCK + r"\s*(?:to|-|until)\s*" + _CLOCK),
            re.compile(r"between\s*" + _CLOCK + r"\s*and\s*" + _CLOCK),
            re.compile(r"working.*hours"),
            re.compile(r"office.*hours"),
        ),
        time_range,
    ),
    (
        "maxMeetings",
        (
            re.compile(r"max(?:imum)?\s*(\d+)\s*meetings?\s*(?:per\s*)?(day|daily)"),
            re.compile(r"no\s*more\s*than\s*(\d+)\s*meetings?\s*(?:per\s*)?(day|daily)"),
            re.compile(r"limit\s*(\d+)\s*meetings?\s*(?:per\s*)?(day|daily)"),
        ),
        max_meetings,
    ),
    (
        "duration",
        (
            re.compile(r"(\d+)\s*min(?:ute)?s?\s*(?:long|duration|meeting)"),
            re.compile(
                r"meetings?\s*(?:can\s*be\s*)?(\d+)(?:,\s*(\d+))?(?:,?\s*or\s*(\d+))?\s*min(?:ute)?s?"
            ),
            re.compile(
                r"duration(?:s)?\s*(?:of\s*)?(\d+)(?:,\s*(\d+))?(?:,?\s*or\s*(\d+))?\s*min(?:ute)?s?"
            ),
        ),
        duration,
    ),
    (
        "buffer",
        (
            re.compile(r"(\d+)\s*min(?:ute)?s?\s*(?:gap|buffer|break)\s*between"),
            re.compile(r"at\s*least\s*(\d+)\s*min(?:ute)?s?\s*between"),
            re.compile(r"minimum\s*(\d+)\s*min(?:ute)?s?\s*(?:gap|buffer)"),
        ),
        buffer,
    ),
]

assert len({rtype for rtype, _, _ in ARCHETYPES}) == len(
    ARCHETYPES
), "Duplicate rule type in ARCHETYPES"


def list_archetypes() -> list[str]:
    """Return the rule types in matching order."""
    return [rtype for rtype, _, _ in ARCHETYPES]
