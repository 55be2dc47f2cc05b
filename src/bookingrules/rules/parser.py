"""Natural-language rule parser.

Turns sentences such as "Max 3 meetings per day" into `state.SchedulingRule`
records by pattern matching against the archetype table in `patterns`.
This is plain regular-expression matching; nothing here is learned.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import bookingrules.state as state
from bookingrules.rules.patterns import ARCHETYPES
from bookingrules.rules.validation import generate_rule_suggestions

logger = logging.getLogger(__name__)

MATCHED_CONFIDENCE = 0.8
CUSTOM_CONFIDENCE = 0.5


@dataclass(slots=True)
class RuleParsingResult:
    success: bool
    rule: Optional[state.SchedulingRule] = None
    errors: Optional[List[str]] = None
    suggestions: Optional[List[str]] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        if self.rule is not None:
            data["rule"] = self.rule.to_dict()
        if self.errors is not None:
            data["errors"] = list(self.errors)
        if self.suggestions is not None:
            data["suggestions"] = list(self.suggestions)
        return data


def _new_id() -> str:
    return uuid.uuid4().hex


def parse_natural_language_rule(
    text: str, *, id_factory: Optional[Callable[[], str]] = None
) -> RuleParsingResult:
    """Parse one sentence into a scheduling rule.

    The first archetype whose pattern matches *and* whose extractor yields a
    config wins. When an extractor comes back empty the search carries on
    with the remaining patterns; if nothing succeeds the text is kept as a
    `custom` rule.

    args:
        text: The sentence as typed by the user
        id_factory: Callable producing rule ids (defaults to random hex ids)

    returns:
        A RuleParsingResult; `success` is False only for empty input.
    """
    make_id = id_factory or _new_id
    normalized = (text or "").strip().lower()
    if not normalized:
        return RuleParsingResult(
            success=False, errors=["Please provide a rule description"]
        )

    for rule_type, patterns, extract in ARCHETYPES:
        for pattern in patterns:
            match = pattern.search(normalized)
            if match is None:
                continue
            extracted = extract(text, match)
            if extracted is None:
                logger.debug(
                    "pattern %r matched but no %s config could be extracted",
                    pattern.pattern,
                    rule_type,
                )
                continue
            description, config = extracted
            logger.debug("parsed %r as %s %s", text, rule_type, config)
            return RuleParsingResult(
                success=True,
                rule=state.SchedulingRule(
                    id=make_id(),
                    type=rule_type,
                    enabled=True,
                    description=description,
                    natural_language=text,
                    config=config,
                    confidence=MATCHED_CONFIDENCE,
                ),
            )

    logger.debug("no archetype for %r, keeping it as a custom rule", text)
    return RuleParsingResult(
        success=True,
        rule=state.SchedulingRule(
            id=make_id(),
            type="custom",
            enabled=True,
            description=f"Custom rule: {text}",
            natural_language=text,
            config={"rule": text},
            confidence=CUSTOM_CONFIDENCE,
        ),
        suggestions=generate_rule_suggestions(text) or None,
    )


class RuleParser:
    """Parser bound to an id factory, for callers that inject one."""

    def __init__(self, id_factory: Optional[Callable[[], str]] = None) -> None:
        self.id_factory = id_factory

    def parse(self, text: str) -> RuleParsingResult:
        return parse_natural_language_rule(text, id_factory=self.id_factory)
