"""Checker assembly for bookingrules.

Turn admitted `state.SchedulingRule` records into checker objects by:
  1) dropping disabled rules, and
  2) resolving each rule's config against the per-type defaults.

Order is preserved: violations are reported in the order the rules were given.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

import bookingrules.state as state
from bookingrules.model.constraints import BaseRule, get_rule_class

logger = logging.getLogger(__name__)


def build_rules(rules: Iterable[state.SchedulingRule]) -> List[BaseRule]:
    """Build one checker per enabled rule.

    Parameters
    ----------
    rules : Iterable[state.SchedulingRule]
        Rules as supplied by the caller; disabled ones are skipped.

    Returns
    -------
    List[BaseRule]
        Checkers with their defaults already applied.
    """
    checkers: List[BaseRule] = []
    for rule in rules:
        if not rule.enabled:
            continue
        checker = get_rule_class(rule.type).from_rule(rule)
        logger.debug("admitted %r", checker)
        checkers.append(checker)
    return checkers
