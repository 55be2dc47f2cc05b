"""Minimal YAML policy loader for rule sets and meetings.

Assumptions (strict):
- The file is YAML and contains a top-level key `rules` (a list).
- Each item of `rules` is a mapping with at least `id` and `type`; optional
  `enabled`, `description`, `natural_language` and `config`.
- An optional top-level `meetings` list holds existing meetings with ISO
  (or YAML timestamp) `start` / `end` values.
- Wrong shapes raise. Unknown rule types are skipped with a warning.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Any, List

from yaml import safe_load

import bookingrules.state as state

# Compute package root as: src/bookingrules/io/policy.py -> go up 1 level
POLICIES_DIR = Path(__file__).resolve().parents[1] / "policies"
DEFAULT_POLICY = POLICIES_DIR / "default.yaml"


class PolicyWarning(UserWarning):
    pass


def _read_document(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as stream:
        return safe_load(stream)


def parse_rules(parsed: Any) -> List[state.SchedulingRule]:
    """Build rules from an already parsed YAML/JSON document."""
    if not isinstance(parsed, dict) or "rules" not in parsed:
        raise ValueError("Policy file must contain a top-level 'rules' list.")
    rules_list = parsed["rules"]
    if not isinstance(rules_list, list):
        raise ValueError(
            "'rules' must be a list of mappings with keys 'id', 'type' and optional 'config'."
        )

    rules: List[state.SchedulingRule] = []
    for idx, item in enumerate(rules_list):
        if not isinstance(item, dict) or "id" not in item or "type" not in item:
            raise ValueError(
                f"rules[{idx}] must be a mapping with at least the keys 'id' and 'type'."
            )
        if not isinstance(item["id"], str) or not item["id"].strip():
            raise ValueError(f"rules[{idx}].id must be a non-empty string.")
        if not isinstance(item.get("enabled", True), bool):
            raise ValueError(f"rules[{idx}].enabled must be true or false.")
        if item["type"] not in state.RULE_TYPES:
            warnings.warn(
                f"Unknown rule type '{item['type']}' in rules[{idx}], skipping.",
                PolicyWarning,
                stacklevel=2,
            )
            continue
        config = item.get("config")
        if config is not None and not isinstance(config, dict):
            raise ValueError(f"rules[{idx}].config must be a mapping if provided.")
        rules.append(state.SchedulingRule.from_dict(item))

    return rules


def parse_meetings(parsed: Any) -> List[state.Meeting]:
    if not isinstance(parsed, dict):
        raise ValueError("Policy file must be a mapping.")
    items = parsed.get("meetings") or []
    if not isinstance(items, list):
        raise ValueError("'meetings' must be a list of mappings.")

    meetings: List[state.Meeting] = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict) or not {"id", "start", "end"} <= item.keys():
            raise ValueError(
                f"meetings[{idx}] must be a mapping with the keys 'id', 'start' and 'end'."
            )
        meetings.append(state.Meeting.from_dict(item))
    return meetings


def load_rules(path: str) -> List[state.SchedulingRule]:
    return parse_rules(_read_document(path))


def load_meetings(path: str) -> List[state.Meeting]:
    return parse_meetings(_read_document(path))


def load_default_rules() -> List[state.SchedulingRule]:
    """The seed rule set shipped with the package."""
    return load_rules(str(DEFAULT_POLICY))
