from __future__ import annotations

from datetime import datetime

from bookingrules.engine import SchedulingRuleEngine
from bookingrules.io.policy import load_default_rules, load_meetings, load_rules

# --- Session configuration ---
POLICY_PATH = None  # e.g. "policies/team.yaml"; None uses the bundled defaults
MEETINGS_PATH = None  # YAML file with a top-level `meetings:` list

# Proposal to check
START = datetime(2024, 1, 15, 10, 0)
DURATION = 30


def main() -> int:
    rules = load_rules(POLICY_PATH) if POLICY_PATH else load_default_rules()
    meetings = load_meetings(MEETINGS_PATH) if MEETINGS_PATH else []

    engine = SchedulingRuleEngine(rules, meetings)
    print(engine.get_active_rules_description())

    res = engine.validate_booking(START, DURATION)
    print(f"[Booking] {START:%Y-%m-%d %H:%M} +{DURATION}min valid={res.valid} score={res.score}")

    for v in res.violations:
        print(f"  [{v.severity}] {v.rule_id}: {v.description}")
    if res.suggestions:
        print("[Booking] Alternatives:")
        for s in res.suggestions:
            print(f"  {s:%Y-%m-%d %H:%M}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
