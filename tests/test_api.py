import pytest
from fastapi.testclient import TestClient

from bookingrules.web.api import create_app


@pytest.fixture
def client():
    return TestClient(create_app())


def test_ping(client):
    assert client.get("/api/ping").json() == {"status": "ok"}


def test_parse_rule(client):
    body = client.post("/api/rules/parse", json={"text": "15 minute buffer between meetings"}).json()
    assert body["success"] is True
    assert body["rule"]["type"] == "buffer"
    assert body["rule"]["config"] == {"bufferMinutes": 15}


def test_validate_rule(client):
    body = client.post(
        "/api/rules/validate",
        json={"id": "r", "type": "maxMeetings", "config": {"maxPerDay": 0}},
    ).json()
    assert body == {"valid": False, "errors": ["Maximum meetings per day must be at least 1"]}


def test_validate_rule_with_unknown_type(client):
    resp = client.post("/api/rules/validate", json={"id": "r", "type": "lunch"})
    assert resp.status_code == 422


def test_rule_suggestions(client):
    body = client.post("/api/rules/suggestions", json={"text": "holiday"}).json()
    # "holiday" also contains "day"
    assert body == {
        "suggestions": [
            'Try: "Only weekdays" or "Maximum 3 meetings per day"',
            'Try: "No Swedish national holidays" or "Exclude public holidays"',
        ]
    }


def test_validate_booking_with_default_rules(client):
    body = client.post(
        "/api/bookings/validate", json={"start": "2024-01-13T10:00:00", "duration": 30}
    ).json()
    assert body["valid"] is False
    assert body["score"] == 80
    assert body["violations"][0]["ruleType"] == "weekdays"
    assert body["suggestions"] == [
        "2024-01-15T10:00:00",
        "2024-01-16T10:00:00",
        "2024-01-17T10:00:00",
    ]


def test_validate_booking_with_own_rules_and_meetings(client):
    body = client.post(
        "/api/bookings/validate",
        json={
            "start": "2024-01-15T14:35:00",
            "duration": 30,
            "rules": [{"id": "gap", "type": "buffer", "config": {"bufferMinutes": 15}}],
            "meetings": [
                {"id": "m", "start": "2024-01-15T14:00:00", "end": "2024-01-15T14:30:00"}
            ],
        },
    ).json()
    assert body["valid"] is False
    assert body["violations"][0]["ruleId"] == "gap"


def test_cancelled_meetings_are_ignored(client):
    body = client.post(
        "/api/bookings/validate",
        json={
            "start": "2024-01-15T14:35:00",
            "duration": 30,
            "rules": [{"id": "gap", "type": "buffer", "config": {"bufferMinutes": 15}}],
            "meetings": [
                {
                    "id": "m",
                    "start": "2024-01-15T14:00:00",
                    "end": "2024-01-15T14:30:00",
                    "status": "cancelled",
                }
            ],
        },
    ).json()
    assert body == {"valid": True, "violations": [], "score": 100}


def test_negative_duration_is_unprocessable(client):
    resp = client.post(
        "/api/bookings/validate", json={"start": "2024-01-15T10:00:00", "duration": -30}
    )
    assert resp.status_code == 422


def test_slots(client):
    body = client.post(
        "/api/slots",
        json={"startDate": "2024-01-15", "endDate": "2024-01-15", "duration": 60, "interval": 60, "rules": []},
    ).json()
    assert [s["start"] for s in body["slots"]][:2] == ["2024-01-15T09:00:00", "2024-01-15T10:00:00"]
    assert len(body["slots"]) == 8
    assert all(s["available"] for s in body["slots"])


def test_malformed_rule_config_is_unprocessable(client):
    resp = client.post(
        "/api/bookings/validate",
        json={
            "start": "2024-01-15T10:00:00",
            "duration": 30,
            "rules": [
                {"id": "hours", "type": "timeRange", "config": {"startTime": "9am", "endTime": "17:00"}}
            ],
        },
    )
    assert resp.status_code == 422
    assert "Rule 'hours' is invalid" in resp.json()["detail"]


def test_malformed_policy_rules_fail_at_startup(tmp_path):
    path = tmp_path / "policy.yaml"
    path.write_text(
        'rules:\n  - {id: cap, type: maxMeetings, config: {maxPerDay: 0}}\n', encoding="utf-8"
    )
    with pytest.raises(ValueError, match="Rule 'cap' is invalid"):
        create_app(str(path))


def test_aware_start_against_naive_meetings_is_unprocessable(client):
    resp = client.post(
        "/api/bookings/validate",
        json={
            "start": "2024-01-15T14:35:00Z",
            "duration": 30,
            "rules": [{"id": "gap", "type": "buffer", "config": {"bufferMinutes": 15}}],
            "meetings": [
                {"id": "m", "start": "2024-01-15T14:00:00", "end": "2024-01-15T14:30:00"}
            ],
        },
    )
    assert resp.status_code == 422
