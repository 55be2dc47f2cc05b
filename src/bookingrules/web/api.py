from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import bookingrules.state as state
from bookingrules.engine import InvalidBookingError, SchedulingRuleEngine
from bookingrules.io.policy import load_default_rules, load_rules
from bookingrules.rules.parser import parse_natural_language_rule
from bookingrules.rules.validation import (
    generate_rule_suggestions,
    require_valid,
    validate_rule,
)


class TextIn(BaseModel):
    text: str


class RuleIn(BaseModel):
    id: str
    type: str
    enabled: bool = True
    description: str = ""
    naturalLanguage: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)


class MeetingIn(BaseModel):
    id: str
    title: str = ""
    start: datetime
    end: datetime
    duration: Optional[int] = None
    attendeeEmail: str = ""
    type: str = "video"
    status: str = "confirmed"


class SessionIn(BaseModel):
    rules: Optional[List[RuleIn]] = None
    meetings: List[MeetingIn] = Field(default_factory=list)


class BookingIn(SessionIn):
    start: datetime
    duration: int


class SlotsIn(SessionIn):
    startDate: date
    endDate: date
    duration: int = 30
    interval: int = 15


def _rule(payload: RuleIn) -> state.SchedulingRule:
    try:
        return state.SchedulingRule.from_dict(payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _admitted_rule(payload: RuleIn) -> state.SchedulingRule:
    try:
        return require_valid(_rule(payload))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def create_app(policy_path: Optional[str] = None) -> FastAPI:
    """Build the API. Requests without `rules` are judged by the policy at
    `policy_path`, or by the bundled default rules.

    Raises ValueError when a policy rule has a malformed config."""
    default_rules = [
        require_valid(r)
        for r in (load_rules(policy_path) if policy_path else load_default_rules())
    ]
    app = FastAPI(title="bookingrules")

    def engine_for(session: SessionIn) -> SchedulingRuleEngine:
        # One engine per request; nothing is shared between requests
        if session.rules is None:
            rules = default_rules
        else:
            rules = [_admitted_rule(r) for r in session.rules]
        try:
            meetings = [state.Meeting.from_dict(m.model_dump()) for m in session.meetings]
            return SchedulingRuleEngine(rules, [m for m in meetings if not m.cancelled])
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

    @app.get("/api/ping")
    def ping() -> JSONResponse:
        """Simple health check endpoint."""
        return JSONResponse({"status": "ok"})

    @app.post("/api/rules/parse")
    def parse_rule(body: TextIn) -> JSONResponse:
        return JSONResponse(parse_natural_language_rule(body.text).to_dict())

    @app.post("/api/rules/validate")
    def check_rule(body: RuleIn) -> JSONResponse:
        return JSONResponse(validate_rule(_rule(body)).to_dict())

    @app.post("/api/rules/suggestions")
    def rule_suggestions(body: TextIn) -> JSONResponse:
        return JSONResponse({"suggestions": generate_rule_suggestions(body.text)})

    @app.post("/api/bookings/validate")
    def validate_booking(body: BookingIn) -> JSONResponse:
        engine = engine_for(body)
        try:
            result = engine.validate_booking(body.start, body.duration)
        except InvalidBookingError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return JSONResponse(result.to_dict())

    @app.post("/api/slots")
    def slots(body: SlotsIn) -> JSONResponse:
        engine = engine_for(body)
        try:
            found = engine.generate_available_slots(
                body.startDate, body.endDate, body.duration, body.interval
            )
        except InvalidBookingError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return JSONResponse({"slots": [s.to_dict() for s in found]})

    return app


app = create_app()
