from datetime import date, datetime

import pandas as pd

from bookingrules.engine import SchedulingRuleEngine
from bookingrules.io.excel import load_meetings, save_slots, slots_frame
from conftest import make_rule


def test_slots_frame_grid():
    engine = SchedulingRuleEngine([make_rule("weekdays")])
    slots = engine.generate_available_slots(date(2024, 1, 13), date(2024, 1, 15), 60, 60)
    grid = slots_frame(slots)
    assert list(grid.columns) == ["2024-01-13", "2024-01-14", "2024-01-15"]
    assert list(grid.index) == [f"{h:02d}:00" for h in range(9, 17)]
    assert not grid["2024-01-13"].any()
    assert grid["2024-01-15"].all()


def test_slots_frame_empty():
    assert slots_frame([]).empty


def test_save_slots_writes_a_readable_grid(tmp_path):
    engine = SchedulingRuleEngine([make_rule("weekdays")])
    slots = engine.generate_available_slots(date(2024, 1, 14), date(2024, 1, 15), 60, 60)
    path = save_slots(slots, str(tmp_path / "grid.xlsx"))

    df = pd.read_excel(path, sheet_name="Availability", index_col=0)
    assert list(df.columns) == ["2024-01-14", "2024-01-15"]
    assert set(df["2024-01-14"]) == {"busy"}
    assert set(df["2024-01-15"]) == {"free"}


def test_load_meetings(tmp_path):
    path = tmp_path / "meetings.xlsx"
    pd.DataFrame(
        [
            {
                "id": 1,
                "title": "Intro",
                "start": datetime(2024, 1, 15, 9, 0),
                "end": datetime(2024, 1, 15, 9, 30),
                "status": "confirmed",
            },
            {
                "id": 2,
                "title": "Review",
                "start": datetime(2024, 1, 15, 14, 0),
                "end": datetime(2024, 1, 15, 15, 0),
                "status": "cancelled",
            },
        ]
    ).to_excel(path, sheet_name="Meetings", index=False)

    meetings = load_meetings(str(path), "Meetings")
    assert [m.id for m in meetings] == ["1", "2"]
    assert meetings[0].start == datetime(2024, 1, 15, 9, 0)
    assert meetings[0].duration == 30
    assert meetings[1].cancelled
