"""Module to handle input and output of excel files"""

from __future__ import annotations

from typing import Iterable

import pandas as pd
from openpyxl import load_workbook

import bookingrules.state as state

MEETING_COLUMNS = (
    "id",
    "title",
    "start",
    "end",
    "duration",
    "attendee_email",
    "type",
    "status",
)


def slots_frame(slots: Iterable[state.TimeSlot]) -> pd.DataFrame:
    """Pivot slots into a calendar grid.

    returns:
        A DataFrame indexed by slot start time ('HH:MM') with one column per
        ISO date; cells hold the availability flag (NaN where a day has no
        slot at that time).
    """
    records = [
        {
            "date": slot.start.date().isoformat(),
            "time": slot.start.strftime("%H:%M"),
            "available": slot.available,
        }
        for slot in slots
    ]
    if not records:
        return pd.DataFrame()
    df = pd.DataFrame.from_records(records)
    return df.pivot(index="time", columns="date", values="available")


def save_slots(
    slots: Iterable[state.TimeSlot],
    file_path: str,
    sheet_name: str = "Availability",
) -> str:
    """Writes the availability grid of `slots` into a new Excel file

    args:
        slots: The slots to write
        file_path: The path of the workbook to create (overwritten if present)
        sheet_name: The name of the sheet to save data to

    returns:
        The path of the written file
    """
    grid = slots_frame(slots)
    grid = grid.apply(lambda col: col.map({True: "free", False: "busy"}))
    grid = grid.rename_axis(columns=None)
    with pd.ExcelWriter(file_path, engine="openpyxl") as writer:
        grid.to_excel(writer, sheet_name=sheet_name)

    # Widen the time column so the grid reads without resizing
    wb = load_workbook(file_path)
    wb[sheet_name].column_dimensions["A"].width = 8
    wb.save(file_path)

    return file_path


def load_meetings(file_path: str, sheet_name: str) -> tuple[state.Meeting, ...]:
    """loads existing meetings from a sheet with one meeting per row.

    The first row must hold the column names in MEETING_COLUMNS; `duration`,
    `attendee_email`, `type` and `status` may be missing.

    args:
        file_path: The path to the Excel file
        sheet_name: The name of the sheet to load data from

    returns:
        A tuple of Meeting objects
    """
    df = pd.read_excel(file_path, sheet_name=sheet_name, engine="openpyxl")

    missing = {"id", "start", "end"} - set(df.columns)
    if missing:
        raise ValueError(
            f"Sheet '{sheet_name}' is missing columns: {', '.join(sorted(missing))}"
        )

    meetings = []
    for _, row in df.iterrows():
        data = {
            col: row[col]
            for col in MEETING_COLUMNS
            if col in df.columns and pd.notna(row[col])
        }
        data["id"] = str(data["id"])
        data["start"] = pd.Timestamp(data["start"]).to_pydatetime()
        data["end"] = pd.Timestamp(data["end"]).to_pydatetime()
        if "duration" in data:
            data["duration"] = int(data["duration"])
        meetings.append(state.Meeting.from_dict(data))
    return tuple(meetings)
