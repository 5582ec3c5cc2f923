"""Tests for history formatting and the attendance report."""
from datetime import datetime
from pathlib import Path

import pytest

from officeflow.api.schemas import AttendanceLogEntry, LogsResponse, UserProfile
from officeflow.errors import TransportError
from officeflow.reports import (
    format_log_entries,
    format_log_entry,
    parse_timestamp,
    render_attendance_report,
    write_attendance_report,
)
from officeflow.screens import Screen

GENERATED = datetime(2026, 3, 2, 18, 0, 0)


@pytest.fixture
def entries():
    return [
        AttendanceLogEntry.model_validate({
            "_id": "log-1",
            "timestamp": "2026-03-02T09:05:00",
            "type": "check-in",
            "distance_meters": 12.34,
            "address": "Tower B MG Road",
            "wifi_quality": -55,
        }),
        AttendanceLogEntry.model_validate({
            "_id": "log-2",
            "timestamp": "2026-03-02T17:35:00",
            "type": "check-out",
            "duration_hours": 8.5,
            "check_in_time": "2026-03-02T09:05:00",
        }),
    ]


def test_format_check_in_entry(entries):
    row = format_log_entry(entries[0])

    assert row.id == "log-1"
    assert row.date == "Mar 2, 2026"
    assert row.time == "09:05 AM"
    assert row.status == "Check-In"
    assert row.is_check_in
    assert row.distance == "12.3m"
    assert row.wifi == "-55 dBm"
    assert row.duration is None


def test_format_check_out_entry(entries):
    row = format_log_entry(entries[1])

    assert row.status == "Check-Out"
    assert row.address == "Office Zone"
    assert row.distance == ""
    assert row.duration == "8.5 hrs"
    assert row.check_in_time == "09:05 AM"


def test_missing_timestamp_and_id():
    row = format_log_entries([AttendanceLogEntry(), AttendanceLogEntry()])[1]

    assert row.id == "1"
    assert row.date == "Unknown Date"
    assert row.time == "--:--"


@pytest.mark.parametrize("value", [None, "", "not-a-date"])
def test_parse_timestamp_rejects_bad_values(value):
    assert parse_timestamp(value) is None


def test_parse_timestamp_converts_utc_to_local():
    parsed = parse_timestamp("2026-03-02T09:05:00Z")

    assert parsed.tzinfo is not None
    assert parsed == datetime.fromisoformat("2026-03-02T09:05:00+00:00")


def test_report_lists_rows_and_escapes_text(entries):
    rows = format_log_entries(entries + [
        AttendanceLogEntry(timestamp="2026-03-03T09:00:00", type="check-in", address="<b>Annex</b>"),
    ])

    html = render_attendance_report(rows, "jane.doe@corp.com", UserProfile(full_name="Jane Doe", employee_id="EMP-042"), GENERATED)

    assert "Work Attendance Log" in html
    assert "Jane Doe" in html
    assert "EMP-042" in html
    assert "2026-03-02 18:00:00" in html
    assert html.count('class="in"') == 2
    assert html.count('class="out"') == 1
    assert "&lt;b&gt;Annex&lt;/b&gt;" in html
    assert "<b>Annex</b>" not in html


def test_report_without_profile_uses_email(entries):
    html = render_attendance_report(format_log_entries(entries), "jane.doe@corp.com", None, GENERATED)

    assert "jane.doe@corp.com" in html


def test_write_report(entries, tmp_path):
    path = write_attendance_report(format_log_entries(entries), "jane.doe@corp.com", tmp_path / "out", generated_at=GENERATED)

    assert path.name == "attendance_jane_doe_at_corp_com_20260302_180000.html"
    assert "Tower B MG Road" in path.read_text(encoding="utf-8")


@pytest.fixture
def history(signed_in_app, api, entries):
    api.get_attendance_logs.return_value = LogsResponse(logs=entries)
    signed_in_app.current_screen.open_history()
    return signed_in_app.current_screen


def test_history_screen_loads_rows(signed_in_app, history, api):
    assert signed_in_app.navigator.current_screen == Screen.HISTORY
    api.get_attendance_logs.assert_called_once_with("jane.doe@corp.com")
    assert [row.status for row in history.rows] == ["Check-In", "Check-Out"]
    assert not history.loading
    assert history.error is None


def test_history_screen_load_failure(signed_in_app, api):
    api.get_attendance_logs.side_effect = TransportError("Network Error")
    signed_in_app.current_screen.open_history()
    history = signed_in_app.current_screen

    assert history.rows == []
    assert history.error == "Connection failed. Please check if your Internet or WiFi is active."


def test_history_export_writes_to_report_dir(signed_in_app, history):
    path = history.export_report()

    assert path is not None
    assert path.parent == Path(signed_in_app.context.report_dir)
    assert path.exists()


def test_history_export_without_rows(signed_in_app, api, presenter):
    signed_in_app.current_screen.open_history()

    assert signed_in_app.current_screen.export_report() is None
    assert presenter.last.title == "No Data"


def test_history_export_failure(history, presenter, monkeypatch):
    def broken(*args, **kwargs):
        raise OSError("read-only file system")

    monkeypatch.setattr("officeflow.screens.history_screen.write_attendance_report", broken)

    assert history.export_report() is None
    assert presenter.last.title == "Export Failed"
    assert presenter.last.message == "Could not generate attendance report."


def test_history_lists_label_valued_wifi_quality(signed_in_app, api):
    api.get_attendance_logs.return_value = LogsResponse.model_validate({"logs": [
        {"_id": "log-1", "timestamp": "2026-03-02T09:05:00", "type": "check-in", "wifi_quality": "Excellent"},
        {"_id": "log-2", "timestamp": "2026-03-02T17:35:00", "type": "check-out", "wifi_quality": -55},
    ]})
    signed_in_app.current_screen.open_history()
    history = signed_in_app.current_screen

    assert history.error is None
    assert [row.wifi for row in history.rows] == ["Excellent", "-55 dBm"]
