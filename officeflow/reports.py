"""
Attendance history formatting and the HTML attendance report.

Rows are formatted once from the server log entries and shared by the
history screen and the exported report.
"""
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from officeflow.api.schemas import AttendanceLogEntry, UserProfile
from officeflow.models import AttendanceType

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
REPORT_TEMPLATE = "attendance_report.html"
DEFAULT_ADDRESS = "Office Zone"
UNKNOWN_DATE = "Unknown Date"
UNKNOWN_TIME = "--:--"

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


@dataclass(frozen=True)
class HistoryRow:
    """One attendance log entry, formatted for display."""
    id: str
    date: str
    time: str
    status: str
    distance: str
    address: str
    wifi: Optional[str] = None
    duration: Optional[str] = None
    check_in_time: Optional[str] = None

    @property
    def is_check_in(self) -> bool:
        return self.status == "Check-In"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 server timestamp.

    Aware timestamps are converted to local time; naive ones are taken as
    local already.

    Returns:
        The datetime, or None if the value is missing or unparseable
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed


def _format_date(ts: datetime) -> str:
    return f"{ts:%b} {ts.day}, {ts.year}"


def _format_time(ts: datetime) -> str:
    return ts.strftime("%I:%M %p")


def _format_number(value: float) -> str:
    # -55.0 reads as "-55"
    return str(int(value)) if float(value).is_integer() else str(value)


def _format_wifi(value: Union[float, str, None]) -> Optional[str]:
    # Labels ("Excellent") are shown as-is, readings get a unit
    if not value:
        return None
    if isinstance(value, str):
        return value
    return f"{_format_number(value)} dBm"


def format_log_entry(entry: AttendanceLogEntry, index: int = 0) -> HistoryRow:
    """
    Format one server log entry.

    Examples:
        distance_meters=12.34 -> "12.3m", wifi_quality=-55 -> "-55 dBm",
        duration_hours=8.5 -> "8.5 hrs", missing address -> "Office Zone"
    """
    ts = parse_timestamp(entry.timestamp)
    check_in = parse_timestamp(entry.check_in_time)
    return HistoryRow(
        id=entry.id or str(index),
        date=_format_date(ts) if ts else UNKNOWN_DATE,
        time=_format_time(ts) if ts else UNKNOWN_TIME,
        status="Check-In" if entry.type == AttendanceType.CHECK_IN.value else "Check-Out",
        distance=f"{entry.distance_meters:.1f}m" if entry.distance_meters else "",
        address=entry.address or DEFAULT_ADDRESS,
        wifi=_format_wifi(entry.wifi_quality),
        duration=f"{_format_number(entry.duration_hours)} hrs" if entry.duration_hours else None,
        check_in_time=_format_time(check_in) if check_in else None,
    )


def format_log_entries(entries: Sequence[AttendanceLogEntry]) -> List[HistoryRow]:
    return [format_log_entry(entry, i) for i, entry in enumerate(entries)]


def render_attendance_report(
    rows: Sequence[HistoryRow],
    email: str,
    user: Optional[UserProfile] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render the attendance report as an HTML document.

    Args:
        rows: Formatted history rows
        email: Signed-in user, shown when the profile has no name
        user: Cached profile
        generated_at: Report timestamp (defaults to now)

    Returns:
        The HTML content
    """
    generated_at = generated_at or datetime.now()
    template = _env.get_template(REPORT_TEMPLATE)
    return template.render(
        employee=(user.full_name if user and user.full_name else email),
        employee_id=(user.employee_id if user and user.employee_id else "-"),
        record_count=len(rows),
        generated=generated_at.strftime("%Y-%m-%d %H:%M:%S"),
        rows=rows,
    )


def write_attendance_report(
    rows: Sequence[HistoryRow],
    email: str,
    output_dir: Union[str, Path],
    user: Optional[UserProfile] = None,
    generated_at: Optional[datetime] = None,
) -> Path:
    """
    Render the report and write it to output_dir.

    Returns:
        Path of the written file
    """
    generated_at = generated_at or datetime.now()
    html_content = render_attendance_report(rows, email, user, generated_at)

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    identifier = email.replace("@", "_at_").replace(".", "_") or "unknown"
    report_file = output_path / f"attendance_{identifier}_{generated_at:%Y%m%d_%H%M%S}.html"
    report_file.write_text(html_content, encoding="utf-8")
    logger.info(f"Attendance report written to {report_file}")
    return report_file
