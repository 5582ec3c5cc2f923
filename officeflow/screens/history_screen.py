"""
Attendance history screen with report export.
"""
import logging
from pathlib import Path
from typing import List, Optional

from officeflow.api.schemas import UserProfile
from officeflow.error_messages import get_friendly_error_message
from officeflow.reports import HistoryRow, format_log_entries, write_attendance_report
from .base_screen import BaseScreen
from .navigation import Screen

logger = logging.getLogger(__name__)

LOAD_FAILED_DEFAULT = "Could not load history."


class HistoryScreen(BaseScreen):
    """Represents the attendance history list."""

    screen = Screen.HISTORY

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user: Optional[UserProfile] = None
        self.rows: List[HistoryRow] = []
        self.loading = False
        self.error: Optional[str] = None

    def mount(self) -> None:
        super().mount()
        self.user = self.context.session.load_profile()
        self.fetch_logs()

    def fetch_logs(self) -> None:
        self.loading = True
        self.error = None
        try:
            data = self.context.api.get_attendance_logs(self.email)
            self.rows = format_log_entries(data.logs)
            logger.info(f"[History] Loaded {len(self.rows)} log entries")
        except Exception as e:
            logger.error(f"[History] Failed to load logs: {e}")
            self.error = get_friendly_error_message(e, LOAD_FAILED_DEFAULT)
        finally:
            self.loading = False

    def export_report(self, output_dir: Optional[str] = None) -> Optional[Path]:
        """
        Write the HTML attendance report.

        Returns:
            Path of the report, or None if nothing was written
        """
        if not self.rows:
            self.alert("No Data", "There are no attendance logs to export.")
            return None
        target = output_dir or self.context.report_dir or "."
        try:
            return write_attendance_report(self.rows, self.email, target, self.user)
        except Exception as e:
            logger.error(f"[History] Export failed: {e}")
            self.alert("Export Failed", "Could not generate attendance report.")
            return None
