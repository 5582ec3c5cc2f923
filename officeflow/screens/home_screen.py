"""
Home screen: today's stats, the check-in/check-out buttons and the way to
history and profile.
"""
import logging
from typing import Any, Dict, Optional

from officeflow.api.schemas import AnalyticsSnapshot, UserProfile
from officeflow.models import AttendanceType, LocationAccuracy, LocationReading, WifiState
from officeflow.office_gate import ActionAvailability, OfficeNetworkGate, evaluate_actions
from officeflow.sensors import Feedback
from .base_screen import AlertAction, BaseScreen
from .navigation import Screen

logger = logging.getLogger(__name__)

DEFAULT_GOAL_HOURS = 8.0


class HomeScreen(BaseScreen):
    """Represents the home dashboard."""

    screen = Screen.HOME

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user: Optional[UserProfile] = self.params.get("user")
        self.location: Optional[LocationReading] = None
        self.wifi = WifiState(connected=False)
        self.analytics = AnalyticsSnapshot()
        self.loading_analytics = True

    def mount(self) -> None:
        super().mount()
        if self.user is None:
            self.user = self.context.session.load_profile()

        try:
            self.location = self.context.location.get_current_position(LocationAccuracy.HIGH)
        except Exception as e:
            logger.warning(f"[Home] Location unavailable: {e}")

        self.refresh_wifi()
        self.fetch_analytics()

    def focus(self, params: Optional[Dict[str, Any]] = None) -> None:
        super().focus(params)
        if params and params.get("user") is not None:
            self.user = params["user"]
        self.fetch_analytics()

    def refresh_wifi(self) -> None:
        try:
            state = self.context.wifi.fetch()
        except Exception as e:
            logger.warning(f"[Home] WiFi state unavailable: {e}")
            state = WifiState(connected=False)
        if state.connected:
            self.wifi = state
        else:
            self.wifi = WifiState(connected=False)

    def fetch_analytics(self) -> None:
        """Refresh the stats; on failure the previous values are kept."""
        try:
            self.analytics = self.context.api.get_analytics(self.email)
        except Exception as e:
            logger.error(f"[Home] Failed to fetch analytics: {e}")
        finally:
            self.loading_analytics = False

    @property
    def gate(self) -> OfficeNetworkGate:
        return OfficeNetworkGate.resolve(self.analytics.office_wifi_ssid, self.context.office_ssid)

    @property
    def on_office_network(self) -> bool:
        return self.gate.allows(self.wifi)

    @property
    def availability(self) -> ActionAvailability:
        return evaluate_actions(self.analytics.current_status, self.on_office_network)

    @property
    def goal_progress(self) -> float:
        """Share of today's 8-hour goal, as a percentage capped at 100."""
        return min(100.0, self.analytics.today_hours / DEFAULT_GOAL_HOURS * 100)

    @property
    def display_name(self) -> str:
        if self.user and self.user.full_name:
            return self.user.full_name
        return self.email.split("@")[0] or "User"

    def press_scan(self, action: AttendanceType) -> bool:
        """
        Check-in or check-out button pressed.

        Returns:
            True if the scan screen was opened
        """
        if not self.availability.is_enabled(action):
            logger.info(f"[Home] {action.value} is not available (status {self.analytics.current_status.value})")
            return False

        self.context.feedback.notify(Feedback.WARNING)
        gate = self.gate
        if not gate.allows(self.wifi):
            logger.warning(f"[Home] Not on office WiFi ({gate.office_ssid}), asking for confirmation")
            self.alert("WiFi Required", gate.warning_message(), [
                AlertAction("Cancel"),
                AlertAction("Proceed Anyway", lambda: self.open_scan(action)),
            ])
            return False

        self.open_scan(action)
        return True

    def open_scan(self, action: AttendanceType) -> BaseScreen:
        return self.navigate(
            Screen.ATTENDANCE_SCAN,
            email=self.email,
            location=self.location,
            wifi=self.wifi,
            intended_type=action,
        )

    def open_history(self) -> bool:
        gate = self.gate
        if gate.is_restricted and not gate.allows(self.wifi):
            self.alert("WiFi Restricted", "Attendance logs are only accessible on the Office network.")
            return False
        self.navigate(Screen.HISTORY, email=self.email)
        return True

    def open_profile(self) -> None:
        self.navigate(Screen.PROFILE, email=self.email)

    def logout(self) -> None:
        try:
            self.context.session.clear()
        except Exception as e:
            logger.error(f"[Home] Logout cleanup failed: {e}")
        finally:
            self.navigator.reset(Screen.LOGIN)
