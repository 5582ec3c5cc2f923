"""Tests for the home dashboard."""
import pytest

from officeflow.api.schemas import AnalyticsSnapshot
from officeflow.errors import TransportError
from officeflow.models import AttendanceType, LocationAccuracy, WifiState
from officeflow.office_gate import ALREADY_IN_BADGE, OFFICE_ONLY_BADGE
from officeflow.screens import AttendanceScanScreen, Screen
from officeflow.sensors import Feedback
from officeflow.session import SESSION_KEYS
from .conftest import USER_EMAIL


@pytest.fixture
def home(signed_in_app):
    return signed_in_app.current_screen


def test_mount_loads_location_wifi_and_analytics(home, api, location, office_wifi):
    api.get_analytics.assert_called_once_with(USER_EMAIL)
    assert location.requests[0] == LocationAccuracy.HIGH
    assert home.location.latitude == pytest.approx(12.9716)
    assert home.wifi == office_wifi
    assert not home.loading_analytics


def test_profile_is_loaded_from_session_when_not_passed(app, profile):
    app.session.save(USER_EMAIL, "pw", "token", profile)
    app.start(auto_login=False)

    home = app.navigator.navigate(Screen.HOME, email=USER_EMAIL)

    assert home.user.full_name == "Jane Doe"


def test_analytics_are_refetched_on_focus(signed_in_app, home, api):
    home.open_profile()
    signed_in_app.navigator.go_back()

    assert api.get_analytics.call_count == 2


def test_analytics_failure_keeps_defaults(app, api, profile):
    api.get_analytics.side_effect = TransportError("Network Error")
    app.session.save(USER_EMAIL, "pw", "token", profile)
    home = app.start()

    assert home.analytics == AnalyticsSnapshot()
    assert not home.loading_analytics
    assert home.availability.check_in_enabled


def test_goal_progress_is_capped(home, api):
    api.get_analytics.return_value = AnalyticsSnapshot(today_hours=4.0)
    home.fetch_analytics()
    assert home.goal_progress == pytest.approx(50.0)

    api.get_analytics.return_value = AnalyticsSnapshot(today_hours=11.0)
    home.fetch_analytics()
    assert home.goal_progress == 100.0


def test_press_scan_opens_scan_screen(signed_in_app, home, feedback, office_wifi):
    assert home.press_scan(AttendanceType.CHECK_IN) is True

    scan = signed_in_app.current_screen
    assert isinstance(scan, AttendanceScanScreen)
    assert scan.intended_type == AttendanceType.CHECK_IN
    assert scan.params["wifi"] == office_wifi
    assert scan.params["location"] is home.location
    assert Feedback.WARNING in feedback.events


def test_disabled_action_does_nothing(signed_in_app, home, api, feedback):
    api.get_analytics.return_value = AnalyticsSnapshot(current_status=AttendanceType.CHECK_IN)
    home.fetch_analytics()

    assert home.availability.check_in_badge == ALREADY_IN_BADGE
    assert home.press_scan(AttendanceType.CHECK_IN) is False
    assert signed_in_app.navigator.current_screen == Screen.HOME
    assert feedback.events == []
    assert home.press_scan(AttendanceType.CHECK_OUT) is True


def test_off_network_asks_for_confirmation(signed_in_app, home, wifi, presenter):
    wifi.state = WifiState(connected=True, ssid="Guest", strength=-40)
    home.refresh_wifi()

    assert home.availability.check_in_badge == OFFICE_ONLY_BADGE
    assert home.press_scan(AttendanceType.CHECK_IN) is False
    assert presenter.last.title == "WiFi Required"
    assert "CorpNet" in presenter.last.message
    assert signed_in_app.navigator.current_screen == Screen.HOME

    presenter.last.press("Cancel")
    assert signed_in_app.navigator.current_screen == Screen.HOME

    presenter.last.press("Proceed Anyway")
    assert signed_in_app.navigator.current_screen == Screen.ATTENDANCE_SCAN


def test_server_ssid_overrides_configured_one(home, api, presenter):
    api.get_analytics.return_value = AnalyticsSnapshot(office_wifi_ssid="HQ-Secure")
    home.fetch_analytics()

    assert not home.on_office_network
    home.press_scan(AttendanceType.CHECK_IN)

    assert "HQ-Secure" in presenter.last.message


def test_history_is_blocked_off_network(signed_in_app, home, wifi, presenter):
    wifi.state = WifiState(connected=False)
    home.refresh_wifi()

    assert home.open_history() is False
    assert presenter.last.title == "WiFi Restricted"
    assert signed_in_app.navigator.current_screen == Screen.HOME


def test_history_is_open_without_office_ssid(signed_in_app, home, wifi):
    signed_in_app.context.office_ssid = ""
    wifi.state = WifiState(connected=False)
    home.refresh_wifi()

    assert home.open_history() is True
    assert signed_in_app.navigator.current_screen == Screen.HISTORY


def test_wifi_failure_counts_as_disconnected(home, wifi, monkeypatch):
    def broken():
        raise OSError("radio off")

    monkeypatch.setattr(wifi, "fetch", broken)
    home.refresh_wifi()

    assert home.wifi == WifiState(connected=False)


def test_display_name_falls_back_to_email(home):
    home.user = None
    assert home.display_name == "jane.doe"


def test_logout_clears_session(signed_in_app, home, store):
    home.logout()

    assert signed_in_app.navigator.history() == [Screen.LOGIN]
    assert all(not store.has_item(key) for key in SESSION_KEYS)
    assert not home.mounted


@pytest.mark.parametrize("status", [None, "on-leave", "update-face"])
def test_unknown_status_counts_as_checked_out(home, api, status):
    api.get_analytics.return_value = AnalyticsSnapshot.model_validate({
        "today_hours": 3.5,
        "week_total": 20,
        "current_status": status,
        "office_wifi_ssid": "HQ-Secure",
    })
    home.fetch_analytics()

    assert home.analytics.current_status == AttendanceType.CHECK_OUT
    assert home.analytics.today_hours == 3.5
    assert home.gate.office_ssid == "HQ-Secure"


def test_check_in_status_is_kept():
    snapshot = AnalyticsSnapshot.model_validate({"current_status": "check-in"})

    assert snapshot.current_status == AttendanceType.CHECK_IN
