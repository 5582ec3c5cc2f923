"""Tests for the command-line interface."""
import pytest

from officeflow import cli
from officeflow.api.schemas import AttendanceLogEntry, LogsResponse
from officeflow.capture import CHECK_IN_TITLE
from officeflow.models import AttendanceType, WifiState
from .conftest import USER_EMAIL, USER_PASSWORD


@pytest.fixture
def run(app, monkeypatch):
    """Run main() against the test app."""
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(cli, "validate_config", lambda: True)
    monkeypatch.setattr(cli, "build_app", lambda args: app)
    return cli.main


@pytest.fixture
def signed_in(app, profile):
    app.session.save(USER_EMAIL, USER_PASSWORD, "token-123", profile)
    return app


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_parser_reads_sensor_options():
    args = cli.build_parser().parse_args([
        "check-in", "--force", "--lat", "12.97", "--lon", "77.59", "--ssid", "CorpNet", "--strength", "-61",
    ])

    assert args.command == "check-in"
    assert args.force
    assert args.lat == pytest.approx(12.97)
    assert args.strength == -61
    assert args.timeout == cli.DEFAULT_OUTCOME_TIMEOUT


def test_register_requires_all_details():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["register", "--email", USER_EMAIL])


def test_build_app_uses_command_line_sensors(monkeypatch, tmp_path):
    monkeypatch.setenv("OFFICEFLOW_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("OFFICEFLOW_API_URL", "http://attendance.local:8000/")
    monkeypatch.setenv("OFFICEFLOW_OFFICE_SSID", "CorpNet")
    for name in ("OFFICEFLOW_STORAGE_KEY", "OFFICEFLOW_STORAGE_PATH", "OFFICEFLOW_STORAGE_KEY_FILE", "OFFICEFLOW_DEVICE_ID"):
        monkeypatch.delenv(name, raising=False)
    args = cli.build_parser().parse_args([
        "status", "--lat", "12.97", "--lon", "77.59", "--mocked", "--ssid", "CorpNet", "--bssid", "aa:bb",
    ])

    app = cli.build_app(args)

    assert app.api.base_url == "http://attendance.local:8000"
    assert app.context.office_ssid == "CorpNet"
    assert app.context.location.reading.mocked
    assert app.context.wifi.fetch() == WifiState(connected=True, ssid="CorpNet", bssid="aa:bb", strength=-50)
    assert app.context.report_dir == str(tmp_path / "reports")


def test_ping(run, capsys):
    assert run(["ping"]) == 0
    assert "http://testserver is reachable" in capsys.readouterr().out


def test_ping_unreachable(run, api):
    api.test_connection.return_value = False
    assert run(["ping"]) == 1


def test_login_with_credentials(run, app, api, capsys):
    assert run(["login", "--email", USER_EMAIL, "--password", USER_PASSWORD]) == 0

    assert api.login.call_count == 1
    assert "Signed in as Jane Doe" in capsys.readouterr().out


def test_login_without_saved_session(run, capsys):
    assert run(["login"]) == 1
    assert "Not signed in" in capsys.readouterr().err


def test_status(run, signed_in, capsys):
    assert run(["status"]) == 0

    out = capsys.readouterr().out
    assert "Jane Doe" in out
    assert "CorpNet (Excellent)" in out


def test_check_in(run, signed_in, api, capsys):
    assert run(["check-in"]) == 0

    assert CHECK_IN_TITLE in capsys.readouterr().out
    assert api.smart_attendance.call_args[0][0].intended_type == AttendanceType.CHECK_IN


def test_check_out_not_available(run, signed_in, capsys):
    assert run(["check-out"]) == 1
    assert "Cannot check-out" in capsys.readouterr().err


def test_check_in_off_network_needs_force(run, signed_in, wifi, api):
    wifi.state = WifiState(connected=True, ssid="Guest")

    assert run(["check-in"]) == 1
    api.smart_attendance.assert_not_called()

    assert run(["check-in", "--force"]) == 0
    api.smart_attendance.assert_called_once()


def test_verify_uses_presence_endpoint(run, signed_in, api):
    assert run(["verify"]) == 0

    api.verify_presence.assert_called_once()
    api.smart_attendance.assert_not_called()


def test_history_export(run, signed_in, api, tmp_path, capsys):
    api.get_attendance_logs.return_value = LogsResponse(logs=[
        AttendanceLogEntry(timestamp="2026-03-02T09:05:00", type="check-in", address="Tower B"),
    ])

    assert run(["history", "--export", str(tmp_path / "export")]) == 0

    out = capsys.readouterr().out
    assert "Check-In" in out
    assert "Report written to" in out
    assert len(list((tmp_path / "export").glob("attendance_*.html"))) == 1


def test_update_face_uses_session_password(run, signed_in, api):
    assert run(["update-face"]) == 0

    assert api.update_face.call_args[0][1] == USER_PASSWORD


def test_logout(run, signed_in, app):
    assert run(["logout"]) == 0
    assert app.session.load_saved_credentials() is None


def test_register(run, app, api):
    assert run([
        "register", "--full-name", "Jane Doe", "--email", USER_EMAIL, "--password", USER_PASSWORD,
        "--employee-id", "EMP-042", "--designation", "Engineer", "--department", "Platform",
    ]) == 0

    api.register.assert_called_once()
    assert app.navigator.current_screen is None


def test_profile(run, signed_in, capsys):
    assert run(["profile"]) == 0
    assert "EMP-042" in capsys.readouterr().out


def test_configuration_error_exits_with_one(run, monkeypatch):
    def invalid():
        raise ValueError("OFFICEFLOW_API_TIMEOUT must be positive")

    monkeypatch.setattr(cli, "validate_config", invalid)
    assert run(["ping"]) == 1


def test_keyboard_interrupt_exits_with_130(run, api):
    api.test_connection.side_effect = KeyboardInterrupt
    assert run(["ping"]) == 130
