"""
Command-line interface for the OfficeFlow attendance client.

Each subcommand drives the same screens a mobile UI would, with sensors
replaced by command-line values (an image file for the camera, fixed
coordinates, a fixed WiFi network).
"""
import argparse
import logging
import sys
from typing import List, Optional

from officeflow import __version__
from officeflow.app import OfficeFlowApp
from officeflow.config import validate_config
from officeflow.models import AttendanceType, GeocodedPlace, LocationReading, WifiState
from officeflow.screens import (
    AttendanceScanScreen,
    HistoryScreen,
    HomeScreen,
    LoggingPresenter,
    OnboardingScreen,
    ProfileScreen,
    RegisterScreen,
    Screen,
)
from officeflow.sensors import StaticLocationProvider, StaticWifiReader
from officeflow.sensors.static import FileCamera
from officeflow.utils import format_result_message, setup_logging, wifi_strength_label

logger = logging.getLogger(__name__)

DEFAULT_OUTCOME_TIMEOUT = 120.0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="officeflow",
        description="Mark office attendance with a face capture, GPS and WiFi verification",
    )
    parser.add_argument("--version", action="version", version=f"OfficeFlow v{__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--log-file", type=str, help="Path to log file")

    credentials = argparse.ArgumentParser(add_help=False)
    credentials.add_argument("--email", type=str, help="Account email (defaults to the saved session)")
    credentials.add_argument("--password", type=str, help="Account password (defaults to the saved session)")

    sensors = argparse.ArgumentParser(add_help=False)
    sensors.add_argument("--image", type=str, help="Image file used as the camera picture")
    sensors.add_argument("--lat", type=float, help="Latitude of the device")
    sensors.add_argument("--lon", type=float, help="Longitude of the device")
    sensors.add_argument("--accuracy", type=float, help="GPS accuracy in meters")
    sensors.add_argument("--mocked", action="store_true", help="Flag the location as coming from a mock provider")
    sensors.add_argument("--address", type=str, help="Street address reported by reverse geocoding")
    sensors.add_argument("--city", type=str, help="City reported by reverse geocoding")
    sensors.add_argument("--ssid", type=str, help="SSID of the connected WiFi network")
    sensors.add_argument("--bssid", type=str, default="", help="BSSID of the connected access point")
    sensors.add_argument("--strength", type=int, help="WiFi signal strength in dBm")
    sensors.add_argument("--timeout", type=float, default=DEFAULT_OUTCOME_TIMEOUT,
                         help="Seconds to wait for the verification result")

    sub = parser.add_subparsers(dest="command", metavar="command")
    sub.required = True

    sub.add_parser("ping", help="Check that the attendance server is reachable")
    sub.add_parser("login", parents=[credentials, sensors], help="Sign in and save the session")
    sub.add_parser("logout", help="Remove the saved session")

    register = sub.add_parser("register", parents=[sensors], help="Create an account and enroll your face")
    register.add_argument("--full-name", required=True)
    register.add_argument("--email", required=True)
    register.add_argument("--password", required=True)
    register.add_argument("--employee-id", required=True)
    register.add_argument("--designation", required=True)
    register.add_argument("--department", required=True)

    sub.add_parser("status", parents=[credentials, sensors], help="Show today's hours and available actions")

    history = sub.add_parser("history", parents=[credentials, sensors], help="List attendance logs")
    history.add_argument("--export", type=str, metavar="DIR", help="Write an HTML report to DIR")

    for name, help_text in (("check-in", "Check in"), ("check-out", "Check out")):
        command = sub.add_parser(name, parents=[credentials, sensors], help=help_text)
        command.add_argument("--force", action="store_true",
                             help="Proceed even when not on the office WiFi")

    sub.add_parser("verify", parents=[credentials, sensors],
                   help="Verify presence without recording attendance")

    update_face = sub.add_parser("update-face", parents=[credentials, sensors],
                                 help="Re-enroll your face biometrics")
    update_face.add_argument("--confirm-password", type=str, help="Password confirming the re-enrollment")

    profile = sub.add_parser("profile", parents=[credentials, sensors], help="Show your profile")
    profile.add_argument("--refresh", action="store_true", help="Re-fetch the profile from the server")

    return parser


def build_app(args: argparse.Namespace) -> OfficeFlowApp:
    """Create the app with sensors taken from the command line."""
    reading = None
    if getattr(args, "lat", None) is not None and getattr(args, "lon", None) is not None:
        reading = LocationReading(
            latitude=args.lat,
            longitude=args.lon,
            accuracy=args.accuracy,
            mocked=args.mocked,
        )
    places = []
    if getattr(args, "address", None) or getattr(args, "city", None):
        places.append(GeocodedPlace(street=args.address, city=args.city))

    wifi = WifiState(connected=False)
    if getattr(args, "ssid", None):
        wifi = WifiState(
            connected=True,
            ssid=args.ssid,
            bssid=args.bssid,
            strength=args.strength if args.strength is not None else -50,
        )

    return OfficeFlowApp.from_config(
        camera=FileCamera(getattr(args, "image", None)),
        location=StaticLocationProvider(reading, places),
        wifi=StaticWifiReader(wifi),
        presenter=LoggingPresenter(),
    )


def _last_alert_message(app: OfficeFlowApp) -> str:
    alert = app.presenter.last
    return f"{alert.title}: {alert.message}" if alert else "Unknown error"


def sign_in(app: OfficeFlowApp, args: argparse.Namespace) -> Optional[HomeScreen]:
    """
    Open the app and get to the home screen.

    Saved credentials sign in automatically; --email/--password sign in
    explicitly and replace the saved session.
    """
    explicit = bool(args.email and args.password)
    app.start(auto_login=not explicit)
    if explicit:
        login = app.navigator.current
        login.fill(args.email, args.password)
        login.login()

    home = app.navigator.current
    if not isinstance(home, HomeScreen):
        if app.presenter.last:
            print(_last_alert_message(app), file=sys.stderr)
        else:
            print("Not signed in. Use --email and --password.", file=sys.stderr)
        return None
    return home


def run_scan(app: OfficeFlowApp, scan: AttendanceScanScreen, timeout: float) -> int:
    """Wait for the scan screen to finish and report the result."""
    outcome = scan.wait_for_outcome(timeout)
    if outcome is None:
        print(f"No verification result within {timeout:.0f}s", file=sys.stderr)
        return 1
    logger.info(format_result_message(outcome))
    print(f"{outcome.title}\n{outcome.message}")
    if outcome.success:
        app.presenter.last.press("Great!")
        return 0
    return 1


def cmd_ping(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    if app.api.test_connection():
        print(f"Server at {app.api.base_url} is reachable")
        return 0
    print(f"Server at {app.api.base_url} is not reachable", file=sys.stderr)
    return 1


def cmd_login(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    home = sign_in(app, args)
    if home is None:
        return 1
    print(f"Signed in as {home.display_name} ({home.email})")
    return 0


def cmd_logout(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    app.session.clear()
    print("Signed out")
    return 0


def cmd_register(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    app.start(auto_login=False)
    register = app.navigator.navigate(Screen.REGISTER)
    assert isinstance(register, RegisterScreen)
    register.fill(
        full_name=args.full_name,
        email=args.email,
        password=args.password,
        employee_id=args.employee_id,
        designation=args.designation,
        department=args.department,
    )
    if not register.proceed():
        print(_last_alert_message(app), file=sys.stderr)
        return 1

    onboarding = app.navigator.current
    assert isinstance(onboarding, OnboardingScreen)
    if not onboarding.capture() or not onboarding.register():
        print(_last_alert_message(app), file=sys.stderr)
        return 1
    app.presenter.last.press("Start Working")
    print(f"Digital ID created for {args.email}")
    return 0


def cmd_status(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    home = sign_in(app, args)
    if home is None:
        return 1
    analytics = home.analytics
    availability = home.availability
    gate = home.gate

    print(f"User:          {home.display_name}")
    print(f"Status:        {analytics.current_status.value}")
    print(f"Today:         {analytics.today_hours:.1f} h ({home.goal_progress:.0f}% of goal)")
    print(f"This week:     {analytics.week_total:.1f} h")
    if home.wifi.connected:
        print(f"WiFi:          {home.wifi.ssid} ({wifi_strength_label(home.wifi.strength)})")
    else:
        print("WiFi:          not connected")
    print(f"Office WiFi:   {gate.office_ssid or '(no restriction)'}")
    for action in (AttendanceType.CHECK_IN, AttendanceType.CHECK_OUT):
        badge = availability.check_in_badge if action == AttendanceType.CHECK_IN else availability.check_out_badge
        state = "available" if availability.is_enabled(action) else "unavailable"
        print(f"{action.value:<14} {state}{f' [{badge}]' if badge else ''}")
    return 0


def cmd_history(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    home = sign_in(app, args)
    if home is None:
        return 1
    if not home.open_history():
        print(_last_alert_message(app), file=sys.stderr)
        return 1
    history = app.navigator.current
    assert isinstance(history, HistoryScreen)
    if history.error:
        print(history.error, file=sys.stderr)
        return 1
    if not history.rows:
        print("No attendance logs yet")
    for row in history.rows:
        extras = [value for value in (row.distance, row.wifi, row.duration) if value]
        print(f"{row.date:<14} {row.time:<9} {row.status:<10} {row.address}"
              + (f"  ({', '.join(extras)})" if extras else ""))
    if args.export:
        path = history.export_report(args.export)
        if path is None:
            print(_last_alert_message(app), file=sys.stderr)
            return 1
        print(f"Report written to {path}")
    return 0


def _cmd_attendance(app: OfficeFlowApp, args: argparse.Namespace, action: AttendanceType) -> int:
    home = sign_in(app, args)
    if home is None:
        return 1
    if not home.availability.is_enabled(action):
        print(f"Cannot {action.value}: current status is {home.analytics.current_status.value}",
              file=sys.stderr)
        return 1
    if not home.press_scan(action):
        alert = app.presenter.last
        if not args.force or alert is None or alert.title != "WiFi Required":
            print(_last_alert_message(app), file=sys.stderr)
            return 1
        logger.warning("Proceeding without office WiFi")
        alert.press("Proceed Anyway")

    scan = app.navigator.current
    assert isinstance(scan, AttendanceScanScreen)
    return run_scan(app, scan, args.timeout)


def cmd_check_in(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    return _cmd_attendance(app, args, AttendanceType.CHECK_IN)


def cmd_check_out(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    return _cmd_attendance(app, args, AttendanceType.CHECK_OUT)


def cmd_verify(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    home = sign_in(app, args)
    if home is None:
        return 1
    scan = home.navigate(
        Screen.ATTENDANCE_SCAN,
        email=home.email,
        location=home.location,
        wifi=home.wifi,
        intended_type=home.analytics.current_status,
        presence_only=True,
    )
    return run_scan(app, scan, args.timeout)


def cmd_update_face(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    home = sign_in(app, args)
    if home is None:
        return 1
    home.open_profile()
    profile = app.navigator.current
    assert isinstance(profile, ProfileScreen)
    password = args.confirm_password or (app.session.current.password if app.session.current else "")
    if not profile.start_reenrollment(password):
        print(_last_alert_message(app), file=sys.stderr)
        return 1
    scan = app.navigator.current
    assert isinstance(scan, AttendanceScanScreen)
    return run_scan(app, scan, args.timeout)


def cmd_profile(app: OfficeFlowApp, args: argparse.Namespace) -> int:
    home = sign_in(app, args)
    if home is None:
        return 1
    home.open_profile()
    profile = app.navigator.current
    assert isinstance(profile, ProfileScreen)
    if args.refresh and not profile.refresh_profile():
        print(_last_alert_message(app), file=sys.stderr)
        return 1
    data = profile.profile_data
    for label in ("name", "email", "id", "department", "designation", "joined"):
        print(f"{label.capitalize():<12} {data[label]}")
    return 0


COMMANDS = {
    "ping": cmd_ping,
    "login": cmd_login,
    "logout": cmd_logout,
    "register": cmd_register,
    "status": cmd_status,
    "history": cmd_history,
    "check-in": cmd_check_in,
    "check-out": cmd_check_out,
    "verify": cmd_verify,
    "update-face": cmd_update_face,
    "profile": cmd_profile,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    app = None
    try:
        logger.debug("Validating configuration...")
        validate_config()
        app = build_app(args)
        return COMMANDS[args.command](app, args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=args.verbose)
        return 1
    finally:
        if app is not None:
            app.shutdown()


if __name__ == "__main__":
    sys.exit(main())
