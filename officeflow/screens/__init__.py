"""Headless screen models for the OfficeFlow app."""

from .base_screen import Alert, AlertAction, BaseScreen, LoggingPresenter, Presenter, RecordingPresenter, ScreenContext
from .navigation import Navigator, Route, Screen
from .login_screen import LoginScreen
from .register_screen import OnboardingScreen, RegisterScreen
from .home_screen import HomeScreen
from .scan_screen import AttendanceScanScreen
from .history_screen import HistoryScreen
from .profile_screen import ProfileScreen

SCREEN_CLASSES = {
    Screen.LOGIN: LoginScreen,
    Screen.REGISTER: RegisterScreen,
    Screen.ONBOARDING: OnboardingScreen,
    Screen.HOME: HomeScreen,
    Screen.ATTENDANCE_SCAN: AttendanceScanScreen,
    Screen.HISTORY: HistoryScreen,
    Screen.PROFILE: ProfileScreen,
}

__all__ = [
    "Alert",
    "AlertAction",
    "BaseScreen",
    "LoggingPresenter",
    "Presenter",
    "RecordingPresenter",
    "ScreenContext",
    "Navigator",
    "Route",
    "Screen",
    "LoginScreen",
    "RegisterScreen",
    "OnboardingScreen",
    "HomeScreen",
    "AttendanceScanScreen",
    "HistoryScreen",
    "ProfileScreen",
    "SCREEN_CLASSES",
]
