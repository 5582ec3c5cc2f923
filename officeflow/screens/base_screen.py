"""
Screen base class and the alert plumbing shared by every screen.

Screens are headless: they hold the state a UI would render and expose the
actions a user can take. Alerts go to a Presenter, which a UI (or the CLI,
or a test) implements.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from officeflow.api import AttendanceApiClient
from officeflow.scheduling import Scheduler
from officeflow.sensors import Camera, DeviceIdentity, Feedback, LocationProvider, WifiReader
from officeflow.session import SessionManager

if TYPE_CHECKING:
    from .navigation import Navigator, Screen

logger = logging.getLogger(__name__)


@dataclass
class AlertAction:
    """A button on an alert."""
    label: str
    callback: Optional[Callable[[], None]] = None


@dataclass
class Alert:
    title: str
    message: str
    actions: List[AlertAction] = field(default_factory=list)

    def action(self, label: str) -> AlertAction:
        for action in self.actions:
            if action.label == label:
                return action
        raise KeyError(f"Alert {self.title!r} has no {label!r} button")

    def press(self, label: str) -> None:
        """Invoke the button with the given label."""
        callback = self.action(label).callback
        if callback is not None:
            callback()


class Presenter:
    """Sink for alerts raised by screens."""

    def show_alert(self, alert: Alert) -> None:
        raise NotImplementedError


class RecordingPresenter(Presenter):
    """Keeps every alert so callers can inspect and answer them."""

    def __init__(self):
        self.alerts: List[Alert] = []

    def show_alert(self, alert: Alert) -> None:
        self.alerts.append(alert)

    @property
    def last(self) -> Optional[Alert]:
        return self.alerts[-1] if self.alerts else None

    def titles(self) -> List[str]:
        return [a.title for a in self.alerts]

    def clear(self) -> None:
        self.alerts.clear()


class LoggingPresenter(RecordingPresenter):
    """Records alerts and writes them to the log."""

    def show_alert(self, alert: Alert) -> None:
        super().show_alert(alert)
        message = alert.message.replace("\n", " ")
        logger.info(f"[Alert] {alert.title}: {message}")


@dataclass
class ScreenContext:
    """Everything a screen needs from the running app."""
    api: AttendanceApiClient
    session: SessionManager
    scheduler: Scheduler
    presenter: Presenter
    camera: Camera
    location: LocationProvider
    wifi: WifiReader
    device: DeviceIdentity
    feedback: Feedback
    office_ssid: str = ""
    capture_config: Dict[str, Any] = field(default_factory=dict)
    report_dir: Optional[str] = None


class BaseScreen:
    """Represents one screen of the app."""

    screen: Optional["Screen"] = None

    def __init__(self, context: ScreenContext, navigator: "Navigator", params: Optional[Dict[str, Any]] = None):
        self.context = context
        self.navigator = navigator
        self.params: Dict[str, Any] = dict(params or {})
        self.mounted = False

    @property
    def email(self) -> str:
        return self.params.get("email") or ""

    def mount(self) -> None:
        """Called once when the screen is pushed."""
        self.mounted = True

    def focus(self, params: Optional[Dict[str, Any]] = None) -> None:
        """Called when navigation returns to this screen."""
        if params:
            self.params.update(params)

    def unmount(self) -> None:
        """Called when the screen is popped. Must release every timer."""
        self.mounted = False

    def alert(self, title: str, message: str, actions: Optional[List[AlertAction]] = None) -> Alert:
        alert = Alert(title=title, message=message, actions=list(actions or []))
        self.context.presenter.show_alert(alert)
        return alert

    def navigate(self, screen: "Screen", **params: Any) -> "BaseScreen":
        return self.navigator.navigate(screen, **params)
