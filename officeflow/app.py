"""
Application wiring.

Builds the API client, secure store, session, sensors, scheduler and
navigator from configuration and hands them to the screens.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from officeflow.api import AttendanceApiClient, get_api_config
from officeflow.config import get_app_config, get_capture_config
from officeflow.scheduling import Scheduler
from officeflow.screens import SCREEN_CLASSES, BaseScreen, LoggingPresenter, Navigator, Presenter, Screen, ScreenContext
from officeflow.sensors import (
    Camera,
    DeviceIdentity,
    Feedback,
    LocationProvider,
    NullFeedback,
    StaticLocationProvider,
    StaticWifiReader,
    StoredDeviceIdentity,
    WifiReader,
)
from officeflow.sensors.static import FileCamera
from officeflow.session import SessionManager
from officeflow.storage import SecureStore, get_storage_config

logger = logging.getLogger(__name__)


class OfficeFlowApp:
    """
    One running instance of the client.

    All screens share one scheduler, one session and one presenter.
    """

    def __init__(
        self,
        api: AttendanceApiClient,
        store: SecureStore,
        camera: Camera,
        location: LocationProvider,
        wifi: WifiReader,
        presenter: Optional[Presenter] = None,
        scheduler: Optional[Scheduler] = None,
        feedback: Optional[Feedback] = None,
        device: Optional[DeviceIdentity] = None,
        office_ssid: str = "",
        capture_config: Optional[Dict[str, Any]] = None,
        report_dir: Optional[str] = None,
    ):
        self.api = api
        self.store = store
        self.session = SessionManager(store)
        self.presenter = presenter or LoggingPresenter()
        self.scheduler = scheduler or Scheduler()
        self.context = ScreenContext(
            api=api,
            session=self.session,
            scheduler=self.scheduler,
            presenter=self.presenter,
            camera=camera,
            location=location,
            wifi=wifi,
            device=device or StoredDeviceIdentity(store),
            feedback=feedback or NullFeedback(),
            office_ssid=office_ssid,
            capture_config=dict(capture_config or {}),
            report_dir=report_dir,
        )
        self.navigator = Navigator(self._build_screen)
        self.server_reachable: Optional[bool] = None

    @classmethod
    def from_config(
        cls,
        camera: Optional[Camera] = None,
        location: Optional[LocationProvider] = None,
        wifi: Optional[WifiReader] = None,
        presenter: Optional[Presenter] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> "OfficeFlowApp":
        """Build an app from environment configuration."""
        app_config = get_app_config()
        api_config = get_api_config()
        store = SecureStore.from_config(get_storage_config())

        api = AttendanceApiClient(api_config["base_url"], timeout=api_config["timeout"])
        return cls(
            api=api,
            store=store,
            camera=camera or FileCamera(None),
            location=location or StaticLocationProvider(),
            wifi=wifi or StaticWifiReader(),
            presenter=presenter,
            scheduler=scheduler,
            device=StoredDeviceIdentity(store, override=app_config["device_id"]),
            office_ssid=app_config["office_ssid"],
            capture_config=get_capture_config(),
            report_dir=str(Path(app_config["data_dir"]) / "reports"),
        )

    def _build_screen(self, screen: Screen, navigator: Navigator, params: Dict[str, Any]) -> BaseScreen:
        return SCREEN_CLASSES[screen](self.context, navigator, params)

    @property
    def current_screen(self) -> Optional[BaseScreen]:
        return self.navigator.current

    def start(self, auto_login: bool = True) -> BaseScreen:
        """Check the server, then open the login screen."""
        self.server_reachable = self.api.test_connection()
        if not self.server_reachable:
            logger.warning(f"Server at {self.api.base_url} is not reachable")
        self.navigator.reset(Screen.LOGIN, auto_login=auto_login)
        return self.navigator.current

    def shutdown(self) -> None:
        """Unmount every screen and cancel anything still scheduled."""
        self.navigator.clear()
        self.scheduler.cancel_all()
