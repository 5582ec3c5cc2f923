"""Shared fixtures: virtual clock, in-memory secure store, fake server and static sensors."""
from unittest.mock import MagicMock

import pytest

from officeflow.api import AttendanceApiClient
from officeflow.api.schemas import (
    AnalyticsSnapshot,
    AttendanceResponse,
    AuthResponse,
    LogsResponse,
    UpdateFaceResponse,
    UserProfile,
)
from officeflow.app import OfficeFlowApp
from officeflow.models import GeocodedPlace, LocationReading, WifiState
from officeflow.scheduling import Scheduler, VirtualClock
from officeflow.screens import RecordingPresenter
from officeflow.sensors import NullFeedback, StaticCamera, StaticLocationProvider, StaticWifiReader
from officeflow.storage import SecureStore
from officeflow.storage.crypto import generate_key

OFFICE_SSID = "CorpNet"
OFFICE_BSSID = "aa:bb:cc:dd:ee:ff"
USER_EMAIL = "jane.doe@corp.com"
USER_PASSWORD = "s3cret-pass"
FAKE_PICTURE = "ZmFrZS1qcGVnLWJ5dGVz"


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture
def store():
    return SecureStore(generate_key())


@pytest.fixture
def profile():
    return UserProfile(
        full_name="Jane Doe",
        email=USER_EMAIL,
        employee_id="EMP-042",
        designation="Engineer",
        department="Platform",
    )


@pytest.fixture
def api(profile):
    api = MagicMock(spec=AttendanceApiClient)
    api.base_url = "http://testserver"
    api.test_connection.return_value = True
    api.login.return_value = AuthResponse(access_token="token-123", user=profile)
    api.register.return_value = AuthResponse(access_token="token-new", user=profile)
    api.get_profile.return_value = profile
    api.get_analytics.return_value = AnalyticsSnapshot()
    api.get_attendance_logs.return_value = LogsResponse()
    api.smart_attendance.return_value = AttendanceResponse(
        type="check-in", user="Jane Doe", wifi_quality="Excellent"
    )
    api.verify_presence.return_value = AttendanceResponse(
        type="check-in", user="Jane Doe", wifi_quality="Good"
    )
    api.update_face.return_value = UpdateFaceResponse(message="Face biometrics updated successfully.")
    return api


@pytest.fixture
def office_reading():
    return LocationReading(latitude=12.9716, longitude=77.5946, accuracy=4.0)


@pytest.fixture
def camera():
    return StaticCamera(FAKE_PICTURE)


@pytest.fixture
def location(office_reading):
    return StaticLocationProvider(
        office_reading,
        [GeocodedPlace(name="Tower B", street="MG Road", district="Ashok Nagar", city="Bengaluru")],
    )


@pytest.fixture
def office_wifi():
    return WifiState(connected=True, ssid=OFFICE_SSID, bssid=OFFICE_BSSID, strength=-48)


@pytest.fixture
def wifi(office_wifi):
    return StaticWifiReader(office_wifi)


@pytest.fixture
def feedback():
    return NullFeedback()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def app(api, store, camera, location, wifi, presenter, scheduler, feedback, tmp_path):
    app = OfficeFlowApp(
        api=api,
        store=store,
        camera=camera,
        location=location,
        wifi=wifi,
        presenter=presenter,
        scheduler=scheduler,
        feedback=feedback,
        office_ssid=OFFICE_SSID,
        report_dir=str(tmp_path / "reports"),
    )
    yield app
    app.shutdown()


@pytest.fixture
def signed_in_app(app, profile):
    """App that starts with saved credentials and lands on Home."""
    app.session.save(USER_EMAIL, USER_PASSWORD, "token-123", profile)
    app.start()
    return app
