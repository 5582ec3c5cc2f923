"""Tests for the HTTP client: request shapes, response parsing and error translation."""
from unittest.mock import MagicMock

import pytest
import requests

from officeflow.api import AttendanceApiClient, get_api_config
from officeflow.errors import ApiError, RequestTimeout, TransportError
from officeflow.models import AttendanceSubmission, AttendanceType


def _response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    return AttendanceApiClient("http://server:8001/", timeout=30, session=session)


@pytest.fixture
def submission():
    return AttendanceSubmission(
        email="jane.doe@corp.com",
        face_image="aW1hZ2U=",
        latitude=12.97,
        longitude=77.59,
        intended_type=AttendanceType.CHECK_IN,
        device_id="device-1",
        address="MG Road, Ashok Nagar",
    )


def test_json_content_type_and_base_url(client, session):
    assert client.base_url == "http://server:8001"
    assert session.headers["Content-Type"] == "application/json"


def test_login_posts_credentials_and_parses_user(client, session):
    session.request.return_value = _response(200, {
        "access_token": "tok",
        "user": {"full_name": "Jane Doe", "email": "jane.doe@corp.com", "unexpected": True},
    })

    result = client.login("jane.doe@corp.com", "pw", "device-1")

    session.request.assert_called_once_with(
        "POST", "http://server:8001/login",
        json={"email": "jane.doe@corp.com", "password": "pw", "device_id": "device-1"},
        params=None, timeout=30,
    )
    assert result.access_token == "tok"
    assert result.user.full_name == "Jane Doe"


def test_smart_attendance_payload_defaults_missing_wifi(client, session, submission):
    session.request.return_value = _response(200, {"type": "check-in", "user": "Jane", "wifi_quality": "Good"})

    result = client.smart_attendance(submission)

    payload = session.request.call_args.kwargs["json"]
    assert payload == {
        "email": "jane.doe@corp.com",
        "image": "aW1hZ2U=",
        "lat": 12.97,
        "long": 77.59,
        "address": "MG Road, Ashok Nagar",
        "intended_type": "check-in",
        "device_id": "device-1",
        "wifi_bssid": "",
        "wifi_ssid": "",
        "wifi_strength": -50,
    }
    assert result.is_check_in


def test_update_face_sends_password_and_face_image(client, session, submission):
    session.request.return_value = _response(200, {"message": "Updated"})

    result = client.update_face(submission, "pw")

    args = session.request.call_args
    assert args[0][1] == "http://server:8001/update-face"
    assert args.kwargs["json"]["password"] == "pw"
    assert args.kwargs["json"]["face_image"] == "aW1hZ2U="
    assert "intended_type" not in args.kwargs["json"]
    assert result.message == "Updated"


def test_verify_presence_has_no_intended_type(client, session, submission):
    session.request.return_value = _response(200, {"type": "check-in", "user": "Jane"})

    client.verify_presence(submission)

    payload = session.request.call_args.kwargs["json"]
    assert "intended_type" not in payload
    assert "address" not in payload


def test_get_profile_passes_token_as_query(client, session):
    session.request.return_value = _response(200, {"full_name": "Jane Doe", "created_at": "2025-06-01T10:00:00"})

    profile = client.get_profile("tok")

    assert session.request.call_args.kwargs["params"] == {"token": "tok"}
    assert profile.created_at.year == 2025


def test_logs_path_quotes_email_and_reads_id_alias(client, session):
    session.request.return_value = _response(200, {"logs": [
        {"_id": "abc", "timestamp": "2026-03-02T09:05:00", "type": "check-in", "wifi_quality": -55},
    ]})

    result = client.get_attendance_logs("jane+ops@corp.com")

    assert session.request.call_args[0][1] == "http://server:8001/logs/jane%2Bops@corp.com"
    assert result.logs[0].id == "abc"
    assert result.logs[0].wifi_quality == -55


def test_analytics_defaults_to_checked_out(client, session):
    session.request.return_value = _response(200, {"today_hours": 3.5})

    snapshot = client.get_analytics("jane.doe@corp.com")

    assert snapshot.current_status == AttendanceType.CHECK_OUT
    assert snapshot.today_hours == 3.5
    assert snapshot.office_wifi_ssid is None


def test_error_status_raises_api_error_with_detail(client, session):
    session.request.return_value = _response(403, {"detail": "BSSID mismatch"})

    with pytest.raises(ApiError) as exc_info:
        client.login("a@b.c", "pw", None)

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "BSSID mismatch"
    assert str(exc_info.value) == "Request failed with status code 403"


def test_api_error_keeps_full_error_body(client, session):
    body = {"detail": [{"loc": ["body", "email"], "msg": "field required"}], "request_id": "r-17"}
    session.request.return_value = _response(422, body)

    with pytest.raises(ApiError) as exc_info:
        client.register("Jane", "", "pw", "EMP-1", "Eng", "Platform", "aW1n", "dev-1")

    assert exc_info.value.payload == body
    assert exc_info.value.detail == body["detail"]


def test_error_without_json_keeps_response_text(client, session):
    session.request.return_value = _response(502, None, text="Bad Gateway")

    with pytest.raises(ApiError) as exc_info:
        client.get_analytics("a@b.c")

    assert exc_info.value.detail == "Bad Gateway"
    assert exc_info.value.payload == "Bad Gateway"


def test_timeout_is_translated(client, session):
    session.request.side_effect = requests.Timeout("read timed out")

    with pytest.raises(RequestTimeout) as exc_info:
        client.get_analytics("a@b.c")

    assert "timeout" in str(exc_info.value)


def test_connection_failure_is_network_error(client, session):
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(TransportError) as exc_info:
        client.login("a@b.c", "pw", None)

    assert exc_info.value.message == "Network Error"


def test_test_connection_never_raises(client, session):
    session.request.side_effect = requests.ConnectionError("refused")
    assert client.test_connection() is False

    session.request.side_effect = None
    session.request.return_value = _response(200, {"status": "ok"})
    assert client.test_connection() is True


def test_get_api_config_reads_environment(monkeypatch):
    monkeypatch.setenv("OFFICEFLOW_API_URL", "https://attendance.example.com/")
    monkeypatch.setenv("OFFICEFLOW_API_TIMEOUT", "12.5")

    config = get_api_config()

    assert config["base_url"] == "https://attendance.example.com"
    assert config["timeout"] == 12.5


def test_get_api_config_rejects_non_positive_timeout(monkeypatch):
    monkeypatch.setenv("OFFICEFLOW_API_TIMEOUT", "0")
    with pytest.raises(ValueError):
        get_api_config()
