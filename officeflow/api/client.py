"""
HTTP client for the attendance verification server.

Every call is a single request bounded by the configured timeout. Nothing is
retried here; retry policy belongs to the caller (in practice the user).
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from officeflow.errors import ApiError, RequestTimeout, TransportError
from officeflow.models import AttendanceSubmission
from .config import DEFAULT_TIMEOUT_SECONDS
from .schemas import (
    AnalyticsSnapshot,
    AttendanceResponse,
    AuthResponse,
    LogsResponse,
    UpdateFaceResponse,
    UserProfile,
)

logger = logging.getLogger(__name__)


def _read_error_body(response: requests.Response) -> Any:
    """Decoded JSON of an error response, falling back to its text."""
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _extract_detail(body: Any) -> Any:
    """Pull the server's `detail` field out of an error body."""
    if isinstance(body, dict) and "detail" in body:
        return body["detail"]
    return body


class AttendanceApiClient:
    """Thin wrapper around the attendance server's JSON API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Raises:
            RequestTimeout: If no answer arrived within the timeout
            TransportError: If no response was received at all
            ApiError: If the server answered with a non-2xx status
        """
        url = f"{self.base_url}{path}"
        logger.info(f"[API] {method} {url}")

        try:
            response = self.session.request(
                method, url, json=json, params=params, timeout=self.timeout
            )
        except requests.Timeout as e:
            logger.error(f"[API] No response within {self.timeout}s from {path}")
            raise RequestTimeout(f"timeout of {int(self.timeout * 1000)}ms exceeded") from e
        except requests.ConnectionError as e:
            logger.error(f"[API] No response received. Is the server running at {self.base_url} ?")
            logger.error(f"[API] Error details: {e}")
            raise TransportError("Network Error") from e
        except requests.RequestException as e:
            logger.error(f"[API] Request error: {e}")
            raise TransportError(str(e)) from e

        if not response.ok:
            body = _read_error_body(response)
            detail = _extract_detail(body)
            logger.error(f"[API] Server error {response.status_code}: {detail}")
            raise ApiError(response.status_code, detail=detail, payload=body)

        logger.info(f"[API] Response {response.status_code} from {path}")
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(response.status_code, detail="Server returned an invalid response") from e

    def test_connection(self) -> bool:
        """Check that the server root answers. Never raises."""
        try:
            data = self._request("GET", "/")
            logger.info(f"[API] Connection test SUCCESS: {data}")
            return True
        except Exception as e:
            logger.error(f"[API] Connection test FAILED: {e}")
            return False

    def register(
        self,
        full_name: str,
        email: str,
        password: str,
        employee_id: str,
        designation: str,
        department: str,
        face_image: str,
        device_id: Optional[str],
    ) -> AuthResponse:
        data = self._request("POST", "/register", json={
            "full_name": full_name,
            "email": email,
            "password": password,
            "employee_id": employee_id,
            "designation": designation,
            "department": department,
            "face_image": face_image,
            "device_id": device_id,
        })
        return AuthResponse.model_validate(data)

    def login(self, email: str, password: str, device_id: Optional[str]) -> AuthResponse:
        data = self._request("POST", "/login", json={
            "email": email,
            "password": password,
            "device_id": device_id,
        })
        return AuthResponse.model_validate(data)

    def get_profile(self, token: str) -> UserProfile:
        data = self._request("GET", "/me", params={"token": token})
        return UserProfile.model_validate(data)

    def verify_presence(self, submission: AttendanceSubmission) -> AttendanceResponse:
        """Presence check without recording a check-in/check-out."""
        data = self._request("POST", "/verify-presence", json=submission.to_presence_payload())
        return AttendanceResponse.model_validate(data)

    def smart_attendance(self, submission: AttendanceSubmission) -> AttendanceResponse:
        """
        Submit a face capture for check-in or check-out.

        The server decides the recorded type; `intended_type` is a hint it
        validates against the user's current status.
        """
        data = self._request("POST", "/smart-attendance", json=submission.to_attendance_payload())
        return AttendanceResponse.model_validate(data)

    def update_face(self, submission: AttendanceSubmission, password: str) -> UpdateFaceResponse:
        """Re-enroll the user's face biometrics."""
        data = self._request(
            "POST", "/update-face", json=submission.to_update_face_payload(password)
        )
        return UpdateFaceResponse.model_validate(data)

    def get_attendance_logs(self, email: str) -> LogsResponse:
        data = self._request("GET", f"/logs/{quote(email, safe='@')}")
        return LogsResponse.model_validate(data)

    def get_analytics(self, email: str) -> AnalyticsSnapshot:
        data = self._request("GET", f"/analytics/{quote(email, safe='@')}")
        return AnalyticsSnapshot.model_validate(data)
