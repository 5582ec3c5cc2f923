"""
Data models for the attendance capture workflow.

These are dataclass models owned by the client: live device context,
the one-shot attendance submission and the outcome of a capture attempt.

For records owned by the server (profile, logs, analytics), see
officeflow.api.schemas.
"""
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

# Wire defaults used when the OS reports no WiFi details
DEFAULT_WIFI_STRENGTH = -50
UNKNOWN_WIFI_STRENGTH = -100


class AttendanceType(str, enum.Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    UPDATE_FACE = "update-face"


class LocationAccuracy(str, enum.Enum):
    BALANCED = "balanced"
    HIGH = "high"
    BEST_FOR_NAVIGATION = "best_for_navigation"


@dataclass(frozen=True)
class LocationReading:
    """A single GPS fix as reported by the OS."""
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    mocked: bool = False
    timestamp: Optional[datetime] = None

    @property
    def is_null_fix(self) -> bool:
        """(0, 0) is what the platform hands back when it has no fix."""
        return self.latitude == 0 and self.longitude == 0


@dataclass(frozen=True)
class WifiState:
    """Current WiFi association of the device."""
    connected: bool = False
    ssid: str = ""
    bssid: str = ""
    strength: int = DEFAULT_WIFI_STRENGTH


@dataclass(frozen=True)
class GeocodedPlace:
    """One reverse-geocoding candidate."""
    name: Optional[str] = None
    street: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None


@dataclass
class AttendanceSubmission:
    """
    Everything sent to the server for one capture.

    Built fresh for every attempt and discarded after the request.
    """
    email: str
    face_image: str
    latitude: float
    longitude: float
    intended_type: AttendanceType
    device_id: Optional[str] = None
    wifi_bssid: str = ""
    wifi_ssid: str = ""
    wifi_strength: Optional[int] = None
    address: Optional[str] = None

    def _wifi_fields(self) -> Dict[str, Any]:
        return {
            "wifi_bssid": self.wifi_bssid or "",
            "wifi_ssid": self.wifi_ssid or "",
            "wifi_strength": self.wifi_strength or DEFAULT_WIFI_STRENGTH,
        }

    def to_attendance_payload(self) -> Dict[str, Any]:
        """Body for /smart-attendance."""
        payload = {
            "email": self.email,
            "image": self.face_image,
            "lat": self.latitude,
            "long": self.longitude,
            "address": self.address,
            "intended_type": self.intended_type.value,
            "device_id": self.device_id,
        }
        payload.update(self._wifi_fields())
        return payload

    def to_presence_payload(self) -> Dict[str, Any]:
        """Body for /verify-presence."""
        payload = {
            "email": self.email,
            "image": self.face_image,
            "lat": self.latitude,
            "long": self.longitude,
            "device_id": self.device_id,
        }
        payload.update(self._wifi_fields())
        return payload

    def to_update_face_payload(self, password: str) -> Dict[str, Any]:
        """Body for /update-face; the password re-confirms the identity."""
        payload = {
            "email": self.email,
            "password": password,
            "face_image": self.face_image,
            "lat": self.latitude,
            "long": self.longitude,
            "device_id": self.device_id,
        }
        payload.update(self._wifi_fields())
        return payload


class OutcomeStatus(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    # Refused locally, nothing was sent
    REJECTED = "rejected"


@dataclass
class CaptureOutcome:
    """
    Result of one capture-and-submit attempt.

    Emitted exactly once per attempt by the capture orchestrator.
    """
    status: OutcomeStatus
    title: str
    message: str
    intended_type: AttendanceType
    result: Optional[Any] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def success(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS
