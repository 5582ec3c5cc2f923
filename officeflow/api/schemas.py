"""
Pydantic models for records owned by the attendance server.

Unknown fields are ignored so server-side additions do not break the client.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from officeflow.models import AttendanceType


class ServerModel(BaseModel):
    """Base class for server payloads."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class UserProfile(ServerModel):
    """Profile snapshot cached locally after login or registration."""
    full_name: Optional[str] = None
    email: Optional[str] = None
    employee_id: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    profile_image: Optional[str] = Field(default=None, description="Base64 face image")
    created_at: Optional[datetime] = None


class AuthResponse(ServerModel):
    """Response model for /login and /register."""
    access_token: Optional[str] = None
    user: Optional[UserProfile] = None


class AttendanceResponse(ServerModel):
    """Response model for /smart-attendance and /verify-presence."""
    type: Optional[str] = None
    user: Optional[str] = None
    wifi_quality: Optional[str] = None

    @property
    def is_check_in(self) -> bool:
        return self.type == AttendanceType.CHECK_IN.value


class UpdateFaceResponse(ServerModel):
    """Response model for /update-face."""
    message: str = "Face biometrics updated."


class AttendanceLogEntry(ServerModel):
    """One row of the attendance history. Never mutated by the client."""
    id: Optional[str] = Field(default=None, alias="_id")
    timestamp: Optional[str] = None
    type: Optional[str] = None
    distance_meters: Optional[float] = None
    address: Optional[str] = None
    # dBm reading, or a quality label such as "Excellent"
    wifi_quality: Optional[Union[float, str]] = None
    duration_hours: Optional[float] = None
    check_in_time: Optional[str] = None


class LogsResponse(ServerModel):
    """Response model for /logs/{email}."""
    logs: List[AttendanceLogEntry] = Field(default_factory=list)


class AnalyticsSnapshot(ServerModel):
    """
    Response model for /analytics/{email}.

    current_status drives which of check-in/check-out is actionable.
    """
    today_hours: float = 0.0
    week_total: float = 0.0
    daily_breakdown: Dict[str, float] = Field(default_factory=dict)
    current_status: AttendanceType = AttendanceType.CHECK_OUT
    office_wifi_ssid: Optional[str] = None

    @field_validator("current_status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> AttendanceType:
        """Anything but a check-in counts as checked out (e.g. no logs yet)."""
        if value in (AttendanceType.CHECK_IN, AttendanceType.CHECK_IN.value):
            return AttendanceType.CHECK_IN
        return AttendanceType.CHECK_OUT
