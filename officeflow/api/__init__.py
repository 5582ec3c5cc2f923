"""
HTTP client for the attendance verification server.
"""
from .client import AttendanceApiClient
from .config import get_api_config
from .schemas import (
    AnalyticsSnapshot,
    AttendanceLogEntry,
    AttendanceResponse,
    AuthResponse,
    LogsResponse,
    UpdateFaceResponse,
    UserProfile,
)

__all__ = [
    "AttendanceApiClient",
    "get_api_config",
    "AnalyticsSnapshot",
    "AttendanceLogEntry",
    "AttendanceResponse",
    "AuthResponse",
    "LogsResponse",
    "UpdateFaceResponse",
    "UserProfile",
]
