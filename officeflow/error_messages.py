"""
Centralized error mapping.

Hides raw backend and transport messages from the user and replaces them
with friendly, actionable feedback. Classification is data-driven: an
ordered table of (patterns -> message) rules, first match wins.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from officeflow.errors import ApiError

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Something went wrong"

GPS_SPOOFING_MESSAGE = (
    "You seem to be outside the office premises or using a mock location. "
    "Please use your real GPS."
)
OFFICE_WIFI_MESSAGE = "Please connect to the official office WiFi to verify you are in the office."
FACE_NOT_RECOGNIZED_MESSAGE = (
    "Face not recognized. Please ensure you are in a well-lit area and looking "
    "directly at the camera."
)
DEVICE_MISMATCH_MESSAGE = "Security Alert: Attendance must be marked from your registered device."
WEAK_SIGNAL_MESSAGE = "WiFi signal is too weak. Please move closer to the router for verification."
BAD_CREDENTIALS_MESSAGE = "Incorrect email or password. Please try again."
UNKNOWN_USER_MESSAGE = "No account found with this email. Please register first."
DUPLICATE_ACCOUNT_MESSAGE = "An account with this email/ID already exists."
SERVER_BUSY_MESSAGE = "Our servers are currently busy. Please try again in 1 minute."
CONNECTION_FAILED_MESSAGE = "Connection failed. Please check if your Internet or WiFi is active."
REQUEST_TIMEOUT_MESSAGE = "The request took too long. Please check your signal strength."

# Longer unmatched details are assumed to be internal noise
PASSTHROUGH_MAX_LENGTH = 100
UNSAFE_DETAIL_MARKERS = ("error code", "exception", "traceback")


@dataclass(frozen=True)
class ErrorRule:
    """A message shown when any of the patterns occurs in the detail."""
    patterns: Tuple[str, ...]
    message: str

    def matches(self, detail_lower: str) -> bool:
        return any(pattern in detail_lower for pattern in self.patterns)


# Order matters: spoofing is reported as such even when other phrases appear.
ERROR_RULES: Tuple[ErrorRule, ...] = (
    ErrorRule(("mock location",), GPS_SPOOFING_MESSAGE),
    ErrorRule(("bssid mismatch", "office wifi"), OFFICE_WIFI_MESSAGE),
    ErrorRule(("location verification failed", "too far"), GPS_SPOOFING_MESSAGE),
    ErrorRule(("face not recognized", "no face detected"), FACE_NOT_RECOGNIZED_MESSAGE),
    ErrorRule(
        ("hardware id mismatch", "device_id", "bound to a different device"),
        DEVICE_MISMATCH_MESSAGE,
    ),
    ErrorRule(("signal too weak",), WEAK_SIGNAL_MESSAGE),
    ErrorRule(("invalid credentials", "incorrect password"), BAD_CREDENTIALS_MESSAGE),
    ErrorRule(("user not found",), UNKNOWN_USER_MESSAGE),
    ErrorRule(("already exists",), DUPLICATE_ACCOUNT_MESSAGE),
    ErrorRule(("database", "server error"), SERVER_BUSY_MESSAGE),
)


def _extract_detail(error: Any) -> Any:
    """Find the server-supplied detail, if the error carries one."""
    if error is None:
        return None
    if isinstance(error, str):
        return error
    if isinstance(error, ApiError):
        return error.detail
    # requests.HTTPError and friends expose the raw response
    response = getattr(error, "response", None)
    if response is not None:
        try:
            body = response.json()
        except Exception:
            return None
        if isinstance(body, dict):
            return body.get("detail")
    return None


def _extract_message(error: Any) -> Optional[str]:
    if error is None or isinstance(error, str):
        return None
    message = getattr(error, "message", None)
    if isinstance(message, str):
        return message
    return str(error)


def classify_detail(detail: str) -> Optional[str]:
    """
    Match a server detail string against the rule table.

    Returns:
        The mapped message, or None if no rule matches
    """
    detail_lower = detail.lower()
    for rule in ERROR_RULES:
        if rule.matches(detail_lower):
            return rule.message
    return None


def _looks_safe(detail: str) -> bool:
    detail_lower = detail.lower()
    return (
        len(detail) < PASSTHROUGH_MAX_LENGTH
        and not any(marker in detail_lower for marker in UNSAFE_DETAIL_MARKERS)
    )


def _map_error(error: Any, default_message: str) -> str:
    detail = _extract_detail(error)
    message = _extract_message(error)
    logger.debug(f"[Error Mapping] Raw detail: {detail!r} Raw message: {message!r}")

    if detail:
        detail_str = str(detail)
        mapped = classify_detail(detail_str)
        if mapped:
            return mapped
        # Structured details (validation lists etc.) are never shown verbatim
        if isinstance(detail, str) and detail.strip() and _looks_safe(detail):
            return detail

    if message == "Network Error":
        return CONNECTION_FAILED_MESSAGE
    if message and "timeout" in message.lower():
        return REQUEST_TIMEOUT_MESSAGE

    return default_message


def get_friendly_error_message(error: Any, default_message: str = FALLBACK_MESSAGE) -> str:
    """
    Map any failure to a user-facing message.

    Args:
        error: A detail string, an ApiError/TransportError, any exception or None
        default_message: Returned when nothing more specific applies

    Returns:
        A non-empty user-facing message. Never raises.
    """
    fallback = default_message or FALLBACK_MESSAGE
    try:
        return _map_error(error, fallback) or fallback
    except Exception as e:
        logger.warning(f"Error mapping failed for {type(error).__name__}: {e}")
        return fallback
