"""
Utility functions for the OfficeFlow client.
"""
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from officeflow.models import CaptureOutcome, GeocodedPlace

UNKNOWN_ADDRESS = "Verified Office Zone"
LOCATING_ADDRESS = "Locating..."

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log levels."""
    COLORS = {
        "DEBUG": "\033[94m",      # Blue
        "INFO": "\033[92m",       # Green
        "WARNING": "\033[93m",    # Yellow
        "ERROR": "\033[91m",      # Red
        "CRITICAL": "\033[91m",   # Red
        "RESET": "\033[0m",
    }

    def format(self, record):
        log_message = super().format(record)
        if getattr(record, 'no_color', False):
            return log_message
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        return f"{color}{log_message}{self.COLORS['RESET']}"


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Set up logging configuration with colored console output.

    Args:
        verbose: If True, set log level to DEBUG
        log_file: Optional path to a log file (plain, uncolored)
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(ColoredFormatter(LOG_FORMAT))
    handlers = [stream_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.insert(0, file_handler)

    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=handlers, force=True)

    # urllib3 logs every connection at DEBUG
    if not verbose:
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def wifi_strength_label(strength: Optional[int]) -> str:
    """
    Describe a WiFi signal strength in dBm.

    Examples:
        -45 -> "Excellent", -65 -> "Fair", None -> "Unknown"
    """
    if strength is None:
        return "Unknown"
    if strength >= -50:
        return "Excellent"
    if strength >= -60:
        return "Good"
    if strength >= -70:
        return "Fair"
    return "Weak"


def format_address(places: Iterable["GeocodedPlace"]) -> str:
    """
    Build a short readable address from reverse-geocoding candidates.

    Uses the first candidate: the place name (unless it just repeats the
    street), the street and the district, falling back to the city.

    Returns:
        The address, or "Verified Office Zone" when nothing usable was found
    """
    place = next(iter(places), None)
    if place is None:
        return UNKNOWN_ADDRESS

    name = place.name or ""
    street = place.street or ""
    area = place.district or place.city or ""

    prefix = name if name != street else ""
    address = f"{prefix} {street}, {area}".strip()
    address = address.lstrip(",").strip()
    address = address.rstrip(",").strip()
    return address or UNKNOWN_ADDRESS


def format_result_message(outcome: "CaptureOutcome") -> str:
    """
    Format a capture outcome into a one-line log/CLI message.

    Args:
        outcome: The CaptureOutcome object

    Returns:
        Formatted message string
    """
    status = outcome.status.value.upper()
    timestamp = outcome.timestamp.strftime("%Y-%m-%d %H:%M:%S")

    message = f"[{status}] {outcome.intended_type.value} - {timestamp}: {outcome.title}"

    if outcome.message:
        message += f" - {outcome.message}"

    if outcome.error and outcome.error != outcome.message:
        message += f" (Error: {outcome.error})"

    return message


def mask_email(email: Optional[str]) -> str:
    """
    Shorten an email for log output.

    Examples:
        "jane.doe@corp.com" -> "ja***@corp.com"
    """
    if not email:
        return "<none>"
    local, _, domain = email.partition("@")
    visible = local[:2]
    return f"{visible}***@{domain}" if domain else f"{visible}***"
