"""
Base/shared configuration management for the OfficeFlow client.

Configuration is read from environment variables (a .env file is loaded when
present) once at startup and handed to the components that need it.
"""
import os
from pathlib import Path
from typing import Dict, Any
import logging

from dotenv import load_dotenv

load_dotenv()  # Load .env file if it exists

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".officeflow"


def _get_float(name: str, default: str) -> float:
    """Read a float environment variable, failing loudly on garbage."""
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def get_app_config() -> Dict[str, Any]:
    """
    Get application configuration settings.

    Returns:
        Dictionary with application configuration
    """
    data_dir = Path(os.getenv("OFFICEFLOW_DATA_DIR", str(DEFAULT_DATA_DIR)))
    return {
        "data_dir": data_dir,
        # Empty string means "no office network restriction"
        "office_ssid": os.getenv("OFFICEFLOW_OFFICE_SSID", "").strip(),
        "device_id": os.getenv("OFFICEFLOW_DEVICE_ID") or None,
        "log_file": os.getenv("OFFICEFLOW_LOG_FILE") or None,
        "verbose": os.getenv("OFFICEFLOW_VERBOSE", "false").lower() == "true",
    }


def get_capture_config() -> Dict[str, Any]:
    """
    Get timing settings for the attendance scan screen.

    All values are in seconds except the liveness increment.

    Returns:
        Dictionary with capture timing configuration
    """
    return {
        "liveness_increment": _get_float("OFFICEFLOW_LIVENESS_INCREMENT", "0.05"),
        "liveness_interval": _get_float("OFFICEFLOW_LIVENESS_INTERVAL", "0.1"),
        "settle_delay": _get_float("OFFICEFLOW_CAPTURE_SETTLE_DELAY", "0.8"),
        "location_poll_interval": _get_float("OFFICEFLOW_LOCATION_POLL_INTERVAL", "5"),
        "wifi_poll_interval": _get_float("OFFICEFLOW_WIFI_POLL_INTERVAL", "2"),
        "result_alert_delay": _get_float("OFFICEFLOW_RESULT_ALERT_DELAY", "0.5"),
    }


def validate_config() -> bool:
    """
    Validate that required configuration exists.

    Returns:
        True if configuration is valid

    Raises:
        ValueError: If configuration is invalid
    """
    try:
        from officeflow.api.config import get_api_config
        from officeflow.storage.config import get_storage_config

        api_config = get_api_config()
        storage_config = get_storage_config()
        app_config = get_app_config()
        capture_config = get_capture_config()

        if capture_config["liveness_increment"] <= 0 or capture_config["liveness_increment"] > 1:
            raise ValueError("OFFICEFLOW_LIVENESS_INCREMENT must be in (0, 1]")
        for key in ("liveness_interval", "location_poll_interval", "wifi_poll_interval"):
            if capture_config[key] <= 0:
                raise ValueError(f"Capture setting {key} must be positive")

        logger.info("Configuration validated successfully")
        logger.info(f"API base URL: {api_config['base_url']}")
        logger.info(f"Secure store: {storage_config['store_path']}")
        logger.info(f"Office SSID: {app_config['office_ssid'] or '(no restriction)'}")

        return True
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise
