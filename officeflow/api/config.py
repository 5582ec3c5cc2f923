"""
Remote API configuration.
"""
import os
from typing import Dict, Any
import logging

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Face processing on the server is slow; keep this generous
DEFAULT_TIMEOUT_SECONDS = 30


def get_api_config() -> Dict[str, Any]:
    """
    Get API client configuration settings.

    Returns:
        Dictionary with API configuration
    """
    base_url = os.getenv("OFFICEFLOW_API_URL", "http://localhost:8001").rstrip("/")
    timeout = float(os.getenv("OFFICEFLOW_API_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS)))
    if timeout <= 0:
        raise ValueError("OFFICEFLOW_API_TIMEOUT must be positive")

    return {
        "base_url": base_url,
        "timeout": timeout,
    }
