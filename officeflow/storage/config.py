"""
Secure store configuration: where the encrypted file lives and which key opens it.
"""
import base64
import binascii
import os
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

STORE_FILENAME = "secure_store.json"
KEY_FILENAME = "store.key"


def _data_dir() -> Path:
    from officeflow.config import DEFAULT_DATA_DIR
    return Path(os.getenv("OFFICEFLOW_DATA_DIR", str(DEFAULT_DATA_DIR)))


def decode_key(encoded: str) -> bytes:
    """
    Decode a urlsafe-base64 storage key.

    Raises:
        ValueError: If the value is not valid base64 or not 32 bytes
    """
    try:
        key = base64.urlsafe_b64decode(encoded.strip().encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"OFFICEFLOW_STORAGE_KEY is not valid base64: {e}")
    if len(key) != 32:
        raise ValueError(f"OFFICEFLOW_STORAGE_KEY must decode to 32 bytes, got {len(key)}")
    return key


def get_storage_config() -> Dict[str, Any]:
    """
    Get secure store configuration from environment variables.

    OFFICEFLOW_STORAGE_KEY (urlsafe base64, 32 bytes) takes precedence over
    the key file; without either, a key file is created on first use.

    Returns:
        Dictionary with store path, key file path and optional inline key
    """
    data_dir = _data_dir()
    store_path = Path(os.getenv("OFFICEFLOW_STORAGE_PATH", str(data_dir / STORE_FILENAME)))
    key_file = Path(os.getenv("OFFICEFLOW_STORAGE_KEY_FILE", str(data_dir / KEY_FILENAME)))

    inline_key: Optional[bytes] = None
    encoded = os.getenv("OFFICEFLOW_STORAGE_KEY")
    if encoded:
        inline_key = decode_key(encoded)

    return {
        "store_path": store_path,
        "key_file": key_file,
        "key": inline_key,
    }
