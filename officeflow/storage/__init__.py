"""
Secure on-device storage for session credentials.
"""
from .config import get_storage_config
from .secure_store import SecureStore, load_or_create_key
from .crypto import is_obfuscated, obfuscate_credential

__all__ = [
    "SecureStore",
    "get_storage_config",
    "load_or_create_key",
    "is_obfuscated",
    "obfuscate_credential",
]
