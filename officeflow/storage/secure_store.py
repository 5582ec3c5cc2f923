"""
Encrypted on-device key-value store.

Each value is sealed with AES-GCM using the item key as associated data, so a
ciphertext cannot be moved to another key. The file is rewritten atomically
and readable by the owner only.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from cryptography.exceptions import InvalidTag

from officeflow.errors import StorageError
from .crypto import SealedValue, generate_key, seal, unseal

logger = logging.getLogger(__name__)


def load_or_create_key(key_file: Path) -> bytes:
    """
    Read the store key from disk, creating it on first use.

    Args:
        key_file: Path of the raw 32-byte key file

    Returns:
        The key bytes
    """
    if key_file.exists():
        key = key_file.read_bytes()
        if len(key) != 32:
            raise StorageError(f"Key file {key_file} is corrupt ({len(key)} bytes)")
        return key

    key_file.parent.mkdir(parents=True, exist_ok=True)
    key = generate_key()
    fd = os.open(str(key_file), os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(key)
    logger.info(f"Created new secure store key at {key_file}")
    return key


class SecureStore:
    """
    String key-value store with encrypted values.

    With `path=None` the store lives in memory only, which is what tests use.
    """

    def __init__(self, key: bytes, path: Optional[Path] = None):
        self._key = key
        self.path = Path(path) if path else None
        self._items: Dict[str, Dict[str, str]] = self._load()

    @classmethod
    def from_config(cls, config: Dict) -> "SecureStore":
        key = config.get("key") or load_or_create_key(Path(config["key_file"]))
        return cls(key=key, path=config["store_path"])

    def _load(self) -> Dict[str, Dict[str, str]]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read secure store {self.path}: {e}")
        if not isinstance(data, dict):
            raise StorageError(f"Secure store {self.path} has an unexpected format")
        return data

    def _commit(self, items: Dict[str, Dict[str, str]]) -> None:
        """Write items to disk, then make them the in-memory state."""
        if self.path is not None:
            self._write(items)
        self._items = items

    def _write(self, items: Dict[str, Dict[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".store-")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(items, f)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            raise StorageError(f"Cannot write secure store {self.path}: {e}")

    def get_item(self, key: str) -> Optional[str]:
        """
        Return the decrypted value stored under key, or None.

        Raises:
            StorageError: If the stored value cannot be decrypted
        """
        item = self._items.get(key)
        if item is None:
            return None
        try:
            return unseal(SealedValue.from_record(item), self._key, key)
        except (InvalidTag, ValueError) as e:
            raise StorageError(f"Stored value for {key!r} cannot be decrypted", key=key) from e

    def set_item(self, key: str, value: str) -> None:
        items = dict(self._items)
        items[key] = seal(value, self._key, key).to_record()
        self._commit(items)

    def delete_item(self, key: str) -> None:
        """Remove key; missing keys are ignored."""
        if key not in self._items:
            return
        items = dict(self._items)
        del items[key]
        self._commit(items)

    def has_item(self, key: str) -> bool:
        return key in self._items

    def keys(self):
        return list(self._items.keys())
