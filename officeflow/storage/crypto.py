"""
Sealing of secure store values with AES-256-GCM.

Every value is sealed under the store key with its item name as associated
data. A sealed value is kept on disk as a record of base64 text fields.
"""
import base64
import binascii
import logging
import random
import secrets
from dataclasses import dataclass
from typing import Dict

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
KEY_SIZE = 32


@dataclass(frozen=True)
class SealedValue:
    ciphertext: bytes
    nonce: bytes

    def to_record(self) -> Dict[str, str]:
        return {
            "ct": base64.b64encode(self.ciphertext).decode("ascii"),
            "nonce": base64.b64encode(self.nonce).decode("ascii"),
        }

    @classmethod
    def from_record(cls, record: Dict[str, str]) -> "SealedValue":
        """
        Raises:
            ValueError: If the record is missing a field or is not base64
        """
        try:
            return cls(
                ciphertext=base64.b64decode(record["ct"], validate=True),
                nonce=base64.b64decode(record["nonce"], validate=True),
            )
        except (KeyError, TypeError, binascii.Error) as e:
            raise ValueError(f"Malformed sealed record: {e}")


def generate_key() -> bytes:
    return AESGCM.generate_key(bit_length=KEY_SIZE * 8)


def _cipher(key: bytes) -> AESGCM:
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes for AES-256, got {len(key)} bytes")
    return AESGCM(key)


def seal(plaintext: str, key: bytes, item: str) -> SealedValue:
    """
    Encrypt a store value.

    Args:
        plaintext: Value to protect
        key: 32-byte store key
        item: Name the value is stored under; bound as associated data

    Returns:
        SealedValue with a fresh random nonce
    """
    nonce = secrets.token_bytes(NONCE_SIZE)
    ciphertext = _cipher(key).encrypt(nonce, plaintext.encode("utf-8"), item.encode("utf-8"))
    return SealedValue(ciphertext=ciphertext, nonce=nonce)


def unseal(sealed: SealedValue, key: bytes, item: str) -> str:
    """
    Decrypt a store value sealed by seal().

    Raises:
        ValueError: If the key or nonce has the wrong size
        cryptography.exceptions.InvalidTag: Wrong key, tampered data, or a
            value moved from another item
    """
    if len(sealed.nonce) != NONCE_SIZE:
        raise ValueError(f"Nonce must be {NONCE_SIZE} bytes, got {len(sealed.nonce)} bytes")
    plaintext = _cipher(key).decrypt(sealed.nonce, sealed.ciphertext, item.encode("utf-8"))
    return plaintext.decode("utf-8")


def obfuscate_credential(value: str) -> str:
    """
    Replace a credential held in memory with null bytes of random length
    (8 to 64), so neither the secret nor its length survives.
    """
    return "\x00" * random.randint(8, 64)


def is_obfuscated(value: str) -> bool:
    return bool(value) and set(value) == {"\x00"}
