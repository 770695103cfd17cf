"""
Field-level encryption for personal data stored at rest.

Two independent keys are derived from two operator secrets:
  * the encryption key feeds AES-256-GCM (reversible, authenticated)
  * the index key feeds HMAC-SHA256 (deterministic, equality lookups only)

Encrypted values are serialized as base64(nonce || tag || ciphertext).
"""

import base64
import hashlib
import hmac
import logging
import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
TAG_SIZE = 16


def derive_key(secret: str) -> bytes:
    """SHA-256 digest of the raw secret (32 bytes, the AES-256 key size)."""
    return hashlib.sha256(str(secret).encode("utf-8")).digest()


def normalize(value: str) -> str:
    return str(value).strip().lower()


def encrypt_value(plain: Optional[str], key: bytes) -> Optional[str]:
    if plain is None:
        return None
    nonce = os.urandom(NONCE_SIZE)
    sealed = AESGCM(key).encrypt(nonce, str(plain).encode("utf-8"), None)
    # AESGCM appends the tag; store it ahead of the ciphertext
    ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
    return base64.b64encode(nonce + tag + ciphertext).decode("ascii")


def decrypt_value(token: Optional[str], key: bytes) -> Optional[str]:
    """Return the plaintext, or None when the token is empty, malformed or tampered."""
    if not token:
        return None
    try:
        raw = base64.b64decode(token, validate=True)
    except ValueError:
        return None
    if len(raw) < NONCE_SIZE + TAG_SIZE:
        return None

    nonce = raw[:NONCE_SIZE]
    tag = raw[NONCE_SIZE:NONCE_SIZE + TAG_SIZE]
    ciphertext = raw[NONCE_SIZE + TAG_SIZE:]
    try:
        plain = AESGCM(key).decrypt(nonce, ciphertext + tag, None)
        return plain.decode("utf-8")
    except (InvalidTag, UnicodeDecodeError):
        return None


def hmac_index(value: str, key: bytes) -> str:
    return hmac.new(key, normalize(value).encode("utf-8"), hashlib.sha256).hexdigest()


class FieldCipher:
    """Holds the derived keys used to protect user email addresses."""

    def __init__(self, encryption_secret: str, index_secret: str):
        self._enc_key = derive_key(encryption_secret)
        self._index_key = derive_key(index_secret)

    @classmethod
    def from_settings(cls, settings) -> "FieldCipher":
        return cls(settings.ENCRYPTION_KEY, settings.HMAC_KEY)

    def encrypt(self, value: Optional[str]) -> Optional[str]:
        return encrypt_value(value, self._enc_key)

    def decrypt(self, token: Optional[str], row_id: int | None = None) -> Optional[str]:
        value = decrypt_value(token, self._enc_key)
        if value is None and token:
            logger.warning(f"Could not decrypt stored value (row id={row_id})")
        return value

    def index(self, value: str) -> str:
        return hmac_index(value, self._index_key)
