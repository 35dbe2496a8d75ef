"""PII protection — deterministic lookup hashes, AES-GCM field encryption, password hashing.

Every PII field (email, full name, phone) is stored twice: once as a
lowercased SHA-256 hex digest used for equality lookups, and once as
authenticated ciphertext that is only decrypted when a row is read back.
"""

import hashlib
import os
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from passlib.context import CryptContext

from app.core.exceptions import DecryptionError, InvalidKeyError

NONCE_LEN = 12
VALID_KEY_LENGTHS = (16, 24, 32)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # malformed stored hash
        return False


def hash_value(value: Optional[str]) -> str:
    """Lookup hash for a PII value. Empty input maps to the empty sentinel."""
    if not value:
        return ""
    return hashlib.sha256(value.lower().encode("utf-8")).hexdigest()


class FieldCipher:
    """AES-GCM cipher for PII columns. Output layout is nonce || ciphertext || tag."""

    def __init__(self, key: Union[str, bytes]):
        key_bytes = key.encode("utf-8") if isinstance(key, str) else bytes(key)
        if len(key_bytes) not in VALID_KEY_LENGTHS:
            raise InvalidKeyError(
                f"encryption key must be 16, 24 or 32 bytes, got {len(key_bytes)}"
            )
        self._aead = AESGCM(key_bytes)

    def encrypt(self, plaintext: Optional[str]) -> Optional[bytes]:
        if not plaintext:
            return None
        nonce = os.urandom(NONCE_LEN)
        return nonce + self._aead.encrypt(nonce, plaintext.encode("utf-8"), None)

    def decrypt(self, ciphertext: Optional[bytes]) -> str:
        if not ciphertext:
            return ""
        if len(ciphertext) < NONCE_LEN:
            raise DecryptionError("invalid ciphertext")

        nonce, sealed = ciphertext[:NONCE_LEN], ciphertext[NONCE_LEN:]
        try:
            plaintext = self._aead.decrypt(nonce, sealed, None)
        except InvalidTag as exc:
            raise DecryptionError("authentication tag mismatch") from exc

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("plaintext is not valid utf-8") from exc
