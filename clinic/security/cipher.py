# clinic/security/cipher.py
"""
Field-level encryption for individual string values.

Tokens have the shape ``<ivHex>:<cipherHex>``: AES-256-CBC with PKCS7
padding and a fresh random 16-byte IV per call, so encrypting the same
value twice gives two different tokens.

Failures never propagate.  A value that cannot be encrypted is stored as
given, and a value that cannot be decrypted (legacy plaintext, a foreign
token, a wrong key) is returned unchanged.  Both cases are logged.
"""

from __future__ import annotations

import os
from typing import Any

import structlog
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

logger = structlog.get_logger(__name__)

#: AES-256 key size in bytes
KEY_SIZE: int = 32

#: CBC block / IV size in bytes
IV_SIZE: int = 16

TOKEN_SEPARATOR = ":"


def normalize_key(secret: str) -> bytes:
    """
    Pad (with ``"0"``) or truncate *secret* to :data:`KEY_SIZE` bytes.
    """
    raw = secret.encode("utf-8")
    return raw.ljust(KEY_SIZE, b"0")[:KEY_SIZE]


class FieldCipher:
    """Encrypts and decrypts single string fields with one fixed key."""

    def __init__(self, key: bytes):
        if len(key) != KEY_SIZE:
            raise ValueError(f"FieldCipher key must be {KEY_SIZE} bytes, got {len(key)}")
        self._key = key

    @classmethod
    def from_secret(cls, secret: str) -> "FieldCipher":
        return cls(normalize_key(secret))

    def _cipher(self, iv: bytes) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(iv))

    def encrypt_field(self, plaintext: Any) -> Any:
        """
        Encrypt *plaintext* into an ``ivHex:cipherHex`` token.

        Non-string and empty values are returned as they are.
        """
        if not plaintext or not isinstance(plaintext, str):
            return plaintext

        try:
            iv = os.urandom(IV_SIZE)
            padder = padding.PKCS7(algorithms.AES.block_size).padder()
            padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
            encryptor = self._cipher(iv).encryptor()
            ct = encryptor.update(padded) + encryptor.finalize()
        except Exception as exc:
            logger.error("field_encrypt_failed", error=str(exc))
            return plaintext

        return f"{iv.hex()}{TOKEN_SEPARATOR}{ct.hex()}"

    def decrypt_field(self, token: Any) -> Any:
        """
        Decrypt an ``ivHex:cipherHex`` token.

        Anything that is not such a token, or does not decrypt cleanly,
        comes back unchanged.
        """
        if not token or not isinstance(token, str):
            return token

        parts = token.split(TOKEN_SEPARATOR)
        if len(parts) != 2:
            # plaintext from before encryption was switched on
            return token

        try:
            iv = bytes.fromhex(parts[0])
            ct = bytes.fromhex(parts[1])
            decryptor = self._cipher(iv).decryptor()
            padded = decryptor.update(ct) + decryptor.finalize()
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            data = unpadder.update(padded) + unpadder.finalize()
            return data.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            logger.warning("field_decrypt_failed", error=str(exc))
            return token
