"""Authenticated encryption of individual secret values."""

import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import BaseModel, ConfigDict

from env_guard.audit import get_logger
from env_guard.config import FIELD_SEPARATOR, IV_LENGTH, KEY_LENGTH, TAG_LENGTH

logger = get_logger(__name__)


class EncryptionError(Exception):
    """Base exception for encryption operations."""


class MalformedValueError(EncryptionError):
    """An encrypted value does not follow the ``iv:tag:ciphertext`` format."""


class AuthenticationFailureError(EncryptionError):
    """The authentication tag did not verify.

    Raised both for tampered data and for a wrong key; the two cases are
    not told apart.
    """


class EncryptedValue(BaseModel):
    """An AES-256-GCM ciphertext with its IV and tag."""

    model_config = ConfigDict(frozen=True)

    iv: bytes
    tag: bytes
    ciphertext: bytes

    @classmethod
    def parse(cls, text: str) -> "EncryptedValue":
        """Parse the hex ``iv:tag:ciphertext`` form.

        Raises:
            MalformedValueError: If the field count, hex encoding or
                IV/tag lengths are wrong.
        """
        parts = text.split(FIELD_SEPARATOR)
        if len(parts) != 3:
            raise MalformedValueError("Invalid encrypted value format")

        try:
            iv, tag, ciphertext = (binascii.unhexlify(part) for part in parts)
        except (binascii.Error, ValueError) as e:
            raise MalformedValueError("Invalid hex encoding in encrypted value") from e

        if len(iv) != IV_LENGTH or len(tag) != TAG_LENGTH:
            raise MalformedValueError("Invalid IV or tag length")

        return cls(iv=iv, tag=tag, ciphertext=ciphertext)

    def serialize(self) -> str:
        """Render as lower-case hex fields joined by the separator."""
        return FIELD_SEPARATOR.join(
            binascii.hexlify(field).decode("ascii")
            for field in (self.iv, self.tag, self.ciphertext)
        )

    def __str__(self) -> str:
        return self.serialize()


def _cipher(key: bytes) -> AESGCM:
    if len(key) != KEY_LENGTH:
        raise EncryptionError(f"Key must be {KEY_LENGTH} bytes, got {len(key)}")
    return AESGCM(key)


def encrypt(plaintext: str, key: bytes) -> str:
    """Encrypt a string using AES-256-GCM.

    A fresh random IV is drawn for every call, so encrypting the same
    plaintext twice gives different results.

    Args:
        plaintext: The string to encrypt. May be empty.
        key: 32-byte encryption key.

    Returns:
        The encrypted value as ``hex(iv):hex(tag):hex(ciphertext)``.

    Raises:
        EncryptionError: If the key has the wrong length or the plaintext
            cannot be encoded as UTF-8 (lone surrogates).
    """
    aesgcm = _cipher(key)
    iv = os.urandom(IV_LENGTH)

    try:
        data = plaintext.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncryptionError("Value is not valid UTF-8") from e
    sealed = aesgcm.encrypt(iv, data, None)

    # AESGCM appends the tag to the ciphertext
    value = EncryptedValue(
        iv=iv,
        tag=sealed[-TAG_LENGTH:],
        ciphertext=sealed[:-TAG_LENGTH],
    )
    logger.debug("encrypted_value", data_size=len(data))
    return value.serialize()


def decrypt(value: str, key: bytes) -> str:
    """Decrypt a value produced by :func:`encrypt`.

    Args:
        value: The ``iv:tag:ciphertext`` string.
        key: 32-byte encryption key.

    Returns:
        The original plaintext.

    Raises:
        MalformedValueError: If ``value`` is not a well-formed encrypted value.
        AuthenticationFailureError: If the data was altered or the key is wrong.
        EncryptionError: If the key has the wrong length.
    """
    aesgcm = _cipher(key)
    parsed = EncryptedValue.parse(value)

    try:
        data = aesgcm.decrypt(parsed.iv, parsed.ciphertext + parsed.tag, None)
    except InvalidTag as e:
        raise AuthenticationFailureError("Authentication failed") from e

    try:
        plaintext = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedValueError("Decrypted value is not valid UTF-8") from e

    logger.debug("decrypted_value", data_size=len(data))
    return plaintext
