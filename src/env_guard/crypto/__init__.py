"""Cryptographic primitives for the secret store."""

from .encryption import (
    AuthenticationFailureError,
    EncryptedValue,
    EncryptionError,
    MalformedValueError,
    decrypt,
    encrypt,
)
from .keys import build_salt_input, canonicalize_path, derive_key

__all__ = [
    # Encryption
    "encrypt",
    "decrypt",
    "EncryptedValue",
    "EncryptionError",
    "MalformedValueError",
    "AuthenticationFailureError",
    # Key derivation
    "derive_key",
    "build_salt_input",
    "canonicalize_path",
]
