"""Encrypted secret storage."""

from .base import (
    AlreadyExistsError,
    CorruptStoreError,
    DecryptionFailureError,
    StoreDocument,
    StoreError,
)
from .lockfile import SecretStore

__all__ = [
    "SecretStore",
    "StoreDocument",
    "StoreError",
    "AlreadyExistsError",
    "CorruptStoreError",
    "DecryptionFailureError",
]
