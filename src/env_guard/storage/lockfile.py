"""Encrypted secret store kept in a single JSON file in the project root."""

import json
import os
from pathlib import Path
from typing import Optional

from env_guard.audit import get_logger
from env_guard.config import LOCK_FILE, ProjectContext
from env_guard.crypto import EncryptionError, decrypt, derive_key, encrypt
from env_guard.security import create_exclusive, replace_atomic

from .base import (
    AlreadyExistsError,
    CorruptStoreError,
    DecryptionFailureError,
    StoreDocument,
    StoreError,
)

logger = get_logger(__name__)


def _serialize(entries: dict[str, str]) -> str:
    return json.dumps(entries, indent=2, ensure_ascii=False)


class SecretStore:
    """Secrets of one project, encrypted with a key bound to user and path.

    Each value is encrypted on its own; names are stored in clear so they
    can be listed without deriving the key.
    """

    def __init__(
        self,
        context: Optional[ProjectContext] = None,
        filename: str = LOCK_FILE,
    ):
        """Initialize the store.

        Args:
            context: Identity context. Read from the environment if None.
            filename: Store file name inside the project root.
        """
        if context is None:
            context = ProjectContext.from_environment()
        self.context = context
        self.project_root = context.working_directory
        self.path = Path(os.path.abspath(os.path.join(self.project_root, filename)))

    def _read_document(self) -> Optional[StoreDocument]:
        """Read and parse the store file, or None if it is missing."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptStoreError(
                f"Invalid JSON in {self.path.name}. File may be corrupted ({e.reason})."
            ) from e
        return StoreDocument.parse(text, self.path.name)

    def _derive_key(self) -> bytes:
        return derive_key(self.project_root, self.context)

    def exists(self) -> bool:
        """Check whether the store file is present."""
        return os.path.exists(self.path)

    def initialize(self) -> None:
        """Create an empty store file.

        Raises:
            AlreadyExistsError: If the store file is already present.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            create_exclusive(self.path, _serialize({}))
        except FileExistsError as e:
            raise AlreadyExistsError(f"{self.path.name} already exists.") from e
        logger.info("store_initialized", path=str(self.path))

    def save(self, name: str, value: str) -> None:
        """Encrypt ``value`` and store it under ``name``.

        Works without a prior :meth:`initialize`. An unparsable store file is
        replaced by a new store holding only this entry.

        Args:
            name: Secret name, used verbatim.
            value: Plaintext value.

        Raises:
            StoreError: If ``name`` cannot be encoded as UTF-8.
            EncryptionError: If ``value`` cannot be encoded as UTF-8.
        """
        try:
            name.encode("utf-8")
        except UnicodeEncodeError as e:
            raise StoreError("Secret name is not valid UTF-8") from e

        key = self._derive_key()

        try:
            document = self._read_document()
        except CorruptStoreError:
            logger.warning("corrupt_store_reset", path=str(self.path))
            document = None

        entries = dict(document.root) if document is not None else {}
        replaced = name in entries
        entries[name] = encrypt(value, key)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        replace_atomic(self.path, _serialize(entries))
        logger.info("secret_saved", name=name, replaced=replaced, count=len(entries))

    def load_all(self) -> dict[str, str]:
        """Decrypt every stored secret.

        Returns:
            Mapping of secret name to plaintext. Empty if the file is missing.

        Raises:
            CorruptStoreError: If the store file cannot be parsed.
            DecryptionFailureError: If any value fails to decrypt. Nothing is
                returned in that case.
        """
        document = self._read_document()
        if document is None or not document.root:
            return {}

        key = self._derive_key()
        secrets: dict[str, str] = {}
        for name, encrypted in document.root.items():
            try:
                secrets[name] = decrypt(encrypted, key)
            except EncryptionError as e:
                raise DecryptionFailureError(name, str(e)) from e

        logger.debug("secrets_loaded", count=len(secrets))
        return secrets

    def list_names(self) -> list[str]:
        """List stored secret names in sorted order without decrypting.

        Raises:
            CorruptStoreError: If the store file cannot be parsed.
        """
        document = self._read_document()
        if document is None:
            return []
        return document.names()
