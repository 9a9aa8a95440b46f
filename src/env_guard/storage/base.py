"""Errors and document model for the encrypted store file."""

from typing import Dict

from pydantic import RootModel, ValidationError

from env_guard.audit import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """Base exception for secret store operations."""


class AlreadyExistsError(StoreError):
    """Exception raised when initializing over an existing store file."""


class CorruptStoreError(StoreError):
    """Exception raised when the store file cannot be parsed."""


class DecryptionFailureError(StoreError):
    """Exception raised when a stored value cannot be decrypted.

    Attributes:
        name: The secret whose value failed to decrypt.
    """

    def __init__(self, name: str, reason: str):
        super().__init__(f'Failed to decrypt key "{name}": {reason}')
        self.name = name


class StoreDocument(RootModel[Dict[str, str]]):
    """Top-level structure of the store file: secret name to encrypted value."""

    @classmethod
    def parse(cls, text: str, source: str) -> "StoreDocument":
        """Validate store file text.

        Args:
            text: Raw file content.
            source: File name used in error messages.

        Raises:
            CorruptStoreError: If the content is not a JSON object of strings.
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            # Only the message and location, never the offending input
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            detail = f"{first['msg']} at {location}" if location else first["msg"]
            logger.debug("store_parse_failed", source=source, errors=e.error_count())
            raise CorruptStoreError(
                f"Invalid JSON in {source}. File may be corrupted ({detail})."
            ) from e

    def names(self) -> list[str]:
        """Return the stored secret names, sorted."""
        return sorted(self.root)
