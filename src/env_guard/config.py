"""Constants and the identity context used for key derivation."""

import os
from collections.abc import Mapping
from typing import Optional

from pydantic import BaseModel, ConfigDict

# Files managed in the project root
LOCK_FILE = ".env.lock"
ENV_FILE = ".env"
GITIGNORE = ".gitignore"

# Cipher parameters
KEY_LENGTH = 32  # AES-256
IV_LENGTH = 16
TAG_LENGTH = 16
PBKDF2_ITERATIONS = 100_000
FIELD_SEPARATOR = ":"

# Account name used when the environment reports none
DEFAULT_ACCOUNT_NAME = "default"


class ProjectContext(BaseModel):
    """Identity and location a store is bound to.

    The derived key depends on both fields, so a store written under one
    context cannot be read under another.
    """

    model_config = ConfigDict(frozen=True)

    account_name: str
    working_directory: str

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ) -> "ProjectContext":
        """Build a context from the process environment.

        Args:
            environ: Environment mapping. Defaults to ``os.environ``.
            cwd: Working directory. Defaults to ``os.getcwd()``.

        Returns:
            A new ProjectContext.
        """
        if environ is None:
            environ = os.environ
        account = environ.get("USER") or environ.get("USERNAME") or DEFAULT_ACCOUNT_NAME
        return cls(
            account_name=account,
            working_directory=cwd if cwd is not None else os.getcwd(),
        )
