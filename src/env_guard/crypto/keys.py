"""Machine- and project-bound key derivation."""

import os
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from env_guard.audit import get_logger
from env_guard.config import KEY_LENGTH, PBKDF2_ITERATIONS, ProjectContext

logger = get_logger(__name__)


def canonicalize_path(path: str, working_directory: str) -> str:
    """Make ``path`` absolute against ``working_directory``.

    Purely lexical: symlinks are not followed and the path need not exist.
    """
    canonical = os.path.normpath(os.path.join(working_directory, path))
    # normpath keeps a leading "//" on POSIX; collapse it to a single root
    if os.name == "posix" and canonical.startswith("//"):
        canonical = "/" + canonical.lstrip("/")
    return canonical


def build_salt_input(project_path: str, context: ProjectContext) -> str:
    """Return ``account:canonical_path`` for the given project."""
    canonical = canonicalize_path(project_path, context.working_directory)
    return f"{context.account_name}:{canonical}"


def derive_key(project_path: str, context: Optional[ProjectContext] = None) -> bytes:
    """Derive the store key for a project directory.

    The salt input serves both as the PBKDF2 password and, hashed with
    SHA-256, as its salt. Nothing is persisted, so the same account and
    path always produce the same key. Changing this scheme makes existing
    stores unreadable.

    Args:
        project_path: Project root, absolute or relative to the context's
            working directory.
        context: Identity context. Read from the environment if None.

    Returns:
        A 32-byte key.
    """
    if context is None:
        context = ProjectContext.from_environment()

    salt_input = build_salt_input(project_path, context).encode("utf-8")

    digest = hashes.Hash(hashes.SHA256())
    digest.update(salt_input)
    salt = digest.finalize()

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    key = kdf.derive(salt_input)
    logger.debug("derived_key", method="pbkdf2", iterations=PBKDF2_ITERATIONS)
    return key
