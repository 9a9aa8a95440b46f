"""Load stored secrets into the process environment."""

import os
from collections.abc import MutableMapping
from typing import Optional

from env_guard.audit import EventType, audit_event, get_logger
from env_guard.config import ProjectContext
from env_guard.storage import SecretStore

logger = get_logger(__name__)


def load_env(
    environ: Optional[MutableMapping[str, str]] = None,
    context: Optional[ProjectContext] = None,
) -> dict[str, str]:
    """Decrypt the project's secrets and export them as environment variables.

    Variables that are already set keep their value. Call this once at
    application start-up::

        from env_guard import load_env

        load_env()
        api_key = os.environ["API_KEY"]

    Args:
        environ: Mapping to populate. Defaults to ``os.environ``.
        context: Identity context. Read from the environment if None.

    Returns:
        The secrets that were actually set.

    Raises:
        CorruptStoreError: If the store file cannot be parsed.
        DecryptionFailureError: If any stored value fails to decrypt.
    """
    if environ is None:
        environ = os.environ
    if context is None:
        context = ProjectContext.from_environment()

    applied: dict[str, str] = {}
    for name, value in SecretStore(context).load_all().items():
        if name not in environ:
            environ[name] = value
            applied[name] = value

    logger.debug("env_loaded", applied=sorted(applied))
    audit_event(
        event_type=EventType.ENV_LOAD,
        project=context.working_directory,
        success=True,
        details={"names": sorted(applied)},
    )
    return applied
