"""
env-guard: encrypted, local-only environment variable store.

Secrets are encrypted with AES-256-GCM under a key derived from the current
user and the project directory, and kept in a ``.env.lock`` file that is
useless on any other machine or in any other directory.
"""

__version__ = "1.0.0"

from env_guard.loader import load_env  # noqa: E402
from env_guard.storage import SecretStore  # noqa: E402

__all__ = ["__version__", "load_env", "SecretStore"]
