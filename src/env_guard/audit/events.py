"""Audit event type definitions."""

from enum import Enum


class EventType(str, Enum):
    """Audit event types."""

    STORE_INIT = "store.init"
    SECRET_SET = "secret.set"
    SECRET_LIST = "secret.list"
    ENV_LOAD = "env.load"
    GITIGNORE_UPDATE = "gitignore.update"
