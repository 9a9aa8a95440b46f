"""Command-line interface for env-guard."""

from collections.abc import Callable
from typing import Any, NoReturn, ParamSpec, TypeVar, cast

import click

from env_guard import __version__
from env_guard.audit import EventType, audit_event, setup_logging
from env_guard.config import ENV_FILE, LOCK_FILE
from env_guard.crypto import EncryptionError
from env_guard.gitignore import ensure_gitignore
from env_guard.storage import SecretStore, StoreError

# Type definitions for Click decorators
P = ParamSpec("P")
T = TypeVar("T")
ClickDecorator = Callable[[Callable[P, T]], Callable[P, T]]

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def typed_option(
    param_name: str,
    *,
    help_text: str = "",
    **kwargs: Any,
) -> ClickDecorator:
    """Create a typed Click option decorator.

    Args:
        param_name: The parameter name/flag
        help_text: Help text for the option
        **kwargs: Additional Click option parameters
    """
    return cast(ClickDecorator, click.option(param_name, help=help_text, **kwargs))


def fail(message: str) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    raise click.exceptions.Exit(1)


def not_found_message() -> str:
    return f"{LOCK_FILE} not found. Run 'env-guard init' first."


@click.group()
@click.version_option(version=__version__, prog_name="env-guard")
@typed_option(
    "--log-level",
    default="WARNING",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help_text="Log level for diagnostics on stderr.",
)
def cli(log_level: str) -> None:
    """Secure, encrypted, local-only environment variable manager."""
    setup_logging(log_level=log_level)


@cli.command()
def init() -> None:
    """Initialize .env.lock in the current directory."""
    store = SecretStore()
    if store.exists():
        audit_event(
            event_type=EventType.STORE_INIT,
            project=store.project_root,
            success=False,
            details={"reason": "exists"},
        )
        fail(f"{LOCK_FILE} already exists.")

    try:
        store.initialize()
        added = ensure_gitignore(store.project_root)
    except (StoreError, OSError) as e:
        audit_event(
            event_type=EventType.STORE_INIT,
            project=store.project_root,
            success=False,
            error=e,
        )
        fail(str(e))

    audit_event(event_type=EventType.STORE_INIT, project=store.project_root, success=True)
    if added:
        audit_event(
            event_type=EventType.GITIGNORE_UPDATE,
            project=store.project_root,
            success=True,
            details={"entries": added},
        )
    click.echo(f"✓ Initialized {LOCK_FILE}")
    click.echo(f"✓ Added {ENV_FILE} and {LOCK_FILE} to .gitignore")


@cli.command(name="set")
@click.argument("assignment", required=False)
def set_secret(assignment: str | None = None) -> None:
    """Encrypt and store a secret given as KEY=value."""
    if not assignment:
        fail("Usage: env-guard set KEY=value")

    name, sep, value = assignment.partition("=")
    if not sep:
        fail("Invalid format. Use KEY=value")

    name = name.strip()
    value = value.strip()
    if not name:
        fail("Key cannot be empty")

    store = SecretStore()
    if not store.exists():
        fail(not_found_message())

    try:
        store.save(name, value)
    except (StoreError, EncryptionError, OSError) as e:
        audit_event(
            event_type=EventType.SECRET_SET,
            project=store.project_root,
            success=False,
            details={"name": name},
            error=e,
        )
        fail(str(e))

    audit_event(
        event_type=EventType.SECRET_SET,
        project=store.project_root,
        success=True,
        details={"name": name},
    )
    click.echo(f"✓ Set {name}")


@cli.command(name="list")
def list_secrets() -> None:
    """List all stored secret names."""
    store = SecretStore()
    if not store.exists():
        fail(not_found_message())

    try:
        names = store.list_names()
    except (StoreError, OSError) as e:
        audit_event(
            event_type=EventType.SECRET_LIST,
            project=store.project_root,
            success=False,
            error=e,
        )
        fail(str(e))

    audit_event(
        event_type=EventType.SECRET_LIST,
        project=store.project_root,
        success=True,
        details={"count": len(names)},
    )

    if not names:
        click.echo("No secrets stored.")
        return

    click.echo("Stored keys:")
    for name in names:
        click.echo(f"  - {name}")


def main() -> None:
    """Entry point for the ``env-guard`` console script."""
    cli(prog_name="env-guard")


if __name__ == "__main__":
    main()
