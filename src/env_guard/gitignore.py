"""Keep the plaintext and encrypted env files out of version control."""

from pathlib import Path

from env_guard.config import ENV_FILE, GITIGNORE, LOCK_FILE


def ensure_gitignore(project_root: str | Path) -> list[str]:
    """Add ``.env`` and ``.env.lock`` to the project's ``.gitignore``.

    Existing entries are matched on trimmed lines. The file is only written
    when something is added.

    Args:
        project_root: Directory holding the ``.gitignore``.

    Returns:
        The entries that were appended.
    """
    path = Path(project_root) / GITIGNORE
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        content = ""

    lines = {line.strip() for line in content.split("\n")}
    missing = [entry for entry in (ENV_FILE, LOCK_FILE) if entry not in lines]
    if not missing:
        return []

    if content and not content.endswith("\n"):
        content += "\n"
    content += "".join(f"{entry}\n" for entry in missing)

    path.write_text(content, encoding="utf-8")
    return missing
