"""
Secure file creation and replacement for store files.

Platform-specific security notes:
- POSIX: files are created with mode 0600, so only the owner can read them
- Windows: mode bits are ignored; the file inherits the directory ACL
"""

import os
from pathlib import Path

FILE_MODE = 0o600


def create_exclusive(path: Path, content: str) -> None:
    """
    Create ``path`` with ``content``, failing if it already exists.

    Args:
        path: File to create
        content: Text written as UTF-8

    Raises:
        FileExistsError: If the file is already present
        OSError: If file creation fails
    """
    fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_EXCL, FILE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)


def replace_atomic(path: Path, content: str) -> None:
    """
    Replace ``path`` with ``content`` through a sibling temp file.

    Readers see either the old or the new content, never a partial write.

    Args:
        path: File to write
        content: Text written as UTF-8

    Raises:
        OSError: If writing or renaming fails
    """
    tmp = path.with_name(f"{path.name}.{os.getpid()}.tmp")
    fd = os.open(str(tmp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        try:
            tmp.unlink()
        except FileNotFoundError:
            pass
        raise
