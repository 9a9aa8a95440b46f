"""Tests for .gitignore bookkeeping."""

from env_guard.gitignore import ensure_gitignore


def test_creates_gitignore(tmp_path):
    """Test a missing .gitignore is created with both entries."""
    added = ensure_gitignore(tmp_path)

    assert added == [".env", ".env.lock"]
    assert (tmp_path / ".gitignore").read_text() == ".env\n.env.lock\n"


def test_appends_to_existing(tmp_path):
    """Test entries are appended after existing content."""
    path = tmp_path / ".gitignore"
    path.write_text("node_modules/\n")

    ensure_gitignore(tmp_path)
    assert path.read_text() == "node_modules/\n.env\n.env.lock\n"


def test_adds_missing_newline(tmp_path):
    """Test a newline is inserted when the file lacks a trailing one."""
    path = tmp_path / ".gitignore"
    path.write_text("dist")

    ensure_gitignore(tmp_path)
    assert path.read_text() == "dist\n.env\n.env.lock\n"


def test_only_missing_entries(tmp_path):
    """Test entries already present are not duplicated."""
    path = tmp_path / ".gitignore"
    path.write_text("  .env  \n*.pyc\n")

    added = ensure_gitignore(tmp_path)
    assert added == [".env.lock"]
    assert path.read_text() == "  .env  \n*.pyc\n.env.lock\n"


def test_nothing_to_add(tmp_path):
    """Test the file is left untouched when complete."""
    path = tmp_path / ".gitignore"
    path.write_text(".env.lock\n.env")
    mtime = path.stat().st_mtime_ns

    assert ensure_gitignore(tmp_path) == []
    assert path.read_text() == ".env.lock\n.env"
    assert path.stat().st_mtime_ns == mtime


def test_similar_entries_do_not_match(tmp_path):
    """Test only exact lines count as present."""
    path = tmp_path / ".gitignore"
    path.write_text(".env.local\n# .env\n")

    assert ensure_gitignore(tmp_path) == [".env", ".env.lock"]
