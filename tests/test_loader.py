"""Tests for loading secrets into the environment."""

import json
import logging
import os

import pytest

from env_guard import SecretStore, load_env
from env_guard.storage import CorruptStoreError, DecryptionFailureError


def test_load_into_mapping(store, context):
    """Test secrets are exported into the given mapping."""
    store.save("API_KEY", "secret-api-key")
    store.save("DB_URL", "postgres://localhost/db")

    environ: dict[str, str] = {}
    applied = load_env(environ, context)

    assert environ == {"API_KEY": "secret-api-key", "DB_URL": "postgres://localhost/db"}
    assert applied == environ


def test_existing_variables_win(store, context):
    """Test variables already set are not overwritten."""
    store.save("API_KEY", "from-store")
    store.save("OTHER", "other")

    environ = {"API_KEY": "from-shell"}
    applied = load_env(environ, context)

    assert environ == {"API_KEY": "from-shell", "OTHER": "other"}
    assert applied == {"OTHER": "other"}


def test_empty_string_counts_as_set(store, context):
    """Test a variable set to an empty string is kept."""
    store.save("FLAG", "on")

    environ = {"FLAG": ""}
    load_env(environ, context)
    assert environ == {"FLAG": ""}


def test_load_is_audited(store, context, caplog):
    """Test loading emits an env.load audit event naming only what was set."""
    store.save("API_KEY", "secret-api-key")
    store.save("KEPT", "kept-value")

    caplog.set_level(logging.INFO)
    load_env({"KEPT": "from-shell"}, context)

    events = [
        json.loads(r.getMessage())
        for r in caplog.records
        if r.name == "env_guard.audit"
    ]
    assert len(events) == 1
    assert events[0]["event_type"] == "env.load"
    assert events[0]["success"] is True
    assert events[0]["project"] == context.working_directory
    assert events[0]["details"] == {"names": ["API_KEY"]}
    assert "secret-api-key" not in caplog.text
    assert "kept-value" not in caplog.text


def test_missing_store(context):
    """Test nothing happens without a store."""
    environ = {"PATH": "/bin"}
    assert load_env(environ, context) == {}
    assert environ == {"PATH": "/bin"}


def test_errors_propagate(store, context):
    """Test store errors reach the caller and nothing is exported."""
    store.path.write_text('{"A": "not-encrypted"}', encoding="utf-8")
    environ: dict[str, str] = {}
    with pytest.raises(DecryptionFailureError):
        load_env(environ, context)
    assert environ == {}

    store.path.write_text("not json", encoding="utf-8")
    with pytest.raises(CorruptStoreError):
        load_env(environ, context)


def test_defaults_to_process_environment(tmp_path, monkeypatch):
    """Test os.environ and the working directory are used by default."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("USER", "tester")
    # Registers the variable so monkeypatch removes it again on teardown
    monkeypatch.setenv("ENV_GUARD_TEST_TOKEN", "placeholder")
    monkeypatch.delenv("ENV_GUARD_TEST_TOKEN")

    SecretStore().save("ENV_GUARD_TEST_TOKEN", "loaded")
    load_env()

    assert os.environ["ENV_GUARD_TEST_TOKEN"] == "loaded"
