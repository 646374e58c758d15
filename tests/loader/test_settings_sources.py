"""Tests for environment and init overrides of settings."""

import pytest

from gitpromote.core.config import MergeStrategy, State


@pytest.fixture
def log_config(tmp_path):
    return {"log_root": str(tmp_path / "logs")}


def test_dry_run_from_environment(monkeypatch, log_config):
    monkeypatch.setenv("DRY_RUN", "true")

    assert State(config=log_config).dry_run


def test_explicit_value_wins_over_environment(monkeypatch, log_config):
    monkeypatch.setenv("DRY_RUN", "true")

    assert not State(config=log_config, dry_run=False).dry_run


def test_nested_environment_override(monkeypatch, tmp_path, log_config):
    monkeypatch.setenv("GITPROMOTE_CONFIG__REPO_PATH", str(tmp_path))

    assert State(config=log_config).config.repo_path == tmp_path


def test_settings_files_win_over_environment(monkeypatch, log_config):
    monkeypatch.setenv("GITPROMOTE_CONFIG__REMOTE", "upstream")

    assert State(config=log_config).config.remote == "origin"


def test_camel_case_workflow_keys(log_config):
    state = State(
        config={**log_config, "workflow": {"mergeStrategy": "squash"}}
    )

    assert state.config.workflow.merge_strategy is MergeStrategy.SQUASH


def test_invalid_strategy_rejected(log_config):
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        State(config={**log_config, "workflow": {"pullStrategy": "octopus"}})
