"""Tests for project configuration."""

import pytest

from deploy_state.config import StateConfig, load_config, save_config
from deploy_state.errors import ConfigError, StateIOError


def test_defaults_when_missing(project):
    config = load_config(project)
    assert config == StateConfig()
    assert config.ignore == []
    assert config.hash_workers == 1


def test_round_trip(project):
    save_config(StateConfig(ignore=["*.log", "build/"], hash_workers=4), project)
    assert load_config(project) == StateConfig(ignore=["*.log", "build/"], hash_workers=4)


def test_partial_config(project):
    project.config_path.write_text("hash_workers: 8\n")
    assert load_config(project) == StateConfig(hash_workers=8)


def test_empty_file(project):
    project.config_path.write_text("")
    assert load_config(project) == StateConfig()


@pytest.mark.parametrize("content", [
    "ignore: [unclosed",
    "- just\n- a list\n",
    "ignore: '*.log'\n",
    "hash_workers: 0\n",
    "hash_workers: many\n",
    "hash_workers: true\n",
])
def test_invalid_config(project, content):
    project.config_path.write_text(content)
    with pytest.raises(ConfigError):
        load_config(project)


def test_config_feeds_ignore_spec(project):
    save_config(StateConfig(ignore=["*.tmp"]), project)
    assert project.get_ignore_spec().is_ignored("scratch.tmp")
    assert not project.get_ignore_spec().is_ignored("main.py")


def test_unreadable_config(project):
    project.config_path.mkdir()
    with pytest.raises(StateIOError) as exc_info:
        load_config(project)
    assert exc_info.value.path == project.config_path


def test_non_utf8_config(project):
    project.config_path.write_bytes(b"ignore:\n  - '\xff'\n")
    with pytest.raises(ConfigError):
        load_config(project)
