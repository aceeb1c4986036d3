"""
Tests for cipher configuration.
"""

import dataclasses

import pytest

from cardangrille.config import DEFAULT_PLACEHOLDER, PLACEHOLDER_ENV_VAR, GrilleConfig


def test_defaults():
    config = GrilleConfig()
    assert config.placeholder == DEFAULT_PLACEHOLDER == '#'
    assert config.trim_chars == ' '


@pytest.mark.parametrize("placeholder", ['', '##', None, 7])
def test_placeholder_must_be_one_character(placeholder):
    with pytest.raises(ValueError):
        GrilleConfig(placeholder=placeholder)


def test_placeholder_cannot_be_trimmed():
    with pytest.raises(ValueError):
        GrilleConfig(placeholder=' ')


def test_trim_chars_must_be_string():
    with pytest.raises(ValueError):
        GrilleConfig(trim_chars=None)


def test_config_is_frozen():
    config = GrilleConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.placeholder = '*'


def test_from_env(monkeypatch):
    monkeypatch.setenv(PLACEHOLDER_ENV_VAR, '~')
    assert GrilleConfig.from_env().placeholder == '~'


def test_from_env_without_variable(monkeypatch):
    monkeypatch.delenv(PLACEHOLDER_ENV_VAR, raising=False)
    assert GrilleConfig.from_env() == GrilleConfig()


def test_from_env_rejects_bad_value(monkeypatch):
    monkeypatch.setenv(PLACEHOLDER_ENV_VAR, 'xyz')
    with pytest.raises(ValueError):
        GrilleConfig.from_env()
