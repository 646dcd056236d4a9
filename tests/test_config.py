"""
Tests for configuration loading
"""
from pathlib import Path

import pytest

from december.utils.config import DEFAULT_EXAMPLES_DIR, get_config, reset_config
from december.utils.logger import Logger, LogLevel, parse_level


def test_defaults(config_env):
    config = get_config()

    assert config.slack.bot_token == "xoxb-test"
    assert config.openai.model == "gpt-4o"
    assert config.classifier.max_clarification_rounds == 2
    assert config.classifier.state_assumptions is True
    assert config.output.max_file_lines == 500
    assert config.output.max_component_lines == 50
    assert config.output.max_repair_attempts == 1
    assert config.library.directory == DEFAULT_EXAMPLES_DIR
    assert config.library.max_examples == 3


def test_config_is_cached(config_env):
    assert get_config() is get_config()


def test_overrides(config_env, monkeypatch, tmp_path):
    monkeypatch.setenv("MAX_CLARIFICATION_ROUNDS", "0")
    monkeypatch.setenv("STATE_ASSUMPTIONS", "no")
    monkeypatch.setenv("EXAMPLES_DIR", str(tmp_path))
    monkeypatch.setenv("OPENAI_TEMPERATURE", "0.7")
    reset_config()

    config = get_config()

    assert config.classifier.max_clarification_rounds == 0
    assert config.classifier.state_assumptions is False
    assert config.library.directory == Path(tmp_path)
    assert config.openai.temperature == 0.7


def test_invalid_numbers_fall_back(config_env, monkeypatch):
    monkeypatch.setenv("MAX_CLARIFICATION_ROUNDS", "many")
    monkeypatch.setenv("MAX_FILE_LINES", "0")
    reset_config()

    config = get_config()

    assert config.classifier.max_clarification_rounds == 2
    assert config.output.max_file_lines == 500


def test_missing_required_variable(config_env, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY")
    reset_config()

    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        get_config()


@pytest.mark.parametrize("value,expected", [
    ("debug", LogLevel.DEBUG),
    ("WARN", LogLevel.WARNING),
    ("", LogLevel.INFO),
    ("loud", LogLevel.INFO),
    (None, LogLevel.INFO),
])
def test_parse_level(value, expected):
    assert parse_level(value) == expected


def test_logger_levels(capsys):
    logger = Logger("Test", level=LogLevel.WARNING)

    logger.info("hidden")
    logger.warning("shown", {"key": "value"})
    logger.error("failed", ValueError("boom"))

    captured = capsys.readouterr()
    assert "hidden" not in captured.out
    assert "[WARN] [Test] shown" in captured.out
    assert '"key": "value"' in captured.out
    assert "[ERROR] [Test] failed" in captured.err
    assert "boom" in captured.err


def test_child_logger_context():
    child = Logger("Agent", level=LogLevel.DEBUG).child("Repair")

    assert child.context == "Agent:Repair"
    assert child.is_enabled_for(LogLevel.DEBUG)
