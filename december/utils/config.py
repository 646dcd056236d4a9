"""
Configuration Management
========================

All environment variables are read, typed and validated here. Nothing else
in the package calls os.getenv() for application settings.

Required:
    SLACK_BOT_TOKEN, SLACK_APP_TOKEN, SLACK_SIGNING_SECRET, OPENAI_API_KEY

Optional (defaults in parentheses):
    OPENAI_MODEL (gpt-4o), OPENAI_TEMPERATURE (0.2)
    MAX_CLARIFICATION_ROUNDS (2), STATE_ASSUMPTIONS (true)
    MAX_FILE_LINES (500), MAX_COMPONENT_LINES (50), MAX_REPAIR_ATTEMPTS (1)
    EXAMPLES_DIR (bundled docs), MAX_EXAMPLES (3)
    LOG_LEVEL (info)

Usage:
    from december.utils.config import get_config

    config = get_config()
    print(config.openai.model)
    print(config.classifier.max_clarification_rounds)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from december.utils.logger import Logger

logger = Logger("Config")

# Example documents bundled with the package
DEFAULT_EXAMPLES_DIR = Path(__file__).parent.parent / "library" / "docs"


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ValueError: If the variable is not set
    """
    value = os.getenv(name)
    if not value:
        raise ValueError(
            f"Missing required environment variable: {name}\n"
            f"Please ensure {name} is set in your .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    return os.getenv(name, default)


def _optional_int(name: str, default: int, minimum: int = 0) -> int:
    """
    Get an optional integer environment variable.

    Values that are not integers, or are below the minimum, fall back to
    the default with a warning.
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"{name} is not a valid integer, using default: {default}")
        return default
    if parsed < minimum:
        logger.warning(f"{name} must be >= {minimum}, using default: {default}")
        return default
    return parsed


def _optional_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"{name} is not a valid number, using default: {default}")
        return default


def _optional_bool(name: str, default: bool) -> bool:
    """True only when the value is 'true', '1' or 'yes' (case-insensitive)."""
    value = os.getenv(name)
    if not value:
        return default
    return value.strip().lower() in ("true", "1", "yes")


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class SlackConfig:
    """Slack API configuration."""
    bot_token: str       # xoxb-... token for bot operations
    app_token: str       # xapp-... token for Socket Mode
    signing_secret: str


@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI API configuration."""
    api_key: str
    model: str
    temperature: float


@dataclass(frozen=True)
class ClassifierConfig:
    """Request classifier policy knobs."""
    max_clarification_rounds: int  # Clarify turns allowed before assuming
    state_assumptions: bool        # Surface Important-tier defaults as labeled assumptions


@dataclass(frozen=True)
class OutputConfig:
    """Limits applied when validating generated responses."""
    max_file_lines: int
    max_component_lines: int
    max_repair_attempts: int  # Corrective re-asks after a format violation


@dataclass(frozen=True)
class LibraryConfig:
    """Example catalog configuration."""
    directory: Path
    max_examples: int


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

    Access via:
        config = get_config()
        config.slack.bot_token
        config.output.max_file_lines
    """
    slack: SlackConfig
    openai: OpenAIConfig
    classifier: ClassifierConfig
    output: OutputConfig
    library: LibraryConfig
    log_level: str


def load_config() -> Config:
    """
    Load and validate all configuration from the environment.

    Returns:
        Config: The validated configuration

    Raises:
        ValueError: If required configuration is missing
    """
    load_dotenv()

    examples_dir = os.getenv("EXAMPLES_DIR")

    return Config(
        slack=SlackConfig(
            bot_token=_required("SLACK_BOT_TOKEN"),
            app_token=_required("SLACK_APP_TOKEN"),
            signing_secret=_required("SLACK_SIGNING_SECRET"),
        ),
        openai=OpenAIConfig(
            api_key=_required("OPENAI_API_KEY"),
            model=_optional("OPENAI_MODEL", "gpt-4o"),
            temperature=_optional_float("OPENAI_TEMPERATURE", 0.2),
        ),
        classifier=ClassifierConfig(
            max_clarification_rounds=_optional_int("MAX_CLARIFICATION_ROUNDS", 2),
            state_assumptions=_optional_bool("STATE_ASSUMPTIONS", True),
        ),
        output=OutputConfig(
            max_file_lines=_optional_int("MAX_FILE_LINES", 500, minimum=1),
            max_component_lines=_optional_int("MAX_COMPONENT_LINES", 50, minimum=1),
            max_repair_attempts=_optional_int("MAX_REPAIR_ATTEMPTS", 1),
        ),
        library=LibraryConfig(
            directory=Path(examples_dir) if examples_dir else DEFAULT_EXAMPLES_DIR,
            max_examples=_optional_int("MAX_EXAMPLES", 3),
        ),
        log_level=_optional("LOG_LEVEL", "info"),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """
    Get the shared configuration instance.

    Loaded on first access and cached for subsequent calls.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
