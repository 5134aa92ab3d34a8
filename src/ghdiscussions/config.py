from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_API_URL = "https://api.github.com"
ENV_PREFIX = "GH_DISCUSSIONS_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass
class DiscussionsConfig:
    api_url: str = DEFAULT_API_URL
    graphql_url: str = f"{DEFAULT_API_URL}/graphql"
    # Logging configuration
    logging_json_enabled: bool = False
    logging_level: str = "WARNING"
    # Environment authentication configuration
    load_dotenv: bool = True
    dotenv_path: str | None = None


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean (1/0, true/false), got {raw!r}")


def load_config(environ: Mapping[str, str] | None = None) -> DiscussionsConfig:
    """Build a :class:`DiscussionsConfig` from environment variables.

    ``GITHUB_API_URL`` and ``GITHUB_GRAPHQL_URL`` match the variables GitHub
    Actions exports, so the tool targets GitHub Enterprise Server runners
    without extra flags.
    """
    env = os.environ if environ is None else environ
    api_url = (env.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
    graphql_url = env.get("GITHUB_GRAPHQL_URL") or f"{api_url}/graphql"
    level = (env.get(f"{ENV_PREFIX}LOG_LEVEL") or "WARNING").upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigError(f"{ENV_PREFIX}LOG_LEVEL must be a logging level name, got {level!r}")
    return DiscussionsConfig(
        api_url=api_url,
        graphql_url=graphql_url,
        logging_json_enabled=_env_flag(env, f"{ENV_PREFIX}LOG_JSON", False),
        logging_level=level,
        load_dotenv=_env_flag(env, f"{ENV_PREFIX}LOAD_DOTENV", True),
        dotenv_path=env.get(f"{ENV_PREFIX}DOTENV_PATH") or None,
    )


__all__ = ["DiscussionsConfig", "load_config", "DEFAULT_API_URL"]
