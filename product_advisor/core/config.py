"""Configuration loader."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigError
from .models import Persona, TransportSettings
from .persona import load_persona

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path("~/.product-advisor").expanduser()
ENV_FILE_NAME = ".env"
PERSONA_FILE = "persona.yaml"
STORAGE_FILE = "conversation.json"


@dataclass
class Config:
    transport: TransportSettings
    persona: Persona
    storage_path: Path
    config_dir: Path
    log_level: str = "WARNING"


def resolve_config_dir(config_dir: Path | str | None) -> Path:
    """Resolve the directory holding .env and persona.yaml.

    A missing directory is allowed; the environment alone can configure
    the advisor.
    """
    target = (
        Path(config_dir).expanduser() if config_dir else DEFAULT_CONFIG_DIR
    ).resolve()
    if target.exists() and not target.is_dir():
        raise ConfigError(f"Config directory {target} is not a directory")
    return target


def load_config(config_dir: Path | str | None = None) -> Config:
    """Load Product Advisor configuration from the provided or default directory."""
    root = resolve_config_dir(config_dir)
    return _load_config_from_root(root)


def _load_config_from_root(root: Path) -> Config:
    _load_env_file(root / ENV_FILE_NAME)

    transport = TransportSettings(
        relay_url=_optional_env("ADVISOR_RELAY_URL"),
        api_key=_optional_env("OPENAI_API_KEY"),
        provider_url=_optional_env("ADVISOR_PROVIDER_URL") or TransportSettings.provider_url,
        model=_optional_env("ADVISOR_MODEL") or TransportSettings.model,
        max_tokens=_int_env("ADVISOR_MAX_TOKENS", TransportSettings.max_tokens),
        timeout=_float_env("ADVISOR_REQUEST_TIMEOUT", TransportSettings.timeout),
    )
    if not transport.relay_url and not transport.api_key:
        LOGGER.warning("Neither ADVISOR_RELAY_URL nor OPENAI_API_KEY is set; remote answers are disabled")

    storage_raw = _optional_env("ADVISOR_STORAGE_PATH")
    storage_path = Path(storage_raw).expanduser() if storage_raw else root / STORAGE_FILE

    return Config(
        transport=transport,
        persona=load_persona(root / PERSONA_FILE),
        storage_path=storage_path,
        config_dir=root,
        log_level=(os.getenv("LOG_LEVEL") or "WARNING").upper(),
    )


def _load_env_file(path: Path) -> None:
    if not path.exists():
        LOGGER.debug("No .env file found at %s; relying on shell environment.", path)
        return
    load_dotenv(dotenv_path=path, override=False)


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _int_env(name: str, default: int) -> int:
    raw = _optional_env(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive")
    return value


def _float_env(name: str, default: float) -> float:
    raw = _optional_env(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive")
    return value
