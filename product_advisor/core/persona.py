"""Load the advisor persona (prompt, canned replies, lexicons) from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import ConfigError
from .models import Lexicon, Persona

LOGGER = logging.getLogger(__name__)

DEFAULT_PERSONA_PATH = Path(__file__).resolve().parents[1] / "data" / "persona.yaml"

_TEXT_FIELDS = (
    "system_prompt",
    "welcome",
    "greeting_reply",
    "refusal_reply",
    "not_configured_reply",
    "apology_reply",
    "name_ack_template",
    "assistant_label",
)


def load_persona(override_path: Path | None = None) -> Persona:
    """Load the packaged persona, then apply keys from ``override_path`` if it exists."""
    data = _read_yaml(DEFAULT_PERSONA_PATH)
    if override_path is not None and override_path.exists():
        LOGGER.info("Applying persona overrides from %s", override_path)
        data = _merge(data, _read_yaml(override_path))
    return _build_persona(data)


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Persona file not found at {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid persona structure at {path}")
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if key == "lexicon" and isinstance(value, dict):
            merged["lexicon"] = {**(base.get("lexicon") or {}), **value}
        else:
            merged[key] = value
    return merged


def _build_persona(data: Dict[str, Any]) -> Persona:
    fields: Dict[str, str] = {}
    for name in _TEXT_FIELDS:
        value = data.get(name)
        if value is None:
            if name == "assistant_label":
                continue
            raise ConfigError(f"Persona is missing {name}")
        if not isinstance(value, str):
            raise ConfigError(f"Persona field {name} must be a string")
        fields[name] = value.strip()

    if "{name}" not in fields["name_ack_template"]:
        raise ConfigError("name_ack_template must contain a {name} placeholder")
    try:
        fields["name_ack_template"].format(name="Guest")
    except (KeyError, IndexError, ValueError) as exc:
        raise ConfigError(
            f"name_ack_template may only use the {{name}} placeholder: {exc!r}"
        ) from exc

    lexicon_cfg = data.get("lexicon") or {}
    if not isinstance(lexicon_cfg, dict):
        raise ConfigError("Persona lexicon must be a mapping")

    lexicon = Lexicon(
        greetings=_word_list(lexicon_cfg, "greetings"),
        topic_keywords=_word_list(lexicon_cfg, "topic_keywords"),
    )
    return Persona(lexicon=lexicon, **fields)


def _word_list(cfg: Dict[str, Any], key: str) -> tuple[str, ...]:
    words = cfg.get(key) or []
    if not isinstance(words, list):
        raise ConfigError(f"lexicon.{key} must be a list")
    cleaned = tuple(str(word).strip().lower() for word in words if str(word).strip())
    if not cleaned:
        LOGGER.warning("Lexicon %s is empty", key)
    return cleaned
