"""Configuration loader for pipe-gpt."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click
import httpx
import yaml

from pipe_gpt.core.models import RequestSettings

log = logging.getLogger(__name__)

APP_NAME = "pipe-gpt"

DEFAULTS: dict = {
    "api_url": "https://api.openai.com/v1",
    "model": "gpt-4",
    "max_tokens": 4096,
    "temperature": 0.6,
}

DEFAULT_TOP_P = 0.95

# key -> accepted types (bool is excluded separately, it subclasses int)
_SCHEMA: dict[str, tuple[type, ...]] = {
    "api_url": (str,),
    "model": (str,),
    "max_tokens": (int,),
    "temperature": (int, float),
}


def config_path() -> Path:
    """Resolve config.yaml: PIPE_GPT_CONFIG env var > per-user app dir."""
    env_path = os.environ.get("PIPE_GPT_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return Path(click.get_app_dir(APP_NAME)) / "config.yaml"


def load_config(path: Path | None = None) -> dict:
    """Load config.yaml and merge with defaults.

    A missing file yields the defaults. A file that cannot be read, parsed or
    validated is ignored as a whole, with a warning, so a single bad value
    never leaves the settings half-applied.

    Args:
        path: Explicit path to config.yaml. If None, uses default location.

    Returns:
        Merged configuration dict.
    """
    if path is None:
        path = config_path()

    user_config: dict = {}
    if path.exists():
        try:
            raw = path.read_text(encoding="utf-8")
            user_config = _validate(yaml.safe_load(raw) or {})
        except Exception:
            log.warning("Failed to read config at %s, using defaults", path, exc_info=True)
            user_config = {}

    return {**DEFAULTS, **user_config}


def _validate(data: object) -> dict:
    """Return the recognised keys of a parsed config, raising on bad values."""
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at top level, got {type(data).__name__}")

    result: dict = {}
    for key, value in data.items():
        expected = _SCHEMA.get(key)
        if expected is None:
            log.debug("Ignoring unknown config key %r", key)
            continue
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ValueError(f"Invalid value for {key!r}: {value!r}")
        result[key] = value

    if "api_url" in result:
        _check_api_url(result["api_url"])
    if "max_tokens" in result and result["max_tokens"] < 1:
        raise ValueError(f"max_tokens must be positive, got {result['max_tokens']}")
    if "temperature" in result:
        result["temperature"] = float(result["temperature"])
    return result


def _check_api_url(value: str) -> None:
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as e:
        raise ValueError(f"Invalid api_url {value!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"api_url must be an http(s) URL with a host, got {value!r}")


def resolve_settings(
    config: dict,
    max_tokens: int | None = None,
    temperature: float | None = None,
    top_p: float | None = None,
    render_markdown: bool = False,
) -> RequestSettings:
    """Apply CLI overrides on top of a loaded config. None means not given."""
    return RequestSettings(
        api_url=config.get("api_url", DEFAULTS["api_url"]),
        model=config.get("model", DEFAULTS["model"]),
        max_tokens=max_tokens if max_tokens is not None else config.get(
            "max_tokens", DEFAULTS["max_tokens"]
        ),
        temperature=temperature if temperature is not None else config.get(
            "temperature", DEFAULTS["temperature"]
        ),
        top_p=top_p if top_p is not None else DEFAULT_TOP_P,
        render_markdown=render_markdown,
    )
