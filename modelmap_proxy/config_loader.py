"""Configuration loading from YAML files with environment variable support."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import dotenv_values

from .core.upstream import DEFAULT_TIMEOUT, DEFAULT_UPSTREAM_URL

logger = logging.getLogger("modelmap-proxy")

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Default paths (relative to project root)
DEFAULT_CONFIG_PATH = "configs/config_default.yaml"
DEFAULT_MODEL_MAP_PATH = "configs/models.json"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

ENV_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def resolve_config_path(path: str | Path) -> Path:
    """Anchor a relative path at the project root."""
    candidate = Path(path)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def resolve_env_path(config_path: Path, env_path: str | None = None) -> Path:
    """The explicit ``env_path``, else the ``.env`` beside the config file."""
    return resolve_config_path(env_path) if env_path else config_path.with_name(".env")


def load_env_values(env_path: Path) -> dict[str, str]:
    """Read a .env file into a dict; ``os.environ`` is left untouched."""
    if not env_path.exists():
        return {}
    return {
        key: value
        for key, value in dotenv_values(env_path).items()
        if value is not None
    }


def load_config(
    path: str | None = None,
    env_path: str | None = None,
    substitute_env: bool = True,
) -> dict:
    """Load configuration from a YAML file.

    Args:
        path: Path to the config file. Defaults to MODELMAP_PROXY_CONFIG,
              or configs/config_default.yaml in the project root.
        env_path: Optional .env path override for env substitution.
        substitute_env: Whether to substitute environment variables in the config.

    Returns:
        Parsed configuration dictionary. A missing file yields an empty
        configuration so the proxy still starts on defaults.
    """
    if path is None:
        path = os.getenv("MODELMAP_PROXY_CONFIG") or DEFAULT_CONFIG_PATH

    config_path = resolve_config_path(path)
    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}; using defaults")
        return {}

    logger.info(f"Reading configuration from {config_path}")
    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise RuntimeError(f"Config file {config_path} must contain a mapping")

    if substitute_env:
        env_file = resolve_env_path(config_path, env_path)
        if env_file.exists():
            logger.info(f"Using variables from {env_file}")
        data = _substitute_env_vars(data, load_env_values(env_file))

    return data


def _substitute_env_vars(
    obj: Any, env_values: Mapping[str, str] | None = None
) -> Any:
    """Recursively substitute ${VAR} and $VAR references in string values.

    Unset variables are left as the literal placeholder and logged.
    """
    env = env_values or {}

    if isinstance(obj, dict):
        return {key: _substitute_env_vars(value, env) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_substitute_env_vars(item, env) for item in obj]
    if not isinstance(obj, str):
        return obj

    def lookup(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        value = env.get(name, os.getenv(name))
        if value is None:
            logger.warning(f"Config references unset variable ${name}; keeping it literally")
            return match.group(0)
        return value

    return ENV_PATTERN.sub(lookup, obj)


def _proxy_settings(config: Mapping[str, Any]) -> Mapping[str, Any]:
    settings = config.get("proxy_settings") or {}
    return settings if isinstance(settings, Mapping) else {}


def _section(settings: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = settings.get(name) or {}
    return section if isinstance(section, Mapping) else {}


def get_server_settings(config: Mapping[str, Any]) -> tuple[str, int]:
    """Return ``(host, port)``; environment variables win over the file."""
    server_cfg = _section(_proxy_settings(config), "server")

    host = os.getenv("MODELMAP_PROXY_HOST") or str(server_cfg.get("host", DEFAULT_HOST))

    port_raw: Optional[Any] = os.getenv("MODELMAP_PROXY_PORT") or server_cfg.get("port", DEFAULT_PORT)
    try:
        port = int(port_raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid port {port_raw!r}, falling back to {DEFAULT_PORT}")
        port = DEFAULT_PORT
    return host, port


def get_upstream_settings(config: Mapping[str, Any]) -> tuple[str, Optional[float]]:
    """Return ``(url, request_timeout)`` for the upstream endpoint."""
    upstream_cfg = _section(_proxy_settings(config), "upstream")

    url = (
        os.getenv("MODELMAP_PROXY_UPSTREAM_URL")
        or str(upstream_cfg.get("url") or DEFAULT_UPSTREAM_URL)
    ).strip()

    timeout_raw = upstream_cfg.get("request_timeout", DEFAULT_TIMEOUT)
    if timeout_raw is None:
        return url, None
    try:
        timeout = float(timeout_raw)
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid request_timeout {timeout_raw!r}, falling back to {DEFAULT_TIMEOUT}"
        )
        timeout = DEFAULT_TIMEOUT
    return url, timeout


def get_model_map_path(config: Mapping[str, Any]) -> Path:
    """Return the location of the model mapping document."""
    raw = (
        os.getenv("MODELMAP_PROXY_MODELS")
        or _proxy_settings(config).get("model_map_path")
        or DEFAULT_MODEL_MAP_PATH
    )
    return resolve_config_path(str(raw))


def get_log_level(config: Mapping[str, Any]) -> str:
    logging_cfg = _section(_proxy_settings(config), "logging")
    return str(logging_cfg.get("level") or "INFO")
