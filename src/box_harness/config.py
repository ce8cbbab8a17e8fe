"""Harness configuration loading.

The configuration is the Box app settings document (the same JSON the Box
developer console exports), optionally extended with a pre-existing
``userID`` and endpoint overrides.

Precedence (highest to lowest):
1. ``INTEGRATION_TESTING_CONFIG`` environment variable (JSON document)
2. Explicit path passed to ``load_config``
3. ``BOX_HARNESS_CONFIG`` environment variable (path)
4. ``config.json`` in the working directory
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

DEFAULT_API_URL = "https://api.box.com/2.0"
DEFAULT_UPLOAD_URL = "https://upload.box.com/api/2.0"
DEFAULT_AUTH_URL = "https://api.box.com/oauth2/token"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONFIG_FILE = "config.json"

ENV_CONFIG_JSON = "INTEGRATION_TESTING_CONFIG"
ENV_CONFIG_PATH = "BOX_HARNESS_CONFIG"


@dataclass(frozen=True)
class HarnessConfig:
    """Connection and identity settings for one test run."""

    client_id: str
    client_secret: str
    enterprise_id: str
    user_id: str | None = None
    api_url: str = DEFAULT_API_URL
    upload_url: str = DEFAULT_UPLOAD_URL
    auth_url: str = DEFAULT_AUTH_URL
    timeout: float = DEFAULT_TIMEOUT
    source: str = "default"

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "default") -> "HarnessConfig":
        """Build a config from a parsed settings document.

        Raises:
            ConfigError: If a required key is missing
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Config from {source} must be a JSON object")

        app_settings = data.get("boxAppSettings") or {}
        values = {
            "boxAppSettings.clientID": app_settings.get("clientID"),
            "boxAppSettings.clientSecret": app_settings.get("clientSecret"),
            "enterpriseID": data.get("enterpriseID"),
        }
        missing = [key for key, value in values.items() if not value]
        if missing:
            raise ConfigError(f"Config from {source} is missing: {', '.join(missing)}")

        try:
            timeout = float(data.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError):
            raise ConfigError(f"Config from {source} has an invalid timeout")

        user_id = data.get("userID")
        return cls(
            client_id=str(values["boxAppSettings.clientID"]),
            client_secret=str(values["boxAppSettings.clientSecret"]),
            enterprise_id=str(values["enterpriseID"]),
            user_id=str(user_id) if user_id else None,
            api_url=str(data.get("apiURL") or DEFAULT_API_URL).rstrip("/"),
            upload_url=str(data.get("uploadURL") or DEFAULT_UPLOAD_URL).rstrip("/"),
            auth_url=str(data.get("authURL") or DEFAULT_AUTH_URL),
            timeout=timeout,
            source=source,
        )


def get_config_path(path: str | Path | None = None) -> Path:
    """Resolve the config file path (explicit > env var > cwd default)."""
    if path:
        return Path(path).expanduser()
    if os.environ.get(ENV_CONFIG_PATH):
        return Path(os.environ[ENV_CONFIG_PATH]).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_FILE


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a JSON or YAML config file.

    Raises:
        ConfigError: If the file is missing, unreadable or cannot be parsed
    """
    if not path.exists():
        raise ConfigError(
            f"No config found: {ENV_CONFIG_JSON} is unset and {path} does not exist"
        )

    try:
        with path.open(encoding="utf-8") as f:
            if path.suffix in [".yaml", ".yml"]:
                return yaml.safe_load(f) or {}
            return json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}")


def load_config(path: str | Path | None = None) -> HarnessConfig:
    """Load the harness configuration.

    Args:
        path: Config file to read when the environment variable is unset

    Returns:
        HarnessConfig with ``source`` naming where it was read from
    """
    raw_json = os.environ.get(ENV_CONFIG_JSON)
    if raw_json:
        try:
            data = json.loads(raw_json)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{ENV_CONFIG_JSON} is not valid JSON: {e}")
        return HarnessConfig.from_dict(data, source="environment")

    config_path = get_config_path(path)
    return HarnessConfig.from_dict(read_config_file(config_path), source=str(config_path))
