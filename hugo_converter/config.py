"""YAML settings loading with env var expansion."""

import dataclasses
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from hugo_converter.core.models import ConfigurationError
from hugo_converter.images.uploader import DEFAULT_UPLOAD_URL

CONFIG_FILENAME = ".hugo-converter.yaml"
USER_CONFIG_PATH = Path.home() / ".config" / "hugo-converter" / "config.yaml"
TOKEN_ENV_VAR = "GYAZO_ACCESS_TOKEN"


@dataclass
class Settings:
    """Settings for converting notes.

    Attributes:
        access_token: Gyazo access token, required for image upload
        output_dir: Directory for converted posts; empty means download
        attachment_folder: Vault folder searched first for embedded images
        upload_url: Gyazo upload endpoint
        timeout: Upload request timeout in seconds, None for no timeout
        title_case: Convert post titles to title case
    """
    access_token: str = ""
    output_dir: str = ""
    attachment_folder: str = "images"
    upload_url: str = DEFAULT_UPLOAD_URL
    timeout: Optional[float] = None
    title_case: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Build settings from a parsed config mapping.

        Raises:
            ConfigurationError: On unknown keys or values of the wrong type
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")

        values = {k: v for k, v in data.items() if v is not None}
        for key in ('access_token', 'output_dir', 'attachment_folder', 'upload_url'):
            if key in values:
                values[key] = str(values[key])
        if 'title_case' in values and not isinstance(values['title_case'], bool):
            raise ConfigurationError(f"title_case must be true or false, got {values['title_case']!r}")
        if 'timeout' in values:
            values['timeout'] = _parse_timeout(values['timeout'])
        return cls(**values)


def _parse_timeout(value: Any) -> float:
    """Timeout in seconds from a number or numeric string."""
    if isinstance(value, bool):
        raise ConfigurationError(f"timeout must be a number of seconds, got {value!r}")
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"timeout must be a number of seconds, got {value!r}") from None
    if not seconds > 0:
        raise ConfigurationError(f"timeout must be positive, got {value!r}")
    return seconds


def config_paths(cli_path: Optional[str] = None, vault_path: Optional[Path] = None) -> List[Path]:
    """Config files to try, in resolution order."""
    paths = []
    if cli_path:
        paths.append(Path(cli_path).expanduser())
    if vault_path is not None:
        paths.append(Path(vault_path) / CONFIG_FILENAME)
    paths.append(USER_CONFIG_PATH)
    return paths


def load_settings(cli_path: Optional[str] = None, vault_path: Optional[Path] = None) -> Settings:
    """Load settings with resolution order: CLI > vault-local > user-global > defaults.

    An empty access token is filled from the GYAZO_ACCESS_TOKEN
    environment variable.

    Raises:
        ConfigurationError: If the CLI path is missing or a config file is invalid
    """
    if cli_path and not Path(cli_path).expanduser().exists():
        raise ConfigurationError(f"Config file not found: {cli_path}")

    settings = Settings()
    for path in config_paths(cli_path, vault_path):
        if not path.exists():
            continue
        try:
            with open(path, encoding='utf-8') as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Could not read {path}: {e}") from e

        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Invalid config in {path}: expected a mapping")
        settings = Settings.from_dict(_expand_env_vars(raw))
        break

    if not settings.access_token:
        settings.access_token = os.environ.get(TOKEN_ENV_VAR, "")
    return settings


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `hugo-converter config init`
DEFAULT_CONFIG_TEMPLATE = """\
# .hugo-converter.yaml

# Gyazo access token (https://gyazo.com/oauth/applications).
# Leave empty to use the GYAZO_ACCESS_TOKEN environment variable.
access_token: "${GYAZO_ACCESS_TOKEN}"

# Directory for converted posts, absolute or relative to the vault.
# Leave empty to print the post to standard output instead.
output_dir: ""

# Vault folder searched first for ![[embedded]] images
attachment_folder: "images"

# Upload request timeout in seconds (null for none)
timeout: null

# Title-case post titles
title_case: false
"""
