"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import VaultpressConfig

PROJECT_CONFIG = Path("vaultpress.yaml")
USER_CONFIG = Path(".vaultpress") / "config.yaml"

# ${VAR} or ${VAR:-fallback}
_ENV_VAR_RE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def find_config_file(cli_path: str | None = None) -> Path | None:
    """First existing config file: CLI path, then project-local, then user-global.

    An explicit CLI path must exist.
    """
    if cli_path:
        path = Path(cli_path).expanduser()
        if not path.is_file():
            raise ValueError(f"Config file not found: {path}")
        return path
    for candidate in (PROJECT_CONFIG, Path.home() / USER_CONFIG):
        if candidate.is_file():
            return candidate
    return None


def load_config(cli_path: str | None = None) -> VaultpressConfig:
    path = find_config_file(cli_path)
    if path is None:
        return VaultpressConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return VaultpressConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping at top level")

    try:
        return VaultpressConfig.model_validate(_expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def _expand_env_vars(obj: object) -> object:
    if isinstance(obj, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `vaultpress config init`
DEFAULT_CONFIG_TEMPLATE = """\
# vaultpress.yaml

# Root of the Obsidian vault to publish from
vault_path: "."

# Sites that receive published notes
destinations:
  - id: "main"
    name: "My site"
    url: "https://example.com"
    api_key_env: "VAULTPRESS_API_KEY"   # or api_key: "${MY_SECRET}"
    timeout: 30

# Vault folders and where they are published
folders:
  - id: "blog"
    vault_folder: "Blog"
    route_base: "/blog"
    destination_id: "main"
    sanitization:
      remove_fenced_code_blocks: true

# Notes matching any rule are skipped (first match wins)
ignore_rules:
  - property: "publish"
    ignoreIf: false
  - property: "draft"
    ignoreIf: true
  - property: "type"
    ignoreValues: ["Dashboard"]

# Embedded assets (![[image.png]])
assets:
  folder: "assets"
  vault_fallback: true

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
