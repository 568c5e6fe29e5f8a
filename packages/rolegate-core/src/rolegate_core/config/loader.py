"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import RolegateConfig


def load_config(cli_path: str | None = None) -> RolegateConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./rolegate.yaml"),
        Path.home() / ".rolegate" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ValueError(f"Invalid config in {path}: top level must be a mapping")
                raw = _expand_env_vars(raw)
                return RolegateConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return RolegateConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `rolegate config init`
DEFAULT_CONFIG_TEMPLATE = """\
# rolegate.yaml

# Permission store
permissions:
  datasource: ".rolegate/permissions.db"
  timeout: 5.0                 # seconds to wait on a locked database
  create_schema: true

# Role resolution
resolver:
  groups_file: ".rolegate/groups.yaml"
  # base_url: "https://idp.example.com/scim/v2"
  token_env: "ROLEGATE_IDP_TOKEN"
  timeout: 10.0

# Plugins (entry point names; unset uses the local defaults)
# plugins:
#   store: "sqlite"
#   resolver: "scim"           # file | scim

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
