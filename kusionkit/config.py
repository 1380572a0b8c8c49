"""
Provider config file.

    providers:
      aws:
        source: hashicorp/aws
        version: 5.0.0
        providerMeta:
          region: us-east-1
"""
from typing import Dict

import yaml

from kusionkit.errors import ConfigError
from kusionkit.models.provider import ProviderConfig


def load_provider_configs(path: str) -> Dict[str, ProviderConfig]:
    """Provider configs keyed by provider local name."""
    try:
        with open(path, "r") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read provider config {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict) or not isinstance(data.get("providers", {}), dict):
        raise ConfigError(f"{path}: expected a 'providers' mapping")

    configs: Dict[str, ProviderConfig] = {}
    for name, entry in (data.get("providers") or {}).items():
        if not isinstance(entry, dict):
            raise ConfigError(f"{path}: provider '{name}' must be a mapping")
        meta = entry.get("providerMeta") or {}
        if not isinstance(meta, dict):
            raise ConfigError(f"{path}: providerMeta of '{name}' must be a mapping")
        configs[str(name)] = ProviderConfig.from_dict(entry)
    return configs
