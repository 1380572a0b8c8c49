from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class ProviderConfig:
    """
    Full configuration of one Terraform provider.

    ``source`` and ``version`` come from the ``terraform.required_providers``
    block, ``provider_meta`` from the ``provider`` block of the hcl file.
    """
    source: str = ""
    version: str = ""
    provider_meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "version": self.version,
            "providerMeta": self.provider_meta,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProviderConfig":
        return cls(
            source=str(data.get("source", "") or ""),
            version=str(data.get("version", "") or ""),
            provider_meta=data.get("providerMeta") or {},
        )
