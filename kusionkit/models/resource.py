from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# Extension key holding the Group/Version/Kind of a Kubernetes resource
RESOURCE_EXTENSION_GVK = "GVK"


class ResourceType(str, Enum):
    KUBERNETES = "Kubernetes"
    TERRAFORM  = "Terraform"


@dataclass(frozen=True)
class Resource:
    id: str                      # unique within one spec
    type: ResourceType
    attributes: Dict[str, Any] = field(default_factory=dict)
    depends_on: Optional[List[str]] = None
    extensions: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type.value,
            "attributes": self.attributes,
        }
        if self.depends_on is not None:
            data["dependsOn"] = self.depends_on
        data["extensions"] = self.extensions
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        return cls(
            id=data["id"],
            type=ResourceType(data["type"]),
            attributes=data.get("attributes") or {},
            depends_on=data.get("dependsOn"),
            extensions=data.get("extensions") or {},
        )
