from typing import Dict, Iterable, Iterator, List, Optional

from kusionkit.errors import DuplicateResourceError
from kusionkit.models.resource import Resource


class Spec:
    """Ordered set of resources whose ids are unique."""

    def __init__(self, resources: Optional[Iterable[Resource]] = None) -> None:
        self._resources: List[Resource] = []
        self._index: Dict[str, Resource] = {}
        for r in resources or []:
            self.add(r)

    def add(self, resource: Resource) -> None:
        if resource.id in self._index:
            raise DuplicateResourceError(resource.id)
        self._index[resource.id] = resource
        self._resources.append(resource)

    def get(self, resource_id: str) -> Optional[Resource]:
        return self._index.get(resource_id)

    @property
    def resources(self) -> List[Resource]:
        return list(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources)

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._index

    def to_dict(self) -> dict:
        return {"resources": [r.to_dict() for r in self._resources]}
