"""
Kubernetes objects -> kusion resources.

Objects may be plain manifest mappings (as loaded from YAML) or models from
the ``kubernetes`` client package (``V1Deployment``, ``V1ObjectMeta``, ...).
"""
from datetime import date, datetime
from typing import Any, Mapping

from kubernetes.client import ApiClient

from kusionkit.errors import ConversionError
from kusionkit.models.resource import RESOURCE_EXTENSION_GVK, Resource, ResourceType


def _is_model(obj: Any) -> bool:
    # generated client models all carry these two class attributes
    return hasattr(obj, "openapi_types") and hasattr(obj, "attribute_map")


def _field(obj: Any, key: str, attr: str) -> str:
    if obj is None:
        return ""
    if isinstance(obj, Mapping):
        value = obj.get(key)
    else:
        value = getattr(obj, attr, None)
    return value or ""


def _plain(val: Any, path: str) -> Any:
    """Deep-copy val into dicts, lists and scalars, rejecting anything else."""
    if isinstance(val, Mapping):
        out = {}
        for k, v in val.items():
            if not isinstance(k, str):
                raise ConversionError(f"non-string key {k!r} at '{path or '.'}'")
            out[k] = _plain(v, f"{path}.{k}")
        return out
    if isinstance(val, (list, tuple)):
        return [_plain(v, f"{path}[{i}]") for i, v in enumerate(val)]
    if val is None or isinstance(val, (str, bool, int, float)):
        return val
    if isinstance(val, (datetime, date)):
        return val.isoformat()
    if _is_model(val):
        return _plain(ApiClient().sanitize_for_serialization(val), path)
    raise ConversionError(
        f"cannot convert value of type {type(val).__name__} at '{path or '.'}'"
    )


def to_unstructured(obj: Any) -> dict:
    """
    Reduce a Kubernetes object to a plain mapping in its serialized form
    (camelCase field names, no None-valued model fields).

    Integers keep Python's arbitrary precision; there is no 64-bit widening.
    """
    if not isinstance(obj, Mapping) and not _is_model(obj):
        raise ConversionError(
            f"cannot convert {type(obj).__name__} to an unstructured object"
        )
    return _plain(obj, "")


def group_version_kind(obj: Any) -> str:
    """
    GVK string of obj, e.g. ``apps/v1, Kind=Deployment`` or ``/v1, Kind=Pod``.
    An apiVersion with more than one '/' keeps only the kind.
    """
    api_version = _field(obj, "apiVersion", "api_version")
    kind = _field(obj, "kind", "kind")

    group, version = "", ""
    parts = api_version.split("/")
    if len(parts) == 1:
        version = parts[0]
    elif len(parts) == 2:
        group, version = parts
    return f"{group}/{version}, Kind={kind}"


def kubernetes_resource_id(type_meta: Any, object_meta: Any) -> str:
    """
    ID of a Kubernetes resource from its type and object metadata, unique in
    one spec. Example: ``apps/v1:Deployment:nginx:nginx-deployment``.
    """
    rid = _field(type_meta, "apiVersion", "api_version") + ":" + _field(type_meta, "kind", "kind") + ":"
    namespace = _field(object_meta, "namespace", "namespace")
    if namespace != "":
        rid += namespace + ":"
    rid += _field(object_meta, "name", "name")
    return rid


def wrap_k8s_resource_to_kusion_resource(resource_id: str, resource: Any) -> Resource:
    attributes = to_unstructured(resource)
    gvk = group_version_kind(resource)
    return Resource(
        id=resource_id,
        type=ResourceType.KUBERNETES,
        attributes=attributes,
        depends_on=None,
        extensions={RESOURCE_EXTENSION_GVK: gvk},
    )
