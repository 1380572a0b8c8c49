"""
Terraform resources -> kusion resources.

A provider source is either ``<namespace>/<name>``, which implies the public
registry, or ``<host>/<namespace>/<name>`` for a customized registry host.
"""
from typing import Any, Dict, List, NamedTuple, Optional

from kusionkit.errors import (
    EmptyProviderVersionError,
    EmptyResourceTypeError,
    EmptySourceError,
    InvalidProviderSourceError,
    InvalidRegionError,
)
from kusionkit.models.provider import ProviderConfig
from kusionkit.models.resource import Resource, ResourceType

DEFAULT_TF_HOST = "registry.terraform.io"

EXTENSION_PROVIDER      = "provider"
EXTENSION_PROVIDER_META = "providerMeta"
EXTENSION_RESOURCE_TYPE = "resourceType"


class ProviderSource(NamedTuple):
    host: str
    namespace: str
    name: str
    is_default_host: bool


def parse_provider_source(source: str) -> ProviderSource:
    parts = source.split("/")
    if len(parts) not in (2, 3) or not all(parts):
        raise InvalidProviderSourceError(source)
    if len(parts) == 3:
        return ProviderSource(parts[0], parts[1], parts[2], False)
    return ProviderSource(DEFAULT_TF_HOST, parts[0], parts[1], True)


def terraform_resource_id(provider_cfg: ProviderConfig, res_type: str, res_name: str) -> str:
    """
    ID of a Terraform resource, unique in one spec:
    ``<providerNamespace>:<providerName>:<resType>:<resName>``.
    """
    if provider_cfg.version == "":
        raise EmptyProviderVersionError()

    src = parse_provider_source(provider_cfg.source)
    return ":".join([src.namespace, src.name, res_type, res_name])


def terraform_provider_extensions(provider_cfg: ProviderConfig, res_type: str) -> Dict[str, Any]:
    if provider_cfg.version == "":
        raise EmptyProviderVersionError()
    if provider_cfg.source == "":
        raise EmptySourceError()
    if res_type == "":
        raise EmptyResourceTypeError()

    # "hashicorp/aws" uses the default registry host, while
    # "registry.customized.io/hashicorp/aws" carries its own.
    src = parse_provider_source(provider_cfg.source)
    if src.is_default_host:
        provider_url = "/".join([DEFAULT_TF_HOST, provider_cfg.source, provider_cfg.version])
    else:
        provider_url = "/".join([provider_cfg.source, provider_cfg.version])

    return {
        EXTENSION_PROVIDER: provider_url,
        EXTENSION_PROVIDER_META: provider_cfg.provider_meta,
        EXTENSION_RESOURCE_TYPE: res_type,
    }


def terraform_provider_region(provider_cfg: ProviderConfig) -> str:
    """Region from the provider block, or "" when it has none."""
    if "region" not in provider_cfg.provider_meta:
        return ""
    region = provider_cfg.provider_meta["region"]
    if not isinstance(region, str):
        raise InvalidRegionError(region)
    return region


def wrap_tf_resource_to_kusion_resource(
    provider_cfg: ProviderConfig,
    res_type: str,
    resource_id: str,
    attributes: Dict[str, Any],
    depends_on: Optional[List[str]],
) -> Resource:
    extensions = terraform_provider_extensions(provider_cfg, res_type)
    return Resource(
        id=resource_id,
        type=ResourceType.TERRAFORM,
        attributes=attributes,
        depends_on=depends_on,
        extensions=extensions,
    )
