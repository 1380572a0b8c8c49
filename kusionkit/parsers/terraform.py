import os
import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

import hcl2
from rich.console import Console

from kusionkit.detect import detect_format
from kusionkit.errors import KusionKitError
from kusionkit.models.provider import ProviderConfig
from kusionkit.models.resource import Resource
from kusionkit.module.terraform import terraform_resource_id, wrap_tf_resource_to_kusion_resource

console = Console(stderr=True)

# Meta-arguments that steer terraform itself rather than describe the resource
_META_ARGS = {"depends_on", "lifecycle", "provider"}

_INTERP_RE = re.compile(r"\$\{([^}]*)\}")
# <type>.<name> where type carries a provider prefix; skips data.x.y and var.x
_REF_RE = re.compile(r"(?<![\w.])([A-Za-z][\w-]*_[\w-]+)\.([A-Za-z_][\w-]*)")
_EXACT_VERSION_RE = re.compile(r"^=?\s*v?(\d+(?:\.\d+)*(?:[-+][\w.]+)?)$")


def _unquote(val: Any) -> Any:
    if isinstance(val, str) and len(val) >= 2 and val[0] == val[-1] == '"':
        return val[1:-1]
    return val


def _unwrap(val: Any) -> Any:
    """
    python-hcl2 wraps single-element blocks in a list.
    Recursively unwrap single-element lists that contain dicts.
    """
    if isinstance(val, list):
        if len(val) == 1 and isinstance(val[0], dict):
            return _unwrap(val[0])
        return [_unwrap(v) for v in val]
    if isinstance(val, dict):
        return {_unquote(k): _unwrap(v) for k, v in val.items()}
    return _unquote(val)


def _blocks(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    val = data.get(key, [])
    if isinstance(val, dict):
        return [val]
    return [b for b in val if isinstance(b, dict)] if isinstance(val, list) else []


def _iter_resources(data: Dict[str, Any]) -> Iterator[Tuple[str, str, Dict[str, Any]]]:
    for resource_block in _blocks(data, "resource"):
        for resource_type, instances in resource_block.items():
            # hcl2 may or may not wrap the block in a list
            instance_maps = instances if isinstance(instances, list) else [instances]
            for instance_map in instance_maps:
                if not isinstance(instance_map, dict):
                    continue
                for name, raw_props in instance_map.items():
                    props = _unwrap(raw_props) if isinstance(raw_props, (dict, list)) else {}
                    if not isinstance(props, dict):
                        props = {}
                    yield _unquote(resource_type), _unquote(name), props


def _pin_version(constraint: Any) -> str:
    """Exact version from a constraint such as "5.0.0" or "= 5.0.0", else ""."""
    if not isinstance(constraint, str):
        return ""
    m = _EXACT_VERSION_RE.match(constraint.strip())
    return m.group(1) if m else ""


def _strip_interp(val: Any) -> str:
    val = str(val).strip()
    m = _INTERP_RE.fullmatch(val)
    return m.group(1).strip() if m else val


def _declared_providers(module: List[Dict[str, Any]]) -> Dict[str, ProviderConfig]:
    """
    ProviderConfigs keyed by local name (and "<name>.<alias>" for aliased
    provider blocks), from the required_providers and provider blocks of
    every file of one module.
    """
    requirements: Dict[str, Dict[str, Any]] = {}
    for tf_block in (b for data in module for b in _blocks(data, "terraform")):
        for rp in _blocks(tf_block, "required_providers"):
            for name, req in _unwrap(rp).items():
                if isinstance(req, str):
                    # legacy shorthand: aws = "5.0.0"
                    req = {"version": req}
                if isinstance(req, dict):
                    requirements[name] = req

    metas: Dict[str, Dict[str, Any]] = {}
    for provider_block in (b for data in module for b in _blocks(data, "provider")):
        for name, body in provider_block.items():
            name = _unquote(name)
            body = _unwrap(body)
            if not isinstance(body, dict):
                body = {}
            alias = body.pop("alias", None)
            key = f"{name}.{alias}" if alias else name
            metas.setdefault(key, body)

    configs: Dict[str, ProviderConfig] = {}
    for key in set(requirements) | set(metas):
        local_name = key.split(".", 1)[0]
        req = requirements.get(local_name, {})
        configs[key] = ProviderConfig(
            source=str(req.get("source") or f"hashicorp/{local_name}"),
            version=_pin_version(req.get("version", "")),
            provider_meta=metas.get(key, metas.get(local_name, {})),
        )
    return configs


def _merge(base: Optional[ProviderConfig], override: Optional[ProviderConfig]) -> Optional[ProviderConfig]:
    if override is None:
        return base
    if base is None:
        return override
    return ProviderConfig(
        source=override.source or base.source,
        version=override.version or base.version,
        provider_meta=override.provider_meta or base.provider_meta,
    )


def _provider_key(resource_type: str, props: Dict[str, Any]) -> str:
    if "provider" in props:
        return _strip_interp(props["provider"])
    return resource_type.split("_", 1)[0]


def _extract_refs(val: Any) -> List[Tuple[str, str]]:
    """Recursively scan property values for <type>.<name> references."""
    refs: List[Tuple[str, str]] = []
    if isinstance(val, str):
        for expr in _INTERP_RE.findall(val):
            refs.extend(_REF_RE.findall(expr))
    elif isinstance(val, list):
        for item in val:
            refs.extend(_extract_refs(item))
    elif isinstance(val, dict):
        for v in val.values():
            refs.extend(_extract_refs(v))
    return refs


def _load(filepath: str) -> Optional[Dict[str, Any]]:
    try:
        with open(filepath) as fh:
            return hcl2.load(fh)
    except Exception as exc:
        console.print(f"[yellow]Warning:[/yellow] failed to parse {filepath}: {exc}")
        return None


def parse_files(
    filepaths: List[str], provider_configs: Optional[Dict[str, ProviderConfig]] = None
) -> List[Resource]:
    """
    Wrap the resources of the given files as one Terraform module: provider
    blocks and resource references resolve across all of them.
    """
    resources: List[Resource] = []
    loaded = []
    for fp in filepaths:
        data = _load(fp)
        if data is not None:
            loaded.append((fp, data))

    declared = _declared_providers([data for _, data in loaded])
    overrides = provider_configs or {}

    # first pass: resolve provider configs and ids so references can be mapped
    resolved = []
    ids: Dict[Tuple[str, str], str] = {}
    for filepath, data in loaded:
        for resource_type, name, props in _iter_resources(data):
            key = _provider_key(resource_type, props)
            local_name = key.split(".", 1)[0]
            cfg = _merge(
                declared.get(key, declared.get(local_name)),
                overrides.get(key, overrides.get(local_name)),
            )
            if cfg is None:
                cfg = ProviderConfig(source=f"hashicorp/{local_name}")
            try:
                rid = terraform_resource_id(cfg, resource_type, name)
            except KusionKitError as exc:
                console.print(
                    f"[yellow]Warning:[/yellow] skipping {resource_type}.{name} in {filepath}: {exc}"
                )
                continue
            ids[(resource_type, name)] = rid
            resolved.append((filepath, resource_type, name, props, cfg, rid))

    for filepath, resource_type, name, props, cfg, rid in resolved:
        deps = sorted({
            ids[ref] for ref in _extract_refs(props)
            if ref in ids and ids[ref] != rid
        })
        attributes = {k: v for k, v in props.items() if k not in _META_ARGS}
        try:
            resources.append(wrap_tf_resource_to_kusion_resource(
                cfg, resource_type, rid, attributes, deps or None,
            ))
        except KusionKitError as exc:
            console.print(
                f"[yellow]Warning:[/yellow] skipping {resource_type}.{name} in {filepath}: {exc}"
            )

    return resources


def parse_file(
    filepath: str, provider_configs: Optional[Dict[str, ProviderConfig]] = None
) -> List[Resource]:
    return parse_files([filepath], provider_configs)


def parse_directory(
    path: str, provider_configs: Optional[Dict[str, ProviderConfig]] = None
) -> List[Resource]:
    """Each directory holding .tf files is parsed as one module."""
    resources: List[Resource] = []

    if os.path.isfile(path):
        if detect_format(path) == "terraform":
            resources.extend(parse_file(path, provider_configs))
        return resources

    for root, _, files in os.walk(path):
        module = [
            os.path.join(root, fname) for fname in sorted(files)
            if detect_format(os.path.join(root, fname)) == "terraform"
        ]
        if module:
            resources.extend(parse_files(module, provider_configs))

    return resources
