import os
from typing import Any, Dict, List

import yaml
from rich.console import Console

from kusionkit.detect import detect_format
from kusionkit.errors import ConversionError
from kusionkit.models.resource import Resource
from kusionkit.module.kubernetes import kubernetes_resource_id, wrap_k8s_resource_to_kusion_resource

console = Console(stderr=True)


def _non_string_identity(doc: Dict[str, Any], metadata: Any) -> str:
    """Name of the first id field that is set but not a string, else ""."""
    if not isinstance(metadata, dict):
        return "metadata"
    for key, val in (
        ("apiVersion", doc.get("apiVersion")),
        ("kind", doc.get("kind")),
        ("metadata.namespace", metadata.get("namespace")),
        ("metadata.name", metadata.get("name")),
    ):
        if val is not None and not isinstance(val, str):
            return key
    return ""


def parse_file(filepath: str) -> List[Resource]:
    resources: List[Resource] = []

    try:
        with open(filepath) as fh:
            docs = list(yaml.safe_load_all(fh))
    except Exception as exc:
        console.print(f"[yellow]Warning:[/yellow] failed to parse {filepath}: {exc}")
        return resources

    for doc in docs:
        if not isinstance(doc, dict):
            continue
        if not doc.get("apiVersion") or not doc.get("kind"):
            console.print(
                f"[dim]Debug:[/dim] skipping document without apiVersion/kind in {filepath}"
            )
            continue

        metadata = doc.get("metadata") or {}
        bad = _non_string_identity(doc, metadata)
        if bad:
            console.print(
                f"[yellow]Warning:[/yellow] skipping document in {filepath}: {bad} must be a string"
            )
            continue

        rid = kubernetes_resource_id(doc, metadata)
        try:
            resources.append(wrap_k8s_resource_to_kusion_resource(rid, doc))
        except ConversionError as exc:
            console.print(f"[yellow]Warning:[/yellow] skipping {rid} in {filepath}: {exc}")

    return resources


def parse_directory(path: str) -> List[Resource]:
    resources: List[Resource] = []

    if os.path.isfile(path):
        if detect_format(path) == "kubernetes":
            resources.extend(parse_file(path))
        return resources

    for root, _, files in os.walk(path):
        for fname in sorted(files):
            fpath = os.path.join(root, fname)
            if detect_format(fpath) == "kubernetes":
                resources.extend(parse_file(fpath))

    return resources
