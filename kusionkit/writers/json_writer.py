"""
JSON spec document with a generation header.
"""
import json
from datetime import datetime, timezone

from kusionkit import __version__
from kusionkit.models.spec import Spec


def build_document(spec: Spec, source_path: str) -> str:
    document = {
        "meta": {
            "generated": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "source": source_path,
            "tool": "kusionkit",
            "version": __version__,
        },
        "resources": spec.to_dict()["resources"],
    }
    return json.dumps(document, indent=2)
