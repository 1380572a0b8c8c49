import os

import yaml


def detect_format(filepath: str) -> str:
    """
    Return 'terraform', 'kubernetes', or 'unknown'.
    """
    _, ext = os.path.splitext(filepath.lower())

    if ext == ".tf":
        return "terraform"

    if ext in (".yaml", ".yml"):
        try:
            with open(filepath) as fh:
                docs = list(yaml.safe_load_all(fh))
        except Exception:
            return "unknown"

        # Kubernetes: apiVersion + kind at top level of any document
        for doc in docs:
            if isinstance(doc, dict) and "apiVersion" in doc and "kind" in doc:
                return "kubernetes"

    return "unknown"
