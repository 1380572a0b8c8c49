from typing import Dict

LABEL_PART_OF = "app.kubernetes.io/part-of"
LABEL_NAME    = "app.kubernetes.io/name"


def unique_app_name(project_name: str, stack_name: str, app_name: str) -> str:
    """Unique workload name built from its project, stack and app name."""
    return project_name + "-" + stack_name + "-" + app_name


def unique_app_labels(project_name: str, app_name: str) -> Dict[str, str]:
    """Labels identifying an app by its project and name. Selectors match on these keys."""
    return {
        LABEL_PART_OF: project_name,
        LABEL_NAME: app_name,
    }
