"""
YAML spec document, the form the engine reads spec files in.
"""
import yaml

from kusionkit.models.spec import Spec


class _NoAliasDumper(yaml.SafeDumper):
    # resources of one provider share a providerMeta dict; write it out in full each time
    def ignore_aliases(self, data):
        return True


def build_document(spec: Spec) -> str:
    return yaml.dump(
        spec.to_dict(),
        Dumper=_NoAliasDumper,
        sort_keys=False,
        default_flow_style=False,
    )
