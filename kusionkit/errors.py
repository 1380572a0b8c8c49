"""
Exceptions raised by kusionkit.
"""


class KusionKitError(Exception):
    """Base class for every kusionkit error."""


class EmptyProviderVersionError(KusionKitError, ValueError):
    def __init__(self) -> None:
        super().__init__("empty terraform provider version")


class EmptySourceError(KusionKitError, ValueError):
    def __init__(self) -> None:
        super().__init__("empty terraform provider source")


class EmptyResourceTypeError(KusionKitError, ValueError):
    def __init__(self) -> None:
        super().__init__("empty resource type")


class InvalidProviderSourceError(KusionKitError, ValueError):
    def __init__(self, source: str) -> None:
        super().__init__(f"invalid terraform provider source: {source}")
        self.source = source


class ConversionError(KusionKitError, TypeError):
    """A Kubernetes object could not be reduced to a plain mapping."""


class InvalidRegionError(KusionKitError, TypeError):
    def __init__(self, region: object) -> None:
        super().__init__(
            f"provider region must be a string, got {type(region).__name__}"
        )
        self.region = region


class DuplicateResourceError(KusionKitError, ValueError):
    def __init__(self, resource_id: str) -> None:
        super().__init__(f"duplicate resource id: {resource_id}")
        self.resource_id = resource_id


class ConfigError(KusionKitError):
    """The provider config file is unreadable or malformed."""
