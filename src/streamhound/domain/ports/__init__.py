from .adapter_registry import AdapterRegistryPort
from .metadata import MetadataResolverPort

__all__ = [
    "AdapterRegistryPort",
    "MetadataResolverPort",
]
