from tinyurl.registry.base import UrlRegistryBase
from tinyurl.registry.memory import InMemoryUrlRegistry


__all__ = [
    'UrlRegistryBase',
    'InMemoryUrlRegistry',
]
