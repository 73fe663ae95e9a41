"""Schema registry implementations."""

from entity_checker.registries.memory import InMemoryRegistry
from entity_checker.registries.yaml_file import YamlRegistry

__all__ = ["InMemoryRegistry", "YamlRegistry"]
