"""Schema registry interface."""

from abc import ABC, abstractmethod

from entity_checker.models import AttributeDef, Concept, EntityType


class SchemaRegistry(ABC):
    """Abstract base class for schema registries.

    A registry resolves entity type, attribute definition and concept URLs to
    their definitions. Lookups return None when nothing is found and may raise
    RegistryError when the registry itself can't answer.
    """

    @property
    @abstractmethod
    def default_locales(self) -> list[str] | None:
        """Locales of the knowledge base, preferred first."""
        pass

    @abstractmethod
    def resolve_entity_type(self, url: str | None) -> EntityType | None:
        """Resolve an entity type by URL."""
        pass

    @abstractmethod
    def resolve_attribute_def(self, url: str | None) -> AttributeDef | None:
        """Resolve an attribute definition by URL."""
        pass

    @abstractmethod
    def resolve_concept(self, url: str | None) -> Concept | None:
        """Resolve a concept by URL."""
        pass

    @abstractmethod
    def entity_types(self) -> list[EntityType]:
        """List all entity types known to the registry."""
        pass
