"""In-memory schema registry."""

from collections.abc import Iterable

import structlog

from entity_checker.models import AttributeDef, Concept, EntityType
from entity_checker.registry import SchemaRegistry

logger = structlog.get_logger()


class InMemoryRegistry(SchemaRegistry):
    """Registry holding its schema in dictionaries keyed by URL."""

    def __init__(
        self,
        entity_types: Iterable[EntityType] = (),
        concepts: Iterable[Concept] = (),
        default_locales: Iterable[str] | None = ("en",),
    ) -> None:
        """Initialize the registry.

        Args:
            entity_types: Entity types to register, with their attribute defs
            concepts: Concepts to register
            default_locales: Locales of the knowledge base, preferred first
        """
        self._etypes: dict[str, EntityType] = {}
        self._attr_defs: dict[str, AttributeDef] = {}
        self._concepts: dict[str, Concept] = {}
        self._locales = list(default_locales) if default_locales is not None else None

        for etype in entity_types:
            self.add_entity_type(etype)
        for concept in concepts:
            self.add_concept(concept)

        logger.debug(
            "In-memory registry initialized",
            etypes=len(self._etypes),
            attr_defs=len(self._attr_defs),
            concepts=len(self._concepts),
        )

    @property
    def default_locales(self) -> list[str] | None:
        return self._locales

    def add_entity_type(self, etype: EntityType) -> None:
        """Register an entity type and all of its attribute definitions."""
        if etype.url is None:
            raise ValueError("Can't register an entity type without URL")
        self._etypes[etype.url] = etype
        for attr_def in etype.attribute_defs:
            if attr_def.url is not None:
                self._attr_defs[attr_def.url] = attr_def

    def add_concept(self, concept: Concept) -> None:
        if concept.url is None:
            raise ValueError("Can't register a concept without URL")
        self._concepts[concept.url] = concept

    def resolve_entity_type(self, url: str | None) -> EntityType | None:
        logger.debug("Resolving entity type", url=url)
        return self._etypes.get(url) if url is not None else None

    def resolve_attribute_def(self, url: str | None) -> AttributeDef | None:
        logger.debug("Resolving attribute def", url=url)
        return self._attr_defs.get(url) if url is not None else None

    def resolve_concept(self, url: str | None) -> Concept | None:
        logger.debug("Resolving concept", url=url)
        return self._concepts.get(url) if url is not None else None

    def entity_types(self) -> list[EntityType]:
        return list(self._etypes.values())
