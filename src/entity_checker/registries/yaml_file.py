"""Schema registry backed by a YAML schema file.

The file holds the knowledge base locales, the entity types with their
attribute definitions and the concepts::

    locales: [en, it]
    etypes:
      - url: http://example.org/etypes/person
        name: {en: Person}
        concept_url: http://example.org/concepts/person
        name_attr_def: http://example.org/attrdefs/person-name
        attribute_defs:
          - url: http://example.org/attrdefs/person-name
            name: {en: Name}
            datatype: dict
            concept_url: http://example.org/concepts/name
    concepts:
      - url: http://example.org/concepts/person
        name: {en: person}
        description: {en: a human being}
"""

from pathlib import Path

import structlog

from entity_checker.errors import LoaderError, RegistryError
from entity_checker.loader import load_concept, load_document, load_entity_type
from entity_checker.registries.memory import InMemoryRegistry

logger = structlog.get_logger()


class YamlRegistry(InMemoryRegistry):
    """Registry loading its schema from a YAML file."""

    def __init__(self, path: str | Path, default_locales: list[str] | None = None) -> None:
        """Initialize the registry from a schema file.

        Args:
            path: Path of the YAML schema file
            default_locales: Locales overriding the ones declared in the file

        Raises:
            RegistryError: If the file can't be read or doesn't describe a schema
        """
        self.path = Path(path)
        logger.debug("Loading schema file", path=str(self.path))

        try:
            document = load_document(self.path)
        except LoaderError as e:
            raise RegistryError(f"Failed to load schema from {self.path}: {e}") from e

        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise RegistryError(f"Schema file {self.path} must contain a mapping")

        try:
            etypes = [load_entity_type(item) for item in document.get("etypes") or []]
            concepts = [load_concept(item) for item in document.get("concepts") or []]
            locales = default_locales if default_locales is not None else document.get("locales", ["en"])
            super().__init__(entity_types=etypes, concepts=concepts, default_locales=locales)
        except (LoaderError, ValueError) as e:
            logger.error("Invalid schema file", path=str(self.path), error=str(e))
            raise RegistryError(f"Invalid schema in {self.path}: {e}") from e

        logger.info("Schema loaded", path=str(self.path), etypes=len(etypes), concepts=len(concepts))
