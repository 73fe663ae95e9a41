"""Checker verifying that entities and schema elements comply with their schema.

Every public ``check_*`` method returns a CheckResult. Checks are fail-fast:
the first violation found during the depth-first walk stops the whole check,
and the failure is wrapped by every enclosing node so that its path leads from
the checked object down to the offending node.

Synthetic objects are those not stored yet: for them URLs of entities and
local ids of attributes and values are not required.
"""

import structlog

from entity_checker.datatypes import ENTITY, STRUCTURE, get_datatype, is_nested
from entity_checker.errors import CheckResult, Failure, FailureKind, RegistryError
from entity_checker.models import Attribute, AttributeDef, Concept, Entity, EntityType, SchemaMapping, StructureLike, Value
from entity_checker.registry import SchemaRegistry
from entity_checker.results import AssignmentResult, IDResult
from entity_checker.urls import dirty_url_reason, is_dirty_url

logger = structlog.get_logger()

DEFAULT_MAX_DEPTH = 64


def _url_failure(url: str | None, message: str, segment: str) -> Failure | None:
    """Failure for a dirty URL, None if the URL is fine."""
    if not is_dirty_url(url):
        return None
    kind = FailureKind.MISSING_REFERENCE if url is None else FailureKind.MALFORMED_URL
    return Failure(kind, f"{message} ({dirty_url_reason(url)})", (segment,))


def _missing(message: str, segment: str) -> Failure:
    return Failure(FailureKind.MISSING_REFERENCE, message, (segment,))


def _entity_segment(entity: Entity) -> str:
    return f"entity:{entity.url or '<synthetic>'}"


def _structure_segment(structure: StructureLike) -> str:
    return f"structure:{structure.url or f'<{structure.etype_url}>'}"


class Checker:
    """Checks entity graphs and schema elements against a schema registry.

    The checker holds no state besides the registry, never modifies what it
    checks and can be shared between threads.
    """

    def __init__(self, registry: SchemaRegistry, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        """Initialize the checker.

        Args:
            registry: Registry used to resolve entity types and attribute definitions
            max_depth: Maximum number of structures nested into each other

        Raises:
            ValueError: If the registry is missing or max_depth is not positive
        """
        if registry is None:
            raise ValueError("A schema registry is required")
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self.registry = registry
        self.max_depth = max_depth
        logger.debug("Checker initialized", registry=type(registry).__name__, max_depth=max_depth)

    @classmethod
    def of(cls, registry: SchemaRegistry, max_depth: int = DEFAULT_MAX_DEPTH) -> "Checker":
        return cls(registry, max_depth=max_depth)

    def _result(self, failure: Failure | None, check: str) -> CheckResult:
        if failure is not None:
            root = failure.root_cause
            logger.debug("Check failed", check=check, kind=failure.kind.value, path=list(failure.path), reason=root.message)
        else:
            logger.debug("Check passed", check=check)
        return CheckResult(failure)

    # Registry lookups

    def _resolve_etype(self, url: str | None, segment: str) -> tuple[EntityType | None, Failure | None]:
        try:
            etype = self.registry.resolve_entity_type(url)
        except RegistryError as e:
            return None, Failure(FailureKind.UNRESOLVED_SCHEMA, f"Failed to resolve etype {url}: {e}", (segment,))
        if etype is None:
            return None, Failure(FailureKind.UNRESOLVED_SCHEMA, f"Found no etype with URL {url}", (segment,))
        return etype, None

    def _resolve_attr_def(self, url: str | None, segment: str) -> tuple[AttributeDef | None, Failure | None]:
        try:
            attr_def = self.registry.resolve_attribute_def(url)
        except RegistryError as e:
            return None, Failure(FailureKind.UNRESOLVED_SCHEMA, f"Failed to resolve attr def {url}: {e}", (segment,))
        if attr_def is None:
            return None, Failure(FailureKind.UNRESOLVED_SCHEMA, f"Found no attr def with URL {url}", (segment,))
        return attr_def, None

    # Schema

    def check_schema_mapping(self, mapping: SchemaMapping | None) -> CheckResult:
        """Check a schema mapping: its target entity type must be valid."""
        logger.debug("Checking schema mapping")
        if mapping is None:
            return self._result(_missing("Schema mapping is null!", "schema_mapping"), "schema_mapping")
        failure = self._entity_type(mapping.target_etype)
        if failure is not None:
            failure = failure.wrap("Invalid etype in schema mapping!", "schema_mapping")
        return self._result(failure, "schema_mapping")

    def check_entity_type(self, etype: EntityType | None) -> CheckResult:
        """Check an entity type and all of its attribute definitions."""
        logger.debug("Checking entity type", url=getattr(etype, "url", None))
        return self._result(self._entity_type(etype), "entity_type")

    def _entity_type(self, etype: EntityType | None) -> Failure | None:
        if etype is None:
            return _missing("Found null etype!", "etype:?")
        segment = f"etype:{etype.url}"

        failure = _url_failure(etype.url, "Invalid etype URL!", segment)
        if failure is not None:
            return failure
        if etype.name is None:
            return _missing(f"Found null name in etype {etype.url}", segment)
        failure = _url_failure(etype.concept_url, f"Found invalid concept for etype {etype.url}", segment)
        if failure is not None:
            return failure
        if etype.attribute_defs is None:
            return _missing(f"Found null attribute defs in etype {etype.url}", segment)

        for attr_def in etype.attribute_defs:
            failure = self._attribute_def(attr_def)
            if failure is not None:
                return failure.wrap(f"Found invalid attr def in etype {etype.url}", segment)

        for role, accessor in (("name", etype.name_attr_def), ("description", etype.description_attr_def)):
            try:
                accessor()
            except Exception as e:
                return Failure(
                    FailureKind.UNRESOLVED_SCHEMA,
                    f"Found problem in the {role} attr def of etype {etype.url}: {e}",
                    (segment,),
                )
        return None

    def check_attribute_def(self, attr_def: AttributeDef | None) -> CheckResult:
        """Check an attribute definition.

        Attribute definitions of datatype structure or entity must name the
        entity type of their values.
        """
        logger.debug("Checking attribute def", url=getattr(attr_def, "url", None))
        return self._result(self._attribute_def(attr_def), "attribute_def")

    def _attribute_def(self, attr_def: AttributeDef | None) -> Failure | None:
        if attr_def is None:
            return _missing("Found null attribute def!", "attr_def:?")
        segment = f"attr_def:{attr_def.url}"

        failure = _url_failure(attr_def.url, f"Found invalid URL for attribute def {attr_def.name}", segment)
        if failure is not None:
            return failure
        if attr_def.name is None:
            return _missing(f"Found null name dict for attribute def {attr_def.url}", segment)
        failure = _url_failure(attr_def.etype_url, f"Found invalid etype URL for attribute def {attr_def.url}", segment)
        if failure is not None:
            return failure
        if attr_def.datatype is None:
            return _missing(f"Found null datatype for attribute def {attr_def.url}", segment)
        if is_nested(attr_def.datatype):
            failure = _url_failure(
                attr_def.range_etype_url,
                f"Attribute def {attr_def.url} with parent etype {attr_def.etype_url} is of datatype "
                f"{attr_def.datatype}, but it has an invalid range etype URL",
                segment,
            )
            if failure is not None:
                return failure
        if attr_def.concept_url is None:
            return _missing(f"Found invalid concept for attr def {attr_def.url}", segment)
        return None

    # Entity graphs

    def check_entity(self, entity: Entity | None, synthetic: bool = False) -> CheckResult:
        """Check an entity and everything it holds.

        Args:
            entity: The entity to check
            synthetic: If True, the entity URL and the local ids of its
                attributes and values are not required

        Returns:
            The check result
        """
        logger.debug("Checking entity", url=getattr(entity, "url", None), synthetic=synthetic)
        return self._result(self._entity(entity, synthetic), "entity")

    def _entity(self, entity: Entity | None, synthetic: bool) -> Failure | None:
        if entity is None:
            return _missing("Found null entity!", "entity:?")
        segment = _entity_segment(entity)

        _, failure = self._resolve_etype(entity.etype_url, segment)
        if failure is not None:
            return failure

        failure = self._structure(entity, synthetic, (), segment)
        if failure is not None:
            return failure.wrap(f"Found invalid structural properties of entity {entity.url}")

        if not synthetic:
            failure = _url_failure(entity.url, "Found invalid URL in entity", segment)
            if failure is not None:
                return failure
        if entity.name is None:
            return _missing(f"Found invalid name in entity {entity.url}", segment)
        if entity.description is None:
            return _missing(f"Found invalid description in entity {entity.url}", segment)
        return None

    def check_structure(self, structure: StructureLike | None, synthetic: bool = False) -> CheckResult:
        """Check a structure and all of its attributes.

        Args:
            structure: The structure to check
            synthetic: If True, local ids of attributes and values are not required

        Returns:
            The check result
        """
        logger.debug("Checking structure", etype_url=getattr(structure, "etype_url", None), synthetic=synthetic)
        return self._result(self._structure(structure, synthetic, ()), "structure")

    def _structure(
        self,
        structure: StructureLike | None,
        synthetic: bool,
        stack: tuple[int, ...],
        segment: str | None = None,
    ) -> Failure | None:
        """Check a structure.

        Args:
            structure: The structure to check
            synthetic: Whether identifiers are relaxed
            stack: ids of the structures enclosing this one
            segment: Path segment to report, when the structure is an entity checked as itself
        """
        if structure is None:
            return _missing("Found null structure!", "structure:?")
        segment = segment or _structure_segment(structure)

        if id(structure) in stack:
            return Failure(FailureKind.INVARIANT_VIOLATION, "Found cyclic structure, it contains itself", (segment,))
        if len(stack) >= self.max_depth:
            return Failure(
                FailureKind.INVARIANT_VIOLATION,
                f"Found structures nested deeper than {self.max_depth} levels",
                (segment,),
            )

        etype, failure = self._resolve_etype(structure.etype_url, segment)
        if failure is not None:
            return failure
        failure = _url_failure(structure.etype_url, f"Found invalid entity type URL in structure {structure.url}", segment)
        if failure is not None:
            return failure
        if etype.url != structure.etype_url:
            return Failure(
                FailureKind.TYPE_MISMATCH,
                f"Provided etype {etype.url} is not the one referenced by the structure, which is {structure.etype_url}",
                (segment,),
            )
        if structure.attributes is None:
            return _missing(f"Found null attributes in structure {structure.url}", segment)

        stack = stack + (id(structure),)
        for attribute in structure.attributes:
            failure = self._attribute(attribute, synthetic, stack)
            if failure is not None:
                return failure.wrap(f"Found invalid attribute in structure {structure.url}", segment)
        return None

    def check_attribute(self, attribute: Attribute | None, synthetic: bool = False) -> CheckResult:
        """Check an attribute and all of its values.

        Args:
            attribute: The attribute to check
            synthetic: If True, local ids of the attribute and its values are not required

        Returns:
            The check result
        """
        logger.debug("Checking attribute", local_id=getattr(attribute, "local_id", None), synthetic=synthetic)
        return self._result(self._attribute(attribute, synthetic, ()), "attribute")

    def _attribute(self, attribute: Attribute | None, synthetic: bool, stack: tuple[int, ...]) -> Failure | None:
        if attribute is None:
            return _missing("Found null attribute!", "attribute:?")
        segment = f"attribute:{attribute.local_id}"

        attr_def, failure = self._resolve_attr_def(attribute.attr_def_url, segment)
        if failure is not None:
            return failure
        if not synthetic and attribute.local_id is None:
            return _missing(f"Found null local ID in attribute with attr def {attribute.attr_def_url}", segment)
        if attribute.attr_def_url is None:
            return _missing(f"Found null attribute definition in attribute {attribute.local_id}", segment)
        if attribute.values is None:
            return _missing(f"Found null values list in attribute {attribute.local_id}", segment)
        if attribute.values_count != len(attribute.values):
            return Failure(
                FailureKind.CARDINALITY_MISMATCH,
                f"Found inconsistent values count in attribute {attribute.local_id}. "
                f"values_count = {attribute.values_count}, number of values = {len(attribute.values)}",
                (segment,),
            )

        for value in attribute.values:
            failure = self._value(value, attr_def, synthetic, stack)
            if failure is not None:
                return failure.wrap(f"Found invalid value in attribute {attribute.local_id}", segment)
        return None

    def check_value(self, value: Value | None, attr_def: AttributeDef, synthetic: bool = False) -> CheckResult:
        """Check a value against the attribute definition of its attribute.

        Structure values, entities given as structures included, are checked
        deeply. Entity values only need a URL (unless synthetic) and a name:
        referenced entities are not walked.

        Args:
            value: The value to check
            attr_def: Definition of the attribute holding the value
            synthetic: If True, local ids of values are not required

        Returns:
            The check result

        Raises:
            ValueError: If attr_def is None
        """
        if attr_def is None:
            raise ValueError("An attribute def is required to check a value")
        logger.debug("Checking value", local_id=getattr(value, "local_id", None), datatype=attr_def.datatype)
        return self._result(self._value(value, attr_def, synthetic, ()), "value")

    def _value(self, value: Value | None, attr_def: AttributeDef, synthetic: bool, stack: tuple[int, ...]) -> Failure | None:
        if value is None:
            return _missing("Found null value!", "value:?")
        segment = f"value:{value.local_id}"
        datatype = attr_def.datatype

        if not synthetic and value.local_id is None:
            return _missing(f"Found null local ID in value {value.obj!r}", segment)
        if value.obj is None:
            return _missing(f"Found null object in value {value.local_id}", segment)

        dt = get_datatype(datatype)
        if dt is None:
            return Failure(
                FailureKind.UNRESOLVED_SCHEMA,
                f"Found unsupported datatype {datatype} in value {value.obj!r} of type {type(value.obj).__name__}",
                (segment,),
            )
        if not dt.matches(value.obj):
            return Failure(
                FailureKind.TYPE_MISMATCH,
                f"Found value not corresponding to its datatype {datatype}. "
                f"Value is {value.obj!r} of type {type(value.obj).__name__}",
                (segment,),
            )

        if datatype == STRUCTURE:
            structure = value.obj
            if attr_def.range_etype_url != structure.etype_url:
                return Failure(
                    FailureKind.TYPE_MISMATCH,
                    f"Found structure value with etype {structure.etype_url} "
                    f"different from the range etype {attr_def.range_etype_url} of its attribute",
                    (segment,),
                )
            failure = self._structure(structure, synthetic, stack)
            if failure is not None:
                return failure.wrap(f"Found invalid structure in value {value.local_id}", segment)

        if datatype == ENTITY:
            entity = value.obj
            if not synthetic:
                failure = _url_failure(entity.url, f"Found invalid URL in entity inside value {value.local_id}", segment)
                if failure is not None:
                    return failure
            if entity.name is None:
                return _missing(f"Found invalid name in entity {entity.url} inside value {value.local_id}", segment)
        return None

    def check_concept(self, concept: Concept | None) -> CheckResult:
        logger.debug("Checking concept", url=getattr(concept, "url", None))
        return self._result(self._concept(concept), "concept")

    def _concept(self, concept: Concept | None) -> Failure | None:
        if concept is None:
            return _missing("Found null concept!", "concept:?")
        segment = f"concept:{concept.url}"
        failure = _url_failure(concept.url, "Found invalid URL in concept", segment)
        if failure is not None:
            return failure
        if concept.name is None:
            return _missing(f"Found invalid name in concept {concept.url}", segment)
        if concept.description is None:
            return _missing(f"Found invalid description in concept {concept.url}", segment)
        return None

    # Reconciliation

    def check_id_result(self, id_result: IDResult | None) -> CheckResult:
        """Check a reconciliation result.

        NEW and REUSE results need a valid URL and valid candidates. REUSE
        needs at least one candidate and a valid result entity; NEW needs no
        candidates and a result entity that is valid as a synthetic entity.
        """
        logger.debug("Checking id result", assignment_result=getattr(id_result, "assignment_result", None))
        return self._result(self._id_result(id_result), "id_result")

    def _id_result(self, id_result: IDResult | None) -> Failure | None:
        segment = "id_result"
        if id_result is None:
            return _missing("Found null idResult!", segment)
        outcome = id_result.assignment_result
        if outcome is None:
            return _missing("Found null assignment result in idResult", segment)
        if id_result.entities is None:
            return _missing(f"Found null result entities in idResult with {outcome.name}", segment)

        if outcome in (AssignmentResult.NEW, AssignmentResult.REUSE):
            failure = _url_failure(id_result.url, f"Found invalid URL in idResult with {outcome.name}", segment)
            if failure is not None:
                return failure
            for candidate in id_result.entities:
                failure = self._entity(candidate, False)
                if failure is not None:
                    return failure.wrap(
                        f"Failed integrity check on candidate entity {getattr(candidate, 'url', None)}",
                        segment,
                    )

        if outcome == AssignmentResult.REUSE:
            failure = self._entity(id_result.result_entity, False)
            if failure is not None:
                return failure.wrap("Found invalid result entity in idResult with REUSE", segment)
            if not id_result.entities:
                return Failure(FailureKind.CARDINALITY_MISMATCH, "Found empty entities in idResult with REUSE", (segment,))

        if outcome == AssignmentResult.NEW:
            failure = self._entity(id_result.result_entity, True)
            if failure is not None:
                return failure.wrap("Found invalid result entity in idResult with NEW", segment)
            if id_result.entities:
                return Failure(
                    FailureKind.CARDINALITY_MISMATCH,
                    f"Found {len(id_result.entities)} entities in idResult with NEW, expected none",
                    (segment,),
                )
        return None

    def check_ekb_quick(self, ekb: SchemaRegistry | None) -> CheckResult:
        """Quick sanity check of a knowledge base handle: it must have a default locale."""
        logger.debug("Checking ekb", ekb=type(ekb).__name__)
        if ekb is None:
            return self._result(_missing("Found null ekb!", "ekb:?"), "ekb")
        segment = f"ekb:{type(ekb).__name__}"
        locales = ekb.default_locales
        if locales is None:
            failure = _missing(f"Found null locales list in ekb {type(ekb).__name__}", segment)
        elif not locales or locales[0] is None:
            failure = _missing(f"Found no first locale in ekb {type(ekb).__name__}", segment)
        else:
            failure = None
        return self._result(failure, "ekb")
