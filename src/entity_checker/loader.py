"""Build model objects from plain mappings, as found in YAML or JSON documents.

Missing keys are kept as None so that the checker, not the loader, reports
them. A value payload given as a mapping with a single ``structure``,
``entity``, ``dict`` or ``concept`` key is turned into the corresponding model
object; any other payload is kept as parsed.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml

from entity_checker.errors import LoaderError
from entity_checker.models import Attribute, AttributeDef, Concept, Dict, Entity, EntityType, Structure, Value
from entity_checker.results import AssignmentResult, IDResult

logger = structlog.get_logger()


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise LoaderError(f"Expected a mapping for {what}, got {type(data).__name__}")
    return data


def _list(data: Mapping[str, Any], key: str, what: str) -> list[Any] | None:
    items = data.get(key)
    if items is None:
        return None
    if not isinstance(items, list):
        raise LoaderError(f"Expected a list for '{key}' in {what}, got {type(items).__name__}")
    return items


def load_document(path: str | Path) -> Any:
    """Load a YAML (or JSON) document from a file.

    Raises:
        LoaderError: If the file can't be read or parsed
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            document = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load document", path=str(path), error=str(e))
        raise LoaderError(f"Failed to load document from {path}: {e}") from e
    logger.debug("Document loaded", path=str(path))
    return document


def load_dict(data: Any) -> Dict | None:
    """Load a Dict from a locale mapping or a plain string (taken as English)."""
    if data is None:
        return None
    if isinstance(data, str):
        return Dict.of(data)
    data = _require_mapping(data, "dict")
    try:
        return Dict.from_mapping({str(locale) if locale is not None else None: texts for locale, texts in data.items()})
    except (TypeError, ValueError) as e:
        raise LoaderError(f"Invalid dict {data!r}: {e}") from e


def load_concept(data: Any) -> Concept:
    data = _require_mapping(data, "concept")
    return Concept(
        url=data.get("url"),
        name=load_dict(data.get("name")),
        description=load_dict(data.get("description")),
    )


def load_attribute_def(data: Any, etype_url: str | None = None) -> AttributeDef:
    """Load an attribute definition.

    Args:
        data: Attribute definition mapping
        etype_url: URL of the owning entity type, used when the mapping has none

    Returns:
        AttributeDef object
    """
    data = _require_mapping(data, "attribute def")
    return AttributeDef(
        url=data.get("url"),
        name=load_dict(data.get("name")),
        etype_url=data.get("etype_url", etype_url),
        datatype=data.get("datatype"),
        concept_url=data.get("concept_url"),
        range_etype_url=data.get("range_etype_url"),
        is_list=bool(data.get("is_list", False)),
        mandatory=bool(data.get("mandatory", False)),
    )


def load_entity_type(data: Any) -> EntityType:
    data = _require_mapping(data, "entity type")
    url = data.get("url")
    attr_defs = _list(data, "attribute_defs", f"entity type {url}") or []
    return EntityType(
        url=url,
        name=load_dict(data.get("name")),
        concept_url=data.get("concept_url"),
        attribute_defs=[load_attribute_def(item, etype_url=url) for item in attr_defs],
        name_attr_def_url=data.get("name_attr_def"),
        description_attr_def_url=data.get("description_attr_def"),
    )


def _load_payload(obj: Any) -> Any:
    if isinstance(obj, Mapping) and len(obj) == 1:
        key, inner = next(iter(obj.items()))
        if key == "structure":
            return load_structure(inner)
        if key == "entity":
            return load_entity(inner)
        if key == "dict":
            return load_dict(inner)
        if key == "concept":
            return load_concept(inner)
    return obj


def load_value(data: Any) -> Value:
    data = _require_mapping(data, "value")
    return Value(obj=_load_payload(data.get("value")), local_id=data.get("local_id"))


def load_attribute(data: Any) -> Attribute:
    data = _require_mapping(data, "attribute")
    values = _list(data, "values", "attribute")
    return Attribute(
        attr_def_url=data.get("attr_def_url"),
        values=[load_value(item) for item in values] if values is not None else None,
        local_id=data.get("local_id"),
        values_count=data.get("values_count"),
    )


def _load_attributes(data: Mapping[str, Any], what: str) -> list[Attribute] | None:
    attributes = _list(data, "attributes", what)
    if attributes is None:
        return None
    return [load_attribute(item) for item in attributes]


def load_structure(data: Any) -> Structure:
    data = _require_mapping(data, "structure")
    return Structure(
        etype_url=data.get("etype_url"),
        attributes=_load_attributes(data, "structure"),
        url=data.get("url"),
    )


def load_entity(data: Any) -> Entity:
    """Load an entity.

    A missing ``url`` loads as the empty string, the URL of synthetic entities.
    """
    data = _require_mapping(data, "entity")
    return Entity(
        url=data.get("url", ""),
        etype_url=data.get("etype_url"),
        name=load_dict(data.get("name")),
        description=load_dict(data.get("description")),
        attributes=_load_attributes(data, f"entity {data.get('url')}"),
    )


def load_id_result(data: Any) -> IDResult:
    """Load a reconciliation result.

    Raises:
        LoaderError: If the assignment result is not one of new, reuse or invalid
    """
    data = _require_mapping(data, "id result")
    raw_result = data.get("assignment_result")
    assignment_result = None
    if raw_result is not None:
        try:
            assignment_result = AssignmentResult(str(raw_result).lower())
        except ValueError as e:
            raise LoaderError(f"Unknown assignment result: {raw_result}") from e

    result_entity = data.get("result_entity")
    entities = _list(data, "entities", "id result")
    return IDResult(
        assignment_result=assignment_result,
        url=data.get("url"),
        result_entity=load_entity(result_entity) if result_entity is not None else None,
        entities=[load_entity(item) for item in entities] if entities is not None else None,
    )
