"""Registry of the datatypes attribute values may have.

Each datatype tag maps to the Python types a value payload of that datatype
is allowed to have. The table is closed: tags not listed here are unsupported.
"""

import datetime
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from entity_checker.models import Concept, Dict, Entity, Structure

STRING = "string"
BOOLEAN = "boolean"
INTEGER = "integer"
LONG = "long"
FLOAT = "float"
DATE = "date"
DICT = "dict"
CONCEPT = "concept"
STRUCTURE = "structure"
ENTITY = "entity"


@dataclass(frozen=True)
class DataType:
    """A datatype tag and the runtime types its values may have."""

    tag: str
    types: tuple[type, ...]
    excluded: tuple[type, ...] = ()

    def matches(self, obj: Any) -> bool:
        """Tell whether a payload has the representation this datatype requires."""
        return isinstance(obj, self.types) and not isinstance(obj, self.excluded)


_DATATYPES = MappingProxyType(
    {
        dt.tag: dt
        for dt in (
            DataType(STRING, (str,)),
            DataType(BOOLEAN, (bool,)),
            # bool is a subclass of int
            DataType(INTEGER, (int,), excluded=(bool,)),
            DataType(LONG, (int,), excluded=(bool,)),
            DataType(FLOAT, (float,)),
            DataType(DATE, (datetime.date,)),
            DataType(DICT, (Dict,)),
            DataType(CONCEPT, (Concept,)),
            # entities are structures too
            DataType(STRUCTURE, (Structure, Entity)),
            DataType(ENTITY, (Entity,)),
        )
    }
)


def get_datatype(tag: str | None) -> DataType | None:
    """Look up a datatype by tag, None if the tag is not supported."""
    if tag is None:
        return None
    return _DATATYPES.get(tag)


def datatype_tags() -> list[str]:
    return list(_DATATYPES)


def is_nested(tag: str | None) -> bool:
    """True for datatypes whose values must name a range entity type."""
    return tag in (STRUCTURE, ENTITY)
