"""Tests for the datatype registry."""

import datetime

import pytest

from entity_checker.datatypes import DATE, ENTITY, INTEGER, STRUCTURE, datatype_tags, get_datatype, is_nested
from entity_checker.models import Concept, Dict, Entity, Structure


def test_known_tags() -> None:
    """Test that the registry holds the closed set of tags."""
    assert set(datatype_tags()) == {
        "string",
        "boolean",
        "integer",
        "long",
        "float",
        "date",
        "dict",
        "concept",
        "structure",
        "entity",
    }


def test_unknown_tag() -> None:
    """Test lookups of unknown or missing tags."""
    assert get_datatype("color") is None
    assert get_datatype(None) is None


def test_integer_excludes_bool() -> None:
    """Test that booleans are not integers."""
    integer = get_datatype(INTEGER)
    assert integer.matches(3)
    assert not integer.matches(True)


def test_date_accepts_datetime() -> None:
    """Test that dates accept both dates and datetimes."""
    date = get_datatype(DATE)
    assert date.matches(datetime.date(2015, 1, 1))
    assert date.matches(datetime.datetime(2015, 1, 1, 12, 0))
    assert not date.matches("2015-01-01")


@pytest.mark.parametrize(
    "tag,payload",
    [
        ("structure", Structure(etype_url="http://example.org/etypes/address")),
        ("entity", Entity(url="", etype_url="http://example.org/etypes/person")),
        ("dict", Dict.of("x")),
        ("concept", Concept(url="http://example.org/concepts/x")),
    ],
)
def test_model_datatypes(tag: str, payload: object) -> None:
    """Test datatypes whose payloads are model objects."""
    assert get_datatype(tag).matches(payload)
    assert not get_datatype(tag).matches("text")


def test_nested_datatypes() -> None:
    """Test that only structure and entity are nested."""
    assert is_nested(STRUCTURE)
    assert is_nested(ENTITY)
    assert not is_nested("string")
    assert not is_nested(None)


def test_structure_accepts_entities() -> None:
    """Test that an entity is a structure but a structure is not an entity."""
    entity = Entity(url="http://example.org/entities/home", etype_url="http://example.org/etypes/address")
    assert get_datatype(STRUCTURE).matches(entity)
    assert not get_datatype(ENTITY).matches(Structure(etype_url="http://example.org/etypes/address"))
