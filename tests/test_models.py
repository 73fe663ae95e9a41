"""Tests for data models."""

import pytest

from entity_checker.errors import SchemaNotFoundError
from entity_checker.models import Attribute, AttrMapping, Dict, Entity, SchemaMapping, Structure, Value
from tests.schema import AGE_AD, NAME_AD, STREET_AD, make_person, person_etype


def test_dict_creation() -> None:
    """Test dict creation with defaults."""
    d = Dict.of("Hello")
    assert d.locales == ["en"]
    assert d.string("en") == "Hello"
    assert d.string("it") is None
    assert d.strings("it") == ()
    assert Dict().is_empty()


def test_dict_rejects_none_text() -> None:
    """Test that None texts are not allowed."""
    with pytest.raises(ValueError):
        Dict.of(None)
    with pytest.raises(ValueError):
        Dict({"en": ["a", None]})


def test_dict_none_locale_is_root() -> None:
    """Test that a None locale becomes the root locale."""
    d = Dict.of("ciao", locale=None)
    assert d.locales == [""]


def test_dict_put_is_a_copy() -> None:
    """Test that put returns a new dict."""
    d = Dict.of("Hello")
    d2 = d.put("it", ["Ciao", "Salve"])
    assert d.strings("it") == ()
    assert d2.strings("it") == ("Ciao", "Salve")
    assert d2.translations_count() == 3


def test_dict_merge() -> None:
    """Test that merge appends only unseen strings."""
    merged = Dict.from_mapping({"en": ["a", "b"]}).merge(Dict.from_mapping({"en": ["b", "c"], "it": "d"}))
    assert merged.strings("en") == ("a", "b", "c")
    assert merged.strings("it") == ("d",)


def test_dict_valid_strings() -> None:
    """Test lookup of valid translations and pretty printing."""
    d = Dict.from_mapping({"it": ["", "null", "Ciao"], "de": "Hallo"})
    assert d.valid_string("it") == "Ciao"
    assert not d.is_empty()
    assert d.pretty(["it"]) == "Ciao"
    assert d.pretty(["fr"]) in ("Ciao", "Hallo")
    assert Dict.from_mapping({"it": ["null"]}).is_empty()
    assert Dict.from_mapping({"it": ["null"]}).pretty() == ""


def test_dict_contains() -> None:
    """Test case insensitive search."""
    d = Dict.of("Hello World")
    assert d.contains("world")
    assert not d.contains("moon")


def test_dict_equality() -> None:
    """Test that dicts with the same translations are equal and hash alike."""
    assert Dict.of("a") == Dict({"en": ["a"]})
    assert hash(Dict.of("a")) == hash(Dict({"en": ("a",)}))


def test_etype_accessors() -> None:
    """Test attribute def lookup on entity types."""
    etype = person_etype()
    assert etype.attr_def(AGE_AD).datatype == "integer"
    assert etype.attr_def("http://example.org/nope") is None
    assert etype.name_attr_def().url == NAME_AD

    etype.description_attr_def_url = "http://example.org/nope"
    with pytest.raises(SchemaNotFoundError):
        etype.description_attr_def()


def test_attribute_values() -> None:
    """Test attribute value helpers."""
    attribute = Attribute(AGE_AD, [Value(1, 1), Value(2, 2)], local_id=1)
    assert attribute.first_value().obj == 1
    assert attribute.raw_values() == [1, 2]
    with pytest.raises(LookupError):
        Attribute(AGE_AD, []).first_value()


def test_structure_lookup() -> None:
    """Test attribute lookup on structures and entities."""
    structure = Structure(etype_url="http://example.org/etypes/address", attributes=[Attribute(STREET_AD, [Value("x", 1)])])
    assert structure.attribute(STREET_AD) is structure.attributes[0]
    assert structure.attribute(AGE_AD) is None
    assert [v.obj for v in structure.values(STREET_AD)] == ["x"]
    assert structure.values(AGE_AD) == []

    person = make_person()
    assert person.attribute(AGE_AD).raw_values() == [30]
    assert len(person.values()) == 4


def test_entity_defaults() -> None:
    """Test entity creation with defaults."""
    entity = Entity(url="", etype_url="http://example.org/etypes/person")
    assert entity.name == Dict()
    assert entity.description == Dict()
    assert entity.attributes == []


def test_mappings_order_by_score() -> None:
    """Test that mappings compare by score."""
    x1 = AttrMapping(source_path=["schema", "s"], target_path=["b"], score=1.0)
    x2 = AttrMapping(source_path=["schema", "s"], target_path=["b"], score=0.5)
    assert x1 > x2
    assert sorted([x1, x2]) == [x2, x1]

    assert SchemaMapping(target_etype=None, score=1.0, mappings=[x1]) > SchemaMapping(target_etype=None, score=0.5)
