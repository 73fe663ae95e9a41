"""Schema and entity builders shared by the tests."""

from entity_checker.models import Attribute, AttributeDef, Concept, Dict, Entity, EntityType, Structure, Value
from entity_checker.registries.memory import InMemoryRegistry

BASE = "http://example.org"

PERSON = f"{BASE}/etypes/person"
ADDRESS = f"{BASE}/etypes/address"

NAME_AD = f"{BASE}/attrdefs/person-name"
AGE_AD = f"{BASE}/attrdefs/person-age"
ADDRESS_AD = f"{BASE}/attrdefs/person-address"
FRIEND_AD = f"{BASE}/attrdefs/person-friend"
STREET_AD = f"{BASE}/attrdefs/address-street"
PARENT_AD = f"{BASE}/attrdefs/address-parent"

PERSON_CONCEPT = f"{BASE}/concepts/person"
ADDRESS_CONCEPT = f"{BASE}/concepts/address"

ALICE = f"{BASE}/entities/alice"
BOB = f"{BASE}/entities/bob"


def attr_def(url: str, etype_url: str, datatype: str, range_etype_url: str | None = None) -> AttributeDef:
    return AttributeDef(
        url=url,
        name=Dict.of(url.rsplit("/", 1)[-1]),
        etype_url=etype_url,
        datatype=datatype,
        concept_url=f"{BASE}/concepts/{url.rsplit('/', 1)[-1]}",
        range_etype_url=range_etype_url,
    )


def person_etype() -> EntityType:
    return EntityType(
        url=PERSON,
        name=Dict.of("Person").put("it", "Persona"),
        concept_url=PERSON_CONCEPT,
        attribute_defs=[
            attr_def(NAME_AD, PERSON, "dict"),
            attr_def(AGE_AD, PERSON, "integer"),
            attr_def(ADDRESS_AD, PERSON, "structure", ADDRESS),
            attr_def(FRIEND_AD, PERSON, "entity", PERSON),
        ],
        name_attr_def_url=NAME_AD,
    )


def address_etype() -> EntityType:
    return EntityType(
        url=ADDRESS,
        name=Dict.of("Address"),
        concept_url=ADDRESS_CONCEPT,
        attribute_defs=[
            attr_def(STREET_AD, ADDRESS, "string"),
            attr_def(PARENT_AD, ADDRESS, "structure", ADDRESS),
        ],
    )


def make_registry() -> InMemoryRegistry:
    return InMemoryRegistry(
        entity_types=[person_etype(), address_etype()],
        concepts=[Concept(url=PERSON_CONCEPT, name=Dict.of("person"), description=Dict.of("a human being"))],
        default_locales=["en", "it"],
    )


def _id(local_id: int, synthetic: bool) -> int | None:
    return None if synthetic else local_id


def make_address(street: object = "Via Roma 1", synthetic: bool = False) -> Structure:
    return Structure(
        etype_url=ADDRESS,
        attributes=[Attribute(STREET_AD, [Value(street, _id(21, synthetic))], local_id=_id(20, synthetic))],
    )


def make_friend(url: str = BOB, name: Dict | None = Dict.of("Bob")) -> Entity:
    return Entity(url=url, etype_url=PERSON, name=name)


def make_person(url: str | None = None, synthetic: bool = False, friend: Entity | None = None) -> Entity:
    """A person with a name, an age, an address and a friend.

    Synthetic persons have no local ids and, unless given, an empty URL.
    """
    if url is None:
        url = "" if synthetic else ALICE
    if friend is None:
        friend = make_friend(url="" if synthetic else BOB)
    return Entity(
        url=url,
        etype_url=PERSON,
        name=Dict.of("Alice"),
        description=Dict.of("A person"),
        attributes=[
            Attribute(NAME_AD, [Value(Dict.of("Alice"), _id(11, synthetic))], local_id=_id(1, synthetic)),
            Attribute(AGE_AD, [Value(30, _id(12, synthetic))], local_id=_id(2, synthetic)),
            Attribute(ADDRESS_AD, [Value(make_address(synthetic=synthetic), _id(13, synthetic))], local_id=_id(3, synthetic)),
            Attribute(FRIEND_AD, [Value(friend, _id(14, synthetic))], local_id=_id(4, synthetic)),
        ],
    )
