"""Data models for entity checking."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from entity_checker.errors import SchemaNotFoundError

logger = structlog.get_logger()

ROOT_LOCALE = ""
ENGLISH = "en"


def _sanitize_locale(locale: str | None) -> str:
    if locale is None:
        logger.warning("Found null locale, converting it to root locale")
        return ROOT_LOCALE
    return locale


def _is_valid_text(text: str) -> bool:
    return bool(text) and text != "null"


@dataclass(frozen=True)
class Dict:
    """Immutable multilingual text: each locale maps to a list of strings.

    Locales are language tags such as ``"en"`` or ``"it"``; the empty tag is
    the root locale.
    """

    translations: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        sanitized: dict[str, tuple[str, ...]] = {}
        for locale, texts in self.translations.items():
            if isinstance(texts, str):
                texts = (texts,)
            for text in texts:
                if text is None:
                    raise ValueError("None texts are not allowed in a Dict")
            sanitized[_sanitize_locale(locale)] = tuple(texts)
        object.__setattr__(self, "translations", sanitized)

    @classmethod
    def of(cls, text: str, locale: str | None = ENGLISH) -> "Dict":
        """Create a Dict holding a single text."""
        if text is None:
            raise ValueError("None text is not allowed in a Dict")
        return cls({_sanitize_locale(locale): (text,)})

    @classmethod
    def from_mapping(cls, mapping: Mapping[str | None, str | Iterable[str]]) -> "Dict":
        """Create a Dict from a mapping of locale to one text or a list of texts."""
        return cls({_sanitize_locale(loc): (texts,) if isinstance(texts, str) else tuple(texts) for loc, texts in mapping.items()})

    @property
    def locales(self) -> list[str]:
        return list(self.translations)

    def strings(self, locale: str) -> tuple[str, ...]:
        """All strings for a locale, empty if the locale is missing."""
        return self.translations.get(locale, ())

    def string(self, locale: str) -> str | None:
        """First string for a locale, or None."""
        texts = self.strings(locale)
        return texts[0] if texts else None

    def valid_string(self, locale: str) -> str | None:
        """First string for a locale that is neither empty nor ``"null"``."""
        for text in self.strings(locale):
            if _is_valid_text(text):
                return text
        return None

    def put(self, locale: str | None, texts: str | Iterable[str]) -> "Dict":
        """Return a copy with the strings of a locale replaced."""
        if isinstance(texts, str):
            texts = (texts,)
        new = dict(self.translations)
        new[_sanitize_locale(locale)] = tuple(texts)
        return Dict(new)

    def merge(self, other: "Dict") -> "Dict":
        """Return a copy extended with the strings of another Dict.

        Strings already present for a locale are not repeated.
        """
        merged = {loc: list(texts) for loc, texts in self.translations.items()}
        for locale, texts in other.translations.items():
            current = merged.setdefault(locale, [])
            for text in texts:
                if text not in current:
                    current.append(text)
        return Dict({loc: tuple(texts) for loc, texts in merged.items()})

    def contains(self, text: str) -> bool:
        """Case-insensitive substring search across all locales."""
        needle = text.lower()
        return any(needle in t.lower() for texts in self.translations.values() for t in texts)

    def is_empty(self) -> bool:
        """True if no locale has a valid string."""
        return all(self.valid_string(loc) is None for loc in self.translations)

    def translations_count(self) -> int:
        return sum(len(texts) for texts in self.translations.values())

    def pretty(self, locales: Iterable[str] = ()) -> str:
        """Best translation for the preferred locales.

        Falls back to English, then to any locale, then to the empty string.
        """
        for locale in [*locales, ENGLISH, *self.translations]:
            text = self.valid_string(locale)
            if text is not None:
                return text
        return ""

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.translations.items())))

    def __str__(self) -> str:
        return self.pretty()


@dataclass
class Concept:
    """A node of the concept taxonomy."""

    url: str | None
    name: Dict | None = field(default_factory=Dict)
    description: Dict | None = field(default_factory=Dict)


@dataclass
class AttributeDef:
    """Schema of one named, typed slot of an entity type."""

    url: str | None
    name: Dict | None
    etype_url: str | None
    datatype: str | None
    concept_url: str | None = None
    range_etype_url: str | None = None
    is_list: bool = False
    mandatory: bool = False


@dataclass
class EntityType:
    """Schema describing the shape of the entities of one kind."""

    url: str | None
    name: Dict | None
    concept_url: str | None = None
    attribute_defs: list[AttributeDef] = field(default_factory=list)
    name_attr_def_url: str | None = None
    description_attr_def_url: str | None = None

    def attr_def(self, url: str) -> AttributeDef | None:
        """Find one of this type's attribute definitions by URL."""
        for attr_def in self.attribute_defs:
            if attr_def.url == url:
                return attr_def
        return None

    def _declared_attr_def(self, url: str | None, role: str) -> AttributeDef | None:
        if url is None:
            return None
        attr_def = self.attr_def(url)
        if attr_def is None:
            raise SchemaNotFoundError(f"{role} attribute def {url} is not among the attribute defs of etype {self.url}")
        return attr_def

    def name_attr_def(self) -> AttributeDef | None:
        """The attribute definition holding the display name of entities.

        Returns:
            The attribute definition, or None if the type declares none

        Raises:
            SchemaNotFoundError: If the declared definition is not part of this type
        """
        return self._declared_attr_def(self.name_attr_def_url, "Name")

    def description_attr_def(self) -> AttributeDef | None:
        """The attribute definition holding the description of entities.

        Returns:
            The attribute definition, or None if the type declares none

        Raises:
            SchemaNotFoundError: If the declared definition is not part of this type
        """
        return self._declared_attr_def(self.description_attr_def_url, "Description")


@dataclass
class Value:
    """One payload held by an attribute."""

    obj: Any
    local_id: int | None = None


@dataclass
class Attribute:
    """The values an entity or structure holds for one attribute definition."""

    attr_def_url: str | None
    values: list[Value] | None = field(default_factory=list)
    local_id: int | None = None
    values_count: int | None = None

    def __post_init__(self) -> None:
        if self.values_count is None and self.values is not None:
            self.values_count = len(self.values)

    def first_value(self) -> Value:
        """Return the first value.

        Raises:
            LookupError: If the attribute holds no value
        """
        if not self.values:
            raise LookupError(f"Attribute {self.local_id} has no values")
        return self.values[0]

    def raw_values(self) -> list[Any]:
        return [value.obj for value in self.values or []]


class StructureLike(Protocol):
    """What the checker needs from anything carrying attributes."""

    url: str | None
    etype_url: str | None
    attributes: list[Attribute] | None


def _attribute(node: StructureLike, attr_def_url: str) -> Attribute | None:
    for attribute in node.attributes or []:
        if attribute.attr_def_url == attr_def_url:
            return attribute
    return None


def _values(node: StructureLike, attr_def_url: str | None) -> list[Value]:
    if attr_def_url is not None:
        attribute = _attribute(node, attr_def_url)
        return list(attribute.values or []) if attribute else []
    return [value for attribute in node.attributes or [] for value in attribute.values or []]


@dataclass
class Structure:
    """A bag of attributes conforming to one entity type."""

    etype_url: str | None
    attributes: list[Attribute] | None = field(default_factory=list)
    url: str | None = None

    def attribute(self, attr_def_url: str) -> Attribute | None:
        """Find the attribute for an attribute definition URL."""
        return _attribute(self, attr_def_url)

    def values(self, attr_def_url: str | None = None) -> list[Value]:
        """Values of one attribute definition, or of all attributes if none given."""
        return _values(self, attr_def_url)


@dataclass
class Entity:
    """An entity: an identified structure with a name and a description.

    Synthetic entities, not yet stored anywhere, have an empty URL.
    """

    url: str | None
    etype_url: str | None
    name: Dict | None = field(default_factory=Dict)
    description: Dict | None = field(default_factory=Dict)
    attributes: list[Attribute] | None = field(default_factory=list)

    def attribute(self, attr_def_url: str) -> Attribute | None:
        """Find the attribute for an attribute definition URL."""
        return _attribute(self, attr_def_url)

    def values(self, attr_def_url: str | None = None) -> list[Value]:
        """Values of one attribute definition, or of all attributes if none given."""
        return _values(self, attr_def_url)


@dataclass
class AttrMapping:
    """Correspondence between a source attribute path and a target attribute path.

    Mappings are ordered by score.
    """

    source_path: list[str] = field(default_factory=list)
    target_path: list[str] = field(default_factory=list)
    score: float = 0.0

    def __lt__(self, other: "AttrMapping") -> bool:
        return self.score < other.score


@dataclass
class SchemaMapping:
    """Mapping of a source schema onto a target entity type, ordered by score."""

    target_etype: EntityType | None
    score: float = 0.0
    mappings: list[AttrMapping] = field(default_factory=list)

    def __lt__(self, other: "SchemaMapping") -> bool:
        return self.score < other.score
