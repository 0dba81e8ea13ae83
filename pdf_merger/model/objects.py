"""Closed object model for PDF values held in a document graph."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Tuple, Union

ObjectId = Tuple[int, int]


class Name(str):
    """PDF name, stored without the leading slash."""

    def __repr__(self) -> str:
        return f"/{str.__str__(self)}"


@dataclass(frozen=True, slots=True)
class Reference:
    """Indirect reference to another object in the same graph."""

    object_id: ObjectId


class Array(list):
    """Ordered sequence of PDF objects."""


class Dictionary(dict):
    """Mapping of PDF names to objects."""

    def set(self, key: str, value: "PdfObject") -> None:
        self[key] = value

    def type_name(self) -> Optional[str]:
        """Return the declared ``Type`` of the dictionary, if any."""
        value = self.get("Type")
        if isinstance(value, str):
            return str(value)
        return None


@dataclass(slots=True)
class Stream:
    """Stream object: a dictionary plus its raw, still-encoded payload."""

    dictionary: Dictionary = field(default_factory=Dictionary)
    data: bytes = b""

    def type_name(self) -> Optional[str]:
        return self.dictionary.type_name()


PdfObject = Union[Dictionary, Array, Reference, Stream, Name, str, bytes, int, float, bool, None]


class ObjectKind(Enum):
    """Structural role of an object, derived from its declared type."""

    CATALOG = "Catalog"
    PAGES = "Pages"
    PAGE = "Page"
    OUTLINES = "Outlines"
    OUTLINE = "Outline"
    OTHER = "Other"


_KINDS_BY_TYPE: Dict[str, ObjectKind] = {
    kind.value: kind for kind in ObjectKind if kind is not ObjectKind.OTHER
}


def classify(value: PdfObject) -> ObjectKind:
    """Return the structural role of ``value``."""
    if isinstance(value, (Dictionary, Stream)):
        type_name = value.type_name()
        if type_name is not None:
            return _KINDS_BY_TYPE.get(type_name, ObjectKind.OTHER)
    return ObjectKind.OTHER


def iter_references(value: PdfObject) -> Iterator[Reference]:
    """Yield every reference nested inside ``value``."""
    if isinstance(value, Reference):
        yield value
    elif isinstance(value, Stream):
        yield from iter_references(value.dictionary)
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_references(item)
    elif isinstance(value, list):
        for item in value:
            yield from iter_references(item)


def rewrite_references(
    value: PdfObject, replace: Callable[[Reference], Optional[Reference]]
) -> PdfObject:
    """Return a copy of ``value`` with every reference passed through ``replace``.

    ``replace`` returning ``None`` removes the reference: dictionary entries are
    dropped and array items become null, matching how PDF readers treat
    references to missing objects. Stream payloads are shared, not copied.
    """
    if isinstance(value, Reference):
        return replace(value)
    if isinstance(value, Stream):
        return Stream(dictionary=rewrite_references(value.dictionary, replace), data=value.data)
    if isinstance(value, dict):
        result = Dictionary()
        for key, item in value.items():
            updated = rewrite_references(item, replace)
            if updated is None and isinstance(item, Reference):
                continue
            result[key] = updated
        return result
    if isinstance(value, list):
        return Array(rewrite_references(item, replace) for item in value)
    return value
