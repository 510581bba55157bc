"""
Typed failures raised while reading and mapping BioPAX models.

Failures that make a whole run meaningless (unparseable input, an empty
result, unwritable output) derive from BioPaxReaderError and always reach
the caller. Failures local to one element (a missing property, a broken
cross-reference) have their own types so the mapping code can recover
from them explicitly and keep going.
"""

from __future__ import annotations


class BioPaxReaderError(Exception):
    """Base class for errors that abort a read or mapping run."""


class BioPaxParseError(BioPaxReaderError):
    """The input stream is not a well-formed BioPAX model."""


class EmptyResultError(BioPaxReaderError):
    """The model parsed but produced nothing to show."""


class SerializationError(BioPaxReaderError):
    """The binary relation table could not be written."""


class PropertyAccessMiss(LookupError):
    """
    A property is not defined for an element's class.

    Attributes:
        uri: URI of the element that was probed.
        prop: Name of the missing property.
    """

    def __init__(self, uri: str, type_name: str, prop: str):
        super().__init__(f"{type_name} {uri} has no property '{prop}'")
        self.uri = uri
        self.type_name = type_name
        self.prop = prop


class MalformedCrossReference(ValueError):
    """A cross-reference is missing its database name or its id."""

    def __init__(self, uri: str, db: str | None, xref_id: str | None):
        super().__init__(f"Xref {uri} is malformed (db={db!r}, id={xref_id!r})")
        self.uri = uri
