"""
Column id codec.

A column id encodes the path of a grid column in the column tree so that
the column can be used as a flat grid key and later decoded back into
its meaning without a lookup table:

- ``a_2211``: row attribute column, display form object id 2211
- ``a_2009_1``: column attribute level, attribute 2009, element 1
- ``m_3``: measure leaf, fourth measure of the measure group
- ``t_sum``: total

Levels are joined with ``-``: ``a_2009_1-a_2071_1-m_0``.
"""

from __future__ import annotations

import re

from ..errors import ArgumentError, ModelError
from ..execution import (
    AttributeHeader,
    AttributeHeaderItem,
    MeasureGroupHeader,
    MeasureHeaderItem,
    TotalHeaderItem,
)

__all__ = [
    "ID_SEPARATOR",
    "FIELD_SEPARATOR",
    "ATTRIBUTE_PREFIX",
    "MEASURE_PREFIX",
    "TOTAL_PREFIX",
    "DOT_PLACEHOLDER",
    "sanitize_field",
    "get_ids_from_uri",
    "get_parsed_fields",
    "encode_fields",
    "join_fields",
    "identify_header",
    "identify_response_header",
    "col_id_is_simple_attribute",
]

ID_SEPARATOR = "_"
FIELD_SEPARATOR = "-"
ATTRIBUTE_PREFIX = "a"
MEASURE_PREFIX = "m"
TOTAL_PREFIX = "t"
DOT_PLACEHOLDER = "?"

URI_IDS_PATTERN = re.compile(r"obj/(?P<object>[^/]*)(/elements\?id=(?P<element>.*))?$")


def sanitize_field(field: str) -> str:
    """Replace dots, grids read dotted fields as nested paths."""
    return field.replace(".", DOT_PLACEHOLDER)


def get_ids_from_uri(uri: str, sanitize: bool = True) -> tuple[str, str | None]:
    """
    Extract object id and element id from a metadata uri.

    Args:
        uri: Uri like ``/gdc/md/project/obj/2210/elements?id=6340109``
        sanitize: Replace dots in the ids, see :func:`sanitize_field`

    Returns:
        Tuple ``(object_id, element_id)``, element id is None for object
        uris without an element part.

    Raises:
        ModelError: If the uri is not an object uri
    """
    match = URI_IDS_PATTERN.search(uri or "")
    if not match:
        raise ModelError(f"Unable to read object id from uri '{uri}'")

    object_id = match.group("object")
    element_id = match.group("element") or None

    if sanitize:
        object_id = sanitize_field(object_id)
        element_id = sanitize_field(element_id) if element_id else element_id

    return object_id, element_id


def get_parsed_fields(col_id: str) -> list[list[str]]:
    """Split a column id into token groups.

    Supported column ids are ``a_2009``, ``a_2009_4-a_2071_12`` and
    ``a_2009_4-a_2071_12-m_3``. Parsing is permissive: malformed input is
    split all the same and validated by the caller.
    """
    return [field.split(ID_SEPARATOR) for field in col_id.split(FIELD_SEPARATOR)]


def encode_fields(fields: list[list[str]]) -> str:
    """Inverse of :func:`get_parsed_fields`."""
    return FIELD_SEPARATOR.join(ID_SEPARATOR.join(field) for field in fields)


def join_fields(*fields: str | None) -> str:
    """Join column id segments, skipping empty ones."""
    return FIELD_SEPARATOR.join(field for field in fields if field)


def identify_header(header: AttributeHeaderItem | MeasureHeaderItem | TotalHeaderItem) -> str:
    """Column id segment of a result header item."""
    if isinstance(header, AttributeHeaderItem):
        object_id, element_id = get_ids_from_uri(header.uri)
        return ID_SEPARATOR.join([ATTRIBUTE_PREFIX, object_id, element_id or ""])
    if isinstance(header, MeasureHeaderItem):
        if header.order is None:
            raise ModelError(f"Measure header item '{header.name}' has no order")
        return f"{MEASURE_PREFIX}{ID_SEPARATOR}{header.order}"
    if isinstance(header, TotalHeaderItem):
        return f"{TOTAL_PREFIX}{ID_SEPARATOR}{header.type}"
    raise ArgumentError(f"Unknown header type: {header!r}")


def identify_response_header(header: AttributeHeader | MeasureGroupHeader) -> str | None:
    """Column id of a response header. A measure group is not identified,
    it would be ambiguous."""
    if isinstance(header, AttributeHeader):
        object_id, _ = get_ids_from_uri(header.uri)
        return f"{ATTRIBUTE_PREFIX}{ID_SEPARATOR}{object_id}"
    if isinstance(header, MeasureGroupHeader):
        return None
    raise ArgumentError(f"Unknown response header type: {header!r}")


def col_id_is_simple_attribute(col_id: str) -> bool:
    """True for row attribute column ids like ``a_2211``."""
    fields = get_parsed_fields(col_id)
    return (
        len(fields) == 1
        and len(fields[0]) == 2
        and fields[0][0] == ATTRIBUTE_PREFIX
    )
