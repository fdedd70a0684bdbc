"""Convert schema identifiers into generated-code identifiers.

Document keys use snake_case; generated code needs two casings:
  - field style (initial lowercase): user_id   -> userId
  - type style  (initial uppercase): user_id   -> UserId

Definitions become type names by uppercasing the first character only:
  friend        -> Friend
  apiFriendList -> ApiFriendList

References resolve to those type names:
  #/definitions/friend -> Friend

Names that are not identifiers after that are passed through safe_identifier
so class names and references agree.
"""

from __future__ import annotations

import enum
import keyword
import re
from typing import Container

from .errors import DanglingReferenceError

DEFINITIONS_PREFIX = "#/definitions/"

INTERFACE_PREFIX = "I"
METHOD_SUFFIX = "Async"


class NameStyle(str, enum.Enum):
    """Case convention for the first character of a converted name."""

    FIELD = "field"
    TYPE = "type"


def to_type_name(raw: str) -> str:
    """Uppercase the first character of a definition name."""
    return raw[:1].upper() + raw[1:]


def type_identifier(raw: str) -> str:
    """Type name for a definition, usable as a Python class name.

    v1.Friend -> V1_Friend, friend-list -> Friend_list, none -> None_
    """
    return safe_identifier(to_type_name(raw))


def to_field_name(raw: str, style: NameStyle | str) -> str:
    """Convert snake_case to camelCase (field style) or PascalCase (type style).

    Names that are already camelCase/PascalCase come back unchanged apart from
    the first character.
    """
    style = NameStyle(style)
    head, *rest = raw.split("_")
    joined = head + "".join(part[:1].upper() + part[1:] for part in rest)
    if style is NameStyle.TYPE:
        return joined[:1].upper() + joined[1:]
    return joined[:1].lower() + joined[1:]


def resolve_ref(ref: str, definitions: Container[str], where: str = "") -> str:
    """Resolve '#/definitions/<Name>' to the generated type name for <Name>."""
    if not ref.startswith(DEFINITIONS_PREFIX):
        raise DanglingReferenceError(ref, where)
    name = ref[len(DEFINITIONS_PREFIX):]
    if name not in definitions:
        raise DanglingReferenceError(ref, where)
    return type_identifier(name)


def interface_name(type_name: str) -> str:
    """Name of the read-only interface generated for a type."""
    return f"{INTERFACE_PREFIX}{type_name}"


def method_name(operation_id: str) -> str:
    """Name of the client method generated for an operation."""
    return safe_identifier(to_field_name(_word_chars(operation_id), NameStyle.TYPE)) + METHOD_SUFFIX


def accessor_name(raw: str) -> str:
    """Name of the interface accessor generated for a property."""
    return safe_identifier(to_field_name(_word_chars(raw), NameStyle.TYPE))


def argument_name(raw: str) -> str:
    """Name of the method argument generated for a parameter."""
    return safe_identifier(to_field_name(_word_chars(raw), NameStyle.FIELD))


def backing_name(raw: str) -> str:
    """Name of the private attribute backing a derived accessor."""
    return "_" + to_field_name(_word_chars(raw), NameStyle.FIELD)


def _word_chars(name: str) -> str:
    return re.sub(r"\W", "_", name)


def safe_identifier(name: str) -> str:
    """Make a name usable as a Python identifier.

    Characters outside [A-Za-z0-9_] become underscores, a leading digit gets
    an underscore prefix and keywords get an underscore suffix.
    """
    name = re.sub(r"\W", "_", name)
    if name[:1].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def strip_newlines(text: str) -> str:
    """Collapse a multi-line description onto one line."""
    return text.replace("\r\n", " ").replace("\n", " ").strip()


def docstring(text: str) -> str:
    """Escape text for use inside a triple-quoted docstring."""
    text = strip_newlines(text).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text
