"""Map schema type descriptors to generated Python type annotations.

Supported shapes:
- integer, boolean, string                -> int, bool, str
- array of primitive / array of $ref      -> List[P] / Sequence[IRef]
- object with additionalProperties
  (primitive or $ref, keys always str)    -> Mapping[str, P] / Mapping[str, IRef]
- bare $ref                               -> IRef

Anything else is rejected with UnmappedTypeShapeError.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Container, Optional

from .errors import UnmappedTypeShapeError
from .model import Schema
from .naming import interface_name, resolve_ref

# Schema primitive type -> Python scalar type
PRIMITIVES: dict[str, str] = {
    "integer": "int",
    "boolean": "bool",
    "string": "str",
}


class TypeShape(enum.Enum):
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING = "string"
    LIST_OF_PRIMITIVE = "list_of_primitive"
    LIST_OF_REF = "list_of_ref"
    MAP_OF_PRIMITIVE = "map_of_primitive"
    MAP_OF_REF = "map_of_ref"
    REF = "ref"


SCALAR_SHAPES = frozenset({TypeShape.INTEGER, TypeShape.BOOLEAN, TypeShape.STRING})
LIST_SHAPES = frozenset({TypeShape.LIST_OF_PRIMITIVE, TypeShape.LIST_OF_REF})
MAP_SHAPES = frozenset({TypeShape.MAP_OF_PRIMITIVE, TypeShape.MAP_OF_REF})

_SCALAR_SHAPE_FOR: dict[str, TypeShape] = {
    "integer": TypeShape.INTEGER,
    "boolean": TypeShape.BOOLEAN,
    "string": TypeShape.STRING,
}

# Annotation templates per shape; {element} is the scalar type or the type name.
_INTERFACE_ANNOTATIONS: dict[TypeShape, str] = {
    TypeShape.INTEGER: "int",
    TypeShape.BOOLEAN: "bool",
    TypeShape.STRING: "str",
    TypeShape.LIST_OF_PRIMITIVE: "List[{element}]",
    TypeShape.LIST_OF_REF: "Sequence[{interface}]",
    TypeShape.MAP_OF_PRIMITIVE: "Mapping[str, {element}]",
    TypeShape.MAP_OF_REF: "Mapping[str, {interface}]",
    TypeShape.REF: "{interface}",
}

_CONCRETE_ANNOTATIONS: dict[TypeShape, str] = {
    TypeShape.INTEGER: "int",
    TypeShape.BOOLEAN: "bool",
    TypeShape.STRING: "str",
    TypeShape.LIST_OF_PRIMITIVE: "List[{element}]",
    TypeShape.LIST_OF_REF: "List[{element}]",
    TypeShape.MAP_OF_PRIMITIVE: "Dict[str, {element}]",
    TypeShape.MAP_OF_REF: "Dict[str, {element}]",
    TypeShape.REF: "{element}",
}


@dataclass(frozen=True)
class GeneratedType:
    """The generated-code type chosen for one descriptor.

    element is the Python scalar for primitive shapes and for the elements or
    values of primitive collections; for ref shapes it is the resolved type name.
    """

    shape: TypeShape
    element: str

    @property
    def is_scalar(self) -> bool:
        return self.shape in SCALAR_SHAPES

    @property
    def is_list(self) -> bool:
        return self.shape in LIST_SHAPES

    @property
    def is_map(self) -> bool:
        return self.shape in MAP_SHAPES

    @property
    def element_is_boolean(self) -> bool:
        return self.element == "bool"

    @property
    def element_is_string(self) -> bool:
        return self.element == "str"

    @property
    def interface_annotation(self) -> str:
        return _INTERFACE_ANNOTATIONS[self.shape].format(
            element=self.element, interface=interface_name(self.element),
        )

    @property
    def concrete_annotation(self) -> str:
        return _CONCRETE_ANNOTATIONS[self.shape].format(element=self.element)

    @property
    def empty_value(self) -> Optional[str]:
        """Literal substituted for an unset collection, None for other shapes."""
        if self.is_list:
            return "[]"
        if self.is_map:
            return "{}"
        return None


def describe_shape(descriptor: Schema) -> str:
    """Human-readable shape of a descriptor for error messages."""
    if descriptor.ref is not None:
        return f"$ref {descriptor.ref}"
    if descriptor.type == "array":
        if descriptor.items is None:
            return "array without items"
        return f"array of {describe_shape(descriptor.items)}"
    if descriptor.type == "object":
        values = descriptor.additional_properties
        if values is None:
            return "object without additionalProperties"
        if isinstance(values, bool):
            return f"object with additionalProperties={str(values).lower()}"
        return f"map of {describe_shape(values)}"
    if descriptor.type is None:
        return "descriptor without type or $ref"
    return descriptor.type


def map_type(
    descriptor: Schema,
    definitions: Container[str],
    where: str = "",
) -> GeneratedType:
    """Choose the generated type for a property, parameter or response descriptor."""
    if descriptor.ref is not None:
        return GeneratedType(TypeShape.REF, resolve_ref(descriptor.ref, definitions, where))

    if descriptor.type in _SCALAR_SHAPE_FOR:
        return GeneratedType(_SCALAR_SHAPE_FOR[descriptor.type], PRIMITIVES[descriptor.type])

    if descriptor.type == "array" and descriptor.items is not None:
        element = _map_element(descriptor.items, definitions, where)
        if element is not None:
            shape = TypeShape.LIST_OF_REF if element.shape is TypeShape.REF else TypeShape.LIST_OF_PRIMITIVE
            return GeneratedType(shape, element.element)

    if descriptor.type == "object" and isinstance(descriptor.additional_properties, Schema):
        value = _map_element(descriptor.additional_properties, definitions, where)
        if value is not None:
            shape = TypeShape.MAP_OF_REF if value.shape is TypeShape.REF else TypeShape.MAP_OF_PRIMITIVE
            return GeneratedType(shape, value.element)

    raise UnmappedTypeShapeError(describe_shape(descriptor), where)


def _map_element(
    descriptor: Schema,
    definitions: Container[str],
    where: str,
) -> GeneratedType | None:
    """Map an array item or map value; only primitives and refs qualify."""
    if descriptor.ref is not None:
        return GeneratedType(TypeShape.REF, resolve_ref(descriptor.ref, definitions, where))
    if descriptor.type in _SCALAR_SHAPE_FOR:
        return GeneratedType(_SCALAR_SHAPE_FOR[descriptor.type], PRIMITIVES[descriptor.type])
    return None
