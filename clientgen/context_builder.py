"""Build Jinja2 template contexts from the parsed document.

Every naming and typing decision is made here, so all generation errors are
raised before a single line is rendered. Each definition and each operation
gets its own self-contained context dict; codegen renders them independently
and joins the fragments in document order.
"""

from __future__ import annotations

from typing import Any, Container

from .config import RenderOptions
from .errors import (
    DuplicateNameError,
    InputMalformedError,
    UnmappedTypeShapeError,
    UnsupportedSecurityError,
)
from .gen_logging import get_logger
from .model import Definition, Document, Operation, Parameter, Schema
from .naming import (
    accessor_name,
    argument_name,
    backing_name,
    docstring,
    interface_name,
    method_name,
    resolve_ref,
    type_identifier,
)
from .type_mapper import TypeShape, describe_shape, map_type

logger = get_logger(__name__)

# Shapes stored under a private backing attribute behind a derived accessor
_BACKED_SHAPES = frozenset({
    TypeShape.LIST_OF_REF,
    TypeShape.MAP_OF_PRIMITIVE,
    TypeShape.MAP_OF_REF,
    TypeShape.REF,
})

# securityDefinitions type -> credential form
_SCHEME_TYPES: dict[str, str] = {
    "basic": "basic",
    "apiKey": "bearer",
    "oauth2": "bearer",
}

# Conventional scheme names, used when securityDefinitions is silent
_SCHEME_NAMES: dict[str, str] = {
    "BasicAuth": "basic",
    "HttpKeyAuth": "bearer",
}

_CREDENTIALS: dict[str, list[dict[str, str]]] = {
    "basic": [
        {"arg": "basicAuthUsername", "annotation": "str"},
        {"arg": "basicAuthPassword", "annotation": "str"},
    ],
    "bearer": [
        {"arg": "bearerToken", "annotation": "Optional[str]"},
    ],
}

# Names the generated method body or module scope already uses
_RESERVED_ARGUMENTS = frozenset({
    "self", "serialize", "deserialize", "basicAuthUsername", "basicAuthPassword",
    "bearerToken", "urlpath", "query_params", "elem", "uri", "method", "headers",
    "content", "contents",
})

_SCAFFOLD_NAMES = frozenset({
    "ABC", "Dict", "HttpAdapter", "HttpxAdapter", "List", "Mapping", "Optional",
    "Sequence", "abstractmethod", "dataclass", "field",
})


def _is_empty_schema(schema: Schema) -> bool:
    return (
        schema.ref is None
        and schema.type is None
        and schema.items is None
        and schema.additional_properties is None
    )


def build_definition_context(
    name: str,
    definition: Definition,
    definitions: Container[str],
) -> dict[str, Any]:
    """Context for one definition's interface and dataclass."""
    class_name = type_identifier(name)
    properties: list[dict[str, Any]] = []
    seen: dict[str, str] = {}

    for prop_name, prop_schema in definition.properties.items():
        where = f"definition {name!r}, property {prop_name!r}"
        generated = map_type(prop_schema, definitions, where)
        accessor = accessor_name(prop_name)
        backing = backing_name(prop_name) if generated.shape in _BACKED_SHAPES else None

        # accessors and backing attributes share the class namespace
        for member in (accessor, backing):
            if member is None:
                continue
            if member in seen:
                raise DuplicateNameError(
                    f"Properties {seen[member]!r} and {prop_name!r} of definition"
                    f" {name!r} both map to {member!r}"
                )
            seen[member] = prop_name

        properties.append({
            "wire_name": prop_name,
            "accessor": accessor,
            "backing": backing,
            "type": generated,
            "description": docstring(prop_schema.description),
        })

    logger.debug("  definition %s (%d properties)", class_name, len(properties))
    return {
        "class_name": class_name,
        "interface_name": interface_name(class_name),
        "description": docstring(definition.description) or f"{class_name} model.",
        "properties": properties,
    }


def resolve_security(operation: Operation, document: Document, where: str) -> str:
    """Credential form for the first security alternative: 'basic' or 'bearer'.

    Later alternatives are never considered. No requirement at all still
    means a bearer token argument.
    """
    if not operation.security:
        return "bearer"
    alternative = operation.security[0]
    if not alternative:
        return "bearer"
    if len(alternative) > 1:
        raise InputMalformedError(
            f"{where}: a security alternative must name exactly one scheme,"
            f" got {sorted(alternative)}"
        )
    (scheme,) = alternative
    declared = document.security_definitions.get(scheme)
    if declared is not None and declared.type in _SCHEME_TYPES:
        return _SCHEME_TYPES[declared.type]
    if scheme in _SCHEME_NAMES:
        return _SCHEME_NAMES[scheme]
    raise UnsupportedSecurityError(f"{where}: unsupported security scheme {scheme!r}")


def _build_parameter(
    param: Parameter,
    definitions: Container[str],
    where: str,
) -> dict[str, Any]:
    where = f"{where}, parameter {param.name!r}"
    generated = map_type(param.descriptor(), definitions, where)

    if param.location == "path" and not generated.is_scalar:
        raise UnmappedTypeShapeError(f"path parameter of shape {generated.shape.value}", where)
    if param.location == "query" and not (
        generated.is_scalar or generated.shape is TypeShape.LIST_OF_PRIMITIVE
    ):
        raise UnmappedTypeShapeError(f"query parameter of shape {generated.shape.value}", where)

    arg = argument_name(param.name)
    if arg in _RESERVED_ARGUMENTS:
        arg = f"{arg}_"

    # every argument defaults to None; required ones are checked in the body
    annotation = f"Optional[{generated.interface_annotation}]"

    return {
        "name": param.name,
        "arg": arg,
        "location": param.location,
        "required": param.required,
        "annotation": annotation,
        "type": generated,
    }


def _build_response(
    operation: Operation,
    definitions: Container[str],
    where: str,
) -> dict[str, str] | None:
    schema = operation.success_schema()
    if schema is None or _is_empty_schema(schema):
        return None
    if schema.ref is None:
        raise UnmappedTypeShapeError(f"response of {describe_shape(schema)}", where)
    class_name = resolve_ref(schema.ref, definitions, where)
    return {"class_name": class_name, "interface_name": interface_name(class_name)}


def build_operation_context(
    url: str,
    method: str,
    operation: Operation,
    document: Document,
) -> dict[str, Any]:
    """Context for one client method."""
    where = f"operation {method.upper()} {url}"
    definitions = document.definitions

    security = resolve_security(operation, document, where)
    params = [_build_parameter(p, definitions, where) for p in operation.parameters]

    seen: set[str] = set()
    for param in params:
        if param["arg"] in seen:
            raise DuplicateNameError(f"{where}: more than one parameter maps to {param['arg']!r}")
        seen.add(param["arg"])

    body_params = [p for p in params if p["location"] == "body"]
    if len(body_params) > 1:
        raise InputMalformedError(
            f"{where}: expected at most one body parameter, got {len(body_params)}"
        )

    response = _build_response(operation, definitions, where)
    name = method_name(operation.operation_id)

    logger.debug("  operation %s -> %s", where, name)
    return {
        "method_name": name,
        "http_method": method.upper(),
        "url": document.base_path.rstrip("/") + url,
        "summary": docstring(operation.summary),
        "security": security,
        "credentials": _CREDENTIALS[security],
        "parameters": params,
        "required_params": [p for p in params if p["required"]],
        "path_params": [p for p in params if p["location"] == "path"],
        "query_params": [p for p in params if p["location"] == "query"],
        "body_param": body_params[0] if body_params else None,
        "response": response,
    }


def build_context(document: Document, options: RenderOptions | None = None) -> dict[str, Any]:
    """Build the full template context for the client module."""
    options = options or RenderOptions()
    reserved = _SCAFFOLD_NAMES | {options.client_name, options.exception_name}

    logger.debug("Building %d definitions", len(document.definitions))
    definitions: list[dict[str, Any]] = []
    type_names: dict[str, str] = {}
    for name, definition in document.definitions.items():
        ctx = build_definition_context(name, definition, document.definitions)
        for generated_name in (ctx["class_name"], ctx["interface_name"]):
            if generated_name in reserved:
                raise DuplicateNameError(
                    f"Definition {name!r} maps to {generated_name!r}, which the client module already defines"
                )
            if generated_name in type_names:
                raise DuplicateNameError(
                    f"Definitions {type_names[generated_name]!r} and {name!r} both map to {generated_name!r}"
                )
            type_names[generated_name] = name
        definitions.append(ctx)

    operations: list[dict[str, Any]] = []
    method_names: dict[str, str] = {}
    for url, path_item in document.paths.items():
        for method, operation in path_item.items():
            ctx = build_operation_context(url, method, operation, document)
            where = f"{method.upper()} {url}"
            if ctx["method_name"] in method_names:
                raise DuplicateNameError(
                    f"Operations {method_names[ctx['method_name']]} and {where}"
                    f" both map to method {ctx['method_name']!r}"
                )
            method_names[ctx["method_name"]] = where
            operations.append(ctx)

    return {
        "title": docstring(document.info.title),
        "version": docstring(document.info.version),
        "runtime_module": options.runtime_module,
        "client_name": options.client_name,
        "exception_name": options.exception_name,
        "timeout": options.timeout,
        "definitions": definitions,
        "operations": operations,
        "definition_count": len(definitions),
        "operation_count": len(operations),
    }
