"""Typed model of the Swagger 2.0 subset the generator renders.

Parses the decoded JSON document into pydantic models:
- Definitions with ordered properties
- Paths keyed by URL, then by lowercase HTTP method
- Operations with ordered parameters, a 200 response and security alternatives
- Security scheme declarations

Path-level "parameters" are merged in front of each operation's own list.
Every mapping keeps document order (dicts are insertion-ordered), which the
renderer relies on for stable output.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InputMalformedError

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class Schema(_Model):
    """A type descriptor: primitive, array, object map or $ref."""

    type: Optional[str] = None
    ref: Optional[str] = Field(default=None, alias="$ref")
    format: Optional[str] = None
    description: str = ""
    items: Optional[Schema] = None
    additional_properties: Optional[Union[Schema, bool]] = Field(
        default=None, alias="additionalProperties",
    )


class Definition(_Model):
    """A named data type with properties in document order."""

    type: Optional[str] = None
    description: str = ""
    properties: dict[str, Schema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class Parameter(_Model):
    """One operation parameter."""

    name: str
    location: Literal["path", "query", "body"] = Field(alias="in")
    required: bool = False
    description: str = ""
    type: Optional[str] = None
    format: Optional[str] = None
    items: Optional[Schema] = None
    additional_properties: Optional[Union[Schema, bool]] = Field(
        default=None, alias="additionalProperties",
    )
    body_schema: Optional[Schema] = Field(default=None, alias="schema")

    def descriptor(self) -> Schema:
        """Return the type descriptor the type mapper should see.

        Body parameters describe their type under "schema"; the others carry
        type/items/additionalProperties directly.
        """
        if self.location == "body":
            return self.body_schema or Schema()
        return Schema(
            type=self.type,
            format=self.format,
            items=self.items,
            additional_properties=self.additional_properties,
        )


class Response(_Model):
    description: str = ""
    response_schema: Optional[Schema] = Field(default=None, alias="schema")


class Operation(_Model):
    """One HTTP method bound to one URL template."""

    operation_id: str = Field(alias="operationId")
    summary: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    parameters: list[Parameter] = Field(default_factory=list)
    responses: dict[str, Response] = Field(default_factory=dict)
    security: Optional[list[dict[str, list[Any]]]] = None

    def success_schema(self) -> Schema | None:
        """Schema of the 200 response, if any."""
        response = self.responses.get("200")
        if response is None:
            return None
        return response.response_schema


class SecurityScheme(_Model):
    type: str
    name: Optional[str] = None
    location: Optional[str] = Field(default=None, alias="in")
    description: str = ""


class Info(_Model):
    title: str = ""
    version: str = ""
    description: str = ""


class Document(_Model):
    """The parsed input document."""

    info: Info = Field(default_factory=Info)
    base_path: str = Field(default="", alias="basePath")
    definitions: dict[str, Definition] = Field(default_factory=dict)
    paths: dict[str, dict[str, Operation]] = Field(default_factory=dict)
    security_definitions: dict[str, SecurityScheme] = Field(
        default_factory=dict, alias="securityDefinitions",
    )

    @field_validator("paths", mode="before")
    @classmethod
    def _select_operations(cls, value: Any) -> Any:
        """Keep only HTTP method entries, merging path-level parameters into each."""
        if not isinstance(value, dict):
            return value
        paths: dict[str, Any] = {}
        for url, path_item in value.items():
            if not isinstance(path_item, dict):
                paths[url] = path_item
                continue
            common = path_item.get("parameters", [])
            operations: dict[str, Any] = {}
            for method, operation in path_item.items():
                if method not in HTTP_METHODS:
                    continue
                if common and isinstance(operation, dict):
                    operation = {**operation, "parameters": _merge_parameters(
                        common, operation.get("parameters", []),
                    )}
                operations[method] = operation
            paths[url] = operations
        return paths


def _merge_parameters(common: list[Any], own: list[Any]) -> list[Any]:
    """Path-level parameters first; an operation parameter with the same (name, in) wins."""
    overridden = {
        (p.get("name"), p.get("in")) for p in own if isinstance(p, dict)
    }
    merged = [
        p for p in common
        if not (isinstance(p, dict) and (p.get("name"), p.get("in")) in overridden)
    ]
    return merged + list(own)


def parse_document(raw: Any) -> Document:
    """Validate a decoded JSON document into the schema model."""
    if not isinstance(raw, dict):
        raise InputMalformedError(
            f"Expected a JSON object at the top level, got {type(raw).__name__}"
        )
    try:
        return Document.model_validate(raw)
    except ValidationError as exc:
        raise InputMalformedError(f"Unable to decode document: {exc}") from exc
