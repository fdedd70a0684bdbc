"""Runtime support imported by generated clients.

Generated modules only reference these names:
- HttpAdapter.send(method, uri, headers, body, timeout) -> bytes
- HttpxAdapter, the default adapter, built on httpx.AsyncClient
- serialize(obj) -> bytes / deserialize(cls, data) -> obj

Dataclass fields carry their JSON key in field metadata ("wire_name");
serialize and deserialize use it in both directions.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import json
import typing
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, TypeVar, Union

import httpx

T = TypeVar("T")

WIRE_NAME = "wire_name"

ErrorFactory = Callable[[int, str, int], Exception]


class HttpAdapter(ABC):
    """Transport used by generated clients."""

    @abstractmethod
    async def send(
        self,
        method: str,
        uri: str,
        headers: dict[str, str],
        body: Optional[bytes],
        timeout: int,
    ) -> bytes:
        """Send a request and return the response body of a successful call.

        Unsuccessful responses raise the client's exception type.
        """


class HttpxAdapter(HttpAdapter):
    """HttpAdapter backed by httpx.

    error_factory builds the exception raised for non-2xx responses from
    (status_code, message, grpc_status_code); generated clients pass their
    own exception class.
    """

    def __init__(self, error_factory: ErrorFactory, client: httpx.AsyncClient | None = None) -> None:
        self._error_factory = error_factory
        self._client = client

    async def send(
        self,
        method: str,
        uri: str,
        headers: dict[str, str],
        body: Optional[bytes],
        timeout: int,
    ) -> bytes:
        headers = {"Accept": "application/json", **headers}
        if body is not None:
            headers.setdefault("Content-Type", "application/json")
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, uri, headers=headers, content=body, timeout=timeout,
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.request(
                        method, uri, headers=headers, content=body, timeout=timeout,
                    )
        except httpx.RequestError as exc:
            raise self._error_factory(-1, str(exc), -1) from exc

        if response.is_success:
            return response.content
        message, grpc_code = _parse_error(response)
        raise self._error_factory(response.status_code, message, grpc_code)


def _parse_error(response: httpx.Response) -> tuple[str, int]:
    """Extract (message, grpc code) from a JSON error body like {"error": ..., "code": 5}."""
    try:
        decoded = response.json()
    except ValueError:
        return response.text, -1
    if not isinstance(decoded, dict):
        return response.text, -1
    message = decoded.get("message") or decoded.get("error") or response.text
    code = decoded.get("code", -1)
    return str(message), code if isinstance(code, int) else -1


def to_wire(value: Any) -> Any:
    """Convert dataclasses to JSON-ready values, keyed by wire name."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result: dict[str, Any] = {}
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            result[f.metadata.get(WIRE_NAME, f.name)] = to_wire(item)
        return result
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_wire(v) for k, v in value.items()}
    return value


def from_wire(tp: Any, value: Any) -> Any:
    """Build a value of type tp from decoded JSON."""
    if value is None:
        return None

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)
    if origin is Union:
        members = [a for a in args if a is not type(None)]
        return from_wire(members[0], value) if len(members) == 1 else value
    if origin in (list, collections.abc.Sequence):
        element = args[0] if args else Any
        return [from_wire(element, v) for v in value]
    if origin in (dict, collections.abc.Mapping):
        element = args[1] if len(args) > 1 else Any
        return {k: from_wire(element, v) for k, v in value.items()}

    if dataclasses.is_dataclass(tp):
        hints = typing.get_type_hints(tp)
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(tp):
            key = f.metadata.get(WIRE_NAME, f.name)
            if key in value:
                kwargs[f.name] = from_wire(hints[f.name], value[key])
        return tp(**kwargs)

    if tp is int and isinstance(value, str):
        # int64 values are commonly transported as JSON strings
        return int(value)
    return value


def serialize(obj: Any) -> bytes:
    """Encode a generated model (or plain value) as JSON bytes."""
    return json.dumps(to_wire(obj)).encode("utf-8")


def deserialize(cls: type[T], data: bytes) -> T:
    """Decode JSON bytes into an instance of a generated dataclass."""
    return from_wire(cls, json.loads(data or b"{}"))
