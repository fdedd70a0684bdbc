"""Shared fixtures for clientgen tests.

Generated clients are executed in-process: the rendered source is loaded as a
real module (registered in sys.modules so dataclass type hints resolve) and
wired to a recording HttpAdapter instead of the network.
"""

from __future__ import annotations

import json
import sys
import types
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from clientgen.codegen import generate
from clientgen.context_builder import build_context
from clientgen.model import parse_document
from clientgen.runtime import HttpAdapter

FIXTURES = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@pytest.fixture
def friends_raw() -> dict[str, Any]:
    """The decoded friends.json document (a fresh copy per test)."""
    return json.loads((FIXTURES / "friends.json").read_text(encoding="utf-8"))


@pytest.fixture
def friends_doc(friends_raw):
    return parse_document(friends_raw)


@pytest.fixture
def friends_source(friends_doc) -> str:
    return generate(build_context(friends_doc))


# ---------------------------------------------------------------------------
# Generated module loading
# ---------------------------------------------------------------------------

@pytest.fixture
def load_client(monkeypatch) -> Callable[[str], types.ModuleType]:
    """Return a callable that turns generated source into an importable module.

    Usage in tests::

        module = load_client(source)
        client = module.ApiClient("http://localhost:7350", adapter)
    """
    counter = iter(range(1000))

    def _load(source: str) -> types.ModuleType:
        name = f"generated_client_{next(counter)}"
        module = types.ModuleType(name)
        monkeypatch.setitem(sys.modules, name, module)
        exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        return module

    return _load


@pytest.fixture
def friends_client(friends_source, load_client) -> types.ModuleType:
    return load_client(friends_source)


# ---------------------------------------------------------------------------
# Transport test double
# ---------------------------------------------------------------------------

class RecordingAdapter(HttpAdapter):
    """HttpAdapter that records every call and replays a canned body."""

    def __init__(self, response: bytes = b"{}") -> None:
        self.response = response
        self.calls: list[dict[str, Any]] = []

    async def send(
        self,
        method: str,
        uri: str,
        headers: dict[str, str],
        body: Optional[bytes],
        timeout: int,
    ) -> bytes:
        self.calls.append({
            "method": method,
            "uri": uri,
            "headers": dict(headers),
            "body": body,
            "timeout": timeout,
        })
        return self.response


@pytest.fixture
def adapter() -> RecordingAdapter:
    return RecordingAdapter()
