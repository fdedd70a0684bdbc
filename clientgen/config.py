"""Generator defaults and per-run render options."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

TEMPLATE_DIR = Path(__file__).parent / "templates"

# Module the generated client imports HttpAdapter, HttpxAdapter, serialize
# and deserialize from.
DEFAULT_RUNTIME_MODULE = "clientgen.runtime"
DEFAULT_CLIENT_NAME = "ApiClient"
DEFAULT_EXCEPTION_NAME = "ApiResponseException"
# Seconds passed to HttpAdapter.send when the caller gives no timeout.
DEFAULT_TIMEOUT = 10


@dataclass(frozen=True)
class RenderOptions:
    runtime_module: str = DEFAULT_RUNTIME_MODULE
    client_name: str = DEFAULT_CLIENT_NAME
    exception_name: str = DEFAULT_EXCEPTION_NAME
    timeout: int = DEFAULT_TIMEOUT
