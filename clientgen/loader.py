"""Load a Swagger document from disk into the schema model."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import InputMalformedError
from .model import Document, parse_document


def load_json(path: Path) -> Any:
    """Read and decode a JSON document. OSError propagates to the caller."""
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InputMalformedError(f"Unable to decode input {path}: {exc}") from exc


def load_document(path: Path) -> Document:
    """Read, decode and validate a document."""
    return parse_document(load_json(path))
