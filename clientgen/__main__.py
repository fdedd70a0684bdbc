"""Entry point: python -m clientgen INPUT [--output FILE]

Reads a Swagger JSON document and writes a generated Python client.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
