"""Render templates into the generated client module.

Takes the context from context_builder. Definitions and operations are
rendered one fragment at a time and joined into the module scaffold in
document order.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2

from .config import TEMPLATE_DIR
from .gen_logging import get_logger

logger = get_logger(__name__)


def create_environment(template_dir: Path = TEMPLATE_DIR) -> jinja2.Environment:
    """Jinja2 environment shared by all client templates."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    # Double-quoted Python string literal
    env.filters["pystr"] = json.dumps
    return env


def render_definition(env: jinja2.Environment, context: dict[str, Any]) -> str:
    """Render one definition's interface and dataclass."""
    return env.get_template("definition.py.j2").render(**context).rstrip("\n")


def render_operation(env: jinja2.Environment, context: dict[str, Any]) -> str:
    """Render one client method."""
    return env.get_template("operation.py.j2").render(**context).rstrip("\n")


def generate(context: dict[str, Any], env: jinja2.Environment | None = None) -> str:
    """Render the whole client module and return its source text."""
    env = env or create_environment()
    definitions = [render_definition(env, ctx) for ctx in context["definitions"]]
    operations = [render_operation(env, ctx) for ctx in context["operations"]]

    output = env.get_template("client.py.j2").render(
        **{**context, "definitions": definitions, "operations": operations},
    )
    logger.info(
        "Generated client (%d definitions, %d operations)",
        context["definition_count"], context["operation_count"],
    )
    return output


def write_output(output: str, path: Path | None = None) -> None:
    """Write generated source to a file, or to stdout when no path is given."""
    if path is None:
        print(output, end="")
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(output, encoding="utf-8")
    logger.info("Wrote %s", path)
