"""CLI entry point for clientgen."""

from __future__ import annotations

from pathlib import Path

import click
import jinja2

from .codegen import generate, write_output
from .config import DEFAULT_CLIENT_NAME, DEFAULT_RUNTIME_MODULE, RenderOptions
from .context_builder import build_context
from .errors import GenerationError, InputMalformedError
from .gen_logging import configure_logging, get_logger
from .loader import load_document

logger = get_logger(__name__)


@click.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write generated code to this file instead of stdout.")
@click.option("--runtime-module", default=DEFAULT_RUNTIME_MODULE, show_default=True,
              envvar="CLIENTGEN_RUNTIME_MODULE",
              help="Module the generated client imports its transport and JSON helpers from.")
@click.option("--client-name", default=DEFAULT_CLIENT_NAME, show_default=True,
              envvar="CLIENTGEN_CLIENT_NAME", help="Name of the generated client class.")
@click.option("-v", "--verbose", is_flag=True, help="Log every definition and operation.")
@click.option("-q", "--quiet", is_flag=True, help="Only log warnings and errors.")
def main(
    input_path: Path,
    output: Path | None,
    runtime_module: str,
    client_name: str,
    verbose: bool,
    quiet: bool,
) -> None:
    """Generate a Python API client from a Swagger 2.0 JSON document."""
    configure_logging(verbose=verbose, quiet=quiet)
    options = RenderOptions(runtime_module=runtime_module, client_name=client_name)

    try:
        document = load_document(input_path)
    except OSError as exc:
        raise click.ClickException(f"Unable to read file: {exc}") from exc
    except InputMalformedError as exc:
        raise click.ClickException(str(exc)) from exc

    logger.info(
        "Loaded %s (%d definitions, %d paths)",
        input_path, len(document.definitions), len(document.paths),
    )

    try:
        context = build_context(document, options)
        source = generate(context)
    except GenerationError as exc:
        raise click.ClickException(f"Generation failed: {exc}") from exc
    except jinja2.TemplateError as exc:
        raise click.ClickException(f"Template render error: {exc}") from exc

    try:
        write_output(source, output)
    except OSError as exc:
        raise click.ClickException(f"Unable to create file: {exc}") from exc
