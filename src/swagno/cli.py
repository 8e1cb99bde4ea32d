"""CLI entry point for swagno."""

import importlib
import logging
import sys
from pathlib import Path

import click

from swagno.config import load_config
from swagno.document import Document
from swagno.errors import SwagnoError


def _load_document(target: str, app_dir: Path = Path(".")) -> Document:
    """Resolve "package.module:attr" to a document, calling attr if it is a factory.

    The module is imported with app_dir at the front of sys.path.
    """
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise click.BadParameter("expected MODULE:ATTRIBUTE", param_hint="TARGET")
    root = str(app_dir.resolve())
    if root not in sys.path:
        sys.path.insert(0, root)
    try:
        module = importlib.import_module(module_name)
    except ImportError as err:
        raise click.BadParameter(f"cannot import {module_name}: {err}", param_hint="TARGET") from err
    try:
        obj = getattr(module, attr)
    except AttributeError as err:
        raise click.BadParameter(f"{module_name} has no attribute {attr}", param_hint="TARGET") from err

    if not isinstance(obj, Document) and callable(obj):
        obj = obj()
    if not isinstance(obj, Document):
        raise click.BadParameter(f"{target} is not a Swagger or OpenAPI document", param_hint="TARGET")
    return obj


@click.group()
def main():
    """swagno: build Swagger 2.0 and OpenAPI 3.0 documents from Python models."""
    pass


@main.command()
@click.argument("target")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="File to write the document to.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML file with document metadata.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format; auto picks by file suffix.")
@click.option("--app-dir", default=".", type=click.Path(file_okay=False, path_type=Path), help="Directory to import TARGET from.")
@click.option("-v", "--verbose", is_flag=True, help="Log schema generation details.")
def export(target: str, output: Path, config_path: Path | None, fmt: str, app_dir: Path, verbose: bool):
    """Generate the document exposed by TARGET (module:attribute) and write it to a file."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    document = _load_document(target, app_dir)
    try:
        if config_path is not None:
            document.configure(load_config(config_path))

        click.echo(f"Generating {type(document).__name__} document for {len(document.endpoints)} endpoints...")
        output.parent.mkdir(parents=True, exist_ok=True)
        document.export(output, fmt=fmt)
    except SwagnoError as err:
        raise click.ClickException(str(err)) from err
    click.echo(f"Document saved to {output}")
