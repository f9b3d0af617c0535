"""Command-line utilities for the shape_schema package."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import get_version
from .api import encode_to_schema, export_schema
from .dsl import NullableMode, SchemaConfig, TypeDescriptor, load_config, load_descriptor
from .errors import UnsupportedTypeError

app = typer.Typer(help="Synthesize JSON Schema documents from type descriptors")
console = Console()


@app.callback()
def setup(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )
    logging.getLogger("shape_schema").setLevel(logging.DEBUG if verbose else logging.INFO)


@app.command()
def version() -> None:
    """Print the installed package version."""
    typer.echo(get_version())


def _resolve_config(config_path: Path | None, overrides: dict[str, Any]) -> SchemaConfig:
    base = load_config(config_path) if config_path is not None else SchemaConfig()
    update = {key: value for key, value in overrides.items() if value is not None}
    if not update:
        return base
    # Round-trip through validation so overrides are checked like file values.
    return SchemaConfig.model_validate({**base.model_dump(), **update})


@app.command()
def generate(
    descriptor: Annotated[Path, typer.Argument(help="Descriptor document (YAML or JSON).")],
    out: Annotated[
        Path | None, typer.Option(help="Write the schema here instead of stdout.")
    ] = None,
    config: Annotated[
        Path | None, typer.Option(help="SchemaConfig document (YAML or JSON).")
    ] = None,
    compact: Annotated[
        bool | None, typer.Option("--compact/--pretty", help="Compact or indented output.")
    ] = None,
    nullable_mode: Annotated[
        NullableMode | None, typer.Option(help="How nullable nodes are represented.")
    ] = None,
    mapping: Annotated[
        bool | None,
        typer.Option("--mapping/--no-mapping", help="Emit discriminator.mapping for unions."),
    ] = None,
    schema_uri: Annotated[str | None, typer.Option(help="Value of the $schema keyword.")] = None,
    discriminator: Annotated[
        str | None, typer.Option(help="Property name carrying the union discriminator.")
    ] = None,
) -> None:
    """Synthesize the JSON Schema for a descriptor document."""
    if not descriptor.exists():
        raise typer.BadParameter(f"{descriptor} does not exist")
    if config is not None and not config.exists():
        raise typer.BadParameter(f"{config} does not exist")
    try:
        schema_config = _resolve_config(
            config,
            {
                "pretty_print": None if compact is None else not compact,
                "nullable_mode": nullable_mode,
                "include_discriminator_mapping": mapping,
                "schema_uri": schema_uri,
                "class_discriminator": discriminator,
            },
        )
        if out is not None:
            export_schema(descriptor, out, schema_config)
        else:
            text = encode_to_schema(load_descriptor(descriptor), schema_config)
    except (UnsupportedTypeError, ValueError) as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc
    if out is not None:
        console.print(f"[bold green]Schema written:[/] {out}")
    else:
        typer.echo(text)


def _metadata_label(metadata: list[Any]) -> str:
    return ", ".join(item.type for item in metadata) or "-"


@app.command()
def inspect(
    descriptor: Annotated[Path, typer.Argument(help="Descriptor document (YAML or JSON).")],
) -> None:
    """Print the elements (or variants) of a descriptor document."""
    if not descriptor.exists():
        raise typer.BadParameter(f"{descriptor} does not exist")
    try:
        loaded: TypeDescriptor = load_descriptor(descriptor)
    except ValueError as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    title = f"{loaded.serial_name} ({loaded.kind}{', nullable' if loaded.nullable else ''})"
    table = Table(title=title)
    if loaded.kind == "sealed":
        table.add_column("Variant")
        table.add_column("Discriminator")
        table.add_column("Elements")
        for variant in loaded.variants:
            table.add_row(
                variant.serial_name, variant.discriminator_value, str(variant.elements_count)
            )
    else:
        table.add_column("Name")
        table.add_column("Kind")
        table.add_column("Nullable")
        table.add_column("Optional")
        table.add_column("Metadata")
        for element in loaded.elements:
            table.add_row(
                element.name,
                element.descriptor.kind,
                "yes" if element.descriptor.nullable else "no",
                "yes" if element.optional else "no",
                _metadata_label(element.metadata),
            )
    console.print(table)
    if loaded.metadata:
        console.print(f"[bold]Type metadata:[/] {_metadata_label(loaded.metadata)}")


def main() -> None:
    """Entry point for `python -m shape_schema.cli`."""
    app()


if __name__ == "__main__":
    main()
