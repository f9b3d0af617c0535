"""Export the JSON Schema for the descriptor document format.

Editors and CI can use it to validate hand-written descriptor YAML/JSON before
it reaches `shape-schema generate`.
"""

from __future__ import annotations

from pathlib import Path

import typer
import ujson as json

from shape_schema.dsl import TypeDescriptor

app = typer.Typer(help="Export JSON Schema for `TypeDescriptor` documents.")


@app.command()
def main(
    out: Path = typer.Argument(..., help="Output path (usually .json)."),
    pretty: bool = typer.Option(True, help="Write pretty-printed JSON."),
) -> None:
    schema = TypeDescriptor.model_json_schema()
    text = json.dumps(schema, indent=2 if pretty else 0, escape_forward_slashes=False)
    out.write_text(text)
    typer.echo(f"Wrote descriptor schema to {out}")


if __name__ == "__main__":
    app()
