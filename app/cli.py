from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.filesystem.shape_repository import FileSystemShapeDocumentRepository
from app.config import AppSettings, load_settings
from domain.errors import ShapeGraphError
from domain.path import Path as PathShape
from domain.polygon import Polygon
from domain.registry import IdentityRegistry
from domain.services.legacy_import import import_legacy_polyline
from domain.services.shape_report import build_shape_reports
from domain.services.shape_serialization import (
    LoadedDocument,
    export_document,
    load_document,
    shapes_equal,
)

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    settings = load_settings(config)
    logging.basicConfig(
        level="DEBUG" if verbose else settings.editor.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    ctx.obj = settings


def _settings(ctx: typer.Context) -> AppSettings:
    return ctx.obj if isinstance(ctx.obj, AppSettings) else load_settings()


def _load(path: Path, settings: AppSettings) -> LoadedDocument:
    if not path.exists():
        console.print(f"[red]File not found:[/] {path}")
        raise typer.Exit(code=1)
    repository = FileSystemShapeDocumentRepository(indent=settings.editor.json_indent)
    try:
        return load_document(repository.load(path))
    except (ValueError, ShapeGraphError) as exc:
        console.print(f"[red]Cannot load shape document:[/] {exc}")
        raise typer.Exit(code=1) from exc


@app.command("validate")
def validate(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Shape document to validate."),
) -> None:
    settings = _settings(ctx)
    loaded = _load(input_path, settings)
    reports = build_shape_reports(loaded.shapes, settings.editor.intersection_tolerance)
    invalid = [report for report in reports if not report.valid]
    for report in invalid:
        reason = "self-intersecting" if report.self_intersecting else "degenerate"
        console.print(f"[red]Invalid {report.kind}[/] {report.shape_id}: {reason}")
    if invalid:
        raise typer.Exit(code=1)
    console.print(f"[green]Valid shape document:[/] {input_path} ({len(reports)} shapes)")


@app.command("inspect")
def inspect_document(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Shape document to describe."),
) -> None:
    settings = _settings(ctx)
    loaded = _load(input_path, settings)
    table = Table(title=str(input_path))
    for column in ("id", "kind", "vertices", "edges", "bezier", "valid", "bbox"):
        table.add_column(column)
    for report in build_shape_reports(loaded.shapes, settings.editor.intersection_tolerance):
        bbox = "-"
        if report.bbox is not None:
            bbox = (
                f"({report.bbox.min.x:g}, {report.bbox.min.y:g}) "
                f"({report.bbox.max.x:g}, {report.bbox.max.y:g})"
            )
        table.add_row(
            str(report.shape_id),
            report.kind,
            str(report.vertices),
            str(report.edges),
            str(report.bezier_edges),
            "yes" if report.valid else "[red]no[/]",
            bbox,
        )
    console.print(table)


@app.command("normalize")
def normalize(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Shape document to normalize."),
    output_path: Path = typer.Option(..., "--output", "-o", help="Where to write the result."),
) -> None:
    settings = _settings(ctx)
    loaded = _load(input_path, settings)
    repository = FileSystemShapeDocumentRepository(indent=settings.editor.json_indent)
    repository.save(export_document(loaded.shapes), output_path)
    if loaded.renumbered:
        console.print(f"[yellow]Renumbered[/] {loaded.renumbered} colliding ids")
    console.print(f"[green]Wrote[/] {output_path}")


@app.command("import-legacy")
def import_legacy(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Flattened vertices/types export."),
    output_path: Path = typer.Option(..., "--output", "-o", help="Where to write the result."),
    shape: Optional[str] = typer.Option(
        None, "--shape", help="polygon or path; defaults to editor.legacy_shape."
    ),
) -> None:
    settings = _settings(ctx)
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    shape_name = (shape or settings.editor.legacy_shape).lower()
    if shape_name not in {"polygon", "path"}:
        console.print(f"[red]Unknown shape type:[/] {shape_name}")
        raise typer.Exit(code=1)
    shape_type = Polygon if shape_name == "polygon" else PathShape

    repository = FileSystemShapeDocumentRepository(indent=settings.editor.json_indent)
    try:
        records = repository.load_legacy(input_path)
    except ValueError as exc:
        console.print(f"[red]Cannot read legacy export:[/] {exc}")
        raise typer.Exit(code=1) from exc

    registry = IdentityRegistry()
    shapes = [import_legacy_polyline(registry, record, shape_type) for record in records]
    repository.save(export_document(shapes), output_path)
    console.print(f"[green]Wrote[/] {output_path} ({len(shapes)} shapes)")


@app.command("compare")
def compare(
    ctx: typer.Context,
    first_path: Path = typer.Argument(..., help="First shape document."),
    second_path: Path = typer.Argument(..., help="Second shape document."),
) -> None:
    settings = _settings(ctx)
    first = _load(first_path, settings)
    second = _load(second_path, settings)
    if len(first.shapes) != len(second.shapes):
        console.print(
            f"[red]Shape count differs:[/] {len(first.shapes)} != {len(second.shapes)}"
        )
        raise typer.Exit(code=1)
    mismatches = [
        index
        for index, (left, right) in enumerate(zip(first.shapes, second.shapes))
        if not shapes_equal(left, right, settings.editor.equality_tolerance)
    ]
    for index in mismatches:
        console.print(f"[red]Shape #{index} differs[/]")
    if mismatches:
        raise typer.Exit(code=1)
    console.print(f"[green]Documents match[/] ({len(first.shapes)} shapes)")


if __name__ == "__main__":
    app()
