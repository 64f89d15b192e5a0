from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..config import AppConfig
from ..core import ConversionError, ConversionService
from ..models import ConversionConfig
from ..settings import resolve_config
from ..sidecar import dump_image_mappings

console = Console()

app = typer.Typer(help="Convert blog README Markdown into publishable HTML")


def _load_config(path: Path | None) -> AppConfig:
    return resolve_config(path)


def _parse_mappings(values: list[str]) -> ConversionConfig:
    mappings = ConversionConfig()
    for value in values:
        name, sep, rest = value.partition("=")
        resolution, sep2, image_id = rest.partition(":")
        if not (name and sep and sep2):
            raise typer.BadParameter(f"expected NAME=WxH:ID, got {value!r}", param_hint="--map")
        try:
            mappings = mappings.with_image(name, resolution, image_id)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--map") from exc
    return mappings


@app.command()
def convert(
    file: Path,
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Where to write the HTML, '-' for stdout"
    ),
    stdout: bool = typer.Option(False, "--stdout", help="Print the HTML instead of writing a file"),
    base_path: str | None = typer.Option(None, "--base-path", help="URL prefix for images"),
    image_map: list[str] = typer.Option(
        [], "--map", help="Image mapping as NAME=WxH:ID, may be repeated"
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    cfg = _load_config(config)
    service = ConversionService(cfg)
    mappings = _parse_mappings(image_map)
    to_stdout = stdout or output == Path("-")
    try:
        result = service.convert_file(
            file,
            output=None if to_stdout else output,
            base_path=base_path,
            mappings=mappings,
            write_output=not to_stdout,
        )
    except ConversionError as exc:
        console.print(f"[red]Conversion failed[/red]: {exc.code} - {exc}")
        raise typer.Exit(1) from exc
    if to_stdout:
        console.print(result.html, end="", markup=False, highlight=False, soft_wrap=True)
        return
    console.print(f"[green]Success[/green]: {result.summary}")
    console.print(f"Segments: {result.prose_segments} prose, {result.code_segments} code")


@app.command()
def batch(
    path: list[Path],
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    parallel: int | None = typer.Option(None, "--parallel", min=1, help="Parallel workers"),
) -> None:
    cfg = _load_config(config)
    service = ConversionService(cfg)
    batch_result = service.batch_convert(path, parallelism=parallel)
    table = Table(title="Batch summary")
    table.add_column("Run ID")
    table.add_column("Source")
    table.add_column("Output")
    for result in batch_result.runs:
        table.add_row(result.run_id, str(result.source_path), str(result.output_path))
    console.print(table)
    summary = batch_result.summary
    console.print(
        f"Processed {summary.total} files: "
        f"{summary.successes} succeeded, {summary.failures} failed."
    )
    for code, count in sorted(summary.errors.items()):
        console.print(f"[red]{code}[/red]: {count}")
    if summary.failures:
        raise typer.Exit(1)


@app.command()
def images(
    file: Path,
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    plain: bool = typer.Option(False, "--plain", help="Print in sidecar file format"),
) -> None:
    """Show the image mappings a document would be converted with."""

    cfg = _load_config(config)
    service = ConversionService(cfg)
    try:
        resolved = service.resolve_images(file)
    except ConversionError as exc:
        console.print(f"[red]Invalid mappings[/red]: {exc.code} - {exc}")
        raise typer.Exit(1) from exc
    if plain:
        console.print(
            dump_image_mappings(resolved), end="", markup=False, highlight=False, soft_wrap=True
        )
        return
    table = Table(title=f"Images for {file.name}")
    table.add_column("Name")
    table.add_column("Resolution")
    table.add_column("ID")
    table.add_column("Alt")
    for mapping in resolved.images.values():
        table.add_row(mapping.name, mapping.resolution, mapping.id, mapping.alt)
    console.print(table)
    console.print(f"Base path: {resolved.base_path or '[yellow]<unset>[/yellow]'}")


if __name__ == "__main__":
    app()
