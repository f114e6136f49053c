"""Command line entry point for descriptor generation."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich import box
from rich import print as rich_print
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import DescriptorConfig, ResourceFileType, ResourceMode
from .errors import DescriptorError
from .operations.generate import ResourceGenerator
from .writer import DescriptorWriter

_LOG = logging.getLogger(__name__)

app = typer.Typer(help="Assemble Kubernetes resource descriptors from fragments and project configuration.")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, log_time_format="%X")],
    )


def _load_config(
    config_path: Path,
    mode: Optional[ResourceMode] = None,
    resource_type: Optional[ResourceFileType] = None,
    resource_dir: Optional[Path] = None,
    target_dir: Optional[Path] = None,
    skip: bool = False,
) -> DescriptorConfig:
    descriptor_config = DescriptorConfig.from_file(config_path)
    updates: dict = {}
    if mode:
        updates["mode"] = mode
    if resource_type:
        updates["resource_type"] = resource_type
    if resource_dir:
        updates["resource_dir"] = resource_dir
    if target_dir:
        updates["target_dir"] = target_dir
    if skip:
        updates["skip"] = True
    return descriptor_config.model_copy(update=updates) if updates else descriptor_config


def _fail(exc: DescriptorError) -> NoReturn:
    _LOG.debug("Descriptor generation failed", exc_info=exc)
    typer.secho(str(exc), fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.command("generate")
def generate(
    config_path: Path = typer.Argument(..., help="Path to the descriptor configuration file."),
    mode: Optional[ResourceMode] = typer.Option(None, help="Operational mode selecting API versions and file name."),
    resource_type: Optional[ResourceFileType] = typer.Option(None, "--resource-type", help="Output encoding."),
    resource_dir: Optional[Path] = typer.Option(None, help="Directory holding resource fragments."),
    target_dir: Optional[Path] = typer.Option(None, help="Directory receiving the descriptor."),
    skip: bool = typer.Option(False, "--skip", help="Skip descriptor generation."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Generate the resource descriptor and write it below the target directory."""

    _configure_logging(verbose)
    try:
        descriptor_config = _load_config(config_path, mode, resource_type, resource_dir, target_dir, skip)
        target = ResourceGenerator(descriptor_config).run()
    except DescriptorError as exc:
        _fail(exc)
    if target is None:
        rich_print("[yellow]Descriptor generation skipped.[/yellow]")
        return
    rich_print(f"[green]Descriptor written to {escape(str(target))}[/green]")


@app.command("show")
def show(
    config_path: Path = typer.Argument(..., help="Path to the descriptor configuration file."),
    resource_type: Optional[ResourceFileType] = typer.Option(None, "--resource-type", help="Output encoding."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Print the enriched descriptor without writing any file."""

    _configure_logging(verbose)
    try:
        descriptor_config = _load_config(config_path, resource_type=resource_type)
        resources = ResourceGenerator(descriptor_config).generate()
    except DescriptorError as exc:
        _fail(exc)
    typer.echo(DescriptorWriter(descriptor_config.resource_type).render(resources), nl=False)


@app.command("fragments")
def fragments(
    config_path: Path = typer.Argument(..., help="Path to the descriptor configuration file."),
) -> None:
    """List the resource fragment files that would be merged."""

    try:
        descriptor_config = _load_config(config_path)
    except DescriptorError as exc:
        _fail(exc)
    files = ResourceGenerator(descriptor_config).fragment_files()
    if not files:
        rich_print(f"No resource fragments found in {escape(str(descriptor_config.resource_dir))}.")
        return

    table = Table(title="Resource fragments", box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right")
    table.add_column("File")
    table.add_column("Size", justify="right")
    for index, path in enumerate(files, start=1):
        table.add_row(str(index), path.name, str(path.stat().st_size))
    rich_print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
