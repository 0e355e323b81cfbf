"""CLI application for strata using Rich and Typer."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from strata import codec
from strata.config import default_ws_root, get_env_bool, home_dir, setup_logging
from strata.errors import ConfigError
from strata.merge import get_path, set_path, unset_path
from strata.result import Err
from strata.storage import LocalFileStore
from strata.store import ConfigStore
from strata.types import MISSING, PrecedenceLayer, ReadMode

app = typer.Typer(
    name="strata",
    help="strata - layered workspace configuration",
    no_args_is_help=True,
)

console = Console()

WsRootOption = typer.Option(
    None,
    "--ws-root",
    "-w",
    help="Workspace root (default: $STRATA_WS_ROOT or current directory)",
)
HomeOption = typer.Option(
    None,
    "--home",
    help="Directory holding the global override (default: $STRATA_HOME or ~)",
)


def _get_store(ws_root: Optional[Path], home: Optional[Path]) -> ConfigStore:
    return ConfigStore(
        LocalFileStore(),
        ws_root or default_ws_root(),
        home or home_dir(),
    )


def _fail(error: ConfigError) -> None:
    console.print(f"[red]Error: {escape(error.message)}[/red]")
    raise typer.Exit(1)


def _print_yaml(value) -> None:
    if isinstance(value, dict):
        text = codec.encode(value)
    else:
        text = yaml.safe_dump(value, default_flow_style=False, allow_unicode=True)
    console.print(text.rstrip("\n"), markup=False, highlight=False, soft_wrap=True)


@app.command()
def init(
    ws_root: Optional[Path] = WsRootOption,
    home: Optional[Path] = HomeOption,
):
    """Write a default strata.yml to the workspace root."""
    store = _get_store(ws_root, home)
    result = asyncio.run(store.create())
    if isinstance(result, Err):
        _fail(result.error)
    console.print(f"[green]Created {escape(str(store.location))}[/green]")


@app.command()
def show(
    ws_root: Optional[Path] = WsRootOption,
    home: Optional[Path] = HomeOption,
    raw: bool = typer.Option(
        False, "--raw", help="Show strata.yml as persisted, without defaults"
    ),
    mode: ReadMode = typer.Option(
        ReadMode.OVERRIDE, "--mode", "-m", help="How to resolve the config"
    ),
    key: Optional[str] = typer.Option(
        None, "--key", "-k", help="Dotted path of a single field to show"
    ),
):
    """Print the resolved (or raw) config as YAML."""
    store = _get_store(ws_root, home)
    result = asyncio.run(store.read_raw() if raw else store.read(mode=mode))
    if isinstance(result, Err):
        _fail(result.error)

    config = result.value
    if key is None:
        _print_yaml(config)
        return

    value = get_path(config, key)
    if value is MISSING:
        console.print(f"[yellow]{escape(key)} is not set[/yellow]")
        raise typer.Exit(1)
    _print_yaml(value)


@app.command("set")
def set_value(
    key: str = typer.Argument(
        ..., help="Dotted field path, e.g. commands.lookup.note.fuzzThreshold"
    ),
    value: str = typer.Argument(..., help="New value, parsed as YAML"),
    ws_root: Optional[Path] = WsRootOption,
    home: Optional[Path] = HomeOption,
):
    """Set one field and save strata.yml.

    Fields owned by an override file are left out of strata.yml.
    """
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as e:
        console.print(f"[red]Invalid value: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    store = _get_store(ws_root, home)

    async def _set():
        current = await store.read(mode=ReadMode.OVERRIDE)
        if isinstance(current, Err):
            return current
        config = current.value
        set_path(config, key, parsed)
        return await store.write(config)

    try:
        result = asyncio.run(_set())
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if isinstance(result, Err):
        _fail(result.error)

    if get_path(result.value, key) is MISSING:
        console.print(
            f"[yellow]{escape(key)} matches an override file; "
            "strata.yml was saved without it[/yellow]"
        )
    else:
        console.print(f"[green]Set {escape(key)}[/green]")


@app.command()
def unset(
    key: str = typer.Argument(..., help="Dotted field path to remove"),
    ws_root: Optional[Path] = WsRootOption,
    home: Optional[Path] = HomeOption,
):
    """Remove one field from strata.yml so it falls back to its default."""
    store = _get_store(ws_root, home)

    async def _unset():
        current = await store.read_raw()
        if isinstance(current, Err):
            return current, False
        config = current.value
        if not unset_path(config, key):
            return current, False
        return await store.write(config), True

    try:
        result, removed = asyncio.run(_unset())
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if isinstance(result, Err):
        _fail(result.error)
    if not removed:
        console.print(f"[yellow]{escape(key)} is not set in strata.yml[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]Unset {escape(key)}[/green]")


@app.command()
def where(
    ws_root: Optional[Path] = WsRootOption,
    home: Optional[Path] = HomeOption,
):
    """List the config files consulted, highest precedence first."""
    store = _get_store(ws_root, home)

    table = Table(title="Config layers", show_header=True)
    table.add_column("Layer", style="cyan")
    table.add_column("Path")
    table.add_column("Status")

    rows = [
        (f"{layer.value} override", store.overrides.locations[layer])
        for layer in PrecedenceLayer
    ]
    rows.append(("base", store.location))

    for name, location in rows:
        found = asyncio.run(store.file_store.exists(location))
        status = "[green]found[/green]" if found else "[dim]missing[/dim]"
        table.add_row(name, escape(str(location)), status)

    console.print(table)


@app.callback()
def main(
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging (also $STRATA_DEBUG)",
    ),
):
    """strata - layered workspace configuration."""
    debug = debug or get_env_bool("STRATA_DEBUG")
    setup_logging("DEBUG" if debug else None)


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
