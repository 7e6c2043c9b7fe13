from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich import print
from rich.markup import escape

from . import __version__
from .cancellation import CancelToken
from .config import CodehistConfig, get_config_path, load_config, resolve_state_db_path
from .provider import SearchProvider
from .store.types import ResultMeta

app = typer.Typer(help="codehist: search your editor's recently opened folders")


def _version_callback(value: bool) -> None:
    if value:
        print(f"codehist {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: str = typer.Option(None, help="Path to config JSON"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
) -> None:
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        print(f"[red]Unknown log level: {escape(log_level)}[/red]")
        raise typer.Exit(code=1)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config_path = Path(config).expanduser() if config else None
    if config_path is not None and not config_path.exists():
        print(f"[red]Config file not found: {escape(str(config_path))}[/red]")
        raise typer.Exit(code=1)
    ctx.meta["config_path"] = config_path
    ctx.obj = load_config(config_path)


def _config(ctx: typer.Context) -> CodehistConfig:
    cfg = ctx.obj
    if isinstance(cfg, CodehistConfig):
        return cfg
    return load_config()


async def _run_search(provider: SearchProvider, terms: list[str], limit: int) -> list[ResultMeta]:
    cancel = CancelToken()
    identifiers = await provider.get_initial_result_set(terms, cancel)
    identifiers = provider.filter_results(identifiers, limit)
    return await provider.get_result_metas(identifiers, cancel)


@app.command()
def search(
    ctx: typer.Context,
    terms: list[str] = typer.Argument(None, help="Search terms (any term may match)"),
    max_results: int = typer.Option(None, help="Maximum results to show"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Search recently opened folders by label or uri."""

    cfg = _config(ctx)
    provider = SearchProvider.from_config(cfg)
    limit = max_results if max_results is not None else cfg.max_results
    metas = asyncio.run(_run_search(provider, list(terms or []), limit))
    if as_json:
        payload = [
            {
                "id": meta.id,
                "name": meta.name,
                "description": meta.description,
                "clipboard_text": meta.clipboard_text,
            }
            for meta in metas
        ]
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    if not metas:
        print("[yellow]No matching folders[/yellow]")
        return
    for meta in metas:
        print(f"[bold]{escape(meta.name)}[/bold]  [dim]{escape(meta.description)}[/dim]")


@app.command("open")
def open_folder(
    ctx: typer.Context,
    uri: str = typer.Argument(..., help="Folder uri to open"),
) -> None:
    """Open a folder uri in the editor."""

    provider = SearchProvider.from_config(_config(ctx))
    provider.activate_result(uri, [])
    print(f"[green]Opening {escape(uri)}[/green]")


@app.command()
def where(ctx: typer.Context) -> None:
    """Show which config file and history database are used."""

    cfg = _config(ctx)
    db_path = resolve_state_db_path(cfg)
    config_path = get_config_path(ctx.meta.get("config_path"))
    print(f"config: {escape(str(config_path))}")
    state = "[green]found[/green]" if db_path.is_file() else "[red]missing[/red]"
    print(f"history db: {escape(str(db_path))} ({state})")
