"""questtracker CLI - typer application entry point."""

from __future__ import annotations

import asyncio
import atexit
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from questtracker.config import ConfigError, TrackerConfig, load_config
from questtracker.models import (
    EXPANSION_NAMES,
    UNSPECIFIED_EXPANSION_ID,
    UNSPECIFIED_EXPANSION_NAME,
    QuestCategory,
)
from questtracker.observability import close_file_logging, configure_logging
from questtracker.providers import IconCache, QuestApiClient
from questtracker.service import QuestDataService

if TYPE_CHECKING:
    from questtracker.models import QuestRecord

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="qt",
    help="questtracker: FFXIV quest graph loader.",
    no_args_is_help=True,
)
console = Console()

DEFAULT_TREE_DEPTH = 8

# Global state for option flags (set by callback, used by commands)
_config_path: Path | None = None


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log-dir",
            help="Write all log events to {log_dir}/debug.jsonl.",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to questtracker.yaml (default: ./questtracker.yaml).",
            envvar="QT_CONFIG",
        ),
    ] = None,
) -> None:
    """questtracker: FFXIV quest graph loader."""
    global _config_path
    _config_path = config

    configure_logging(verbosity=verbose, log_to_file=log_dir is not None, log_dir=log_dir)
    if log_dir is not None:
        atexit.register(close_file_logging)


def _load_config(max_pages: int | None = None, max_quests: int | None = None) -> TrackerConfig:
    try:
        return load_config(_config_path).with_overrides(
            max_pages=max_pages, max_quests=max_quests
        )
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


async def _run_load(config: TrackerConfig) -> QuestDataService:
    async with QuestDataService(config) as service:
        with console.status("Loading quest data from XIVAPI..."):
            await service.load()
    return service


def _load_or_exit(config: TrackerConfig) -> QuestDataService:
    service = asyncio.run(_run_load(config))
    if not service.is_loaded:
        console.print(
            "[red]Error:[/red] Quest data could not be loaded. Re-run with -v for details."
        )
        raise typer.Exit(1)
    return service


def _expansion_label(expansion_id: int) -> str:
    # Bucket 0 holds A Realm Reborn and quests without an expansion
    if expansion_id == UNSPECIFIED_EXPANSION_ID:
        return f"{EXPANSION_NAMES[expansion_id]} / {UNSPECIFIED_EXPANSION_NAME}"
    return EXPANSION_NAMES.get(expansion_id, f"Expansion {expansion_id}")


def _counts_table(service: QuestDataService) -> Table:
    table = Table(title=f"Quests loaded: {service.loaded_count}")
    table.add_column("Expansion", style="cyan")
    for category in QuestCategory:
        table.add_column(category.value, justify="right")
    table.add_column("Total", justify="right", style="bold")

    for expansion_id in service.index.expansion_ids():
        counts = service.counts_by_category(expansion_id)
        table.add_row(
            _expansion_label(expansion_id),
            *(str(counts[c]) if c in counts else "-" for c in QuestCategory),
            str(sum(counts.values())),
        )
    return table


def _add_branch(
    service: QuestDataService,
    parent: Tree,
    record: QuestRecord,
    depth: int,
    max_depth: int,
    path: frozenset[int],
) -> None:
    branch = parent.add(f"{record.name} [dim](Lv. {record.level})[/dim]")
    successors = service.successors_of(record)
    if not successors:
        return
    if depth >= max_depth:
        branch.add(f"[dim]... {len(successors)} more[/dim]")
        return
    for successor in successors:
        if successor.id in path:
            branch.add(f"[yellow]↻ {successor.name}[/yellow]")
            continue
        _add_branch(service, branch, successor, depth + 1, max_depth, path | {successor.id})


def build_quest_tree(
    service: QuestDataService,
    expansion_id: int,
    category: QuestCategory,
    max_depth: int = DEFAULT_TREE_DEPTH,
) -> Tree:
    """Render level-sorted roots of a bucket and their successor chains."""
    roots = service.roots_sorted_by_level(expansion_id, category)
    tree = Tree(
        f"[bold]{_expansion_label(expansion_id)} / {category.value}[/bold] "
        f"({len(roots)} root quests)"
    )
    for root in roots:
        _add_branch(service, tree, root, 1, max_depth, frozenset({root.id}))
    return tree


@app.command()
def version() -> None:
    """Show version information."""
    from questtracker import __version__

    console.print(f"questtracker v{__version__}")


@app.command()
def load(
    max_pages: Annotated[
        int | None,
        typer.Option("--max-pages", min=1, help="Fetch at most N list pages."),
    ] = None,
    max_quests: Annotated[
        int | None,
        typer.Option("--max-quests", min=1, help="Fetch details for at most N quests."),
    ] = None,
) -> None:
    """Load all quests and show counts per expansion and category."""
    config = _load_config(max_pages, max_quests)
    service = _load_or_exit(config)
    console.print(_counts_table(service))


@app.command()
def tree(
    expansion: Annotated[int, typer.Argument(help="Expansion id (0 = A Realm Reborn).")],
    category: Annotated[
        QuestCategory,
        typer.Argument(case_sensitive=False, help="Quest category."),
    ],
    depth: Annotated[
        int,
        typer.Option("--depth", min=1, help="Maximum successor depth to print."),
    ] = DEFAULT_TREE_DEPTH,
    max_pages: Annotated[
        int | None,
        typer.Option("--max-pages", min=1, help="Fetch at most N list pages."),
    ] = None,
    max_quests: Annotated[
        int | None,
        typer.Option("--max-quests", min=1, help="Fetch details for at most N quests."),
    ] = None,
) -> None:
    """Print the quest tree for one expansion and category."""
    config = _load_config(max_pages, max_quests)
    service = _load_or_exit(config)

    if not service.counts_by_category(expansion).get(category):
        console.print(f"No {category.value} quests found for {_expansion_label(expansion)}.")
        return

    console.print(build_quest_tree(service, expansion, category, depth))


async def _fetch_icon(config: TrackerConfig, icon_path: str) -> int | None:
    async with QuestApiClient(config.api_base, timeout=config.icon_timeout) as client:
        cache = IconCache(client.fetch_bytes, config.icon_cache_dir)
        image = await cache.load(icon_path)
    return image.size_bytes if image else None


@app.command()
def icon(
    icon_path: Annotated[str, typer.Argument(help="Icon path, e.g. /i/071000/071201.png.")],
) -> None:
    """Fetch one quest icon into the on-disk icon cache."""
    config = _load_config()
    size = asyncio.run(_fetch_icon(config, icon_path))
    if size is None:
        console.print(f"[red]Error:[/red] Could not load icon {icon_path}")
        raise typer.Exit(1)
    console.print(f"Cached {icon_path} ({size} bytes) in {config.icon_cache_dir}")
