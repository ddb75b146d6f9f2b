"""CLI entry point for vaultpress."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from vaultpress.config import DestinationConfig, FolderConfig, VaultpressConfig, load_config
from vaultpress.config.loader import DEFAULT_CONFIG_TEMPLATE
from vaultpress.delivery import (
    ConnectionStatus,
    HttpAssetUploader,
    HttpNoteUploader,
    RecordingSink,
    check_connection,
)
from vaultpress.logging_setup import configure_logging, console
from vaultpress.models import PublishableDocument, RawDocument
from vaultpress.progress import RichProgress
from vaultpress.publish import (
    AssetPublisher,
    ConfigurationError,
    PublicationOrchestrator,
    PublicationResult,
    PublicationStatus,
    prepare_document,
)
from vaultpress.vault import FilesystemVault, parse_frontmatter

app = typer.Typer(
    name="vaultpress",
    help="Publish Obsidian vault folders to your site.",
)

config_app = typer.Typer(help="Manage vaultpress configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: VaultpressConfig | None = None


def _get_config() -> VaultpressConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to vaultpress.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _open_vault(cfg: VaultpressConfig) -> FilesystemVault:
    try:
        return FilesystemVault(cfg.vault_path)
    except ConfigurationError as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


def _display_routes(notes: list[PublishableDocument], title: str) -> None:
    table = Table(title=f"{title} ({len(notes)})")
    table.add_column("Note", style="cyan")
    table.add_column("Route", style="green")
    table.add_column("Destination")
    table.add_column("Assets", justify="right")
    for note in notes:
        table.add_row(
            note.source_path,
            note.routing.full_path if note.routing else "-",
            note.destination.id,
            str(len(note.assets or [])),
        )
    rprint(table)


def _report_failure(result: PublicationResult) -> None:
    if result.status is PublicationStatus.no_config:
        rprint("[yellow]No destinations or folders configured.[/yellow] Run 'vaultpress config init'.")
    elif result.status is PublicationStatus.missing_destination:
        missing = ", ".join(result.folders_without_destination)
        rprint(f"[red]Folders reference unknown destinations:[/red] {missing}")
    else:
        rprint(f"[red]Publication failed:[/red] {escape(str(result.error))}")
        if result.published_count:
            rprint(f"[dim]{result.published_count} note(s) were delivered before the failure.[/dim]")


def _group_by_destination(
    notes: list[PublishableDocument],
) -> dict[str, tuple[DestinationConfig, list[PublishableDocument]]]:
    groups: dict[str, tuple[DestinationConfig, list[PublishableDocument]]] = {}
    for note in notes:
        groups.setdefault(note.destination.id, (note.destination, []))[1].append(note)
    return groups


def _publish_assets(
    cfg: VaultpressConfig, vault: FilesystemVault, notes: list[PublishableDocument]
) -> bool:
    """Upload embedded assets per destination. Returns False on any failure."""
    publisher = AssetPublisher(vault, HttpAssetUploader())
    clean = True
    for destination, group in _group_by_destination(notes).values():
        result = asyncio.run(publisher.execute(
            destination,
            group,
            assets_folder=cfg.assets.folder,
            vault_fallback=cfg.assets.vault_fallback,
            progress=RichProgress("Uploading assets", console=console),
        ))
        if result.published_assets_count:
            rprint(
                f"[green]Uploaded[/green] {result.published_assets_count} asset(s) "
                f"to {destination.id}"
            )
        for failure in result.failures:
            clean = False
            detail = f": {escape(str(failure.error))}" if failure.error else ""
            rprint(f"[red]{failure.reason}[/red] {failure.asset.target}{detail}")
    return clean


@app.command()
def publish(
    dry_run: bool = typer.Option(False, "--dry-run", help="Compute routes without uploading"),
    assets: bool = typer.Option(True, "--assets/--no-assets", help="Upload embedded assets"),
) -> None:
    """Publish every configured folder to its destination."""
    cfg = _get_config()
    vault = _open_vault(cfg)
    sink = RecordingSink() if dry_run else HttpNoteUploader()

    orchestrator = PublicationOrchestrator(vault, sink)
    result = asyncio.run(
        orchestrator.execute(cfg, RichProgress("Publishing notes", console=console))
    )

    if not result.ok:
        _report_failure(result)
        raise typer.Exit(1)

    if dry_run:
        _display_routes(result.notes, "Dry run")
        return

    rprint(f"[green]Published[/green] {result.published_count} note(s).")
    if assets and result.notes and not _publish_assets(cfg, vault, result.notes):
        raise typer.Exit(1)


@app.command()
def preview(
    note_path: str = typer.Argument(..., help="Markdown note to preview"),
    route_base: str = typer.Option("", "--route-base", help="Route base of the note's folder"),
) -> None:
    """Run the note stages on one file and show the result."""
    cfg = _get_config()
    path = Path(note_path)
    if not path.is_file():
        rprint(f"[red]Not a file:[/red] {path}")
        raise typer.Exit(1)

    try:
        frontmatter, body = parse_frontmatter(path.read_text(encoding="utf-8-sig"))
    except yaml.YAMLError as e:
        rprint(f"[red]Invalid frontmatter in {path}:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    folder = FolderConfig(id="preview", route_base=route_base, destination_id="preview")
    raw = RawDocument(
        source_path=path.as_posix(),
        relative_path=path.name,
        content=body,
        frontmatter=frontmatter,
        folder=folder,
    )
    note = prepare_document(
        raw, DestinationConfig(id="preview"), cfg.ignore_rules, note_id="preview"
    )
    if note is None:
        rprint(f"[yellow]{path} is excluded by an ignore rule.[/yellow]")
        raise typer.Exit(0)

    routing = note.routing
    rprint(Panel(
        f"[bold]{note.title}[/bold]\n\n"
        f"[dim]Slug:[/dim]      {routing.slug}\n"
        f"[dim]Path:[/dim]      {routing.path or '(root)'}\n"
        f"[dim]Full path:[/dim] {routing.full_path}",
        title="Routing",
        border_style="blue",
    ))

    if note.assets:
        table = Table(title=f"Assets ({len(note.assets)})")
        table.add_column("Target", style="cyan")
        table.add_column("Kind", style="green")
        table.add_column("Display")
        for asset in note.assets:
            d = asset.display
            parts = [d.alignment or "", f"{d.width}px" if d.width is not None else "", *d.classes]
            table.add_row(asset.target, asset.kind.value, " ".join(p for p in parts if p) or "-")
        rprint(table)

    if note.wikilinks:
        table = Table(title=f"Wikilinks ({len(note.wikilinks)})")
        table.add_column("Path", style="cyan")
        table.add_column("Subpath")
        table.add_column("Alias")
        table.add_column("Kind", style="green")
        for link in note.wikilinks:
            table.add_row(link.path, link.subpath or "-", link.alias or "-", link.kind.value)
        rprint(table)

    rprint(Syntax(note.content, "markdown"))


@app.command()
def ping(
    destination_id: str | None = typer.Argument(None, help="Destination to check (default: all)"),
) -> None:
    """Check connectivity of configured destinations."""
    cfg = _get_config()
    destinations = [
        d for d in cfg.destinations if destination_id is None or d.id == destination_id
    ]
    if not destinations:
        target = f"'{destination_id}'" if destination_id else "any destination"
        rprint(f"[red]No configuration for {target}.[/red]")
        raise typer.Exit(1)

    table = Table(title="Destinations")
    table.add_column("id", style="cyan")
    table.add_column("url")
    table.add_column("status")

    failed = False
    for destination in destinations:
        status = asyncio.run(check_connection(destination))
        ok = status is ConnectionStatus.success
        failed = failed or not ok
        table.add_row(
            destination.id,
            destination.url or "-",
            f"[green]{status.value}[/green]" if ok else f"[red]{status.value}[/red]",
        )
    rprint(table)
    if failed:
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(mode="json"), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default vaultpress.yaml in current directory."""
    target = Path("vaultpress.yaml")
    if target.exists() and not force:
        rprint("[yellow]vaultpress.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
