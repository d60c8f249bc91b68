"""CLI entry point for revstamp."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from revstamp.config import RevstampConfig, load_config
from revstamp.config.loader import CONFIG_FILENAME, DEFAULT_CONFIG_TEMPLATE
from revstamp.display import normalize
from revstamp.errors import RevstampError
from revstamp.output.emitter import FIELD_SYMBOLS, MACHINE_FORMATS
from revstamp.pipeline import freeze as freeze_cache
from revstamp.pipeline import generate as run_pipeline
from revstamp.pipeline import resolve_path
from revstamp.probe import probe_with_source
from revstamp.vcs import get_backends
from revstamp.vcs.models import RevisionState

app = typer.Typer(
    name="revstamp",
    help="Stamp builds with their version-control revision.",
)

config_app = typer.Typer(help="Manage revstamp configuration.")
app.add_typer(config_app, name="config")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Global state
_config: RevstampConfig | None = None


def _get_config() -> RevstampConfig:
    if _config is None:
        return load_config()
    return _config


def _fail(message: str) -> typer.Exit:
    rprint(f"[red]{escape(message)}[/red]")
    return typer.Exit(1)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS[level],
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to revstamp.yaml")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        raise _fail(str(e))
    _configure_logging("debug" if verbose else _config.log_level)


def _with_overrides(
    cfg: RevstampConfig,
    repo: str | None = None,
    cache: str | None = None,
    machine_header: str | None = None,
    fmt: str | None = None,
    display_header: str | None = None,
    display_cache: str | None = None,
) -> RevstampConfig:
    """Apply command-line overrides on top of the loaded config."""
    top = {k: v for k, v in {"repo_path": repo, "cache_path": cache}.items() if v is not None}
    out = {
        k: v
        for k, v in {
            "machine_header": machine_header,
            "machine_format": fmt,
            "display_header": display_header,
            "display_cache": display_cache,
        }.items()
        if v is not None
    }
    merged = cfg.model_dump()
    merged.update(top)
    merged["output"].update(out)
    return RevstampConfig(**merged)


@app.command()
def generate(
    repo: Annotated[str | None, typer.Option("--repo", help="Working copy to probe")] = None,
    cache: Annotated[str | None, typer.Option("--cache", help="Revision cache file")] = None,
    machine_header: Annotated[
        str | None, typer.Option("--machine-header", help="Machine header output path")
    ] = None,
    fmt: Annotated[
        str | None,
        typer.Option("--format", help=f"Machine header format ({', '.join(MACHINE_FORMATS)})"),
    ] = None,
    display_header: Annotated[
        str | None, typer.Option("--display-header", help="Display header output path")
    ] = None,
    display_cache: Annotated[
        str | None, typer.Option("--display-cache", help="Display cache output path")
    ] = None,
    ci: Annotated[bool, typer.Option("--ci", help="Machine-readable output")] = False,
) -> None:
    """Probe the repository and write the revision artifacts."""
    try:
        cfg = _with_overrides(
            _get_config(), repo, cache, machine_header, fmt, display_header, display_cache
        )
        result = run_pipeline(cfg)
    except (RevstampError, ValueError) as e:
        logging.getLogger(__name__).debug("generate failed", exc_info=True)
        raise _fail(f"Error: {e}")

    if ci:
        for artifact, write in result.writes.items():
            status = "WRITTEN" if write.written else "UNCHANGED"
            typer.echo(f"{status} {artifact} {write.path}")
        typer.echo(f"source={result.source}")
        return

    table = Table(title=f"Revision {result.state.short_hash} ({result.source})")
    table.add_column("Artifact", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Path", style="dim")
    for artifact, write in result.writes.items():
        status = "[green]written[/green]" if write.written else "[yellow]unchanged[/yellow]"
        table.add_row(artifact, status, str(write.path))
    rprint(table)
    rprint(f"\n[dim]Display tag:[/dim] {escape(result.display.display_tag)}")


def _lookup_symbol(name: str) -> str:
    """Map ``tag``, ``shortHash``, ``short_hash`` or ``VCS_TAG`` to a field name."""
    fields = list(RevisionState.model_fields)
    if name in fields:
        return name
    for field, symbol in FIELD_SYMBOLS.items():
        if name.upper() == symbol:
            return field
    snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in name)
    if snake in fields:
        return snake
    raise ValueError(f"Unknown symbol: {name!r}. Known: {', '.join(fields)}")


def _format_value(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


@app.command()
def show(
    symbol: Annotated[
        str | None, typer.Option("--symbol", "-s", help="Print a single value, e.g. tag")
    ] = None,
    display: Annotated[
        bool, typer.Option("--display", help="Use display tag/branch instead of raw values")
    ] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print as JSON")] = False,
    repo: Annotated[str | None, typer.Option("--repo", help="Working copy to probe")] = None,
    cache: Annotated[str | None, typer.Option("--cache", help="Revision cache file")] = None,
) -> None:
    """Show the revision state without writing anything."""
    try:
        cfg = _with_overrides(_get_config(), repo, cache)
        repo_path = Path(cfg.repo_path)
        cache_path = resolve_path(repo_path, cfg.cache_path)
        probed = probe_with_source(repo_path, cache_path, get_backends(list(cfg.backends)))
        values = probed.state.model_dump()
        if display:
            shown = normalize(probed.state)
            values["tag"] = shown.display_tag
            values["branch"] = shown.display_branch
        field = _lookup_symbol(symbol) if symbol else None
    except (RevstampError, ValueError) as e:
        raise _fail(f"Error: {e}")

    if field is not None:
        typer.echo(_format_value(values[field]))
        return

    if as_json:
        typer.echo(json.dumps({**values, "source": probed.source}, indent=2, sort_keys=True))
        return

    table = Table(title=f"Revision ({probed.source})")
    table.add_column("Field", style="cyan")
    table.add_column("Symbol", style="dim")
    table.add_column("Value", style="green")
    for name, value in values.items():
        table.add_row(name, FIELD_SYMBOLS.get(name, ""), _format_value(value))
    rprint(table)


@app.command()
def freeze(
    repo: Annotated[str | None, typer.Option("--repo", help="Working copy to probe")] = None,
    cache: Annotated[str | None, typer.Option("--cache", help="Revision cache file")] = None,
) -> None:
    """Write the revision cache from the live repository."""
    try:
        write = freeze_cache(_with_overrides(_get_config(), repo, cache))
    except (RevstampError, ValueError) as e:
        raise _fail(f"Error: {e}")
    if write.written:
        rprint(f"[green]Wrote[/green] {write.path}")
    else:
        rprint(f"[dim]Unchanged[/dim] {write.path}")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default revstamp.yaml in current directory."""
    target = Path(CONFIG_FILENAME)
    if target.exists() and not force:
        rprint(f"[yellow]{target} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
