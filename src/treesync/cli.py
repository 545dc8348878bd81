"""Developer CLI: diff snapshots, flatten trees, dry-run a sync."""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from treesync.config import ROOT_NAMESPACE
from treesync.core.diff import diff as diff_states
from treesync.core.flatten import flatten as flatten_tree
from treesync.hosts import MemoryHost
from treesync.logging_config import configure_logging
from treesync.models.node import ComponentTree
from treesync.sync import Synchronizer

app = typer.Typer(help="treesync: flatten component trees and compute host patches.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Log level name, overrides --verbose")
    ] = None,
) -> None:
    configure_logging(verbose=verbose, level=log_level)


def _load_json(path: Path) -> Any:
    """Read a JSON file, exiting with an error message if it is unusable."""
    if not path.exists():
        logger.error("File not found: {}", path)
        raise typer.Exit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in {}: {}", path, e)
        raise typer.Exit(1) from None


def _echo_patch(patch: dict[str, Any], *, output_json: bool) -> None:
    if output_json:
        typer.echo(json.dumps(patch, indent=2, sort_keys=True))
        return
    if not patch:
        typer.echo("No changes.")
        return
    typer.echo(f"{len(patch)} change(s):")
    for path, value in patch.items():
        typer.echo(f"  {path} = {json.dumps(value)}")


def _load_tree(path: Path) -> ComponentTree:
    try:
        return ComponentTree.from_dict(_load_json(path))
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error("Cannot build tree from {}: {}", path, e)
        raise typer.Exit(1) from None


@app.command()
def diff(
    new: Path = typer.Argument(..., help="JSON file with the new state"),
    old: Path = typer.Argument(..., help="JSON file with the old (host) state"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Print the patch that turns OLD into NEW."""
    new_state = _load_json(new)
    if not isinstance(new_state, dict):
        logger.error("Top level of {} must be an object", new)
        raise typer.Exit(1)
    _echo_patch(diff_states(new_state, _load_json(old)), output_json=output_json)


@app.command()
def flatten(
    tree_file: Path = typer.Argument(..., help="JSON file with a nested component tree"),
    namespace: Annotated[
        str,
        typer.Option("--namespace", "-n", help="Root namespace for snapshot keys"),
    ] = ROOT_NAMESPACE,
) -> None:
    """Print the flattened snapshot of a component tree."""
    tree = _load_tree(tree_file)
    snapshot = flatten_tree(tree, namespace=namespace)
    typer.echo(json.dumps(snapshot, indent=2, sort_keys=True))


@app.command()
def sync(
    tree_file: Path = typer.Argument(..., help="JSON file with a nested component tree"),
    state: Annotated[
        Path | None,
        typer.Option("--state", "-s", help="JSON file with the current host state"),
    ] = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Run an initial sync against an in-memory host and print the patch."""
    tree = _load_tree(tree_file)
    host_state = _load_json(state) if state else None
    if host_state is not None and not isinstance(host_state, dict):
        logger.error("Top level of {} must be an object", state)
        raise typer.Exit(1)
    host = MemoryHost(host_state)
    patch = Synchronizer(tree, host).init_sync()
    _echo_patch(patch, output_json=output_json)
