#!/usr/bin/env python3
"""
Layered Merkle CLI

Command-line interface for building merkle trees over leaf hashes,
generating and verifying inclusion paths, and updating leaves.
"""

import json
import logging
import sys
from typing import List, Optional, Sequence

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .api.client import TreeAPIClient
from .api.rest_api import run_server
from .config import get_log_level
from .hashers import HASHERS, get_combine
from .main import build_tree, generate_proof, load_leaves
from .merkle import MerkleTree, MerkleTreeError, verify_merkle_proof
from .utils import shorten_hash

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)

DEMO_LEAVES = ["1234", "2345", "7545", "4564"]
DEMO_UPDATE = (0, "63453")


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else getattr(logging, get_log_level(), logging.INFO)
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def resolve_leaves(leaves: Sequence[str], json_file: Optional[str]) -> List[str]:
    """Take leaves from --json-file when given, else from the arguments."""
    if json_file and leaves:
        raise click.UsageError("Give leaves either as arguments or with --json-file, not both")
    if json_file:
        try:
            return load_leaves(json_file)
        except (OSError, ValueError) as e:
            raise click.ClickException(f"Failed to load leaves from {json_file}: {e}")
    if not leaves:
        raise click.UsageError("No leaves given")
    return list(leaves)


def print_proof_result(result, format_output: str = "table"):
    """Print proof results in various formats."""
    if format_output == "json":
        output = {
            "proof": result.proof,
            "root": result.root,
            "metadata": result.metadata,
        }
        click.echo(json.dumps(output, indent=2))
        return

    # Table format (default)
    table = Table(title="Merkle Proof")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Root Hash", result.root)
    table.add_row("Proof Steps", str(len(result.proof)))
    for key, value in result.metadata.items():
        table.add_row(key.replace("_", " ").title(), shorten_hash(str(value)))

    console.print(table)

    console.print("\n[bold cyan]Proof Steps:[/bold cyan]")
    for i, step in enumerate(result.proof):
        console.print(f"  {i:2d}: {step}")


def render_tree(tree: MerkleTree) -> Tree:
    """Render every layer of a tree as a rich Tree, root at the top."""
    layers = tree.layers

    def add_children(node: Tree, level: int, position: int):
        if level == 0:
            return
        below = layers[level - 1]
        left = position * 2
        if left + 1 < len(below):
            for child in (left, left + 1):
                branch = node.add(f"[{level - 1}:{child}] {shorten_hash(below[child])}")
                add_children(branch, level - 1, child)
        else:
            branch = node.add(f"[{level - 1}:{left}] {shorten_hash(below[left])} [dim](carried)[/dim]")
            add_children(branch, level - 1, left)

    top = len(layers) - 1
    rendered = Tree(f"[bold green]root[/bold green] {shorten_hash(tree.root())}")
    add_children(rendered, top, 0)
    return rendered


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--hasher",
    type=click.Choice(sorted(HASHERS)),
    envvar="MERKLE_HASHER",
    default="sha256",
    show_default=True,
    help="Combine function used for inner nodes",
)
@click.pass_context
def cli(ctx, verbose: bool, hasher: str):
    """
    Layered Merkle CLI - build merkle trees and generate inclusion proofs.

    Leaves are decimal or 0x-hex field elements, given as arguments or in a
    JSON file (a list, or an object with a "leaves" list).
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["hasher"] = hasher


@cli.command()
@click.argument("leaves", nargs=-1)
@click.option("--json-file", type=click.Path(exists=True), help="JSON file with the leaves")
@click.pass_context
def root(ctx, leaves, json_file: Optional[str]):
    """Print the merkle root of LEAVES."""
    leaf_list = resolve_leaves(leaves, json_file)
    try:
        tree = build_tree(leaf_list, ctx.obj["hasher"])
    except MerkleTreeError as e:
        raise click.ClickException(str(e))
    click.echo(tree.root())


@cli.command()
@click.argument("index", type=int)
@click.argument("leaves", nargs=-1)
@click.option("--json-file", type=click.Path(exists=True), help="JSON file with the leaves")
@click.option(
    "--format",
    "format_output",
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
    help="Output format",
)
@click.pass_context
def proof(ctx, index: int, leaves, json_file: Optional[str], format_output: str):
    """
    Generate the inclusion path for the leaf at INDEX.

    INDEX: 0-based position of the leaf in LEAVES
    """
    leaf_list = resolve_leaves(leaves, json_file)
    try:
        result = generate_proof(leaf_list, index, ctx.obj["hasher"])
    except MerkleTreeError as e:
        logger.error(f"Error generating proof: {e}")
        raise click.ClickException(str(e))
    print_proof_result(result, format_output)


@cli.command()
@click.argument("index", type=int)
@click.argument("value")
@click.argument("leaves", nargs=-1)
@click.option("--json-file", type=click.Path(exists=True), help="JSON file with the leaves")
@click.pass_context
def update(ctx, index: int, value: str, leaves, json_file: Optional[str]):
    """
    Replace the leaf at INDEX with VALUE and print both roots.

    Only the ancestors of the replaced leaf are recomputed.
    """
    leaf_list = resolve_leaves(leaves, json_file)
    try:
        tree = build_tree(leaf_list, ctx.obj["hasher"])
        old_root = tree.root()
        new_root = tree.update_leaf(index, value)
    except MerkleTreeError as e:
        logger.error(f"Error updating leaf: {e}")
        raise click.ClickException(str(e))
    click.echo(json.dumps({"index": index, "old_root": old_root, "new_root": new_root}, indent=2))


@cli.command()
@click.argument("leaf")
@click.argument("index", type=int)
@click.argument("expected_root")
@click.option("--path", "-p", "path", multiple=True, help="Sibling hash, leaf level first (repeatable)")
@click.option("--leaf-count", "-n", type=int, required=True, help="Number of leaves in the tree")
@click.pass_context
def verify(ctx, leaf: str, index: int, expected_root: str, path, leaf_count: int):
    """
    Check that LEAF at INDEX and its path reproduce EXPECTED_ROOT.

    Exits with status 1 when the proof does not verify.
    """
    try:
        valid = verify_merkle_proof(
            leaf, list(path), index, leaf_count, expected_root, get_combine(ctx.obj["hasher"])
        )
    except (MerkleTreeError, ValueError) as e:
        raise click.ClickException(str(e))

    if valid:
        console.print("[green]✅ Proof is valid[/green]")
    else:
        console.print("[red]❌ Proof does not match the root[/red]")
        sys.exit(1)


@cli.command()
@click.argument("leaves", nargs=-1)
@click.option("--json-file", type=click.Path(exists=True), help="JSON file with the leaves")
@click.pass_context
def inspect(ctx, leaves, json_file: Optional[str]):
    """Show every layer of the tree built from LEAVES."""
    leaf_list = resolve_leaves(leaves, json_file)
    try:
        tree = build_tree(leaf_list, ctx.obj["hasher"])
    except MerkleTreeError as e:
        raise click.ClickException(str(e))

    table = Table(title="Merkle Tree Information")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Hasher", ctx.obj["hasher"])
    table.add_row("Leaves", str(len(tree)))
    table.add_row("Depth", str(tree.depth))
    table.add_row("Layer Sizes", ", ".join(str(len(layer)) for layer in tree.layers))
    table.add_row("Root", shorten_hash(tree.root()))
    console.print(table)

    console.print(render_tree(tree))


@cli.command()
@click.pass_context
def demo(ctx):
    """Build a small example tree, print a path, then update a leaf."""
    hasher = ctx.obj["hasher"]
    tree = build_tree(DEMO_LEAVES, hasher)

    console.print(
        Panel(
            f"Leaves: {', '.join(DEMO_LEAVES)}\nHasher: {hasher}",
            title="Demo",
            border_style="blue",
        )
    )
    click.echo(f"Merkle Root: {tree.root()}")
    click.echo(f"Merkle Path for leaf 0: {tree.merkle_path(0)}")

    index, value = DEMO_UPDATE
    tree.update_leaf(index, value)
    click.echo(f"Updated Merkle Root: {tree.root()}")


@cli.command()
@click.option("--api-url", envvar="MERKLE_API_URL", help="Tree API URL")
def health(api_url: Optional[str]):
    """Check whether a tree API server is reachable."""
    try:
        client = TreeAPIClient(api_url)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    healthy = client.health_check()

    table = Table(title="System Health Check")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Details")
    table.add_row("Tree API", "✅ Healthy" if healthy else "❌ Unhealthy", client.base_url)
    console.print(table)

    if not healthy:
        sys.exit(1)


@cli.command()
@click.option("--host", envvar="MERKLE_API_HOST", default="127.0.0.1", help="Host to bind to")
@click.option("--port", envvar="MERKLE_API_PORT", default=8000, type=int, help="Port to bind to")
@click.option("--dev", is_flag=True, help="Enable development mode with auto-reload")
@click.pass_context
def serve(ctx, host: str, port: int, dev: bool):
    """Start the REST API server."""
    try:
        console.print(
            Panel(
                f"Starting Layered Merkle API Server\n\n"
                f"🚀 Server: http://{host}:{port}\n"
                f"📖 Docs: http://{host}:{port}/docs\n"
                f"❤️ Health: http://{host}:{port}/health\n\n"
                f"Press Ctrl+C to stop",
                title="API Server",
                border_style="green",
            )
        )

        run_server(host=host, port=port, dev=dev)

    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Server error: {e}[/red]", style="bold")
        if ctx.obj.get("verbose"):
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    cli()
