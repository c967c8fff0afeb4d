#!/usr/bin/env python3
"""
Graph Explorer Script

Explores a JIVAS graph from the terminal, one fragment at a time.

Usage:
    # Explore the server configured in .env
    python scripts/explore_graph.py

    # Explore a specific root on a specific server
    python scripts/explore_graph.py --host http://localhost:8000 --root 7f3a...

    # Built-in sample graph, no server needed
    python scripts/explore_graph.py --demo
"""

import sys
import asyncio
import argparse
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.syntax import Syntax
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from config.settings import get_settings, TRAVERSAL_MODES
from jvgraph.graph.schema import Hit
from jvgraph.graph.selection import InspectionView
from jvgraph.fetch.client import JivasClient
from jvgraph.fetch.local import LocalGraphSource
from jvgraph.viewer import GraphViewer

console = Console()

HELP = """\
[bold]mode[/] Full|Step|Focus     switch traversal mode
[bold]depth[/] N                  neighborhood depth (1-10)
[bold]open[/] ID                  double-click a node (move focus)
[bold]select[/] ID                click a node
[bold]edge[/] ID                  click an edge
[bold]inspect[/] [table|json]     show the selected element
[bold]reset[/]                    Reset Graph
[bold]refresh[/]                  refetch the current fragment
[bold]show[/]                     print the discovered graph
[bold]quit[/]"""


def build_demo_source() -> LocalGraphSource:
    """Small agent graph shaped like a JIVAS deployment"""
    source = LocalGraphSource(latency=0.05)
    source.add_node("app", "App", name="jivas")
    source.add_node("agents", "Agents")
    source.add_node("a1", "Agent", name="support-bot", published=True)
    source.add_node("a2", "Agent", name="sales-bot", published=False)
    source.add_node("act1", "Action", label="IntentClassifier", enabled=True)
    source.add_node("act2", "Action", label="PersonaResponse", enabled=True)
    source.add_node("mem1", "Memory", frames=12)
    source.add_node("f1", "Frame", session_id="s-001", interactions=4)
    source.add_edge("e1", "app", "agents", "HasAgents")
    source.add_edge("e2", "agents", "a1", "Agent")
    source.add_edge("e3", "agents", "a2", "Agent")
    source.add_edge("e4", "a1", "act1", "HasAction", order=1)
    source.add_edge("e5", "a1", "act2", "HasAction", order=2)
    source.add_edge("e6", "a1", "mem1", "HasMemory")
    source.add_edge("e7", "mem1", "f1", "Frame")
    return source


def print_graph(viewer: GraphViewer):
    """Print the discovered graph"""
    info = viewer.traversal_info()
    console.print(
        f"\n[bold]Mode:[/] [cyan]{info['mode']}[/]  [bold]Focus:[/] [cyan]{info['focus_id']}[/]  "
        f"[bold]Depth:[/] [cyan]{info['depth']}[/]"
    )
    console.print(f"[dim]{TRAVERSAL_MODES[info['mode']]}[/]")
    if info["last_error"]:
        console.print(f"[red]Last fetch failed:[/] {info['last_error']}")

    nodes = Table(title=f"Nodes ({viewer.store.node_count})", show_lines=False)
    nodes.add_column("id", style="cyan")
    nodes.add_column("label")
    for node in sorted(viewer.store.nodes(), key=lambda n: n.id):
        marker = " ◉" if node.id == info["focus_id"] else ""
        nodes.add_row(node.id + marker, node.label)

    edges = Table(title=f"Edges ({viewer.store.edge_count})", show_lines=False)
    edges.add_column("id", style="cyan")
    edges.add_column("label")
    edges.add_column("from → to")
    for edge in sorted(viewer.store.edges(), key=lambda e: e.id):
        edges.add_row(edge.id, edge.label, f"{edge.from_ or '?'} → {edge.to or '?'}")

    console.print(nodes)
    console.print(edges)


def print_selection(viewer: GraphViewer):
    """Print the selected element's attributes"""
    selection = viewer.selection.selection
    if selection.is_empty:
        console.print("[dim]Nothing selected[/]")
        return

    title = f"{selection.kind.value} {selection.ref}"
    if viewer.selection.view == InspectionView.JSON:
        console.print(Panel(Syntax(viewer.selection.inspection_json(), "json"), title=title, border_style="blue"))
        return

    table = Table(title=title)
    table.add_column("key", style="bold")
    table.add_column("value")
    for key, value in viewer.selection.inspection_rows():
        table.add_row(key, value)
    console.print(table)


async def handle(viewer: GraphViewer, command: str, args: list) -> bool:
    """Run one command; returns False when the session should end"""
    if command in ("quit", "exit", "q"):
        return False

    if command == "mode" and args:
        await viewer.set_mode(args[0].capitalize())
        print_graph(viewer)
    elif command == "depth" and args:
        await viewer.set_depth(int(args[0]))
        print_graph(viewer)
    elif command == "open" and args:
        await viewer.double_click(Hit(nodes=[args[0]]))
        print_graph(viewer)
    elif command == "select" and args:
        viewer.click(Hit(nodes=[args[0]]))
        print_selection(viewer)
    elif command == "edge" and args:
        viewer.click(Hit(edges=[args[0]]))
        print_selection(viewer)
    elif command == "inspect":
        if args:
            viewer.set_view(args[0].lower())
        print_selection(viewer)
    elif command == "reset":
        if not viewer.controller.can_reset():
            console.print("[dim]Nothing to reset[/]")
            return True
        await viewer.reset()
        print_graph(viewer)
    elif command == "refresh":
        await viewer.refresh()
        print_graph(viewer)
    elif command == "show":
        print_graph(viewer)
    else:
        console.print(HELP)

    return True


async def explore(viewer: GraphViewer):
    """Interactive exploration loop"""
    await viewer.open()
    print_graph(viewer)
    console.print("\n[bold]Interactive Mode[/] - Type 'help' for commands, 'quit' to exit\n")

    try:
        while True:
            try:
                line = await asyncio.to_thread(console.input, "[bold blue]graph>[/] ")
            except (KeyboardInterrupt, EOFError):
                console.print("\n")
                break

            parts = line.strip().split()
            if not parts:
                continue

            try:
                if not await handle(viewer, parts[0].lower(), parts[1:]):
                    break
            except ValueError as e:
                console.print(f"[red]✗ {e}[/]")
    finally:
        await viewer.close()

    console.print("Goodbye!")


def main():
    parser = argparse.ArgumentParser(description="Explore a JIVAS graph")
    parser.add_argument("--host", help="JIVAS server URL (defaults to JIVAS_HOST)")
    parser.add_argument("--root", help="Root node id (defaults to ROOT_NODE)")
    parser.add_argument("--mode", choices=list(TRAVERSAL_MODES), help="Initial traversal mode")
    parser.add_argument("--demo", action="store_true", help="Use the built-in sample graph")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log fetches and merges")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    settings = get_settings()

    console.print("\n[bold]JIVAS Graph Explorer[/bold]\n")

    if args.demo:
        source = build_demo_source()
        root = args.root or "app"
    else:
        source = JivasClient(host=args.host)
        root = args.root or settings.root_node

    if not root:
        console.print("[red]No root node. Pass --root or set ROOT_NODE.[/]")
        sys.exit(1)

    viewer = GraphViewer(source, root_id=root, mode=args.mode or settings.default_mode)
    asyncio.run(explore(viewer))


if __name__ == "__main__":
    main()
