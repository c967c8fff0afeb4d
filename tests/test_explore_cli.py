"""
Tests for the interactive explorer commands
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

import explore_graph
from jvgraph.fetch.local import LocalGraphSource
from jvgraph.viewer import GraphViewer


class TestExplorerCommands:
    """Commands typed at the graph> prompt"""

    @pytest.mark.asyncio
    async def test_demo_graph_opens(self, capsys):
        """The built-in sample graph builds and serves its root"""
        viewer = GraphViewer(explore_graph.build_demo_source(), root_id="app", mode="Step")

        await viewer.open()
        explore_graph.print_graph(viewer)

        assert viewer.store.node_ids() == {"app", "agents"}
        assert viewer.store.get_node("app").attributes == {"name": "jivas"}
        assert "Neighborhood of the focus node" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_reset_with_nothing_to_reset(self, capsys):
        """Only the notice is printed, the graph is not re-rendered"""
        source = LocalGraphSource().add_node("solo", "Root", name="root")
        viewer = GraphViewer(source, root_id="solo", mode="Step")
        await viewer.open()
        capsys.readouterr()

        assert await explore_graph.handle(viewer, "reset", []) is True

        out = capsys.readouterr().out
        assert "Nothing to reset" in out
        assert "Nodes" not in out
        assert source.calls == [("neighborhood", "solo", 1)]
        assert viewer.surface.drain_commands() == []

    @pytest.mark.asyncio
    async def test_reset_refetches_root(self, capsys):
        viewer = GraphViewer(explore_graph.build_demo_source(), root_id="app", mode="Step")
        await viewer.open()
        await viewer.double_click(explore_graph.Hit(nodes=["agents"]))

        assert await explore_graph.handle(viewer, "reset", []) is True

        assert viewer.controller.focus_id == "app"
        assert "Nodes" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_quit(self):
        viewer = GraphViewer(LocalGraphSource().add_node("solo", "Root"), root_id="solo")

        assert await explore_graph.handle(viewer, "quit", []) is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
