"""
Tests for the in-process graph source
"""

import pytest

from jvgraph.fetch.errors import FetchFailure
from jvgraph.fetch.local import LocalGraphSource


class TestLocalGraphSource:
    """Walker answers served from a NetworkX graph"""

    def setup_method(self):
        self.source = (
            LocalGraphSource()
            .add_node("n1", "Agent", name="support-bot", published=True)
            .add_node("n2", "Action", name="IntentClassifier")
            .add_node("n3", "Memory")
            .add_edge("e1", "n1", "n2", "HasAction", name="primary", source="config")
            .add_edge("e2", "n2", "n3", "HasMemory")
        )

    @pytest.mark.asyncio
    async def test_attribute_bag_may_carry_name(self):
        """A "name" attribute stays in data and does not replace the record type"""
        fragment = await self.source.fetch_neighborhood("n1", depth=1)

        nodes = {n["id"]: n for n in fragment.nodes}
        assert nodes["n1"]["name"] == "Agent"
        assert nodes["n1"]["data"] == {"name": "support-bot", "published": True}

        (edge,) = fragment.edges
        assert edge["name"] == "HasAction"
        assert edge["source"] == "n::n1"
        assert edge["data"] == {"name": "primary", "source": "config"}

    @pytest.mark.asyncio
    async def test_full_graph_follows_edges_forward(self):
        fragment = await self.source.fetch_full_graph("n2")

        assert {n["id"] for n in fragment.nodes} == {"n2", "n3"}
        assert self.source.calls == [("full", "n2")]

    @pytest.mark.asyncio
    async def test_unknown_node(self):
        with pytest.raises(FetchFailure) as exc:
            await self.source.fetch_neighborhood("ghost", depth=1)

        assert exc.value.status_code == 404


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
