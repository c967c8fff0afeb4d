"""
Shared fixtures for the explorer tests
"""

import asyncio
import sys
from pathlib import Path
from typing import Dict, Tuple, Union

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from jvgraph.graph.schema import GraphFragment
from jvgraph.fetch.local import LocalGraphSource


def node(node_id: str, name: str = "Node", **data) -> dict:
    return {"id": node_id, "name": name, "data": data}


def edge(edge_id: str, source: str, target: str, name: str = "Edge", **data) -> dict:
    return {"id": edge_id, "name": name, "source": f"n::{source}", "target": f"n::{target}", "data": data}


def build_scenario_source() -> LocalGraphSource:
    """n1 -e1-> n2 -e2-> n3"""
    source = LocalGraphSource()
    source.add_node("n1", "Root", name="root")
    source.add_node("n2", "Agent", name="support-bot")
    source.add_node("n3", "Action", enabled=True)
    source.add_edge("e1", "n1", "n2", "HasAgent")
    source.add_edge("e2", "n2", "n3", "HasAction")
    return source


class GatedSource:
    """
    GraphSource whose calls block until the test releases them.

    Calls are identified as ("full", root) or ("neighborhood", focus, depth).
    """

    def __init__(self, responses: Dict[Tuple, Union[GraphFragment, Exception]]):
        self.responses = responses
        self.calls = []
        self._gates: Dict[Tuple, asyncio.Event] = {}

    def _gate(self, call: Tuple) -> asyncio.Event:
        if call not in self._gates:
            self._gates[call] = asyncio.Event()
        return self._gates[call]

    def release(self, *calls: Tuple):
        for call in calls:
            self._gate(call).set()

    def hold(self, *calls: Tuple):
        for call in calls:
            self._gate(call).clear()

    async def fetch_full_graph(self, root_id: str) -> GraphFragment:
        return await self._serve(("full", root_id))

    async def fetch_neighborhood(self, focus_id: str, depth: int) -> GraphFragment:
        return await self._serve(("neighborhood", focus_id, depth))

    async def _serve(self, call: Tuple) -> GraphFragment:
        self.calls.append(call)
        await self._gate(call).wait()
        response = self.responses[call]
        if isinstance(response, Exception):
            raise response
        return response


async def settle(rounds: int = 5):
    """Let scheduled tasks run up to their next await"""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def scenario_source():
    return build_scenario_source()
