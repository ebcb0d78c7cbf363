"""Pytest configuration for tests."""

import os
import sys
from pathlib import Path

import pytest

# Add src to the import path the same way the app runs
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Set test environment
os.environ["ENVIRONMENT"] = "test"

from schemas.node_catalog import NodeTypeDefinition, ParameterDef  # noqa: E402
from services.node_catalog import NodeCatalog  # noqa: E402
from services.node_reference import reference_definitions  # noqa: E402


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_loader(definitions):
    """Async loader returning ``definitions`` and counting its calls."""
    async def loader():
        loader.calls += 1
        return list(definitions)

    loader.calls = 0
    return loader


@pytest.fixture
def clock():
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def reference_nodes():
    """Node definitions from the packaged reference table."""
    return list(reference_definitions())


@pytest.fixture
def catalog(reference_nodes, clock):
    """Catalog backed by the reference table instead of the database."""
    return NodeCatalog(loader=make_loader(reference_nodes), ttl_seconds=300, clock=clock)


@pytest.fixture
def legacy_node_definition():
    """A deprecated node type with no registered migration."""
    return NodeTypeDefinition(
        type_id="n8n-nodes-base.spreadsheetFile",
        display_name="Spreadsheet File",
        category="transform",
        deprecated=True,
        replaced_by="n8n-nodes-base.code",
        parameters=[ParameterDef(name="operation", type="options", options=["toFile", "fromFile"])],
    )


def document(nodes, connections=None, name="Test Workflow"):
    """Build a platform workflow document."""
    return {
        "name": name,
        "nodes": nodes,
        "connections": connections or {},
        "active": False,
        "settings": {},
    }


def node(name, type_id, parameters=None, node_id=None):
    """Build a node entry of a platform workflow document."""
    return {
        "id": node_id or name.replace(" ", "") + "_1",
        "name": name,
        "type": type_id,
        "typeVersion": 1,
        "position": [240, 300],
        "parameters": parameters if parameters is not None else {},
    }


def link(*targets):
    """Connection entry for one output port."""
    return {"main": [[{"node": target, "type": "main", "index": 0} for target in targets]]}
