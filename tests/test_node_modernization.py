"""Tests for auto-fixing deprecated nodes."""

import copy

from conftest import document, link, node
from services.validation import MIGRATIONS, apply_migrations, autofix, has_migration

FUNCTION = "n8n-nodes-base.function"
CODE = "n8n-nodes-base.code"
SET = "n8n-nodes-base.set"


def legacy_workflow():
    return document(
        [
            node("Legacy Transform", FUNCTION, {"functionCode": "return items.map(i => i);"}),
            node("Set", SET, {"fields": {"values": []}}),
        ],
        {"Legacy Transform": link("Set")},
    )


class TestMigrations:
    """Tests for registered node migrations."""

    def test_only_function_registered(self):
        """Test the Function node is the only migrated type."""
        assert list(MIGRATIONS) == [FUNCTION]
        assert has_migration(FUNCTION) is True
        assert has_migration("n8n-nodes-base.spreadsheetFile") is False

    def test_function_to_code(self):
        """Test a Function node becomes a Code node with its script."""
        fixed, changes = apply_migrations(legacy_workflow())

        migrated = fixed["nodes"][0]
        assert migrated["type"] == CODE
        assert migrated["typeVersion"] == 2
        assert migrated["parameters"] == {
            "jsCode": "return items.map(i => i);",
            "mode": "runOnceForAllItems",
        }
        assert changes == ['Converted Function node "Legacy Transform" to Code node']

    def test_default_code_when_missing(self):
        """Test a Function node without code gets a placeholder script."""
        fixed, _ = apply_migrations(document([node("Empty", FUNCTION, {})]))

        assert fixed["nodes"][0]["parameters"]["jsCode"] == "// Add your code here"


class TestAutofix:
    """Tests for the auto-fix pass."""

    def test_migration_scenario(self):
        """Test migration plus the legacy Set rename with rewired connections."""
        workflow = legacy_workflow()
        original = copy.deepcopy(workflow)

        fixed, changes = autofix(workflow)

        assert changes == [
            'Converted Function node "Legacy Transform" to Code node',
            'Updated Set node name to "Edit Fields (Set)"',
        ]
        assert [n["name"] for n in fixed["nodes"]] == ["Legacy Transform", "Edit Fields (Set)"]
        assert fixed["connections"] == {"Legacy Transform": link("Edit Fields (Set)")}
        assert workflow == original

    def test_outgoing_connections_renamed(self):
        """Test connections from the renamed Set node follow the new name."""
        workflow = document(
            [node("Set", SET, {}), node("Next", CODE, {"jsCode": "return [];"})],
            {"Set": link("Next")},
        )

        fixed, _ = autofix(workflow)

        assert fixed["connections"] == {"Edit Fields (Set)": link("Next")}

    def test_idempotent(self):
        """Test running auto-fix on its own output changes nothing."""
        fixed, _ = autofix(legacy_workflow())

        refixed, changes = autofix(fixed)

        assert changes == []
        assert refixed == fixed

    def test_rename_skipped_when_name_taken(self):
        """Test the rename never creates duplicate names."""
        workflow = document([node("Set", SET, {}), node("Edit Fields (Set)", SET, {})])

        fixed, changes = autofix(workflow)

        assert changes == []
        assert [n["name"] for n in fixed["nodes"]] == ["Set", "Edit Fields (Set)"]

    def test_without_nodes(self):
        """Test documents without a nodes list are returned unchanged."""
        fixed, changes = autofix({"name": "x"})

        assert fixed == {"name": "x"}
        assert changes == []

    def test_non_object_nodes_skipped(self):
        """Test entries that are not objects are left for the validator to report."""
        workflow = document(["oops", node("Legacy", FUNCTION, {"functionCode": "return items;"}), node("Set", SET)])

        fixed, changes = autofix(workflow)

        assert fixed["nodes"][0] == "oops"
        assert fixed["nodes"][1]["type"] == CODE
        assert fixed["nodes"][2]["name"] == "Edit Fields (Set)"
        assert len(changes) == 2
