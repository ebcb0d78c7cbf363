"""Tests for workflow document validation."""

import pytest

from conftest import document, link, make_loader, node
from services.node_catalog import NodeCatalog
from services.validation import WorkflowValidator
from services.workflow import WorkflowBuilder, WorkflowTypeDetector, export_workflow

WEBHOOK = "n8n-nodes-base.webhook"
CODE = "n8n-nodes-base.code"
HTTP_REQUEST = "n8n-nodes-base.httpRequest"
SET = "n8n-nodes-base.set"
IF = "n8n-nodes-base.if"
FUNCTION = "n8n-nodes-base.function"


@pytest.fixture
def validator(catalog):
    """Create a WorkflowValidator over the reference catalog."""
    return WorkflowValidator(catalog)


def errors(result):
    return [issue for issue in result.issues if issue.type == "error"]


class TestDocumentShape:
    """Tests for top-level document checks."""

    @pytest.mark.asyncio
    async def test_missing_nodes(self, validator):
        """Test a document without nodes gives exactly one error."""
        result = await validator.validate({"name": "Empty"})

        assert result.is_valid is False
        assert len(result.issues) == 1
        assert result.issues[0].message == "Workflow must contain nodes array"

    @pytest.mark.asyncio
    async def test_nodes_not_a_list(self, validator):
        """Test a non-list nodes field is treated as missing."""
        result = await validator.validate({"nodes": {"a": 1}})

        assert [i.message for i in result.issues] == ["Workflow must contain nodes array"]

    @pytest.mark.asyncio
    async def test_empty_workflow_is_valid(self, validator):
        """Test zero nodes is a legal workflow."""
        result = await validator.validate(document([]))

        assert result.is_valid is True
        assert result.issues == []

    @pytest.mark.asyncio
    async def test_generated_workflow_is_valid(self, validator):
        """Test the webhook scenario validates cleanly."""
        description = "Receive webhook data, validate it, process and transform it"
        workflow = WorkflowBuilder().build(WorkflowTypeDetector.classify(description), description)

        result = await validator.validate(export_workflow(workflow))

        assert result.is_valid is True
        assert result.issues == []


class TestNodeChecks:
    """Tests for per-node validation."""

    @pytest.mark.asyncio
    async def test_unknown_node_type(self, validator):
        """Test unknown types are reported and not checked further."""
        result = await validator.validate(document([node("Mystery", "custom.mystery", {"x": 1})]))

        assert len(result.issues) == 1
        assert result.issues[0].message == "Unknown node type: custom.mystery"
        assert result.issues[0].node_name == "Mystery"

    @pytest.mark.asyncio
    async def test_missing_url(self, validator):
        """Test an HTTP Request without url gives exactly one error."""
        result = await validator.validate(document([
            node("Call API", HTTP_REQUEST, {"method": "GET"}),
        ]))

        found = errors(result)
        assert len(found) == 1
        assert found[0].parameter == "url"
        assert found[0].message == 'Missing required parameter "url" in node "Call API"'
        assert found[0].suggestion == "Add value for url: Absolute URL or expression for the request target"
        assert result.is_valid is False

    @pytest.mark.parametrize("value", [None, ""])
    @pytest.mark.asyncio
    async def test_empty_required_value(self, validator, value):
        """Test None and empty string count as missing, with no type error."""
        result = await validator.validate(document([node("Call API", HTTP_REQUEST, {"url": value})]))

        found = errors(result)
        assert len(found) == 1
        assert found[0].message.startswith("Missing required parameter")

    @pytest.mark.asyncio
    async def test_string_type(self, validator):
        """Test a non-string value for a string parameter."""
        result = await validator.validate(document([node("Call API", HTTP_REQUEST, {"url": 42})]))

        found = errors(result)
        assert [i.message for i in found] == ['Invalid value for parameter "url": Expected string value']
        assert found[0].suggestion == "Provide a text value"

    @pytest.mark.asyncio
    async def test_pattern_rule(self, validator):
        """Test the url pattern rule."""
        result = await validator.validate(document([node("Call API", HTTP_REQUEST, {"url": "ftp://x"})]))

        assert len(errors(result)) == 1
        assert errors(result)[0].message.startswith('Invalid value for parameter "url": Value does not match pattern')

    @pytest.mark.asyncio
    async def test_expression_url_allowed(self, validator):
        """Test expressions pass the url pattern."""
        result = await validator.validate(document([
            node("Call API", HTTP_REQUEST, {"url": "={{ $json.target }}", "authentication": "none"}),
        ]))

        assert errors(result) == []

    @pytest.mark.asyncio
    async def test_invalid_option(self, validator):
        """Test option membership."""
        result = await validator.validate(document([
            node("Call API", HTTP_REQUEST, {"url": "https://example.com", "method": "FETCH"}),
        ]))

        found = errors(result)
        assert [i.message for i in found] == ['Invalid value for parameter "method": Invalid option "FETCH"']
        assert found[0].suggestion.startswith("Choose from: GET, POST")

    @pytest.mark.asyncio
    async def test_boolean_type(self, validator):
        """Test boolean parameters reject strings."""
        result = await validator.validate(document([
            node("Call API", HTTP_REQUEST, {"url": "https://example.com", "sendHeaders": "yes"}),
        ]))

        assert [i.message for i in errors(result)] == [
            'Invalid value for parameter "sendHeaders": Expected boolean value'
        ]

    @pytest.mark.asyncio
    async def test_collection_type(self, validator):
        """Test collection parameters require an object or list."""
        result = await validator.validate(document([node("Branch", IF, {"conditions": "x > 1"})]))

        assert len(errors(result)) == 1
        assert errors(result)[0].parameter == "conditions"

    @pytest.mark.asyncio
    async def test_min_length(self, validator):
        """Test the minimum length rule."""
        result = await validator.validate(document([node("Hook", WEBHOOK, {"path": " "})]))

        # " " is not empty, so the pattern rule applies after minLength passes
        assert len(errors(result)) == 1
        assert errors(result)[0].parameter == "path"

    @pytest.mark.asyncio
    async def test_number_type_rejects_bool(self):
        """Test booleans are not accepted as numbers."""
        from schemas.node_catalog import NodeTypeDefinition, ParameterDef

        definition = NodeTypeDefinition(
            type_id="custom.wait",
            display_name="Wait",
            parameters=[ParameterDef(name="amount", type="number", required=True)],
        )
        validator = WorkflowValidator(NodeCatalog(loader=make_loader([definition])))

        bad = await validator.validate(document([node("Wait", "custom.wait", {"amount": True})]))
        good = await validator.validate(document([node("Wait", "custom.wait", {"amount": 2.5})]))

        assert [i.message for i in bad.issues] == ['Invalid value for parameter "amount": Expected numeric value']
        assert good.issues == []


class TestDeprecatedNodes:
    """Tests for deprecated node handling."""

    @pytest.mark.asyncio
    async def test_function_node_warns_with_autofix(self, validator):
        """Test a Function node warns and gets a modernized copy."""
        workflow = document([node("Legacy", FUNCTION, {"functionCode": "return items;"})])

        result = await validator.validate(workflow)

        assert result.is_valid is True
        assert len(result.issues) == 1
        warning = result.issues[0]
        assert warning.type == "warning"
        assert warning.message == (
            'Node "Legacy" uses deprecated type "n8n-nodes-base.function". '
            'Consider upgrading to "n8n-nodes-base.code".'
        )
        assert warning.suggestion == "Replace with n8n-nodes-base.code"
        assert warning.auto_fix is True

        modernized = result.modernized_workflow["nodes"][0]
        assert modernized["type"] == CODE
        assert modernized["parameters"]["jsCode"] == "return items;"
        assert workflow["nodes"][0]["type"] == FUNCTION

    @pytest.mark.asyncio
    async def test_deprecated_without_migration(self, reference_nodes, legacy_node_definition):
        """Test deprecated types without a migration only warn."""
        catalog = NodeCatalog(loader=make_loader(reference_nodes + [legacy_node_definition]))
        validator = WorkflowValidator(catalog)

        result = await validator.validate(document([
            node("Sheet", "n8n-nodes-base.spreadsheetFile", {"operation": "toFile"}),
        ]))

        assert len(result.issues) == 1
        assert result.issues[0].auto_fix is False
        assert result.modernized_workflow is None

    @pytest.mark.asyncio
    async def test_no_modernized_copy_without_deprecations(self, validator):
        """Test modernized_workflow is only set for auto-fixable issues."""
        result = await validator.validate(document([node("Code", CODE, {"jsCode": "return [];"})]))

        assert result.modernized_workflow is None

    @pytest.mark.asyncio
    async def test_non_object_node_with_deprecated_node(self, validator):
        """Test a non-object entry is reported while the Function node is still modernized."""
        workflow = document(["oops", node("Legacy", FUNCTION, {"functionCode": "return items;"})])

        result = await validator.validate(workflow)

        assert result.is_valid is False
        assert result.issues[0].message == "Workflow nodes must be objects"
        assert result.modernized_workflow["nodes"][0] == "oops"
        assert result.modernized_workflow["nodes"][1]["type"] == CODE


class TestConnections:
    """Tests for connection integrity."""

    @pytest.mark.asyncio
    async def test_unknown_source(self, validator):
        """Test a connection from a missing node."""
        result = await validator.validate(document(
            [node("Code", CODE, {"jsCode": "return [];"})],
            {"Ghost": link("Code")},
        ))

        assert [i.message for i in result.issues] == ['Connection source node "Ghost" does not exist']
        assert result.issues[0].suggestion == "Remove invalid connection or add missing node"

    @pytest.mark.asyncio
    async def test_unknown_target(self, validator):
        """Test a connection to a missing node."""
        result = await validator.validate(document(
            [node("Code", CODE, {"jsCode": "return [];"})],
            {"Code": link("Ghost")},
        ))

        assert [i.message for i in result.issues] == ['Connection target node "Ghost" does not exist']
        assert result.is_valid is False

    @pytest.mark.asyncio
    async def test_valid_connections(self, validator):
        """Test connections between existing nodes pass."""
        result = await validator.validate(document(
            [
                node("First", CODE, {"jsCode": "return [];"}),
                node("Second", CODE, {"jsCode": "return [];"}),
            ],
            {"First": link("Second")},
        ))

        assert result.issues == []


class TestSuggestions:
    """Tests for improvement suggestions."""

    @pytest.mark.asyncio
    async def test_many_set_nodes(self, validator):
        """Test more than three Set nodes suggests a Code node."""
        nodes = [node(f"Fields {i}", SET, {"fields": {"values": []}}) for i in range(4)]

        result = await validator.validate(document(nodes))

        assert result.is_valid is True
        assert [i.message for i in result.issues] == [
            "Consider using a Code node instead of multiple Set nodes for better performance."
        ]
        assert result.issues[0].type == "suggestion"

    @pytest.mark.asyncio
    async def test_http_without_if(self, validator):
        """Test HTTP requests without an If node suggest error handling."""
        result = await validator.validate(document([
            node("Call API", HTTP_REQUEST, {"url": "https://example.com"}),
        ]))

        assert [i.message for i in result.issues] == ["Consider adding error handling for HTTP requests."]
        assert result.issues[0].suggestion == "Add If or Switch nodes to handle potential API failures gracefully."

    @pytest.mark.asyncio
    async def test_http_with_if(self, validator):
        """Test no error-handling suggestion when an If node exists."""
        result = await validator.validate(document([
            node("Call API", HTTP_REQUEST, {"url": "https://example.com"}),
            node("Check", IF, {"conditions": {}}),
        ]))

        assert result.issues == []
