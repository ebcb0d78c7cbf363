"""Tests for workflow scoring."""

import pytest

from conftest import document, node
from schemas.workflow import IssueType, ValidationIssue, WorkflowValidationResult
from services.validation import WorkflowScorer

HTTP_REQUEST = "n8n-nodes-base.httpRequest"
CODE = "n8n-nodes-base.code"
SET = "n8n-nodes-base.set"
WEBHOOK = "n8n-nodes-base.webhook"
IF = "n8n-nodes-base.if"


@pytest.fixture
def scorer():
    """Create a WorkflowScorer instance."""
    return WorkflowScorer()


def http_node(name, authentication="none"):
    return node(name, HTTP_REQUEST, {"url": "https://api.example.com/data", "authentication": authentication})


class TestScoreBounds:
    """Tests for score clamping."""

    def test_fifty_http_nodes(self, scorer):
        """Test heavy penalties stay within 0-100."""
        workflow = document([http_node(f"Call {i}") for i in range(50)])

        report = scorer.score(workflow)

        assert report.performance == 0
        assert report.security == 0
        assert report.maintainability == 25
        for value in (report.performance, report.security, report.maintainability):
            assert 0 <= value <= 100

    def test_bonus_capped(self, scorer):
        """Test rewards never push a score above 100."""
        workflow = document([node("Transform Orders", CODE, {"jsCode": "// transform\nreturn items;"})])

        report = scorer.score(workflow)

        assert (report.performance, report.security, report.maintainability) == (100, 100, 100)
        assert report.recommendations == []

    def test_empty_workflow(self, scorer):
        """Test a workflow without nodes scores full marks."""
        report = scorer.score({"nodes": []})

        assert (report.performance, report.security, report.maintainability) == (100, 100, 100)


class TestPerformance:
    """Tests for the performance axis."""

    def test_many_set_nodes(self, scorer):
        """Test -5 per Set node beyond three."""
        workflow = document([node(f"Fields {i}", SET, {}) for i in range(5)])

        assert scorer.score(workflow).performance == 90

    def test_code_bonus_needs_few_set_nodes(self, scorer):
        """Test the code bonus is lost with more than two Set nodes."""
        calls = [http_node(f"Call {i}") for i in range(6)]
        transform = node("Transform", CODE, {"jsCode": "return [];"})
        fields = [node(f"Fields {i}", SET, {}) for i in range(3)]

        assert scorer.score(document(calls + [transform] + fields)).performance == 90
        assert scorer.score(document(calls + [transform] + fields[:2])).performance == 100


class TestSecurity:
    """Tests for the security axis."""

    def test_hardcoded_secret(self, scorer):
        """Test literal credentials cost 20 points."""
        workflow = document([node("Fields", SET, {"password": "hunter2"})])

        assert scorer.score(workflow).security == 80

    def test_expression_secret_allowed(self, scorer):
        """Test credentials taken from expressions are not penalized."""
        workflow = document([node("Fields", SET, {"password": "={{ $env.PASSWORD }}"})])

        assert scorer.score(workflow).security == 100

    def test_unauthenticated_http(self, scorer):
        """Test -5 per HTTP Request without authentication."""
        workflow = document([http_node("Call A"), http_node("Call B", "genericCredentialType")])

        assert scorer.score(workflow).security == 95

    def test_open_webhook(self, scorer):
        """Test webhooks without allowed origins cost 10 points."""
        open_hook = node("Inbound", WEBHOOK, {"path": "in"})
        locked_hook = node("Locked", WEBHOOK, {"path": "in2", "options": {"allowedOrigins": "https://app.example.com"}})

        assert scorer.score(document([open_hook])).security == 90
        assert scorer.score(document([locked_hook])).security == 100

    def test_options_list_counts_as_open(self, scorer):
        """Test a list-valued options collection scores as an open webhook."""
        hook = node("Inbound", WEBHOOK, {"path": "in", "options": ["a"]})

        assert scorer.score(document([hook])).security == 90


class TestMaintainability:
    """Tests for the maintainability axis."""

    def test_default_names(self, scorer):
        """Test -5 per node with a default name."""
        workflow = document([
            node("code", CODE, {"jsCode": "return [];"}),
            node("Untitled step", SET, {}),
        ])

        report = scorer.score(workflow)

        assert report.maintainability == 90
        assert "Rename nodes with descriptive names to improve workflow readability" in report.recommendations

    def test_http_without_error_handling(self, scorer):
        """Test -15 when HTTP requests have no error handling."""
        assert scorer.score(document([http_node("Call API")])).maintainability == 85

    def test_error_text_counts_as_handling(self, scorer):
        """Test parameter text mentioning errors avoids the penalty."""
        workflow = document([
            http_node("Call API"),
            node("Guard", CODE, {"jsCode": "try { run(); } catch (error) { return []; }"}),
        ])

        assert scorer.score(workflow).maintainability == 100

    def test_if_node_counts_as_handling(self, scorer):
        """Test an If node avoids the penalty."""
        workflow = document([http_node("Call API"), node("Check Status", IF, {"conditions": {}})])

        assert scorer.score(workflow).maintainability == 100


class TestRecommendations:
    """Tests for scorer recommendations."""

    def test_http_recommendations(self, scorer):
        """Test authentication and error-handling advice."""
        report = scorer.score(document([http_node("Call API")]))

        assert report.recommendations == [
            "Add proper authentication to HTTP Request nodes for security",
            "Add error handling with If nodes to make your workflow more robust",
        ]

    def test_set_consolidation(self, scorer):
        """Test advice for many Set nodes."""
        report = scorer.score(document([node(f"Fields {i}", SET, {}) for i in range(4)]))

        assert report.recommendations == [
            "Consider consolidating multiple Set nodes into a single Code node for better performance"
        ]

    def test_deprecated_from_validation(self, scorer):
        """Test auto-fixable warnings add upgrade advice."""
        validation = WorkflowValidationResult(
            is_valid=True,
            issues=[ValidationIssue(type=IssueType.WARNING, message="deprecated", auto_fix=True)],
        )

        report = scorer.score(document([]), validation)

        assert report.recommendations == [
            "Update deprecated nodes to their modern equivalents for better compatibility"
        ]
