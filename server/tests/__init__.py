"""figma-mcp test suite."""

from typing import Any, Dict

from figma_mcp.tools.base import ToolResult


class TestToolTemplate:
    """Base class for tool tests with common assertions."""

    @staticmethod
    def assert_success(result: ToolResult) -> None:
        """Assert that a tool result indicates success."""
        assert isinstance(result, ToolResult), "Tool must return a ToolResult"
        assert result.success, f"Tool returned error: {result.message}"

    @staticmethod
    def assert_error(
        result: ToolResult, error_substring: str = "", kind: str | None = None
    ) -> None:
        """Assert that a tool result indicates an error."""
        assert isinstance(result, ToolResult), "Tool must return a ToolResult"
        assert not result.success, "Tool should indicate error"
        if error_substring:
            assert error_substring.lower() in result.message.lower(), \
                f"Expected error to contain '{error_substring}', got: {result.message}"
        if kind is not None:
            assert result.error is not None, "Expected a typed error payload"
            assert result.error["kind"] == kind, \
                f"Expected error kind '{kind}', got: {result.error['kind']}"

    @staticmethod
    def get_data(result: ToolResult) -> Dict[str, Any]:
        """Extract data from a tool result."""
        return result.data if result.data is not None else {}


__all__ = ["TestToolTemplate"]
