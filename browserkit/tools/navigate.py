"""Navigate the browser to a URL."""
from __future__ import annotations

from .base import BrowserTool, ToolResult, describe_error


class NavigateTool(BrowserTool):
    name: str = "stagehand_navigate"
    description: str = (
        "Use this tool to navigate to a specific URL using Stagehand. "
        "The input should be a valid URL as a string."
    )

    async def _execute(self, tool_input: str) -> ToolResult:
        session = await self.get_session()
        await session.goto(tool_input)
        return ToolResult.success(f"Successfully navigated to {tool_input}.")

    def _failure(self, tool_input: str, exc: BaseException) -> ToolResult:
        return ToolResult.capability_error(
            f"Failed to navigate to {tool_input}: {describe_error(exc)}", exc
        )
