"""List the actions available on the current page."""
from __future__ import annotations

from .base import BrowserTool, ToolResult, describe_error, to_json


class ObserveTool(BrowserTool):
    name: str = "stagehand_observe"
    description: str = (
        "Use this tool to observe the current web page and retrieve possible actions "
        "using Stagehand. The input can be an optional instruction string."
    )

    async def _execute(self, tool_input: str) -> ToolResult:
        instruction = tool_input or None
        session = await self.get_session()
        observed = await session.observe(instruction=instruction)
        return ToolResult.success(to_json(observed), observed)

    def _failure(self, tool_input: str, exc: BaseException) -> ToolResult:
        return ToolResult.capability_error(f"Failed to observe page: {describe_error(exc)}", exc)
