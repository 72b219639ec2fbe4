"""Perform a natural-language action on the current page."""
from __future__ import annotations

from ..session import ActOutcome
from .base import BrowserTool, ToolResult, describe_error


class ActTool(BrowserTool):
    name: str = "stagehand_act"
    description: str = (
        "Use this tool to perform an action on the current web page using Stagehand. "
        "The input should be a string describing the action to perform."
    )

    async def _execute(self, tool_input: str) -> ToolResult:
        session = await self.get_session()
        outcome = ActOutcome.coerce(await session.act(action=tool_input))
        if outcome.success:
            return ToolResult.success(f"Action performed successfully: {outcome.message}", outcome)
        # a negative outcome is reported by the session, not raised
        return ToolResult.soft_failure(f"Failed to perform action: {outcome.message}", outcome)

    def _failure(self, tool_input: str, exc: BaseException) -> ToolResult:
        return ToolResult.capability_error(f"Failed to perform action: {describe_error(exc)}", exc)
