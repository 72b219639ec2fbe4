"""Extract structured data from the current page."""
from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple, Union

from ..schema import build_schema_model
from .base import BrowserTool, ToolResult, describe_error, to_json

INVALID_INPUT_MESSAGE = (
    "Invalid input. Please provide a JSON string with 'instruction' and 'schema' fields."
)
MISSING_FIELDS_MESSAGE = "Input must contain 'instruction' and 'schema' fields."


def parse_extract_input(raw: str) -> Union[Tuple[str, Dict[str, Any]], ToolResult]:
    """Validate the raw payload; return ``(instruction, schema)`` or an input error."""
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return ToolResult.input_error(INVALID_INPUT_MESSAGE)
    if not isinstance(payload, dict):
        return ToolResult.input_error(INVALID_INPUT_MESSAGE)

    instruction: Optional[Any] = payload.get("instruction")
    schema: Optional[Any] = payload.get("schema")
    if not instruction or not schema:
        return ToolResult.input_error(MISSING_FIELDS_MESSAGE)
    return str(instruction), schema


class ExtractTool(BrowserTool):
    name: str = "stagehand_extract"
    description: str = (
        "Use this tool to extract structured information from the current web page "
        "using Stagehand. The input should be a JSON string with 'instruction' and "
        "'schema' fields, where 'schema' maps field names to types such as "
        "\"string\", \"number\", \"integer\", \"boolean\" or \"array\"."
    )

    async def _execute(self, tool_input: str) -> ToolResult:
        parsed = parse_extract_input(tool_input)
        if isinstance(parsed, ToolResult):
            return parsed
        instruction, schema = parsed

        model = build_schema_model(schema)
        session = await self.get_session()
        extracted = await session.extract(instruction=instruction, schema=model)
        return ToolResult.success(to_json(extracted), extracted)

    def _failure(self, tool_input: str, exc: BaseException) -> ToolResult:
        return ToolResult.capability_error(
            f"Failed to extract information: {describe_error(exc)}", exc
        )
