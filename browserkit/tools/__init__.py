"""Browser tools exposed to LangChain agents."""
from __future__ import annotations

from .act import ActTool
from .base import BrowserTool, ResultKind, ToolResult
from .extract import ExtractTool
from .navigate import NavigateTool
from .observe import ObserveTool

__all__ = [
    "ActTool",
    "BrowserTool",
    "ExtractTool",
    "NavigateTool",
    "ObserveTool",
    "ResultKind",
    "ToolResult",
]
