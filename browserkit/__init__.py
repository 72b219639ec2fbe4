"""Browser automation tools for LangChain agents."""
from __future__ import annotations

import importlib
from typing import Any

_EXPORTS = {
    "BrowserToolkit": ".toolkit",
    "NavigateTool": ".tools",
    "ActTool": ".tools",
    "ExtractTool": ".tools",
    "ObserveTool": ".tools",
    "ResultKind": ".tools",
    "ToolResult": ".tools",
    "SessionProvider": ".session",
    "StagehandSession": ".session",
    "BrowserSession": ".session",
    "build_schema_model": ".schema",
    "load_runtime_config": ".config",
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module = importlib.import_module(_EXPORTS[name], __name__)
        return getattr(module, name)
    raise AttributeError(name)


__all__ = sorted(_EXPORTS)
