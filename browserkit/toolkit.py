"""Toolkit bundling the four browser tools."""
from __future__ import annotations

from typing import Any, List, Optional

from langchain_core.tools import BaseToolkit
from pydantic import ConfigDict, Field

from .config import SessionConfig
from .observability import Observability
from .session import SessionFactory, ensure_session
from .tools import ActTool, BrowserTool, ExtractTool, NavigateTool, ObserveTool

TOOL_CLASSES = (NavigateTool, ActTool, ExtractTool, ObserveTool)


class BrowserToolkit(BaseToolkit):
    """Navigate, act, extract and observe tools, optionally sharing one session.

    Without a session every tool creates and keeps its own on first use.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    session: Optional[Any] = None
    tools: List[BrowserTool] = Field(default_factory=list)

    def __init__(
        self,
        session: Any = None,
        *,
        session_factory: Optional[SessionFactory] = None,
        session_config: Optional[SessionConfig] = None,
        observability: Optional[Observability] = None,
        **kwargs: Any,
    ) -> None:
        shared = ensure_session(session) if session is not None else None
        super().__init__(session=shared, **kwargs)
        self.tools = [
            tool_cls(
                shared,
                session_factory=session_factory,
                session_config=session_config,
                observability=observability,
            )
            for tool_cls in TOOL_CLASSES
        ]

    @classmethod
    async def from_session(cls, session: Any = None, **kwargs: Any) -> "BrowserToolkit":
        return cls(session, **kwargs)

    from_stagehand = from_session

    def get_tools(self) -> List[BrowserTool]:
        return list(self.tools)

    async def aclose(self) -> None:
        """Close sessions the tools created themselves."""
        for tool in self.tools:
            await tool.aclose()


__all__ = ["BrowserToolkit", "TOOL_CLASSES"]
