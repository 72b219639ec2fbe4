"""Base class shared by the browser tools.

Each tool takes one string and returns one string.  Internally a tool
produces a :class:`ToolResult` so callers and tests can tell outcomes apart;
only ``_arun`` flattens it to text for the agent.
"""
from __future__ import annotations

import asyncio
import enum
import json
import logging
import threading
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Optional, Type

from langchain_core.callbacks import (
    AsyncCallbackManagerForToolRun,
    CallbackManagerForToolRun,
)
from langchain_core.tools import BaseTool
from pydantic import BaseModel, Field, PrivateAttr

from ..config import SessionConfig
from ..observability import Observability, get_observability
from ..session import BrowserSession, SessionFactory, SessionProvider

logger = logging.getLogger(__name__)


class ResultKind(str, enum.Enum):
    SUCCESS = "success"
    SOFT_FAILURE = "soft_failure"
    INPUT_ERROR = "input_error"
    CAPABILITY_ERROR = "capability_error"


@dataclass
class ToolResult:
    kind: ResultKind
    text: str
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.SUCCESS

    @classmethod
    def success(cls, text: str, data: Any = None) -> "ToolResult":
        return cls(ResultKind.SUCCESS, text, data)

    @classmethod
    def soft_failure(cls, text: str, data: Any = None) -> "ToolResult":
        return cls(ResultKind.SOFT_FAILURE, text, data)

    @classmethod
    def input_error(cls, text: str) -> "ToolResult":
        return cls(ResultKind.INPUT_ERROR, text)

    @classmethod
    def capability_error(cls, text: str, error: Optional[BaseException] = None) -> "ToolResult":
        return cls(ResultKind.CAPABILITY_ERROR, text, error)


def describe_error(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def to_json(value: Any) -> str:
    """Serialize a capability result (models, dataclasses, plain data)."""
    return json.dumps(_jsonable(value), ensure_ascii=False, default=str)


class BrowserToolInput(BaseModel):
    tool_input: str = Field(default="", description="Tool input as a single string.")


class BrowserTool(BaseTool):
    """A single browser capability behind a string-in/string-out contract."""

    args_schema: Type[BaseModel] = BrowserToolInput

    _provider: SessionProvider = PrivateAttr()
    _observability: Optional[Observability] = PrivateAttr(default=None)
    _sync_loop: Optional[asyncio.AbstractEventLoop] = PrivateAttr(default=None)
    _sync_lock: Any = PrivateAttr(default_factory=threading.Lock)

    def __init__(
        self,
        session: Any = None,
        *,
        session_factory: Optional[SessionFactory] = None,
        session_config: Optional[SessionConfig] = None,
        observability: Optional[Observability] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._observability = observability
        self._provider = SessionProvider(
            session,
            session_factory=session_factory,
            config=session_config,
            observability=observability,
        )

    @property
    def session_provider(self) -> SessionProvider:
        return self._provider

    async def get_session(self) -> BrowserSession:
        return await self._provider.get_session()

    async def aclose(self) -> None:
        loop = self._sync_loop
        if loop is None:
            await self._provider.aclose()
            return
        # an owned session opened by a sync call lives on the background loop
        await asyncio.wrap_future(asyncio.run_coroutine_threadsafe(self._provider.aclose(), loop))
        with self._sync_lock:
            self._sync_loop = None
        loop.call_soon_threadsafe(loop.stop)

    # ------------------------------------------------------------------
    async def execute(self, tool_input: str) -> ToolResult:
        try:
            result = await self._execute(tool_input)
        except Exception as exc:
            logger.warning("%s failed: %s", self.name, exc)
            result = self._failure(tool_input, exc)
        logger.debug("%s finished with %s", self.name, result.kind.value)
        self._obs().record_tool_invocation(
            tool=self.name,
            outcome=result.kind.value,
            error=describe_error(result.data) if isinstance(result.data, BaseException) else None,
        )
        return result

    async def _execute(self, tool_input: str) -> ToolResult:
        raise NotImplementedError

    def _failure(self, tool_input: str, exc: BaseException) -> ToolResult:
        raise NotImplementedError

    # ------------------------------------------------------------------
    async def _arun(
        self,
        tool_input: str = "",
        run_manager: Optional[AsyncCallbackManagerForToolRun] = None,
    ) -> str:
        result = await self.execute(tool_input)
        return result.text

    def _run(
        self,
        tool_input: str = "",
        run_manager: Optional[CallbackManagerForToolRun] = None,
    ) -> str:
        future = asyncio.run_coroutine_threadsafe(self._arun(tool_input), self._background_loop())
        return future.result()

    def _background_loop(self) -> asyncio.AbstractEventLoop:
        """One long-lived loop per tool, so owned sessions survive between sync calls."""
        with self._sync_lock:
            if self._sync_loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(target=loop.run_forever, name=f"{self.name}-loop", daemon=True)
                thread.start()
                self._sync_loop = loop
            return self._sync_loop

    def _obs(self) -> Observability:
        if self._observability is None:
            self._observability = get_observability()
        return self._observability


__all__ = [
    "BrowserTool",
    "BrowserToolInput",
    "ResultKind",
    "ToolResult",
    "describe_error",
    "to_json",
]
