"""Browser session protocol, Stagehand adapter and the per-tool session provider.

A tool either receives a session from its caller (shared) or builds one on
first use (owned).  Owned sessions are created at most once per provider and
are only closed through :meth:`SessionProvider.aclose`.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, runtime_checkable

from .config import SessionConfig, load_runtime_config
from .observability import Observability, get_observability

logger = logging.getLogger(__name__)

_CAPABILITIES = ("goto", "act", "extract", "observe")


@runtime_checkable
class BrowserSession(Protocol):
    async def init(self) -> Any:
        ...

    async def goto(self, url: str) -> Any:
        ...

    async def act(self, *, action: str) -> Any:
        ...

    async def extract(self, *, instruction: str, schema: Any) -> Any:
        ...

    async def observe(self, *, instruction: Optional[str] = None) -> Any:
        ...


SessionFactory = Callable[[SessionConfig], BrowserSession]


@dataclass
class ActOutcome:
    success: bool
    message: str = ""

    @classmethod
    def coerce(cls, result: Any) -> "ActOutcome":
        if isinstance(result, ActOutcome):
            return result
        if isinstance(result, Mapping):
            return cls(bool(result.get("success")), str(result.get("message") or ""))
        return cls(
            bool(getattr(result, "success", False)),
            str(getattr(result, "message", "") or ""),
        )


class StagehandSession:
    """Adapts a ``stagehand.Stagehand`` instance to :class:`BrowserSession`."""

    def __init__(self, stagehand: Any) -> None:
        self._stagehand = stagehand

    @property
    def stagehand(self) -> Any:
        return self._stagehand

    async def init(self) -> None:
        await self._stagehand.init()

    async def goto(self, url: str) -> None:
        await self._stagehand.page.goto(url)

    async def act(self, *, action: str) -> ActOutcome:
        result = await self._stagehand.page.act(action)
        return ActOutcome.coerce(result)

    async def extract(self, *, instruction: str, schema: Any) -> Any:
        return await self._stagehand.page.extract(instruction, schema=schema)

    async def observe(self, *, instruction: Optional[str] = None) -> Any:
        if instruction is None:
            return await self._stagehand.page.observe()
        return await self._stagehand.page.observe(instruction)

    async def close(self) -> None:
        await self._stagehand.close()


def create_stagehand_session(config: SessionConfig) -> StagehandSession:
    """Build an uninitialized Stagehand session from ``config``."""
    from stagehand import Stagehand, StagehandConfig

    options: dict[str, Any] = {
        "env": config.env,
        "enable_caching": config.enable_caching,
        "headless": config.headless,
        "verbose": config.verbose,
    }
    if config.model_name:
        options["model_name"] = config.model_name
    if config.model_api_key:
        options["model_api_key"] = config.model_api_key
    return StagehandSession(Stagehand(StagehandConfig(**options)))


def ensure_session(candidate: Any) -> BrowserSession:
    """Return ``candidate`` as a :class:`BrowserSession`.

    Objects exposing the four capabilities are used as-is; a raw Stagehand
    instance (anything with a ``page`` attribute) is wrapped, even before its
    ``init()`` has run; the caller stays responsible for initializing it.
    """
    if all(callable(getattr(candidate, name, None)) for name in _CAPABILITIES):
        return candidate
    if hasattr(candidate, "page"):
        return StagehandSession(candidate)
    raise TypeError(
        f"{type(candidate).__name__} is not a browser session: expected goto/act/extract/observe "
        "methods or a Stagehand instance"
    )


class SessionProvider:
    """Resolves the session a tool works against."""

    def __init__(
        self,
        session: Any = None,
        *,
        session_factory: Optional[SessionFactory] = None,
        config: Optional[SessionConfig] = None,
        observability: Optional[Observability] = None,
    ) -> None:
        self._shared: Optional[BrowserSession] = ensure_session(session) if session is not None else None
        self._factory: SessionFactory = session_factory or create_stagehand_session
        self._config = config
        self._observability = observability
        self._owned: Optional[BrowserSession] = None
        self._init_lock = asyncio.Lock()

    @property
    def owns_session(self) -> bool:
        return self._shared is None

    @property
    def shared_session(self) -> Optional[BrowserSession]:
        return self._shared

    @property
    def owned_session(self) -> Optional[BrowserSession]:
        return self._owned

    async def get_session(self) -> BrowserSession:
        if self._shared is not None:
            return self._shared
        if self._owned is not None:
            return self._owned
        async with self._init_lock:
            if self._owned is None:
                config = self._config or load_runtime_config().session
                session = self._factory(config)
                await session.init()
                self._owned = session
                logger.info("Created owned browser session (env=%s)", config.env)
                self._obs().record_session_created(env=config.env)
        return self._owned

    async def aclose(self) -> None:
        """Close the owned session, if any. Shared sessions are left alone."""
        if self._shared is not None:
            return
        async with self._init_lock:
            session, self._owned = self._owned, None
        if session is None:
            return
        close = getattr(session, "close", None)
        if close is not None:
            await close()
        logger.info("Closed owned browser session")
        self._obs().record_session_closed()

    def _obs(self) -> Observability:
        if self._observability is None:
            self._observability = get_observability()
        return self._observability


__all__ = [
    "ActOutcome",
    "BrowserSession",
    "SessionFactory",
    "SessionProvider",
    "StagehandSession",
    "create_stagehand_session",
    "ensure_session",
]
