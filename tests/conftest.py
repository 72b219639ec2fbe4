"""Shared fixtures: an in-memory browser session and isolated metrics."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from browserkit.config import ObservabilityConfig
from browserkit.observability import Observability


class FakeSession:
    def __init__(self) -> None:
        self.init_calls = 0
        self.closed = False
        self.calls: List[tuple[str, Dict[str, Any]]] = []
        self.act_result: Any = {"success": True, "message": "clicked"}
        self.extract_result: Any = {"title": "Home"}
        self.observe_result: Any = [{"action": "click", "selector": "#btn"}]
        self.fail_with: Optional[Exception] = None

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def init(self) -> None:
        self.init_calls += 1

    async def goto(self, url: str) -> None:
        self.calls.append(("goto", {"url": url}))
        self._maybe_fail()

    async def act(self, *, action: str) -> Any:
        self.calls.append(("act", {"action": action}))
        self._maybe_fail()
        return self.act_result

    async def extract(self, *, instruction: str, schema: Any) -> Any:
        self.calls.append(("extract", {"instruction": instruction, "schema": schema}))
        self._maybe_fail()
        return self.extract_result

    async def observe(self, *, instruction: Optional[str] = None) -> Any:
        self.calls.append(("observe", {"instruction": instruction}))
        self._maybe_fail()
        return self.observe_result

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def session_factory():
    created: List[FakeSession] = []

    def factory(config):
        session = FakeSession()
        created.append(session)
        return session

    factory.created = created  # type: ignore[attr-defined]
    return factory


@pytest.fixture
def observability(tmp_path) -> Observability:
    cfg = ObservabilityConfig(json_log_path=tmp_path / "events.jsonl", metrics_namespace="test_ns")
    return Observability(cfg)
