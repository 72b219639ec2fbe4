"""Shared vs. owned session resolution."""
from __future__ import annotations

import asyncio
import types

import pytest

from browserkit.config import SessionConfig
from browserkit.session import ActOutcome, SessionProvider, StagehandSession, ensure_session


@pytest.mark.asyncio
async def test_shared_session_is_returned_without_creating_one(fake_session, session_factory, observability):
    provider = SessionProvider(fake_session, session_factory=session_factory, observability=observability)

    assert await provider.get_session() is fake_session
    assert await provider.get_session() is fake_session
    assert session_factory.created == []
    assert fake_session.init_calls == 0
    assert not provider.owns_session


@pytest.mark.asyncio
async def test_owned_session_created_once_and_reused(session_factory, observability):
    provider = SessionProvider(
        session_factory=session_factory,
        config=SessionConfig(),
        observability=observability,
    )

    first = await provider.get_session()
    second = await provider.get_session()

    assert first is second
    assert len(session_factory.created) == 1
    assert first.init_calls == 1
    assert provider.owns_session
    assert "test_ns_sessions_created_total 1.0" in observability.export_metrics().decode()


@pytest.mark.asyncio
async def test_concurrent_first_use_creates_a_single_session(observability):
    created = []

    class SlowSession:
        async def init(self):
            await asyncio.sleep(0.01)

        async def goto(self, url):
            return None

        async def act(self, *, action):
            return {"success": True, "message": ""}

        async def extract(self, *, instruction, schema):
            return {}

        async def observe(self, *, instruction=None):
            return []

    def factory(config):
        session = SlowSession()
        created.append(session)
        return session

    provider = SessionProvider(session_factory=factory, config=SessionConfig(), observability=observability)
    sessions = await asyncio.gather(*(provider.get_session() for _ in range(5)))

    assert len(created) == 1
    assert all(s is created[0] for s in sessions)


@pytest.mark.asyncio
async def test_failed_init_is_not_retained(observability):
    attempts = []

    class FlakySession:
        async def init(self):
            attempts.append(self)
            if len(attempts) == 1:
                raise RuntimeError("browser did not start")

        async def goto(self, url):
            return None

        act = extract = observe = goto

    provider = SessionProvider(
        session_factory=lambda config: FlakySession(),
        config=SessionConfig(),
        observability=observability,
    )

    with pytest.raises(RuntimeError, match="browser did not start"):
        await provider.get_session()
    session = await provider.get_session()

    assert session is attempts[1]


@pytest.mark.asyncio
async def test_aclose_closes_owned_but_never_shared(fake_session, session_factory, observability):
    shared = SessionProvider(fake_session, observability=observability)
    await shared.aclose()
    assert not fake_session.closed

    owned = SessionProvider(session_factory=session_factory, config=SessionConfig(), observability=observability)
    session = await owned.get_session()
    await owned.aclose()
    await owned.aclose()

    assert session.closed
    assert owned.owned_session is None


def test_nothing_is_created_before_first_use(session_factory, observability):
    provider = SessionProvider(session_factory=session_factory, observability=observability)

    assert provider.owns_session
    assert provider.owned_session is None
    assert session_factory.created == []


def test_ensure_session_wraps_raw_stagehand(fake_session):
    raw = types.SimpleNamespace(page=object())

    assert ensure_session(fake_session) is fake_session
    wrapped = ensure_session(raw)
    assert isinstance(wrapped, StagehandSession)
    assert wrapped.stagehand is raw
    with pytest.raises(TypeError):
        ensure_session(object())


def test_ensure_session_wraps_stagehand_before_init():
    raw = types.SimpleNamespace(page=None)

    wrapped = ensure_session(raw)

    assert isinstance(wrapped, StagehandSession)
    assert wrapped.stagehand is raw


def test_ensure_session_error_names_what_is_expected():
    with pytest.raises(TypeError, match="goto/act/extract/observe"):
        ensure_session("not a session")


@pytest.mark.asyncio
async def test_stagehand_adapter_delegates_to_page():
    calls = []

    class Page:
        async def goto(self, url):
            calls.append(("goto", url))

        async def act(self, action):
            calls.append(("act", action))
            return types.SimpleNamespace(success=False, message="not found", action=action)

        async def extract(self, instruction, schema=None):
            calls.append(("extract", instruction, schema))
            return {"title": "Home"}

        async def observe(self, instruction=None):
            calls.append(("observe", instruction))
            return []

    raw = types.SimpleNamespace(page=Page())
    session = StagehandSession(raw)

    await session.goto("https://example.com")
    outcome = await session.act(action="click login")
    await session.extract(instruction="get title", schema=dict)
    await session.observe()

    assert outcome == ActOutcome(success=False, message="not found")
    assert calls == [
        ("goto", "https://example.com"),
        ("act", "click login"),
        ("extract", "get title", dict),
        ("observe", None),
    ]


def test_act_outcome_coerce_accepts_mappings_and_objects():
    assert ActOutcome.coerce({"success": True, "message": "ok"}) == ActOutcome(True, "ok")
    assert ActOutcome.coerce(types.SimpleNamespace(success=False, message=None)) == ActOutcome(False, "")
