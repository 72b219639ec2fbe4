"""Observability utilities for the browser tools."""
from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from prometheus_client import CollectorRegistry, Counter, generate_latest

from .config import ObservabilityConfig, load_runtime_config


def _ts() -> str:
    return datetime.now(timezone.utc).isoformat()


class Observability:
    """Counts tool invocations and session lifecycle events, emits JSON logs."""

    def __init__(self, config: ObservabilityConfig) -> None:
        self.config = config
        self.registry = CollectorRegistry()
        self._lock = threading.Lock()
        self._log_path: Optional[Path] = None
        if self.config.json_log_path:
            path = Path(self.config.json_log_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            self._log_path = path

        ns = config.metrics_namespace
        self._tool_invocations = Counter(
            f"{ns}_tool_invocations_total",
            "Tool invocations",
            ["tool", "outcome"],
            registry=self.registry,
        )
        self._sessions_created = Counter(
            f"{ns}_sessions_created_total", "Owned browser sessions created", registry=self.registry
        )
        self._sessions_closed = Counter(
            f"{ns}_sessions_closed_total", "Owned browser sessions closed", registry=self.registry
        )

    # ------------------------------------------------------------------
    def record_tool_invocation(self, *, tool: str, outcome: str, error: Optional[str] = None) -> None:
        self._tool_invocations.labels(tool, outcome).inc()
        self._log_event("tool_invoked", tool=tool, outcome=outcome, error=error)

    def record_session_created(self, *, env: Optional[str] = None) -> None:
        self._sessions_created.inc()
        self._log_event("session_created", env=env)

    def record_session_closed(self) -> None:
        self._sessions_closed.inc()
        self._log_event("session_closed")

    # ------------------------------------------------------------------
    def export_metrics(self) -> bytes:
        return generate_latest(self.registry)

    def _log_event(self, event_type: str, **payload: Any) -> None:
        if self._log_path is None:
            return
        record = {"ts": _ts(), "type": event_type, **{k: v for k, v in payload.items() if v is not None}}
        line = json.dumps(record)
        with self._lock:
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")


@lru_cache(maxsize=1)
def get_observability() -> Observability:
    return Observability(load_runtime_config().observability)


__all__ = ["Observability", "get_observability"]
