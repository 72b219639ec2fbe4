"""Runtime configuration loading utilities."""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

dotenv_path = os.getenv("BROWSERKIT_DOTENV")
if dotenv_path:
    load_dotenv(dotenv_path, override=False)
else:
    load_dotenv(override=False)


@dataclass(slots=True)
class SessionConfig:
    """Settings used when a tool has to create its own browser session."""

    env: str = "LOCAL"
    enable_caching: bool = True
    headless: bool = True
    model_name: Optional[str] = None
    model_api_key: Optional[str] = None
    verbose: int = 1


@dataclass(slots=True)
class ObservabilityConfig:
    json_log_path: Optional[Path] = None
    metrics_namespace: str = "browserkit"


@dataclass(slots=True)
class RuntimeConfig:
    session: SessionConfig = field(default_factory=SessionConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)


def _load_config_file() -> Dict[str, Any]:
    env_path = os.getenv("BROWSERKIT_CONFIG")
    candidates = []
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(Path(p) for p in ("browserkit.toml", "config/browserkit.toml"))
    for candidate in candidates:
        candidate = candidate.expanduser()
        if candidate.is_file():
            with candidate.open("rb") as fh:
                return tomllib.load(fh)
    return {}


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on", "y"}:
        return True
    if text in {"0", "false", "no", "off", "n"}:
        return False
    return default


def _as_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _lookup(settings: Mapping[str, Any], *path: str, default: Any = None) -> Any:
    current: Any = settings
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


def _parse_log_path(value: Any) -> Optional[Path]:
    if value is None:
        return None
    candidate = str(value).strip()
    if candidate.lower() in {"", "none", "null", "disable", "disabled"}:
        return None
    return Path(candidate).expanduser()


def build_runtime_config(
    settings: Mapping[str, Any], environ: Mapping[str, str]
) -> RuntimeConfig:
    """Merge file settings with environment overrides (environment wins)."""
    session = SessionConfig(
        env=str(
            environ.get("STAGEHAND_ENV", _lookup(settings, "session", "env", default="LOCAL"))
        ).strip().upper()
        or "LOCAL",
        enable_caching=_as_bool(
            environ.get(
                "STAGEHAND_ENABLE_CACHING",
                _lookup(settings, "session", "enable_caching", default=True),
            ),
            True,
        ),
        headless=_as_bool(
            environ.get(
                "STAGEHAND_HEADLESS",
                _lookup(settings, "session", "headless", default=True),
            ),
            True,
        ),
        model_name=_as_optional_str(
            environ.get(
                "STAGEHAND_MODEL_NAME",
                _lookup(settings, "session", "model_name"),
            )
        ),
        model_api_key=_as_optional_str(
            environ.get(
                "STAGEHAND_MODEL_API_KEY",
                _lookup(settings, "session", "model_api_key"),
            )
        ),
        verbose=_as_int(
            environ.get("STAGEHAND_VERBOSE", _lookup(settings, "session", "verbose", default=1)),
            1,
        ),
    )

    observability = ObservabilityConfig(
        json_log_path=_parse_log_path(
            environ.get(
                "BROWSERKIT_OBSERVABILITY_LOG_PATH",
                _lookup(settings, "observability", "json_log_path"),
            )
        ),
        metrics_namespace=str(
            environ.get(
                "BROWSERKIT_METRICS_NAMESPACE",
                _lookup(settings, "observability", "metrics_namespace", default="browserkit"),
            )
        ).strip()
        or "browserkit",
    )

    return RuntimeConfig(session=session, observability=observability)


@lru_cache(maxsize=1)
def load_runtime_config() -> RuntimeConfig:
    return build_runtime_config(_load_config_file(), os.environ)


__all__ = [
    "ObservabilityConfig",
    "RuntimeConfig",
    "SessionConfig",
    "build_runtime_config",
    "load_runtime_config",
]
