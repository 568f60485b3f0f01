"""Central environment configuration utilities for vkquality.

Provides typed accessors, a registry of known VKQ_* variables, and helper
functions to introspect current effective configuration. Keeps os.environ
lookups in one place so tests can stub them with monkeypatch.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional


@dataclass(frozen=True)
class EnvVarMeta:
    name: str
    description: str
    default: Any
    parser: Callable[[str], Any]
    choices: Optional[List[str]] = None
    category: str = "general"


def _parse_bool(val: str) -> bool:
    return str(val).lower() in ("1", "true", "yes", "on")


def _identity(val: str) -> str:
    return val


def _upper(val: str) -> str:
    return str(val).strip().upper()


_REGISTRY: Dict[str, EnvVarMeta] = {
    # Startup mitigation
    "VKQ_MITIGATION_TABLE": EnvVarMeta(
        name="VKQ_MITIGATION_TABLE",
        description="Path to a JSON mitigation table replacing the built-in rules",
        default="",
        parser=_identity,
        category="mitigation",
    ),
    "VKQ_SKIP_STARTUP_MITIGATION": EnvVarMeta(
        name="VKQ_SKIP_STARTUP_MITIGATION",
        description="Bypass the startup mitigation check and always consult the engine",
        default="0",
        parser=_parse_bool,
        category="mitigation",
    ),
    "VKQ_GLES_ONLY_ON_MITIGATED_DEVICES": EnvVarMeta(
        name="VKQ_GLES_ONLY_ON_MITIGATED_DEVICES",
        description="Recommend GLES on mitigated devices even if the rule allows Vulkan",
        default="0",
        parser=_parse_bool,
        category="mitigation",
    ),
    # Engine
    "VKQ_DATA_FILENAME": EnvVarMeta(
        name="VKQ_DATA_FILENAME",
        description="Quality data file handed to the engine when none is given",
        default="vkqualitydata.vkq",
        parser=_identity,
        category="engine",
    ),
    # Logging
    "VKQ_LOG_LEVEL": EnvVarMeta(
        name="VKQ_LOG_LEVEL",
        description="Override log verbosity (DEBUG,INFO,WARNING,ERROR)",
        default="INFO",
        parser=_upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        category="logging",
    ),
}


def get(name: str) -> Any:
    meta = _REGISTRY.get(name)
    if not meta:
        return os.environ.get(name)
    raw = os.environ.get(name, str(meta.default))
    try:
        value = meta.parser(raw)
    except Exception:
        return meta.default
    # Values outside the declared choices fall back to the default
    if meta.choices and value not in meta.choices:
        return meta.default
    return value


def as_dict(include_unset: bool = False) -> Dict[str, Any]:
    data = {}
    for k in _REGISTRY:
        raw = os.environ.get(k)
        if raw is None and not include_unset:
            continue
        data[k] = get(k)
    return data


def describe() -> List[Dict[str, Any]]:
    info = []
    for meta in _REGISTRY.values():
        info.append(
            {
                "name": meta.name,
                "category": meta.category,
                "default": meta.default,
                "current": get(meta.name),
                "description": meta.description,
                "choices": meta.choices or [],
            }
        )
    return sorted(info, key=lambda x: (x["category"], x["name"]))


__all__ = ["get", "as_dict", "describe", "EnvVarMeta"]

# Runtime overrides registry (set via set()) for introspection.
_OVERRIDES: Dict[str, Any] = {}
_SET_LOCK = threading.Lock()


def set(name: str, value: Any) -> None:
    """Set an environment variable (stringifying value) and record override.

    The CLI uses this when a command-line option mirrors a VKQ_* variable so
    that `vkquality config list` can show where a value came from.
    """
    with _SET_LOCK:
        os.environ[name] = str(value)
        _OVERRIDES[name] = value


def overrides() -> Dict[str, Any]:
    return dict(_OVERRIDES)


__all__.extend(["set", "overrides"])
