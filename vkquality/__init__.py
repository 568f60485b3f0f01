"""
Top-level vkquality package exports (lightweight).

Symbols are imported lazily on first access so that importing the package
does not configure logging or build the mitigation table.
"""
from __future__ import annotations

import importlib
from typing import Any

__version__ = "1.2.1"

_EXPORTS = {
  "PatchDate": "patch_date",
  "DeviceRecord": "device_record",
  "DeviceStatus": "mitigation_rule",
  "MitigationRule": "mitigation_rule",
  "MitigationDatabase": "mitigation_database",
  "MitigationVerdict": "mitigation_database",
  "DeviceSnapshot": "device_info",
  "InitFlags": "engine",
  "InitResult": "engine",
  "QualityEngine": "engine",
  "Recommendation": "engine",
  "StartupMitigation": "startup",
  "VkQuality": "startup",
  "default_rules": "mitigation_table",
  "load_table": "mitigation_table",
}

__all__ = sorted(_EXPORTS) + ["config"]


def __getattr__(name: str) -> Any:  # lazy attribute loader
  if name in _EXPORTS:
    module = importlib.import_module(f"{__name__}.{_EXPORTS[name]}")
    value = getattr(module, name)
    # Cache on the package module to avoid repeated imports
    globals()[name] = value
    return value
  if name == "config":
    _config = importlib.import_module(__name__ + ".config")
    globals()["config"] = _config
    return _config
  raise AttributeError(f"module 'vkquality' has no attribute {name!r}")
