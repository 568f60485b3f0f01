"""Mitigation table data.

The built-in table is plain data (``DEFAULT_RULE_LITERALS``) kept apart from
the matching code so it can be replaced by a JSON file. Order matters: the
database stops at the first matching rule.

JSON layout accepted by ``load_table`` and produced by ``dump_table``::

    {
      "version": 1,
      "rules": [
        {"brand": "samsung", "device": "", "soc": "SM8650",
         "affected_api_max": 34, "fixed_api_min": 99,
         "fixed_patch_date": "2099-12-31", "vulkan_patch_date": "2024-06-01"}
      ]
    }

A bare list of rule objects is accepted as well.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from . import config as _cfg
from .mitigation_rule import MitigationRule, make_rule
from .patch_date import SENTINEL_PATCH_DATE, PatchDate
from .utils.logging import get_logger as _get_logger

_log = _get_logger("vkquality.table")

TABLE_VERSION = 1

VULKAN_PATCH_DATE = "2024-06-01"
# Unreachable date, used for 'not fixed' and 'never recommend Vulkan'
UNFIXED_PATCH_DATE = "2099-12-31"
AFFECTED_API_MAX = 34
UNFIXED_API_MIN = 99

_RULE_FIELDS = (
    "brand",
    "device",
    "soc",
    "affected_api_max",
    "fixed_api_min",
    "fixed_patch_date",
    "vulkan_patch_date",
)


class MitigationTableError(ValueError):
    """Raised when an external mitigation table cannot be used."""


# SOC_MODEL only exists from API 31, so the chipset rules are backed up by
# device rules for the known affected models.
_VULKAN_SOCS = ("SM8650", "SM8550", "SM8475", "SM8450")
_GLES_SOCS = ("SM6375",)

VULKAN_DEVICES: Tuple[str, ...] = (
    "e3q",
    "b0q",
    "dm3q",
    "r0q",
    "e2q",
    "g0q",
    "dm1q",
    "q4q",
    "e1q",
    "dm2q",
    "q5q",
    "r11q",
    "b4q",
    "b5q",
    "gts8wifi",
    "SC-51C",
    "gts8p",
)

GLES_DEVICES: Tuple[str, ...] = (
    "a23xq",
    "gta9pwifi",
)


def _literal(brand: str, device: str, soc: str, vulkan_patch_date: str) -> Dict[str, Any]:
    return {
        "brand": brand,
        "device": device,
        "soc": soc,
        "affected_api_max": AFFECTED_API_MAX,
        "fixed_api_min": UNFIXED_API_MIN,
        "fixed_patch_date": UNFIXED_PATCH_DATE,
        "vulkan_patch_date": vulkan_patch_date,
    }


DEFAULT_RULE_LITERALS: Tuple[Dict[str, Any], ...] = (
    *(_literal("samsung", "", soc, VULKAN_PATCH_DATE) for soc in _VULKAN_SOCS),
    *(_literal("samsung", "", soc, UNFIXED_PATCH_DATE) for soc in _GLES_SOCS),
    *(_literal("samsung", device, "", VULKAN_PATCH_DATE) for device in VULKAN_DEVICES),
    *(_literal("samsung", device, "", UNFIXED_PATCH_DATE) for device in GLES_DEVICES),
)


def rule_from_literal(literal: Dict[str, Any]) -> MitigationRule:
    if not isinstance(literal, dict):
        raise MitigationTableError(f"Rule must be an object, got {type(literal).__name__}")
    for field in ("affected_api_max", "fixed_api_min", "fixed_patch_date", "vulkan_patch_date"):
        if field not in literal:
            raise MitigationTableError(f"Rule missing '{field}': {literal}")
    unknown = sorted(set(literal) - set(_RULE_FIELDS))
    if unknown:
        raise MitigationTableError(f"Unknown rule field(s) {unknown}")
    identity = {}
    for field in ("brand", "device", "soc"):
        value = literal.get(field) or ""
        if not isinstance(value, str):
            raise MitigationTableError(f"Field '{field}' must be a string")
        identity[field] = value
    for field in ("affected_api_max", "fixed_api_min"):
        if isinstance(literal[field], bool) or not isinstance(literal[field], int):
            raise MitigationTableError(f"Field '{field}' must be an integer")
    for field in ("fixed_patch_date", "vulkan_patch_date"):
        value = literal[field]
        if not isinstance(value, str):
            raise MitigationTableError(f"Field '{field}' must be a YYYY-MM-DD string")
        # Only a literal 0-0-0 may load as the sentinel
        if PatchDate.parse(value) == SENTINEL_PATCH_DATE and value != "0-0-0":
            raise MitigationTableError(f"Field '{field}' is not a YYYY-MM-DD date: {value!r}")
    return make_rule(
        identity["brand"],
        identity["device"],
        identity["soc"],
        literal["affected_api_max"],
        literal["fixed_api_min"],
        literal["fixed_patch_date"],
        literal["vulkan_patch_date"],
    )


def build_rules(literals: Iterable[Dict[str, Any]]) -> List[MitigationRule]:
    return [rule_from_literal(lit) for lit in literals]


def default_rules() -> List[MitigationRule]:
    return build_rules(DEFAULT_RULE_LITERALS)


def load_table(path: str | Path) -> List[MitigationRule]:
    p = Path(path)
    try:
        data = json.loads(p.read_text())
    except OSError as e:
        raise MitigationTableError(f"Cannot read mitigation table {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise MitigationTableError(f"Invalid JSON in mitigation table {p}: {e}") from e
    if isinstance(data, dict):
        version = data.get("version", TABLE_VERSION)
        if version != TABLE_VERSION:
            raise MitigationTableError(f"Unsupported mitigation table version '{version}'")
        data = data.get("rules")
    if not isinstance(data, list):
        raise MitigationTableError("Mitigation table must contain a list of rules")
    rules = build_rules(data)
    _log.debug("Loaded %d mitigation rules from %s", len(rules), p)
    return rules


def dump_table(rules: Sequence[MitigationRule]) -> Dict[str, Any]:
    return {"version": TABLE_VERSION, "rules": [r.to_dict() for r in rules]}


def configured_rules(table_path: str | Path | None = None) -> List[MitigationRule]:
    """Rules from ``table_path`` or VKQ_MITIGATION_TABLE, else the built-in table."""
    if table_path is None:
        table_path = _cfg.get("VKQ_MITIGATION_TABLE") or None
    if table_path:
        return load_table(table_path)
    return default_rules()


__all__ = [
    "DEFAULT_RULE_LITERALS",
    "GLES_DEVICES",
    "MitigationTableError",
    "TABLE_VERSION",
    "UNFIXED_PATCH_DATE",
    "VULKAN_DEVICES",
    "VULKAN_PATCH_DATE",
    "build_rules",
    "configured_rules",
    "default_rules",
    "dump_table",
    "load_table",
    "rule_from_literal",
]
