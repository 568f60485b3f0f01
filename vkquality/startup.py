"""Startup mitigation and the caller-facing vkquality entry point.

``StartupMitigation`` checks a device snapshot against the mitigation table.
``VkQuality`` uses it to decide whether the native engine may be started at
all: on an affected device the recommendation is decided from the table and
the engine (and with it the Vulkan driver) is never touched.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Optional

from . import config as _cfg
from .device_info import DeviceSnapshot
from .engine import DEFAULT_QUALITY_FILE, InitFlags, InitResult, QualityEngine, Recommendation
from .mitigation_database import MSG_NOT_RUN, MitigationDatabase, MitigationVerdict
from .mitigation_rule import MitigationRule
from .mitigation_table import MitigationTableError, configured_rules
from .utils.logging import get_logger as _get_logger

_log = _get_logger("vkquality.startup")


class MitigationState(Enum):
    NOT_RUN = "not_run"
    MITIGATION_ACTIVE = "mitigation_active"
    MITIGATION_INACTIVE = "mitigation_inactive"


def mitigated_recommendation(verdict: MitigationVerdict, flags: int = 0) -> Recommendation:
    """Recommendation served on an affected device instead of asking the engine."""
    if verdict.recommend_vulkan and not (flags & InitFlags.GLES_ONLY_ON_MITIGATED_DEVICES):
        return Recommendation.VULKAN_BECAUSE_DEVICE_MATCH
    return Recommendation.GLES_BECAUSE_NO_DEVICE_MATCH


class StartupMitigation:
    def __init__(self, rules: Optional[Iterable[MitigationRule]] = None):
        self._rules = tuple(rules) if rules is not None else None
        self.state = MitigationState.NOT_RUN
        self.verdict: Optional[MitigationVerdict] = None

    @property
    def result_string(self) -> str:
        return self.verdict.diagnostic_message if self.verdict else MSG_NOT_RUN

    def reset(self) -> None:
        self.state = MitigationState.NOT_RUN
        self.verdict = None

    def evaluate(self, snapshot: DeviceSnapshot) -> MitigationVerdict:
        # Without explicit rules, VKQ_MITIGATION_TABLE or the built-in table
        rules = self._rules if self._rules is not None else configured_rules()
        database = MitigationDatabase(rules)
        verdict = database.lookup_snapshot(snapshot)
        self.verdict = verdict
        self.state = MitigationState.MITIGATION_ACTIVE if verdict.affected else MitigationState.MITIGATION_INACTIVE
        _log.info(verdict.diagnostic_message)
        return verdict


class VkQuality:
    """
    Entry point mirroring the vkquality library API.

    ``start_with_flags`` runs the startup mitigation unless
    ``InitFlags.SKIP_STARTUP_MITIGATION`` is set. The engine is started only
    when the device is not mitigated, and ``stop``/``query`` reach the engine
    only after it started successfully.
    """

    def __init__(
        self,
        engine: QualityEngine,
        snapshot: DeviceSnapshot,
        asset_source: Any = None,
        storage_path: str = "",
        rules: Optional[Iterable[MitigationRule]] = None,
    ):
        self.engine = engine
        self.snapshot = snapshot
        self.asset_source = asset_source
        self.storage_path = storage_path
        self.mitigation = StartupMitigation(rules)
        self._mitigation_recommendation: Optional[Recommendation] = None
        self._engine_started = False

    @property
    def mitigation_active(self) -> bool:
        return self._mitigation_recommendation is not None

    @property
    def engine_started(self) -> bool:
        return self._engine_started

    @property
    def result_string(self) -> str:
        return self.mitigation.result_string

    def start(self, data_filename: str = "") -> InitResult:
        return self.start_with_flags(data_filename, 0)

    def start_with_flags(self, data_filename: str = "", flags: int = 0) -> InitResult:
        if self._engine_started or self.mitigation_active:
            _log.warning("vkquality already started")
            return InitResult.ERROR_INITIALIZATION_FAILURE
        data_filename = data_filename or _cfg.get("VKQ_DATA_FILENAME") or DEFAULT_QUALITY_FILE

        if not (flags & InitFlags.SKIP_STARTUP_MITIGATION):
            try:
                verdict = self.mitigation.evaluate(self.snapshot)
            except MitigationTableError as e:
                _log.error("Startup mitigation unavailable: %s", e)
                return InitResult.ERROR_INITIALIZATION_FAILURE
            if verdict.affected:
                self._mitigation_recommendation = mitigated_recommendation(verdict, flags)
                _log.info("Startup mitigation active, recommendation: %s", self._mitigation_recommendation.name)
                return InitResult.SUCCESS
        else:
            _log.debug("Startup mitigation skipped by flags")

        code = self.engine.start(self.asset_source, self.storage_path, data_filename, int(flags))
        if code == InitResult.SUCCESS:
            self._engine_started = True
            return InitResult.SUCCESS
        try:
            result = InitResult(code)
        except ValueError:
            _log.error("vkquality engine returned unknown start code %r", code)
            return InitResult.ERROR_INITIALIZATION_FAILURE
        _log.error("vkquality engine failed to start: %s", result.name)
        return result

    def stop(self) -> None:
        if self._engine_started:
            self.engine.stop()
            self._engine_started = False
        self._mitigation_recommendation = None
        self.mitigation.reset()

    def get_recommendation(self) -> Recommendation:
        if self._mitigation_recommendation is not None:
            return self._mitigation_recommendation
        if not self._engine_started:
            return Recommendation.ERROR_NOT_INITIALIZED
        code = self.engine.query()
        try:
            return Recommendation(code)
        except ValueError:
            _log.warning("vkquality engine returned unknown recommendation %r", code)
            return Recommendation.NOT_READY


__all__ = [
    "MitigationState",
    "StartupMitigation",
    "VkQuality",
    "mitigated_recommendation",
]
