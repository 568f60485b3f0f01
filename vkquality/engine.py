"""
Quality engine boundary.

The native engine that inspects the Vulkan driver and produces a
recommendation is opaque to this package. It is reached through the
``QualityEngine`` interface, which concrete bindings implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, IntFlag
from typing import Any

DEFAULT_QUALITY_FILE = "vkqualitydata.vkq"


class InitResult(IntEnum):
    """Result codes returned when starting vkquality."""

    SUCCESS = 0
    ERROR_INITIALIZATION_FAILURE = -1
    ERROR_NO_VULKAN = -2
    ERROR_INVALID_DATA_VERSION = -3
    ERROR_INVALID_DATA_FILE = -4
    ERROR_MISSING_DATA_FILE = -5


class Recommendation(IntEnum):
    """Graphics API recommendation and the reason behind it."""

    NOT_READY = -2
    ERROR_NOT_INITIALIZED = -1
    VULKAN_BECAUSE_DEVICE_MATCH = 0
    VULKAN_BECAUSE_PREDICTION_MATCH = 1
    VULKAN_BECAUSE_FUTURE_ANDROID = 2
    GLES_BECAUSE_OLD_DEVICE = 3
    GLES_BECAUSE_OLD_DRIVER = 4
    GLES_BECAUSE_NO_DEVICE_MATCH = 5
    GLES_BECAUSE_PREDICTION_MATCH = 6

    @property
    def is_vulkan(self) -> bool:
        return self.name.startswith("VULKAN_")

    @property
    def is_gles(self) -> bool:
        return self.name.startswith("GLES_")


class InitFlags(IntFlag):
    NONE = 0
    SKIP_STARTUP_MITIGATION = 1 << 0
    GLES_ONLY_ON_MITIGATED_DEVICES = 1 << 1
    # Forwarded to the engine: skip the SoC/driver fingerprint allow/deny list
    SKIP_FINGERPRINT_RECOMMENDATION_CHECK = 1 << 2


class QualityEngine(ABC):
    """
    Abstract interface of the native quality engine.

    Implementations must:
    - start only once until stopped
    - answer ``query`` only after a successful ``start``
    """

    @abstractmethod
    def start(self, asset_source: Any, storage_path: str, data_filename: str, flags: int = 0) -> InitResult:
        """
        Initialize the engine and begin computing a recommendation.

        Args:
            asset_source: Handle used to read bundled assets (may be None).
            storage_path: Writable directory for the data file and cache.
            data_filename: Name of the quality data file.
            flags: ``InitFlags`` bits the engine understands.

        Returns:
            ``InitResult.SUCCESS`` or an error code.
        """
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        """Release engine resources."""
        raise NotImplementedError

    @abstractmethod
    def query(self) -> Recommendation:
        """Return the current recommendation."""
        raise NotImplementedError


__all__ = [
    "DEFAULT_QUALITY_FILE",
    "InitFlags",
    "InitResult",
    "QualityEngine",
    "Recommendation",
]
