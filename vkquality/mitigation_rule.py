"""Mitigation rules: an identity pattern plus API level and patch thresholds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict

from .device_record import DeviceRecord
from .patch_date import PatchDate


class DeviceStatus(IntEnum):
    UNAFFECTED = 0
    AFFECTED = 1


@dataclass(frozen=True)
class MitigationRule:
    record: DeviceRecord
    affected_api_max: int
    fixed_api_min: int
    fixed_patch_date: PatchDate
    vulkan_patch_date: PatchDate

    def record_match(self, brand: str, device: str, soc: str) -> bool:
        return self.record.record_match(brand, device, soc)

    def is_device_affected(self, api_level: int, patch_date: PatchDate) -> DeviceStatus:
        """Resolve whether a matched device still needs the mitigation.

        API levels above ``affected_api_max`` but below ``fixed_api_min`` never
        get a patch date check and stay affected.
        """
        if api_level >= self.fixed_api_min:
            return DeviceStatus.UNAFFECTED
        if api_level <= self.affected_api_max and patch_date.is_equal_or_later_than(self.fixed_patch_date):
            return DeviceStatus.UNAFFECTED
        return DeviceStatus.AFFECTED

    def recommend_affected_vulkan(self, patch_date: PatchDate) -> bool:
        return patch_date.is_equal_or_later_than(self.vulkan_patch_date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brand": self.record.brand,
            "device": self.record.device,
            "soc": self.record.soc,
            "affected_api_max": self.affected_api_max,
            "fixed_api_min": self.fixed_api_min,
            "fixed_patch_date": str(self.fixed_patch_date),
            "vulkan_patch_date": str(self.vulkan_patch_date),
        }


def make_rule(
    brand: str,
    device: str,
    soc: str,
    affected_api_max: int,
    fixed_api_min: int,
    fixed_patch_date: PatchDate | str,
    vulkan_patch_date: PatchDate | str,
) -> MitigationRule:
    """Build a rule from flat fields; date strings go through PatchDate.parse."""
    if not isinstance(fixed_patch_date, PatchDate):
        fixed_patch_date = PatchDate.parse(fixed_patch_date)
    if not isinstance(vulkan_patch_date, PatchDate):
        vulkan_patch_date = PatchDate.parse(vulkan_patch_date)
    return MitigationRule(
        record=DeviceRecord(brand, device, soc),
        affected_api_max=int(affected_api_max),
        fixed_api_min=int(fixed_api_min),
        fixed_patch_date=fixed_patch_date,
        vulkan_patch_date=vulkan_patch_date,
    )


__all__ = ["DeviceStatus", "MitigationRule", "make_rule"]
