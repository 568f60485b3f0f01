"""First-match lookup of a device against the mitigation rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

from .mitigation_rule import DeviceStatus, MitigationRule
from .patch_date import PatchDate

if TYPE_CHECKING:
    from .device_info import DeviceSnapshot

MSG_NOT_RUN = "StartupMitigation not yet run"
MSG_NOT_FOUND = "Startup mitigation: Device not found in mitigation list, unaffected"
MSG_FOUND_UNAFFECTED = "Startup mitigation: Device found in mitigation list, unaffected"


@dataclass(frozen=True)
class MitigationVerdict:
    affected: bool
    recommend_vulkan: bool
    diagnostic_message: str
    rule: Optional[MitigationRule] = None

    @property
    def status(self) -> DeviceStatus:
        return DeviceStatus.AFFECTED if self.affected else DeviceStatus.UNAFFECTED


def _affected_message(brand: str, device: str, soc: str, use_vulkan: bool) -> str:
    return (
        "Startup mitigation: Device found in mitigation list, affected"
        f" brand: {brand}"
        f" device: {device}"
        f" SoC:{soc}"
        f" useVulkan: {'true' if use_vulkan else 'false'}"
    )


class MitigationDatabase:
    """Ordered mitigation rules. The first rule whose identity matches decides."""

    def __init__(self, rules: Iterable[MitigationRule] = ()):
        self.rules: Tuple[MitigationRule, ...] = tuple(rules)

    def __len__(self) -> int:
        return len(self.rules)

    def find(self, brand: str, device: str, soc: str) -> Optional[MitigationRule]:
        for rule in self.rules:
            if rule.record_match(brand, device, soc):
                return rule
        return None

    def lookup(self, brand: str, device: str, soc: str, api_level: int, patch_date: PatchDate) -> MitigationVerdict:
        rule = self.find(brand, device, soc)
        if rule is None:
            return MitigationVerdict(False, False, MSG_NOT_FOUND)
        use_vulkan = rule.recommend_affected_vulkan(patch_date)
        if rule.is_device_affected(api_level, patch_date) == DeviceStatus.AFFECTED:
            return MitigationVerdict(True, use_vulkan, _affected_message(brand, device, soc, use_vulkan), rule)
        return MitigationVerdict(False, use_vulkan, MSG_FOUND_UNAFFECTED, rule)

    def lookup_snapshot(self, snapshot: "DeviceSnapshot") -> MitigationVerdict:
        return self.lookup(snapshot.brand, snapshot.device, snapshot.soc, snapshot.api_level, snapshot.security_patch)


__all__ = [
    "MSG_FOUND_UNAFFECTED",
    "MSG_NOT_FOUND",
    "MSG_NOT_RUN",
    "MitigationDatabase",
    "MitigationVerdict",
]
