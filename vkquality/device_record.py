"""Device identity patterns used by the mitigation table."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceRecord:
    """A (brand, device, soc) pattern. Empty fields act as wildcards.

    Matching rules, in order:
      1. When both the queried device and the pattern device are set, compare
         devices for equality (and the brand too, unless the pattern brand is
         empty). The SoC is ignored.
      2. Otherwise compare SoCs. The pattern SoC only has to be contained in
         the queried one, since platforms report either ``SM8650`` or
         ``QTI SM8650``. The brand must match unless the pattern brand is
         empty.

    An empty pattern SoC is contained in every string, so a device-only
    pattern also matches any query that has no device name.
    """

    brand: str = ""
    device: str = ""
    soc: str = ""

    def record_match(self, brand: str, device: str, soc: str) -> bool:
        if device and self.device:
            if not self.brand:
                return device == self.device
            return brand == self.brand and device == self.device
        if not self.brand:
            return self.soc in soc
        return brand == self.brand and self.soc in soc

    def describe(self) -> str:
        fields = [f"{k}={v}" for k, v in (("brand", self.brand), ("device", self.device), ("soc", self.soc)) if v]
        return ",".join(fields) or "*"


__all__ = ["DeviceRecord"]
