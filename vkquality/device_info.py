# vkquality/device_info.py
"""Device identity snapshot taken once at startup.

Values come from Android system properties, either as a mapping or as the raw
text printed by ``adb shell getprop``. Older platforms lack some properties:
``ro.soc.model`` exists from API 31 and the security patch level from API 23.
Missing values fall back instead of failing.
"""
import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .patch_date import PatchDate

MIN_SOC_API = 31
MIN_SECURITY_PATCH_API = 23
# Used when the OS cannot report its security patch level
FALLBACK_SECURITY_PATCH = "2021-01-01"

PROP_BRAND = "ro.product.brand"
PROP_DEVICE = "ro.product.device"
PROP_SOC = "ro.soc.model"
PROP_SDK = "ro.build.version.sdk"
PROP_SECURITY_PATCH = "ro.build.version.security_patch"

_GETPROP_LINE = re.compile(r"^\s*\[(?P<key>[^\]]+)\]\s*:\s*\[(?P<value>.*)\]\s*$")


@dataclass(frozen=True)
class DeviceSnapshot:
    api_level: int
    brand: str
    device: str
    soc: str
    security_patch: PatchDate

    @classmethod
    def create(
        cls,
        api_level: int,
        brand: str,
        device: str,
        soc: Optional[str] = None,
        security_patch: Optional[str] = None,
    ) -> "DeviceSnapshot":
        """Build a snapshot from raw strings, applying platform fallbacks."""
        if api_level < MIN_SOC_API or not soc:
            soc = ""
        if api_level < MIN_SECURITY_PATCH_API or not security_patch:
            security_patch = FALLBACK_SECURITY_PATCH
        return cls(
            api_level=api_level,
            brand=brand or "",
            device=device or "",
            soc=soc,
            security_patch=PatchDate.parse(security_patch),
        )

    @classmethod
    def from_build_props(cls, props: Mapping[str, str]) -> "DeviceSnapshot":
        try:
            api_level = int(str(props.get(PROP_SDK, "")).strip())
        except ValueError:
            api_level = 0
        return cls.create(
            api_level=api_level,
            brand=props.get(PROP_BRAND, ""),
            device=props.get(PROP_DEVICE, ""),
            soc=props.get(PROP_SOC),
            security_patch=props.get(PROP_SECURITY_PATCH),
        )

    @classmethod
    def from_getprop(cls, text: str) -> "DeviceSnapshot":
        return cls.from_build_props(parse_getprop(text))

    def as_dict(self) -> Dict[str, object]:
        return {
            "api_level": self.api_level,
            "brand": self.brand,
            "device": self.device,
            "soc": self.soc,
            "security_patch": str(self.security_patch),
        }


def parse_getprop(text: str) -> Dict[str, str]:
    """Parse ``[key]: [value]`` lines; anything else is skipped."""
    props: Dict[str, str] = {}
    for line in text.splitlines():
        m = _GETPROP_LINE.match(line)
        if m:
            props[m.group("key").strip()] = m.group("value")
    return props


__all__ = [
    "DeviceSnapshot",
    "FALLBACK_SECURITY_PATCH",
    "MIN_SECURITY_PATCH_API",
    "MIN_SOC_API",
    "parse_getprop",
]
