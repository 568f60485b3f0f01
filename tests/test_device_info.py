from vkquality.device_info import FALLBACK_SECURITY_PATCH, DeviceSnapshot, parse_getprop
from vkquality.patch_date import PatchDate

GETPROP_OUTPUT = """\
[ro.build.version.release]: [14]
[ro.build.version.sdk]: [34]
[ro.build.version.security_patch]: [2024-07-01]
[ro.product.brand]: [samsung]
[ro.product.device]: [e3q]
[ro.soc.model]: [SM8650]
garbage line without brackets
"""


def test_parse_getprop():
    props = parse_getprop(GETPROP_OUTPUT)
    assert props["ro.product.brand"] == "samsung"
    assert props["ro.soc.model"] == "SM8650"
    assert len(props) == 6


def test_snapshot_from_getprop():
    snap = DeviceSnapshot.from_getprop(GETPROP_OUTPUT)
    assert snap == DeviceSnapshot(34, "samsung", "e3q", "SM8650", PatchDate(2024, 7, 1))


def test_soc_dropped_below_api_31():
    snap = DeviceSnapshot.from_build_props(
        {"ro.build.version.sdk": "30", "ro.product.brand": "samsung", "ro.soc.model": "SM8250"}
    )
    assert snap.soc == ""
    assert snap.device == ""


def test_security_patch_fallback_below_api_23():
    snap = DeviceSnapshot.create(22, "samsung", "a5", security_patch="2024-07-01")
    assert snap.security_patch == PatchDate.parse(FALLBACK_SECURITY_PATCH)


def test_missing_values_fall_back():
    snap = DeviceSnapshot.from_build_props({"ro.build.version.sdk": "34"})
    assert snap.brand == "" and snap.device == "" and snap.soc == ""
    assert str(snap.security_patch) == "2021-01-01"


def test_bad_sdk_is_level_zero_and_bad_patch_is_sentinel():
    snap = DeviceSnapshot.from_build_props({"ro.build.version.sdk": "S", "ro.build.version.security_patch": "x"})
    assert snap.api_level == 0
    snap = DeviceSnapshot.create(34, "samsung", "e3q", "", "July 2024")
    assert snap.security_patch == PatchDate()


def test_as_dict():
    snap = DeviceSnapshot.create(34, "samsung", "", "SM8650", "2024-07-01")
    assert snap.as_dict() == {
        "api_level": 34,
        "brand": "samsung",
        "device": "",
        "soc": "SM8650",
        "security_patch": "2024-07-01",
    }
