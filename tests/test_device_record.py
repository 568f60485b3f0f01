from vkquality.device_record import DeviceRecord


def test_soc_substring_match_with_brand():
    rec = DeviceRecord("samsung", "", "SM8650")
    assert rec.record_match("samsung", "", "QTI SM8650")
    assert rec.record_match("samsung", "", "SM8650")
    assert not rec.record_match("other", "", "SM8650")
    assert not rec.record_match("samsung", "", "SM8550")


def test_soc_match_without_brand_ignores_brand():
    rec = DeviceRecord("", "", "SM8650")
    assert rec.record_match("anything", "", "QTI SM8650")
    assert not rec.record_match("anything", "", "SM8550")


def test_device_only_pattern_ignores_brand_and_soc():
    rec = DeviceRecord("", "e3q", "")
    assert rec.record_match("samsung", "e3q", "SM8650")
    assert rec.record_match("other", "e3q", "")
    assert not rec.record_match("samsung", "e2q", "")


def test_device_compare_takes_precedence_over_soc():
    rec = DeviceRecord("f0nebrand", "f0nedevice", "f0neSoC")
    assert rec.record_match("f0nebrand", "f0nedevice", "f0neSoC")
    assert rec.record_match("f0nebrand", "f0nedevice", "")
    # Devices differ: the matching SoC is not consulted
    assert not rec.record_match("f0nebrand", "otherdevice", "f0neSoC")
    assert not rec.record_match("otherbrand", "f0nedevice", "f0neSoC")


def test_missing_query_device_falls_back_to_soc():
    rec = DeviceRecord("f0nebrand", "f0nedevice", "f0neSoC")
    assert rec.record_match("f0nebrand", "", "f0neSoC")
    assert not rec.record_match("f0nebrand", "", "otherSoC")


def test_empty_pattern_soc_matches_any_query_without_device():
    rec = DeviceRecord("samsung", "a23xq", "")
    assert rec.record_match("samsung", "", "SM8750")
    assert rec.record_match("samsung", "", "")
    assert not rec.record_match("google", "", "")
    assert DeviceRecord().record_match("x", "", "y")


def test_describe():
    assert DeviceRecord("samsung", "", "SM8650").describe() == "brand=samsung,soc=SM8650"
    assert DeviceRecord().describe() == "*"
