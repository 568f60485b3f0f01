from vkquality import config as _cfg


def test_defaults(monkeypatch):
    for name in ("VKQ_SKIP_STARTUP_MITIGATION", "VKQ_DATA_FILENAME", "VKQ_MITIGATION_TABLE"):
        monkeypatch.delenv(name, raising=False)
    assert _cfg.get("VKQ_SKIP_STARTUP_MITIGATION") is False
    assert _cfg.get("VKQ_DATA_FILENAME") == "vkqualitydata.vkq"
    assert _cfg.get("VKQ_MITIGATION_TABLE") == ""


def test_bool_parsing(monkeypatch):
    monkeypatch.setenv("VKQ_SKIP_STARTUP_MITIGATION", "yes")
    assert _cfg.get("VKQ_SKIP_STARTUP_MITIGATION") is True
    monkeypatch.setenv("VKQ_SKIP_STARTUP_MITIGATION", "nope")
    assert _cfg.get("VKQ_SKIP_STARTUP_MITIGATION") is False


def test_unknown_variable_passes_through(monkeypatch):
    monkeypatch.setenv("VKQ_SOMETHING_ELSE", "x")
    assert _cfg.get("VKQ_SOMETHING_ELSE") == "x"


def test_as_dict_and_describe(monkeypatch):
    monkeypatch.setenv("VKQ_GLES_ONLY_ON_MITIGATED_DEVICES", "1")
    assert _cfg.as_dict()["VKQ_GLES_ONLY_ON_MITIGATED_DEVICES"] is True
    described = _cfg.describe()
    assert [d["category"] for d in described] == sorted(d["category"] for d in described)


def test_set_records_override(monkeypatch):
    # Registers the variable so monkeypatch restores it after _cfg.set
    monkeypatch.setenv("VKQ_DATA_FILENAME", "vkqualitydata.vkq")
    _cfg.set("VKQ_DATA_FILENAME", "x.vkq")
    assert _cfg.get("VKQ_DATA_FILENAME") == "x.vkq"
    assert _cfg.overrides()["VKQ_DATA_FILENAME"] == "x.vkq"


def test_log_level_choices(monkeypatch):
    monkeypatch.setenv("VKQ_LOG_LEVEL", " debug ")
    assert _cfg.get("VKQ_LOG_LEVEL") == "DEBUG"
    monkeypatch.setenv("VKQ_LOG_LEVEL", "chatty")
    assert _cfg.get("VKQ_LOG_LEVEL") == "INFO"
