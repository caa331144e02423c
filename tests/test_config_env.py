from kollaplan.common.config import load_config


def test_defaults_applied_for_empty_file(tmp_path):
    cfg_file = tmp_path / "config.yml"
    cfg_file.write_text("{}", encoding="utf-8")

    cfg = load_config(cfg_file)

    assert cfg["logging"]["level"] == "INFO"
    assert cfg["plan"]["file"] == "kolla-plan.yml"
    assert cfg.web["port"] == 8080


def test_environment_overrides(tmp_path, monkeypatch):
    cfg_file = tmp_path / "config.yml"
    cfg_file.write_text("web:\n  host: 0.0.0.0\n  port: 9000\n", encoding="utf-8")

    monkeypatch.setenv("KOLLAPLAN_LOG_LEVEL", "debug")
    monkeypatch.setenv("KOLLAPLAN_PLAN_FILE", "site.yml")
    monkeypatch.setenv("KOLLAPLAN_WEB_PORT", "9100")

    cfg = load_config(cfg_file)

    assert cfg["logging"]["level"] == "DEBUG"
    assert cfg["plan"]["file"] == "site.yml"
    assert cfg["web"] == {"host": "0.0.0.0", "port": 9100}


def test_invalid_port_override_is_ignored(tmp_path, monkeypatch):
    cfg_file = tmp_path / "config.yml"
    cfg_file.write_text("web:\n  port: 9000\n", encoding="utf-8")

    monkeypatch.setenv("KOLLAPLAN_WEB_PORT", "not-a-port")

    assert load_config(cfg_file)["web"]["port"] == 9000


def test_missing_config_file_uses_defaults(tmp_path):
    cfg = load_config(tmp_path / "absent.yml")

    assert cfg["web"]["host"] == "127.0.0.1"
