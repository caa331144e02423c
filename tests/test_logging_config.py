import logging

from kollaplan.common import logging_config


def test_setup_logging_updates_level(tmp_path, monkeypatch):
    log_path = tmp_path / "kollaplan.log"
    monkeypatch.setattr(logging_config, "DEFAULT_LOG_FILE", log_path, raising=False)

    logging_config.setup_logging("INFO")
    logging_config.setup_logging("DEBUG")

    logger = logging.getLogger("kollaplan.tests.logging")
    logger.debug("debug-entry")

    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path.exists()
    assert "debug-entry" in log_path.read_text(encoding="utf-8")


def test_log_debug_attaches_json_detail(caplog):
    logger = logging.getLogger("kollaplan.tests.detail")
    logger.setLevel(logging.DEBUG)

    with caplog.at_level(logging.DEBUG, logger="kollaplan.tests.detail"):
        logging_config.log_debug(logger, "payload", {"host": "控制节点"})

    record = caplog.records[-1]
    assert record.detail == '{"host": "控制节点"}'
    assert record.getMessage() == 'payload {"host": "控制节点"}'


def test_log_debug_payload_reaches_log_file(tmp_path, monkeypatch):
    log_path = tmp_path / "kollaplan.log"
    monkeypatch.setattr(logging_config, "DEFAULT_LOG_FILE", log_path, raising=False)
    logging_config.setup_logging("DEBUG")

    logging_config.log_debug(logging.getLogger("kollaplan.tests.file"), "校验明细", {"failures": ["dup"]})

    for handler in logging.getLogger().handlers:
        handler.flush()

    assert '校验明细 {"failures": ["dup"]}' in log_path.read_text(encoding="utf-8")
