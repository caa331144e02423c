import pytest

from kollaplan.common import logging_config
from kollaplan.models import NetworkConfig
from kollaplan.core.planning.app_state import initial_state


@pytest.fixture(autouse=True)
def isolated_log_file(tmp_path, monkeypatch):
    monkeypatch.setattr(logging_config, "DEFAULT_LOG_FILE", tmp_path / "logs" / "kollaplan.log", raising=False)
    for key in ("KOLLAPLAN_LOG_LEVEL", "KOLLAPLAN_PLAN_FILE", "KOLLAPLAN_WEB_HOST", "KOLLAPLAN_WEB_PORT"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(name="reference_nodes")
def reference_nodes_fixture():
    return list(initial_state().nodes)


@pytest.fixture(name="network_config")
def network_config_fixture():
    return NetworkConfig()
