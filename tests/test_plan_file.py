import pytest

from kollaplan.core.validation.validator import validate
from kollaplan.integrations.plan_file import (
    PlanDocument,
    PlanFileError,
    find_plan_file,
    load_plan,
    save_plan,
    write_sample_plan,
)
from kollaplan.models import NetworkConfig


def test_sample_plan_round_trip_validates(tmp_path):
    path = write_sample_plan(tmp_path / "kolla-plan.yml")

    text = path.read_text(encoding="utf-8")
    document = load_plan(path)

    assert "managementNic:" in text
    assert "tunnelNic: null" not in text
    assert len(document.nodes) == 4
    assert validate(document.nodes, document.network_config).is_valid is True


def test_json_plan_keeps_null_vip(tmp_path, reference_nodes):
    document = PlanDocument(nodes=reference_nodes, network_config=NetworkConfig(vip_external_ip=None))

    loaded = load_plan(save_plan(document, tmp_path / "plan.json"))

    assert loaded.network_config.vip_external_ip is None
    assert loaded.nodes[3].storage_disks[0].volume_group == "cinder-volumes"


def test_missing_plan_file(tmp_path):
    with pytest.raises(PlanFileError):
        load_plan(tmp_path / "absent.yml")


@pytest.mark.parametrize(
    "content",
    [
        "nodes: [unclosed",
        "- just\n- a list\n",
        "nodes:\n  - hostname: controller01\n",
    ],
)
def test_invalid_plan_content(tmp_path, content):
    path = tmp_path / "plan.yml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(PlanFileError):
        load_plan(path)


def test_empty_plan_uses_defaults(tmp_path):
    path = tmp_path / "plan.yml"
    path.write_text("", encoding="utf-8")

    document = load_plan(path)

    assert document.nodes == []
    assert document.network_config.management_cidr == "172.16.100.0/24"


def test_find_plan_file(tmp_path):
    assert find_plan_file(tmp_path) is None

    (tmp_path / "kolla-plan.json").write_text("{}", encoding="utf-8")

    assert find_plan_file(tmp_path) == tmp_path / "kolla-plan.json"
