import pytest
from typer.testing import CliRunner

from kollaplan.command_line_interface import app
from kollaplan.integrations.plan_file import load_plan

runner = CliRunner()


@pytest.fixture(name="plan_path")
def plan_path_fixture(tmp_path):
    path = tmp_path / "kolla-plan.yml"
    result = runner.invoke(app, ["init", "--plan", str(path)])
    assert result.exit_code == 0, result.output
    return path


def test_init_refuses_to_overwrite(plan_path):
    result = runner.invoke(app, ["init", "--plan", str(plan_path)])

    assert result.exit_code == 1
    assert runner.invoke(app, ["init", "--plan", str(plan_path), "--force"]).exit_code == 0


def test_validate_reference_plan(plan_path):
    result = runner.invoke(app, ["validate", "--plan", str(plan_path), "--json"])

    assert result.exit_code == 0, result.output
    assert '"isValid": true' in result.output


def test_validate_exits_2_when_invalid(plan_path):
    assert runner.invoke(app, ["remove-node", "network01", "--plan", str(plan_path)]).exit_code == 0

    result = runner.invoke(app, ["validate", "--plan", str(plan_path)])

    assert result.exit_code == 2
    assert len(load_plan(plan_path).nodes) == 3


def test_validate_missing_plan(tmp_path):
    result = runner.invoke(app, ["validate", "--plan", str(tmp_path / "absent.yml")])

    assert result.exit_code == 1


def test_add_node_default_and_typed(plan_path):
    assert runner.invoke(app, ["add-node", "--plan", str(plan_path)]).exit_code == 0
    assert runner.invoke(app, ["add-node", "--type", "controller", "--plan", str(plan_path)]).exit_code == 0

    nodes = load_plan(plan_path).nodes

    assert [node.hostname for node in nodes[-2:]] == ["hybrid01", "controller02"]
    assert nodes[-1].management_nic.ip == "172.16.100.12"


def test_set_type_reallocates(plan_path):
    result = runner.invoke(app, ["set-type", "3", "storage", "--plan", str(plan_path)])

    assert result.exit_code == 0, result.output
    node = load_plan(plan_path).nodes[2]
    assert node.hostname == "storage02"
    assert node.storage_disks[0].name == "/dev/sdb"


def test_remove_unknown_node(plan_path):
    assert runner.invoke(app, ["remove-node", "missing01", "--plan", str(plan_path)]).exit_code == 1


def test_spec_and_inventory(plan_path):
    spec = runner.invoke(app, ["spec", "--plan", str(plan_path)])
    inventory = runner.invoke(app, ["inventory", "--globals", "--plan", str(plan_path)])

    assert spec.exit_code == 0
    assert '"totalCpuCores": 20' in spec.output
    assert inventory.exit_code == 0
    assert "[control]" in inventory.output
    assert "kolla_internal_vip_address" in inventory.output
    assert "sudo pvcreate /dev/sdb" in inventory.output
