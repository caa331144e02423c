import pytest
from fastapi.testclient import TestClient

from kollaplan.integrations.plan_file import PlanDocument
from kollaplan.core.planning.app_state import initial_state


@pytest.fixture(name="client")
def client_fixture():
    from kollaplan.interfaces.web.web_server import create_app

    return TestClient(create_app())


@pytest.fixture(name="plan_payload")
def plan_payload_fixture():
    state = initial_state()
    return PlanDocument(nodes=list(state.nodes), network_config=state.network_config).to_payload()


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_defaults(client):
    data = client.get("/api/defaults").json()

    assert data["networkConfig"]["managementCidr"] == "172.16.100.0/24"
    assert data["nodeTypeRanges"]["hybrid"] == 50
    assert data["tunnelNic"] == "ens4"


def test_validate_reference_plan(client, plan_payload):
    data = client.post("/api/validate", json=plan_payload).json()

    assert data["isValid"] is True
    assert "Network nodes with external interface: network01." in data["details"]
    assert {item["severity"] for item in data["diagnostics"]} == {"pass"}


def test_validate_reports_failures(client, plan_payload):
    plan_payload["nodes"] = plan_payload["nodes"][:1]

    data = client.post("/api/validate", json=plan_payload).json()

    assert data["isValid"] is False
    assert "Missing required roles in deployment: network, compute, storage" in data["details"]


def test_allocate_hostname_and_ip(client, plan_payload):
    hostname = client.post(
        "/api/allocate/hostname", json={"nodeType": "controller", "nodes": plan_payload["nodes"]}
    ).json()
    ip = client.post(
        "/api/allocate/ip",
        json={
            "nodeType": "compute",
            "networkKind": "tunnel",
            "networkConfig": plan_payload["networkConfig"],
            "nodes": plan_payload["nodes"],
        },
    ).json()

    assert hostname == {"value": "controller02"}
    assert ip == {"value": "192.168.100.32"}


def test_allocate_ip_rejects_unknown_network(client):
    response = client.post("/api/allocate/ip", json={"nodeType": "compute", "networkKind": "storage"})

    assert response.status_code == 422


def test_default_node(client, plan_payload):
    data = client.post("/api/nodes/default", json=plan_payload).json()

    assert data["id"] == "5"
    assert data["hostname"] == "hybrid01"
    assert data["hybridRoles"]["compute"] is True
    assert data["managementNic"]["ip"] == "172.16.100.51"


def test_constraints(client, plan_payload):
    data = client.post("/api/constraints", json={"node": plan_payload["nodes"][0]}).json()

    assert data["tunnelAllowed"] is False
    assert data["vipExternalAllowed"] is True
    assert data["roles"] == ["controller"]


def test_specification_and_inventory(client, plan_payload):
    spec = client.post("/api/specification", json=plan_payload).json()
    inventory = client.post("/api/inventory", json=plan_payload).json()

    assert spec["totalCpuCores"] == 20
    assert inventory["inventory"][0] == "[control]"
    assert 'kolla_internal_vip_address: "172.16.100.254"' in inventory["globals"]
