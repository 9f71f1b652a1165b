"""End-to-end tests for the HTTP API."""

import json
import time

import pytest
from fastapi.testclient import TestClient

from nodeflow.main import app
from nodeflow.services.trigger_service import compute_stripe_signature

USER = {"X-User-Id": "user_api"}
OTHER_USER = {"X-User-Id": "someone_else"}


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as client:
        yield client


def create_workflow(client, name="API flow"):
    response = client.post("/workflows", json={"name": name}, headers=USER)
    assert response.status_code == 201
    return response.json()


def save_graph(client, workflow_id, nodes, connections=()):
    return client.put(
        f"/workflows/{workflow_id}",
        json={"nodes": list(nodes), "connections": list(connections)},
        headers=USER,
    )


def wait_for_run(client, run_id, timeout=5.0):
    """Poll run history until the run has finished."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        response = client.get(f"/runs/{run_id}", headers=USER)
        if response.status_code == 200 and response.json()["state"] in ("completed", "failed"):
            return response.json()
        time.sleep(0.05)
    pytest.fail(f"Run {run_id} did not finish in {timeout}s")


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"
    assert client.get("/health").json()["status"] == "healthy"


def test_requires_caller_identity(client):
    assert client.get("/workflows").status_code == 401


def test_workflow_crud(client):
    created = create_workflow(client)
    workflow_id = created["id"]
    assert [n["type"] for n in created["nodes"]] == ["INITIAL"]

    assert client.get(f"/workflows/{workflow_id}", headers=USER).json()["name"] == "API flow"
    assert client.get(f"/workflows/{workflow_id}", headers=OTHER_USER).status_code == 404

    renamed = client.patch(f"/workflows/{workflow_id}/name", json={"name": "Renamed"}, headers=USER)
    assert renamed.json()["name"] == "Renamed"

    listing = client.get("/workflows", params={"search": "renamed"}, headers=USER).json()
    assert workflow_id in [w["id"] for w in listing["items"]]

    assert client.delete(f"/workflows/{workflow_id}", headers=USER).json()["success"] is True
    assert client.get(f"/workflows/{workflow_id}", headers=USER).status_code == 404


def test_saving_a_cycle_is_rejected(client):
    workflow_id = create_workflow(client)["id"]
    response = save_graph(
        client,
        workflow_id,
        [{"id": "a", "type": "MANUAL_TRIGGER"}, {"id": "b", "type": "MANUAL_TRIGGER"}],
        [{"source": "a", "target": "b"}, {"source": "b", "target": "a"}],
    )
    assert response.status_code == 400
    assert "cycle" in response.json()["detail"]


def test_manual_trigger_runs_in_background(client):
    workflow_id = create_workflow(client)["id"]
    save_graph(client, workflow_id, [{"id": "start", "type": "MANUAL_TRIGGER"}])

    response = client.post(f"/workflows/{workflow_id}/trigger", json={"data": {"seed": 1}}, headers=USER)
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Workflow execution triggered successfully"
    assert body["workflowId"] == workflow_id

    run = wait_for_run(client, body["eventId"])
    assert run["state"] == "completed"
    assert run["executedNodeIds"] == ["start"]
    assert run["context"]["seed"] == 1


def test_webhook_trigger(client):
    workflow_id = create_workflow(client)["id"]
    save_graph(
        client,
        workflow_id,
        [{"id": "hook", "type": "WEBHOOK", "data": {"variables": "incoming", "secret": "s3cret"}}],
    )
    url = f"/api/webhooks/webhook/{workflow_id}/hook"

    assert client.post(url, json={"order": 7}).status_code == 401
    assert client.post(f"/api/webhooks/webhook/{workflow_id}/nope", json={}).status_code == 404

    response = client.post(url, json={"order": 7}, headers={"X-Webhook-Secret": "s3cret"})
    assert response.status_code == 200

    run = wait_for_run(client, response.json()["eventId"])
    assert run["state"] == "completed"
    assert run["context"]["incoming"]["payload"] == {"order": 7}
    headers = run["context"]["incoming"]["headers"]
    assert "x-webhook-secret" not in {name.lower() for name in headers}
    assert "s3cret" not in json.dumps(run["context"])


def test_google_form_trigger(client):
    assert client.post("/api/webhooks/google-form", json={}).status_code == 400
    assert client.post("/api/webhooks/google-form?workflowId=wf_missing", json={}).status_code == 404

    workflow_id = create_workflow(client)["id"]
    save_graph(client, workflow_id, [{"id": "form", "type": "GOOGLE_FORM_TRIGGER"}])
    response = client.post(
        f"/api/webhooks/google-form?workflowId={workflow_id}",
        json={"formId": "f1", "responses": {"Email": "a@example.com"}},
    )

    run = wait_for_run(client, response.json()["eventId"])
    assert run["state"] == "completed"
    assert run["context"]["googleForm"]["payload"]["responses"] == {"Email": "a@example.com"}


def test_stripe_trigger_verifies_signature(client):
    workflow_id = create_workflow(client)["id"]
    save_graph(client, workflow_id, [{"id": "pay", "type": "STRIPE_TRIGGER", "data": {"secret": "whsec_test"}}])
    url = f"/api/webhooks/stripe?workflowId={workflow_id}"
    payload = json.dumps({"id": "evt_1", "type": "charge.succeeded", "data": {"object": {"amount": 500}}})

    assert client.post(url, content=payload).status_code == 401

    timestamp = str(int(time.time()))
    signature = compute_stripe_signature(payload, timestamp, "whsec_test")
    response = client.post(url, content=payload, headers={"Stripe-Signature": f"t={timestamp},v1={signature}"})
    assert response.status_code == 200

    run = wait_for_run(client, response.json()["eventId"])
    assert run["context"]["stripe"]["event"] == "charge.succeeded"


def test_failed_run_reports_node(client):
    workflow_id = create_workflow(client)["id"]
    save_graph(client, workflow_id, [{"id": "call", "type": "HTTP_REQUEST", "data": {"variables": "x"}}])

    event_id = client.post(f"/workflows/{workflow_id}/trigger", headers=USER).json()["eventId"]

    run = wait_for_run(client, event_id)
    assert run["state"] == "failed"
    assert run["failedNodeId"] == "call"
    assert run["error"] == "HTTP Endpoint is not configured"
    assert client.get(f"/runs/{event_id}", headers=OTHER_USER).status_code == 404


def test_subscription_tokens(client):
    body = client.get("/workflows/subscription-token", headers=USER).json()

    assert body["success"] is True
    assert set(body["tokens"]) == set(body["channelNames"])
    assert body["channelNames"]["httpRequest"] == "http-request-execution"


def test_realtime_rejects_bad_token(client):
    assert client.get("/realtime/httpRequest", params={"token": "garbage"}).status_code == 401

    tokens = client.get("/workflows/subscription-token", headers=USER).json()["tokens"]
    assert client.get("/realtime/openai", params={"token": tokens["httpRequest"]}).status_code == 401


def test_node_catalogue(client):
    types = {n["type"] for n in client.get("/nodes").json()}
    assert types == {
        "INITIAL",
        "MANUAL_TRIGGER",
        "WEBHOOK",
        "GOOGLE_FORM_TRIGGER",
        "STRIPE_TRIGGER",
        "HTTP_REQUEST",
        "OPENAI",
        "ANTHROPIC",
        "GEMINI",
    }


def test_stripe_trigger_rejects_undecodable_body(client):
    assert client.post("/api/webhooks/stripe?workflowId=wf_missing", content=b"\xff\xfe\xfa").status_code == 404

    workflow_id = create_workflow(client)["id"]
    save_graph(client, workflow_id, [{"id": "pay", "type": "STRIPE_TRIGGER"}])
    response = client.post(f"/api/webhooks/stripe?workflowId={workflow_id}", content=b"\xff\xfe\xfa")

    assert response.status_code == 400


def test_webhook_with_undecodable_body_gets_empty_payload(client):
    workflow_id = create_workflow(client)["id"]
    save_graph(client, workflow_id, [{"id": "hook", "type": "WEBHOOK"}])

    response = client.post(f"/api/webhooks/webhook/{workflow_id}/hook", content=b"\xff\xfe\xfa")
    assert response.status_code == 200

    run = wait_for_run(client, response.json()["eventId"])
    assert run["context"]["webhook"]["payload"] == {}
