# tests/api/test_fulfillment_progress_api.py
from __future__ import annotations

import httpx
import pytest

from tests._problem import assert_problem

pytestmark = pytest.mark.asyncio

ADMIN = {"X-Viewer-Role": "admin"}


async def _create_order(client: httpx.AsyncClient, *lifecycles: str) -> dict:
    resp = await client.post(
        "/orders",
        json={
            "name": "UT-API",
            "seller_id": 7,
            "lines": [{"product_name": f"P{i}", "lifecycle_status": lc} for i, lc in enumerate(lifecycles)],
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_create_order_and_read_progress(client: httpx.AsyncClient):
    order = await _create_order(client, "mfg_qc", "new")
    assert [ln["lifecycle_status"] for ln in order["lines"]] == ["mfg_qc", "new"]

    resp = await client.get(f"/orders/{order['id']}/progress")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["view"] == "item_wise"
    assert body["lifecycle_status"] == "new"
    assert body["progress"] == {
        "manufacturing": "in-progress",
        "mfgQc": "pending",
        "packaging": "pending",
        "pkgQc": "pending",
        "shipped": "pending",
    }
    assert len(body["lines"]) == 2

    combined = await client.get(f"/orders/{order['id']}/progress", params={"view": "combined"})
    assert combined.json()["view"] == "combined"


async def test_order_line_progress_and_actions_per_role(client: httpx.AsyncClient):
    order = await _create_order(client, "manufacture")
    line_id = order["lines"][0]["id"]

    seller = (await client.get(f"/order-lines/{line_id}/progress")).json()
    assert seller["label"] == "Pending MFG QC"
    assert [a["action"] for a in seller["actions"]] == ["submit_mfg_qc"]

    admin = (await client.get(f"/order-lines/{line_id}/progress", headers=ADMIN)).json()
    assert admin["actions"] == []


async def test_advance_returns_line_progress(client: httpx.AsyncClient):
    order = await _create_order(client, "new")
    line_id = order["lines"][0]["id"]

    resp = await client.post(f"/order-lines/{line_id}/advance", json={"target": "manufacture"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["lifecycle_status"] == "manufacture"


async def test_advance_errors_are_problems(client: httpx.AsyncClient):
    order = await _create_order(client, "mfg_qc")
    line_id = order["lines"][0]["id"]

    resp = await client.post(f"/order-lines/{line_id}/advance", json={"target": "packaging"})
    body = assert_problem(resp, 409, "lifecycle_transition_invalid")
    assert body["context"]["order_line_id"] == line_id

    resp = await client.post(f"/order-lines/{line_id}/advance", json={"target": "warp"})
    assert_problem(resp, 422, "request_validation_error")

    resp = await client.post(f"/order-lines/{line_id}/advance", json={"target": "packaging"}, headers=ADMIN)
    assert_problem(resp, 403, "role_forbidden")


async def test_not_found_and_bad_role(client: httpx.AsyncClient):
    assert_problem(await client.get("/orders/999/progress"), 404, "order_not_found")
    assert_problem(await client.get("/order-lines/999/progress"), 404, "order_line_not_found")

    order = await _create_order(client, "new")
    resp = await client.get(f"/orders/{order['id']}/progress", headers={"X-Viewer-Role": "buyer"})
    assert_problem(resp, 422, "request_validation_error")


async def test_create_order_validation(client: httpx.AsyncClient):
    resp = await client.post("/orders", json={"name": "X", "lines": []})
    body = assert_problem(resp, 422, "request_validation_error")
    assert body["details"][0]["type"] == "validation"


async def test_health_and_metrics(client: httpx.AsyncClient):
    assert (await client.get("/healthz")).json() == {"status": "ok"}
    await client.get("/orders/1/progress")
    resp = await client.get("/metrics")
    assert resp.status_code == 200
    assert "fulfillops_http_requests_total" in resp.text
