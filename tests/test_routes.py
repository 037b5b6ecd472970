"""HTTP mapping of action results and the read-only inspection endpoints."""

from __future__ import annotations

import pytest

from dao import action as action_dao
from db.models.action import Action


def _post(client, action):
    return client.post("/perform_action", json={"action": action})


def test_perform_action_success(client, reference_data, action_payload):
    resp = _post(
        client,
        action_payload(
            "借用", asset_id="printer-001", to_location_id="showroom", related_person="Li"
        ),
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "action completed"
    assert Action.query.filter_by(id=body["action_id"]).count() == 1


def test_missing_by_user_is_client_error(client, reference_data):
    resp = _post(client, {"action_type": "借用"})

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "missing required fields: action_type, by_user"}
    assert Action.query.count() == 0


def test_malformed_body_is_client_error(client, reference_data):
    assert client.post("/perform_action", data="not json").status_code == 400
    assert client.post("/perform_action", json={"nothing": 1}).status_code == 400
    assert client.post("/perform_action", json={"action": "借用"}).status_code == 400


def test_insufficient_stock_message_is_verbatim(client, opening_balance, action_payload):
    opening_balance("paper-6inch", "warehouse", 5)

    resp = _post(
        client,
        action_payload(
            "耗材领用", consumable_id="paper-6inch", qty=10, from_location_id="warehouse"
        ),
    )

    assert resp.status_code == 400
    assert resp.get_json() == {
        "error": "insufficient stock: current balance 5, requested 10"
    }


def test_unexpected_error_is_generic_500(client, reference_data, action_payload, monkeypatch):
    def explode(req):
        raise RuntimeError("secret internals")

    monkeypatch.setattr(action_dao, "_handle_asset_movement", explode)

    resp = _post(client, action_payload("调拨", asset_id="printer-001"))

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "internal server error"}


def test_action_detail_and_list(client, reference_data, action_payload):
    action_id = _post(client, action_payload("报修", asset_id="printer-001")).get_json()[
        "action_id"
    ]

    detail = client.get(f"/actions/{action_id}")
    assert detail.status_code == 200
    assert detail.get_json()["action_type"] == "报修"
    assert detail.get_json()["status"] == "completed"

    assert [a["id"] for a in client.get("/actions").get_json()] == [action_id]
    assert client.get("/actions/unknown").status_code == 404


def test_failures_endpoint(client, reference_data, action_payload):
    _post(client, action_payload("报修", asset_id="printer-404"))

    rows = client.get("/actions/failures").get_json()
    assert len(rows) == 1
    assert rows[0]["error_message"] == "asset does not exist: printer-404"


def test_stock_endpoints(client, opening_balance):
    opening_balance("paper-6inch", "warehouse", 5)
    opening_balance("ribbon-ds40", "warehouse", 40)

    levels = client.get("/stock/levels").get_json()
    assert {(r["item_id"], r["current_stock"]) for r in levels} == {
        ("paper-6inch", 5.0),
        ("ribbon-ds40", 40.0),
    }

    alerts = client.get("/stock/alerts").get_json()
    assert [r["item_id"] for r in alerts] == ["paper-6inch"]

    avail = client.get(
        "/stock/availability?item_id=paper-6inch&location_id=warehouse&qty=8"
    ).get_json()
    assert avail == {"available": False, "current_stock": 5.0, "shortage": 3.0}

    ledger = client.get("/stock/ledger?item_id=paper-6inch&location_id=warehouse")
    assert [r["balance"] for r in ledger.get_json()] == [5.0]

    assert client.get("/stock/availability?item_id=paper-6inch").status_code == 400


@pytest.mark.parametrize("qty", ["NaN", "Infinity", "-3", "0", "abc"])
def test_availability_rejects_bad_qty(client, opening_balance, qty):
    opening_balance("paper-6inch", "warehouse", 5)

    resp = client.get(
        "/stock/availability",
        query_string={"item_id": "paper-6inch", "location_id": "warehouse", "qty": qty},
    )

    assert resp.status_code == 400
    assert "qty must be" in resp.get_json()["error"]


def test_compatibility_endpoints(client, reference_data):
    check = client.get(
        "/compatibility/check",
        query_string={
            "printer_model_id": "dnp-ds40",
            "consumable_id": "ribbon-ds40",
            "code_type": "通码",
        },
    ).get_json()
    assert check["is_compatible"] is False
    assert check["reason"] == "DNP printers only accept specialized codes"

    binding = client.get(
        "/compatibility/binding?code_id=dnp-code-001&asset_id=printer-001"
    ).get_json()
    assert binding == {"can_bind": True, "reason": None, "code_type": "专码"}

    consumables = client.get("/printer-models/citizen-cx02/consumables").get_json()
    assert [c["id"] for c in consumables] == ["paper-6inch"]

    codes = client.get(
        "/codes/available", query_string={"code_type": "通码"}
    ).get_json()
    assert [c["id"] for c in codes] == ["generic-code-001"]

    assert client.get("/codes/available?code_type=bogus").status_code == 400


def test_health(client, app):
    assert client.get("/health").get_json() == {"status": "ok"}
