from inventory.core.authorization import GateState
from inventory.core.session import Identity
from tests.conftest import ADMIN_ID, NO_ROLE_ID, USER_ID, auth_headers


def seed_inventory(fake_supabase) -> None:
    fake_supabase.tables["materials"] = [
        {"id": "m1", "material_number": "MAT-1", "name": "Bolt", "unit": "Piece", "category": "Metal",
         "stock": 5, "minimum_stock": 10, "price": 2, "status": "active", "created_at": "2024-05-01T00:00:00+00:00"},
        {"id": "m2", "material_number": "MAT-2", "name": "Paint", "unit": "Liter", "category": None,
         "stock": "40", "minimum_stock": 5, "price": None, "status": "active", "created_at": "2024-05-02T00:00:00+00:00"},
    ]
    fake_supabase.tables["machines"] = [
        {"id": "k1", "asset_number": "AS-1", "name": "Lathe", "status": "operational", "purchase_price": 1000},
        {"id": "k2", "asset_number": "AS-2", "name": "Press", "status": "decommission_review", "purchase_price": None},
    ]
    fake_supabase.tables["material_transactions"] = [
        {"id": "t1", "transaction_number": "TR-1", "material_id": "m1", "transaction_type": "receipt",
         "movement_type": "101", "quantity": 20, "transaction_date": "2000-01-01T00:00:00+00:00"},
    ]


def test_health(client) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["Cache-Control"] == "no-store"


def test_ready_checks_record_store(client, fake_supabase) -> None:
    assert client.get("/ready").json() == {"status": "ready"}

    fake_supabase.fail_tables.add("permissions")
    resp = client.get("/ready")
    assert resp.status_code == 503


def test_missing_token_is_rejected(client) -> None:
    resp = client.get("/api/v1/materials")
    assert resp.status_code in (401, 403)


def test_user_can_view_but_not_create_materials(client, fake_supabase) -> None:
    seed_inventory(fake_supabase)

    resp = client.get("/api/v1/materials", headers=auth_headers(USER_ID))
    assert resp.status_code == 200
    assert {m["id"] for m in resp.json()} == {"m1", "m2"}

    resp = client.post(
        "/api/v1/materials",
        json={"material_number": "MAT-3", "name": "Nut", "unit": "Piece"},
        headers=auth_headers(USER_ID),
    )
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Insufficient permissions. Required: materials.create"


def test_admin_manages_materials(client, fake_supabase) -> None:
    headers = auth_headers(ADMIN_ID)

    resp = client.post(
        "/api/v1/materials",
        json={"material_number": "MAT-3", "name": "Nut", "unit": "Piece", "stock": 3, "price": 1.5},
        headers=headers,
    )
    assert resp.status_code == 201
    material_id = resp.json()["id"]

    duplicate = client.post(
        "/api/v1/materials",
        json={"material_number": "MAT-3", "name": "Other", "unit": "Piece"},
        headers=headers,
    )
    assert duplicate.status_code == 400

    resp = client.put(f"/api/v1/materials/{material_id}", json={"stock": 10}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["stock"] == 10
    assert resp.json()["name"] == "Nut"

    assert client.delete(f"/api/v1/materials/{material_id}", headers=headers).status_code == 204
    assert client.get(f"/api/v1/materials/{material_id}", headers=headers).status_code == 404


def test_user_without_role_is_denied(client, fake_supabase) -> None:
    seed_inventory(fake_supabase)
    resp = client.get("/api/v1/materials", headers=auth_headers(NO_ROLE_ID))
    assert resp.status_code == 403


def test_permission_fetch_failure_fails_closed(client, fake_supabase, gate) -> None:
    def broken(name, params):
        raise RuntimeError("database unavailable")

    fake_supabase.rpc = broken

    resp = client.get("/api/v1/materials", headers=auth_headers(ADMIN_ID))

    assert resp.status_code == 403
    assert gate.state(Identity(id=ADMIN_ID)) is GateState.FAILED


def test_me_lists_role_and_permissions(client) -> None:
    resp = client.get("/api/v1/auth/me", headers=auth_headers(USER_ID))
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == USER_ID
    assert body["role"] == "user"
    assert body["is_admin"] is False
    assert "materials.view" in body["permissions"]
    assert "materials.delete" not in body["permissions"]
    assert body["permissions"] == sorted(body["permissions"])


def test_me_for_admin(client) -> None:
    body = client.get("/api/v1/auth/me", headers=auth_headers(ADMIN_ID)).json()
    assert body["role"] == "admin"
    assert body["is_admin"] is True
    assert "users.manage_roles" in body["permissions"]


def test_permission_check_reports_decision(client, gate) -> None:
    gate.effective_permissions(Identity(id=USER_ID))
    headers = auth_headers(USER_ID)

    resp = client.get(
        "/api/v1/auth/permissions/check",
        params=[("names", "materials.view"), ("names", "materials.delete"), ("mode", "any")],
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["granted"] is True
    assert resp.json()["pending"] is False

    resp = client.get(
        "/api/v1/auth/permissions/check",
        params=[("names", "materials.view"), ("names", "materials.delete"), ("mode", "all")],
        headers=headers,
    )
    assert resp.json()["granted"] is False

    resp = client.get(
        "/api/v1/auth/permissions/check", params={"names": "users.delete"}, headers=headers
    )
    assert resp.json() == {
        "permissions": ["users.delete"],
        "mode": "one",
        "granted": False,
        "pending": False,
    }


def test_permission_check_rejects_empty_name(client) -> None:
    resp = client.get(
        "/api/v1/auth/permissions/check", params={"names": ""}, headers=auth_headers(USER_ID)
    )
    assert resp.status_code == 400


def test_permission_check_one_mode_requires_single_name(client) -> None:
    resp = client.get(
        "/api/v1/auth/permissions/check",
        params=[("names", "materials.delete"), ("names", "materials.view"), ("mode", "one")],
        headers=auth_headers(USER_ID),
    )
    assert resp.status_code == 400
    assert "exactly one" in resp.json()["detail"]


def test_role_change_invalidates_cached_permissions(client, gate) -> None:
    user = Identity(id=USER_ID)
    assert client.get("/api/v1/users", headers=auth_headers(USER_ID)).status_code == 403
    assert gate.state(user) is GateState.LOADED

    resp = client.put(f"/api/v1/users/{USER_ID}/role", json={"role": "admin"}, headers=auth_headers(ADMIN_ID))
    assert resp.status_code == 200
    assert resp.json()["role"] == "admin"
    assert gate.state(user) is GateState.UNLOADED

    resp = client.get("/api/v1/users", headers=auth_headers(USER_ID))
    assert resp.status_code == 200
    roles = {u["id"]: u["role"] for u in resp.json()}
    assert roles[USER_ID] == "admin"
    assert roles[NO_ROLE_ID] is None


def test_admin_cannot_delete_self(client) -> None:
    resp = client.delete(f"/api/v1/users/{ADMIN_ID}", headers=auth_headers(ADMIN_ID))
    assert resp.status_code == 400


def test_delete_user(client, fake_supabase) -> None:
    resp = client.delete(f"/api/v1/users/{NO_ROLE_ID}", headers=auth_headers(ADMIN_ID))
    assert resp.status_code == 204
    assert all(p["id"] != NO_ROLE_ID for p in fake_supabase.tables["profiles"])
    assert client.delete(f"/api/v1/users/{NO_ROLE_ID}", headers=auth_headers(ADMIN_ID)).status_code == 404


def test_revoking_role_permission_invalidates_everyone(client, fake_supabase, gate) -> None:
    headers = auth_headers(ADMIN_ID)
    assert client.get("/api/v1/materials", headers=auth_headers(USER_ID)).status_code == 200

    permission_id = next(p["id"] for p in fake_supabase.tables["permissions"] if p["name"] == "materials.view")
    resp = client.delete(f"/api/v1/roles/user/permissions/{permission_id}", headers=headers)
    assert resp.status_code == 204
    assert gate.state(Identity(id=USER_ID)) is GateState.UNLOADED

    assert client.get("/api/v1/materials", headers=auth_headers(USER_ID)).status_code == 403


def test_role_permissions_listing(client) -> None:
    resp = client.get("/api/v1/roles/user/permissions", headers=auth_headers(ADMIN_ID))
    assert resp.status_code == 200
    names = {p["name"] for p in resp.json()["permissions"]}
    assert "materials.view" in names
    assert "users.delete" not in names

    resp = client.get("/api/v1/roles/permissions/by-module", headers=auth_headers(ADMIN_ID))
    assert set(resp.json()["modules"]["materials"][0].keys()) >= {"id", "name", "module", "action"}

    assert client.get("/api/v1/roles/permissions", headers=auth_headers(USER_ID)).status_code == 403


def test_material_transaction_defaults_unit_from_material(client, fake_supabase) -> None:
    seed_inventory(fake_supabase)

    resp = client.post(
        "/api/v1/material-transactions",
        json={
            "transaction_number": "TR-2",
            "material_id": "m2",
            "transaction_type": "issue",
            "movement_type": "201",
            "quantity": 3,
        },
        headers=auth_headers(USER_ID),
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["unit"] == "Liter"
    assert body["status"] == "completed"
    assert body["created_by"] == USER_ID


def test_material_transaction_for_unknown_material(client) -> None:
    resp = client.post(
        "/api/v1/material-transactions",
        json={
            "transaction_number": "TR-3",
            "material_id": "missing",
            "transaction_type": "receipt",
            "movement_type": "101",
            "quantity": 1,
        },
        headers=auth_headers(USER_ID),
    )
    assert resp.status_code == 404


def test_machine_transaction_requires_type_fields(client, fake_supabase) -> None:
    seed_inventory(fake_supabase)
    headers = auth_headers(USER_ID)
    payload = {
        "transaction_number": "MT-1",
        "machine_id": "k1",
        "transaction_type": "service",
        "start_date": "2024-06-01T08:00:00+00:00",
    }

    assert client.post("/api/v1/machine-transactions", json=payload, headers=headers).status_code == 422

    payload.update(service_type="preventive", service_provider="Acme Service")
    resp = client.post("/api/v1/machine-transactions", json=payload, headers=headers)
    assert resp.status_code == 201
    assert resp.json()["status"] == "active"


def test_dashboard_report(client, fake_supabase) -> None:
    seed_inventory(fake_supabase)

    resp = client.get("/api/v1/reports/dashboard", headers=auth_headers(USER_ID))

    assert resp.status_code == 200
    body = resp.json()
    assert body["total_materials"] == 2
    assert body["low_stock_count"] == 1
    assert body["low_stock_materials"][0]["id"] == "m1"


def test_overview_tolerates_malformed_records(client, fake_supabase) -> None:
    seed_inventory(fake_supabase)

    body = client.get("/api/v1/reports/overview", headers=auth_headers(USER_ID)).json()

    assert body["total_material_value"] == 10
    assert body["materials_by_category"]["Uncategorized"] == {"count": 1, "total_value": 0.0}
    assert body["machines_by_status"] == {"operational": 1, "decommission_review": 1}


def test_stock_change_report_windows(client, fake_supabase) -> None:
    seed_inventory(fake_supabase)
    headers = auth_headers(USER_ID)

    windowed = client.get("/api/v1/reports/materials/stock-changes", params={"period": "7d"}, headers=headers).json()
    assert windowed["summary"]["total_received"] == 0

    all_time = client.get("/api/v1/reports/materials/stock-changes", params={"period": "all"}, headers=headers).json()
    assert all_time["window_start"] is None
    assert all_time["rows"][0]["material_id"] == "m1"
    assert all_time["summary"]["total_received"] == 20

    assert client.get(
        "/api/v1/reports/materials/stock-changes", params={"period": "1y"}, headers=headers
    ).status_code == 422


def test_stock_change_export_requires_export_permission(client, fake_supabase) -> None:
    seed_inventory(fake_supabase)
    url = "/api/v1/reports/materials/stock-changes/export"

    assert client.get(url, headers=auth_headers(USER_ID)).status_code == 403

    resp = client.get(url, params={"period": "all"}, headers=auth_headers(ADMIN_ID))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert 'filename="material_stock_report_all.csv"' in resp.headers["content-disposition"]
    assert resp.text.splitlines()[0].startswith("Material Number,")


def test_machines_filtered_by_status(client, fake_supabase) -> None:
    seed_inventory(fake_supabase)
    headers = auth_headers(ADMIN_ID)

    resp = client.get("/api/v1/machines", params={"status": "operational"}, headers=headers)
    assert [m["id"] for m in resp.json()] == ["k1"]

    resp = client.post(
        "/api/v1/machines",
        json={"asset_number": "AS-3", "name": "Drill", "purchase_date": "2023-04-01", "purchase_price": 800},
        headers=headers,
    )
    assert resp.status_code == 201
    assert resp.json()["status"] == "operational"

    assert client.post(
        "/api/v1/machines", json={"asset_number": "AS-1", "name": "Copy"}, headers=headers
    ).status_code == 400
    assert client.delete("/api/v1/machines/k2", headers=auth_headers(USER_ID)).status_code == 403
