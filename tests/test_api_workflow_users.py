"""
HTTP tests — workflow catalog, users, task queues, dashboard and health.
"""

import pytest


# ═════════════════════════════════════════════════════════════════════════════
# Workflows
# ═════════════════════════════════════════════════════════════════════════════


class TestWorkflowEndpoints:
    def test_list(self, client):
        res = client.get("/api/v1/workflows")
        assert res.status_code == 200
        codes = [w["code"] for w in res.get_json()["items"]]
        assert codes == ["onssa", "standard"]

    def test_steps(self, client):
        res = client.get("/api/v1/workflows/standard/steps")
        body = res.get_json()
        assert body["total"] == 59
        assert body["items"][0]["responsible_role"] == "SM"

    def test_steps_for_phase(self, client):
        res = client.get("/api/v1/workflows/standard/steps?phase=3")
        body = res.get_json()
        assert body["total"] == 17
        assert body["items"][-1]["responsible_role"] == "TP"

    def test_steps_unknown_phase_is_empty(self, client):
        assert client.get("/api/v1/workflows/standard/steps?phase=9").get_json()["total"] == 0

    def test_steps_bad_phase(self, client):
        assert client.get("/api/v1/workflows/standard/steps?phase=x").status_code == 400

    def test_unknown_workflow(self, client):
        assert client.get("/api/v1/workflows/nope/steps").status_code == 404


# ═════════════════════════════════════════════════════════════════════════════
# Users
# ═════════════════════════════════════════════════════════════════════════════


class TestUserEndpoints:
    def test_create_and_get(self, client):
        res = client.post("/api/v1/users", json={
            "id": "sm9", "username": "karim", "role": "SM",
            "email": "Karim@TenderFlow.ma", "first_name": "Karim", "last_name": "Alaoui",
        })
        assert res.status_code == 201
        data = res.get_json()
        assert data["id"] == "sm9"
        assert data["full_name"] == "Karim Alaoui"
        assert data["is_admin"] is False

        res = client.get("/api/v1/users/sm9")
        assert res.status_code == 200
        assert res.get_json()["role_label"] == "Service Marchés"

    def test_admin_flag_defaults_from_role(self, client):
        res = client.post("/api/v1/users", json={"username": "boss", "role": "ADMIN"})
        assert res.get_json()["is_admin"] is True

    @pytest.mark.parametrize("body,status", [
        ({"role": "SM"}, 400),
        ({"username": "x"}, 400),
        ({"username": "x", "role": "JANITOR"}, 422),
        ({"username": "x", "role": "SM", "email": "not-an-email"}, 422),
    ])
    def test_create_errors(self, client, body, status):
        assert client.post("/api/v1/users", json=body).status_code == status

    def test_duplicate_username(self, client, make_user):
        make_user("sm1", "SM")
        res = client.post("/api/v1/users", json={"username": "sm1", "role": "SM"})
        assert res.status_code == 409

    def test_list_filters(self, client, make_user):
        make_user("sm1", "SM")
        make_user("sm2", "SM", is_active=False)
        make_user("ce1", "CE")

        assert client.get("/api/v1/users").get_json()["total"] == 3
        assert client.get("/api/v1/users?role=SM").get_json()["total"] == 2
        active = client.get("/api/v1/users?role=SM&active=true").get_json()
        assert [u["id"] for u in active["items"]] == ["sm1"]

    def test_update_and_deactivate(self, client, make_user):
        make_user("sm1", "SM")
        res = client.put("/api/v1/users/sm1", json={"is_active": False, "division": "DIV-X"})
        assert res.status_code == 200
        assert res.get_json()["is_active"] is False
        assert res.get_json()["division"] == "DIV-X"

    def test_update_bad_role(self, client, make_user):
        make_user("sm1", "SM")
        assert client.put("/api/v1/users/sm1", json={"role": "BOSS"}).status_code == 422

    def test_update_ignores_identity_keys(self, client, make_user):
        make_user("sm1", "SM")
        res = client.put("/api/v1/users/sm1", json={"user_id": "x", "id": "y", "first_name": "Amina"})
        assert res.status_code == 200
        assert res.get_json()["id"] == "sm1"
        assert res.get_json()["first_name"] == "Amina"

    @pytest.mark.parametrize("field", ["is_active", "is_admin"])
    def test_update_rejects_non_boolean_flags(self, client, make_user, field):
        make_user("sm1", "SM")
        res = client.put("/api/v1/users/sm1", json={field: "false", "division": "DIV-X"})
        assert res.status_code == 422
        assert res.get_json()["details"] == {field: "not_boolean"}

        user = client.get("/api/v1/users/sm1").get_json()
        assert user["is_active"] is True
        assert user["division"] is None

    def test_create_rejects_non_boolean_admin_flag(self, client):
        res = client.post("/api/v1/users", json={"username": "x", "role": "SM", "is_admin": "no"})
        assert res.status_code == 422

    def test_deactivate(self, client, make_user, actors):
        make_user("sm2", "SM")
        res = client.delete(f"/api/v1/users/{actors['SM'].id}")
        assert res.status_code == 200
        assert res.get_json()["is_active"] is False

        # Deactivated actors drop out of actor resolution
        tender = client.post("/api/v1/tenders", json={"title": "X", "created_by_id": actors["ST"].id}).get_json()
        assert tender["current_actor_id"] == "sm2"

    def test_deactivate_unknown(self, client):
        assert client.delete("/api/v1/users/ghost").status_code == 404

    @pytest.mark.parametrize("method,url", [
        ("post", "/api/v1/users"),
        ("put", "/api/v1/users/sm1"),
    ])
    def test_non_object_body(self, client, make_user, method, url):
        make_user("sm1", "SM")
        res = getattr(client, method)(url, json=["sm1"])
        assert res.status_code == 400
        assert res.get_json()["code"] == "ERR_VALIDATION_INVALID"

    def test_unknown_user(self, client):
        assert client.get("/api/v1/users/ghost").status_code == 404
        assert client.put("/api/v1/users/ghost", json={"role": "SM"}).status_code == 404


# ═════════════════════════════════════════════════════════════════════════════
# Tasks
# ═════════════════════════════════════════════════════════════════════════════


def _new_tender(client, actors):
    res = client.post("/api/v1/tenders", json={"title": "Travaux", "created_by_id": actors["ST"].id})
    return res.get_json()


class TestTaskEndpoints:
    def test_by_actor(self, client, actors):
        tender = _new_tender(client, actors)
        res = client.get(f"/api/v1/tasks?actor_id={actors['SM'].id}")
        assert res.status_code == 200
        assert [t["id"] for t in res.get_json()["items"]] == [tender["id"]]

    def test_by_header(self, client, actors):
        _new_tender(client, actors)
        res = client.get("/api/v1/tasks", headers={"X-User-ID": actors["SM"].id})
        assert res.get_json()["total"] == 1

    def test_by_role(self, client, actors):
        _new_tender(client, actors)
        assert client.get("/api/v1/tasks?role=SM").get_json()["total"] == 1
        assert client.get("/api/v1/tasks?role=CE").get_json()["total"] == 0

    def test_bad_role(self, client):
        assert client.get("/api/v1/tasks?role=JANITOR").status_code == 422

    def test_requires_filter(self, client):
        assert client.get("/api/v1/tasks").status_code == 400

    def test_unassigned_and_overdue(self, client, actors):
        _new_tender(client, actors)
        assert client.get("/api/v1/tasks/unassigned").get_json()["total"] == 0
        assert client.get("/api/v1/tasks/overdue").get_json()["total"] == 0


# ═════════════════════════════════════════════════════════════════════════════
# Dashboard + health
# ═════════════════════════════════════════════════════════════════════════════


class TestDashboardAndHealth:
    def test_stats(self, client, actors):
        _new_tender(client, actors)
        body = client.get("/api/v1/dashboard/stats").get_json()
        assert body["total"] == 1
        assert body["by_phase"] == {"1": 1}

    def test_workload(self, client, actors):
        _new_tender(client, actors)
        body = client.get("/api/v1/dashboard/workload").get_json()
        assert body == {"SM": 1, "unassigned": 0}

    def test_ready(self, client):
        assert client.get("/api/v1/health/ready").status_code == 200

    def test_live(self, client):
        res = client.get("/api/v1/health/live")
        assert res.status_code == 200
        body = res.get_json()
        assert body["checks"]["database"]["status"] == "ok"
        assert body["checks"]["catalogs"]["workflows"] == {"onssa": 45, "standard": 59}

    def test_request_id_header(self, client):
        res = client.get("/api/v1/health/ready", headers={"X-Request-ID": "abc123"})
        assert res.headers.get("X-Request-ID") == "abc123"

    def test_unknown_route(self, client):
        assert client.get("/api/v1/nowhere").status_code == 404
