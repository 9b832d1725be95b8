"""
HTTP tests — tender and transition endpoints.

Covers status mapping:
    201 create, 200 transitions/reads
    400 malformed input, 404 unknown ids, 409 terminal state, 422 business rule
"""

import pytest

from tenderflow.models import db
from tenderflow.models.tender import Tender


def _create(client, actors, **body):
    payload = {"title": "Achat de véhicules", "amount": "250000", "division": "DIV-A",
               "created_by_id": actors["ST"].id}
    payload.update(body)
    res = client.post("/api/v1/tenders", json=payload)
    assert res.status_code == 201, res.get_json()
    return res.get_json()


# ═════════════════════════════════════════════════════════════════════════════
# Tenders
# ═════════════════════════════════════════════════════════════════════════════


class TestTenderEndpoints:
    def test_create(self, client, actors):
        data = _create(client, actors)
        assert data["current_phase"] == 1
        assert data["current_step"] == 1
        assert data["status"] == "active"
        assert data["current_actor_id"] == actors["SM"].id
        assert data["amount"] == "250000.00"
        assert data["reference"].startswith("AO-")

    def test_create_with_header_actor(self, client, actors):
        res = client.post("/api/v1/tenders", json={"title": "X"}, headers={"X-User-ID": actors["ST"].id})
        assert res.status_code == 201
        assert res.get_json()["created_by_id"] == actors["ST"].id

    def test_create_requires_title(self, client, actors):
        res = client.post("/api/v1/tenders", json={"created_by_id": actors["ST"].id})
        assert res.status_code == 400
        assert res.get_json()["code"] == "ERR_VALIDATION_REQUIRED"

    def test_create_requires_creator(self, client, actors):
        res = client.post("/api/v1/tenders", json={"title": "X"})
        assert res.status_code == 400

    def test_create_unknown_creator(self, client, actors):
        res = client.post("/api/v1/tenders", json={"title": "X", "created_by_id": "ghost"})
        assert res.status_code == 404

    def test_create_unknown_workflow(self, client, actors):
        res = client.post("/api/v1/tenders", json={"title": "X", "created_by_id": actors["ST"].id,
                                                   "workflow_code": "nope"})
        assert res.status_code == 422
        assert res.get_json()["code"] == "ERR_VALIDATION_CONSTRAINT"

    def test_create_invalid_amount(self, client, actors):
        res = client.post("/api/v1/tenders", json={"title": "X", "created_by_id": actors["ST"].id,
                                                   "amount": "beaucoup"})
        assert res.status_code == 422

    def test_get(self, client, actors):
        created = _create(client, actors)
        res = client.get(f"/api/v1/tenders/{created['id']}")
        assert res.status_code == 200
        assert res.get_json()["reference"] == created["reference"]
        assert res.get_json()["current_actor"]["role"] == "SM"

    def test_get_unknown(self, client):
        res = client.get("/api/v1/tenders/missing")
        assert res.status_code == 404
        assert res.get_json()["code"] == "ERR_NOT_FOUND"

    def test_list_and_filters(self, client, actors):
        first = _create(client, actors, title="A")
        _create(client, actors, title="B")
        client.post(f"/api/v1/tenders/{first['id']}/cancel", json={"actor_id": actors["ADMIN"].id})

        res = client.get("/api/v1/tenders")
        assert res.get_json()["total"] == 2

        res = client.get("/api/v1/tenders?status=cancelled")
        assert [t["title"] for t in res.get_json()["items"]] == ["A"]

        res = client.get("/api/v1/tenders?limit=1")
        assert res.get_json()["total"] == 2
        assert len(res.get_json()["items"]) == 1

    def test_list_bad_status(self, client):
        res = client.get("/api/v1/tenders?status=archived")
        assert res.status_code == 422

    def test_list_bad_phase(self, client):
        res = client.get("/api/v1/tenders?phase=one")
        assert res.status_code == 400


# ═════════════════════════════════════════════════════════════════════════════
# Transitions
# ═════════════════════════════════════════════════════════════════════════════


class TestTransitionEndpoints:
    def test_approve(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/approve",
                          json={"actor_id": actors["SM"].id, "comments": "OK"})
        assert res.status_code == 200
        data = res.get_json()
        assert (data["current_phase"], data["current_step"]) == (1, 2)
        assert data["current_actor_id"] == actors["CE"].id

    def test_approve_with_deadline(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/approve",
                          json={"actor_id": actors["SM"].id, "deadline": "2030-05-01"})
        assert res.status_code == 200
        assert res.get_json()["deadline"].startswith("2030-05-01")

    def test_approve_bad_deadline(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/approve",
                          json={"actor_id": actors["SM"].id, "deadline": "demain"})
        assert res.status_code == 400

    def test_approve_bad_with_remarks(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/approve",
                          json={"actor_id": actors["SM"].id, "with_remarks": "yes"})
        assert res.status_code == 400

    def test_approve_requires_actor(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/approve", json={})
        assert res.status_code == 400

    def test_approve_header_actor(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/approve", json={},
                          headers={"X-User-ID": actors["SM"].id})
        assert res.status_code == 200

    def test_approve_unknown_tender(self, client, actors):
        res = client.post("/api/v1/tenders/missing/approve", json={"actor_id": actors["SM"].id})
        assert res.status_code == 404

    def test_approve_unknown_actor(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/approve", json={"actor_id": "ghost"})
        assert res.status_code == 404

    def test_approve_completed_is_conflict(self, client, actors):
        created = _create(client, actors)
        client.post(f"/api/v1/tenders/{created['id']}/cancel", json={"actor_id": actors["ADMIN"].id})
        res = client.post(f"/api/v1/tenders/{created['id']}/approve", json={"actor_id": actors["SM"].id})
        assert res.status_code == 409
        body = res.get_json()
        assert body["code"] == "ERR_CONFLICT_STATE"
        assert body["details"]["status"] == "cancelled"

    def test_next_actor_role_mismatch(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/approve",
                          json={"actor_id": actors["SM"].id, "next_actor_id": actors["TP"].id})
        assert res.status_code == 422
        assert res.get_json()["details"]["required_role"] == "CE"

    def test_inconsistent_position_is_500(self, client, actors):
        created = _create(client, actors)
        tender = db.session.get(Tender, created["id"])
        tender.current_step = 42
        db.session.commit()
        res = client.post(f"/api/v1/tenders/{created['id']}/approve", json={"actor_id": actors["SM"].id})
        assert res.status_code == 500
        assert res.get_json()["code"] == "ERR_INTERNAL"

    def test_reject(self, client, actors):
        created = _create(client, actors)
        client.post(f"/api/v1/tenders/{created['id']}/approve", json={"actor_id": actors["SM"].id})
        res = client.post(f"/api/v1/tenders/{created['id']}/reject",
                          json={"actor_id": actors["CE"].id, "comments": "Pièces manquantes"})
        assert res.status_code == 200
        assert (res.get_json()["current_phase"], res.get_json()["current_step"]) == (1, 1)

    def test_cancel(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/cancel", json={"actor_id": actors["ADMIN"].id})
        assert res.status_code == 200
        assert res.get_json()["status"] == "cancelled"
        assert res.get_json()["current_actor_id"] is None

    def test_reassign(self, client, actors, make_user):
        make_user("sm2", "SM")
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/reassign",
                          json={"actor_id": actors["ADMIN"].id, "new_actor_id": "sm2"})
        assert res.status_code == 200
        assert res.get_json()["current_actor_id"] == "sm2"

    def test_reassign_requires_target(self, client, actors):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/reassign", json={"actor_id": actors["ADMIN"].id})
        assert res.status_code == 400


# ═════════════════════════════════════════════════════════════════════════════
# Timeline + comments
# ═════════════════════════════════════════════════════════════════════════════


class TestTimelineAndComments:
    def test_timeline(self, client, actors):
        created = _create(client, actors)
        client.post(f"/api/v1/tenders/{created['id']}/approve", json={"actor_id": actors["SM"].id})

        res = client.get(f"/api/v1/tenders/{created['id']}/timeline")
        assert res.status_code == 200
        body = res.get_json()
        assert body["total"] == 2
        assert [e["action"] for e in body["timeline"]] == ["created", "approved"]
        assert body["timeline"][1]["step_title"] == "Envoi du DAO"
        assert body["timeline"][1]["actor_name"] == actors["SM"].username

    def test_timeline_unknown(self, client):
        assert client.get("/api/v1/tenders/missing/timeline").status_code == 404

    def test_comments(self, client, actors):
        created = _create(client, actors)
        url = f"/api/v1/tenders/{created['id']}/comments"
        res = client.post(url, json={"actor_id": actors["CE"].id, "content": "Vérifier le CPS"})
        assert res.status_code == 201
        client.post(url, json={"actor_id": actors["CE"].id, "content": "Note interne", "is_public": False})

        assert client.get(url).get_json()["total"] == 2
        public = client.get(f"{url}?include_private=false").get_json()
        assert [c["content"] for c in public["items"]] == ["Vérifier le CPS"]

    @pytest.mark.parametrize("body,status", [
        ({"content": "x"}, 400),
        ({"actor_id": "ce1"}, 400),
        ({"actor_id": "ghost", "content": "x"}, 404),
    ])
    def test_comment_errors(self, client, actors, body, status):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/comments", json=body)
        assert res.status_code == status

    @pytest.mark.parametrize("suffix", ["approve", "reject", "cancel", "reassign", "comments"])
    def test_non_object_body(self, client, actors, suffix):
        created = _create(client, actors)
        res = client.post(f"/api/v1/tenders/{created['id']}/{suffix}", json=[actors["SM"].id])
        assert res.status_code == 400
        assert res.get_json()["code"] == "ERR_VALIDATION_INVALID"

        assert client.get(f"/api/v1/tenders/{created['id']}").get_json()["version"] == created["version"]

    def test_create_non_object_body(self, client, actors):
        res = client.post("/api/v1/tenders", json=["Achat"], headers={"X-User-ID": actors["ST"].id})
        assert res.status_code == 400
        assert res.get_json()["code"] == "ERR_VALIDATION_INVALID"
