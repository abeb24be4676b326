"""
Church Registry Service: HTTP tests
===================================
Run:  pytest test_main.py -v
"""
import pytest
from fastapi.testclient import TestClient

from church_registry.core import dependencies
from church_registry.core.config import settings
from church_registry.core.errors import StorageError
from church_registry.core.security import create_access_token
from church_registry.repositories import UserRepository
from conftest import login, stored_counts
from main import create_app

MEMBER = {
    "firstname": "Grace", "lastname": "Wanjiru", "phone": "0712345678",
    "gender": "Female", "ministry": "Ushering, Media", "department": "Women",
    "home_location": "Kasarani", "joined_at": "2024-03-10",
}


def _create(client, headers, **overrides):
    body = {**MEMBER, **overrides}
    r = client.post("/api/members", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["member"]


# ═══════════════════════════════════════════════════════════════════════════
# HEALTH & METRICS
# ═══════════════════════════════════════════════════════════════════════════
class TestHealth:
    def test_health_ok(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["service"] == settings.SERVICE_NAME

    def test_readiness_ok(self, client):
        r = client.get("/health/ready")
        assert r.status_code == 200
        assert r.json()["database"] == "connected"

    def test_readiness_fails_when_db_down(self, client, monkeypatch):
        def boom():
            raise RuntimeError("db down")
        monkeypatch.setattr(dependencies.get_category_repo(), "verify_connection", boom)
        r = client.get("/health/ready")
        assert r.status_code == 503

    def test_metrics_endpoint(self, client, auth_headers):
        _create(client, auth_headers)
        r = client.get("/metrics")
        assert r.status_code == 200
        assert "member_mutations_total" in r.text
        assert "category_members" in r.text

    def test_request_id_propagated(self, client):
        r = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert r.headers["X-Request-ID"] == "req-42"

    def test_request_id_generated(self, client):
        assert client.get("/health").headers.get("X-Request-ID")


# ═══════════════════════════════════════════════════════════════════════════
# AUTH
# ═══════════════════════════════════════════════════════════════════════════
class TestAuth:
    def test_register_and_login(self, client):
        r = client.post("/api/auth/register", json={"username": "elder", "password": "pw-123"})
        assert r.status_code == 201
        r = client.post("/api/auth/login", json={"username": "elder", "password": "pw-123"})
        assert r.status_code == 200
        d = r.json()
        assert d["token"]
        assert d["user"]["username"] == "elder"
        assert d["user"]["role"] == "user"

    def test_register_ignores_admin_code(self, client):
        r = client.post("/api/auth/register",
                        json={"username": "sneaky", "password": "pw", "adminCode": "38484692"})
        assert r.status_code == 201
        r = client.post("/api/auth/login", json={"username": "sneaky", "password": "pw"})
        assert r.json()["user"]["role"] == "user"

    def test_register_duplicate_400(self, client):
        client.post("/api/auth/register", json={"username": "elder", "password": "pw"})
        r = client.post("/api/auth/register", json={"username": "elder", "password": "other"})
        assert r.status_code == 400
        assert "exists" in r.json()["detail"]

    @pytest.mark.parametrize("body", [{}, {"username": "x"}, {"password": "y"}, {"username": " ", "password": "y"}])
    def test_register_missing_fields_400(self, client, body):
        assert client.post("/api/auth/register", json=body).status_code == 400

    def test_login_wrong_password_401(self, client):
        client.post("/api/auth/register", json={"username": "elder", "password": "right"})
        r = client.post("/api/auth/login", json={"username": "elder", "password": "wrong"})
        assert r.status_code == 401

    def test_login_unknown_user_401(self, client):
        r = client.post("/api/auth/login", json={"username": "ghost", "password": "pw"})
        assert r.status_code == 401

    def test_me(self, client, auth_headers):
        r = client.get("/api/auth/me", headers=auth_headers)
        assert r.status_code == 200
        assert r.json()["user"]["username"] == "secretary"

    def test_no_token_401(self, client):
        assert client.get("/api/members").status_code == 401

    def test_bad_token_403(self, client):
        r = client.get("/api/members", headers={"Authorization": "Bearer not-a-token"})
        assert r.status_code == 403

    def test_expired_token_403(self, client):
        token = create_access_token({"sub": "secretary", "id": 1, "role": "user"}, expires_minutes=-5)
        r = client.get("/api/members", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 403


# ═══════════════════════════════════════════════════════════════════════════
# MEMBERS
# ═══════════════════════════════════════════════════════════════════════════
class TestMembers:
    def test_create_201(self, client, auth_headers):
        r = client.post("/api/members", json=MEMBER, headers=auth_headers)
        assert r.status_code == 201
        d = r.json()
        assert d["message"] == "Member added successfully"
        for key in ("firstname", "lastname", "phone", "gender", "ministry", "department", "home_location"):
            assert d["member"][key] == MEMBER[key]
        assert d["member"]["joined_at"] == "2024-03-10"

    def test_create_missing_required_400(self, client, auth_headers):
        r = client.post("/api/members", json={"firstname": "Grace"}, headers=auth_headers)
        assert r.status_code == 400
        assert "phone" in r.json()["detail"]
        assert "gender" in r.json()["detail"]

    def test_create_ministry_list_is_joined(self, client, auth_headers):
        member = _create(client, auth_headers, ministry=["Ushering", "Media"])
        assert member["ministry"] == "Ushering, Media"

    def test_create_blank_joined_at(self, client, auth_headers):
        member = _create(client, auth_headers, joined_at="")
        assert member["joined_at"]

    def test_create_updates_counts(self, client, auth_headers, engine):
        _create(client, auth_headers)
        ministries = stored_counts(engine, "ministries")
        assert ministries["ministry-ushering"] == 1
        assert ministries["ministry-media"] == 1
        assert ministries["ministry-praise"] == 0
        assert stored_counts(engine, "departments")["dept-women"] == 1

    def test_get_member(self, client, auth_headers):
        member = _create(client, auth_headers)
        r = client.get(f"/api/members/{member['id']}", headers=auth_headers)
        assert r.status_code == 200
        assert r.json() == member

    def test_get_unknown_404(self, client, auth_headers):
        assert client.get("/api/members/999", headers=auth_headers).status_code == 404

    def test_list_newest_first(self, client, auth_headers):
        ids = [_create(client, auth_headers, firstname=f"M{i}")["id"] for i in range(4)]
        client.delete(f"/api/members/{ids[0]}", headers=auth_headers)
        r = client.get("/api/members", headers=auth_headers)
        assert [m["id"] for m in r.json()] == [ids[3], ids[2], ids[1]]

    def test_update_moves_department(self, client, auth_headers, engine):
        member = _create(client, auth_headers)
        r = client.put(f"/api/members/{member['id']}",
                       json={**MEMBER, "department": "Men"}, headers=auth_headers)
        assert r.status_code == 200
        assert r.json()["member"]["department"] == "Men"
        departments = stored_counts(engine, "departments")
        assert departments["dept-women"] == 0
        assert departments["dept-men"] == 1

    def test_update_unknown_404(self, client, auth_headers):
        assert client.put("/api/members/999", json=MEMBER, headers=auth_headers).status_code == 404

    def test_update_unknown_with_empty_body_404(self, client, auth_headers):
        assert client.put("/api/members/999", json={}, headers=auth_headers).status_code == 404

    def test_update_missing_required_400(self, client, auth_headers):
        member = _create(client, auth_headers)
        r = client.put(f"/api/members/{member['id']}", json={"firstname": "X"}, headers=auth_headers)
        assert r.status_code == 400

    def test_delete(self, client, auth_headers, engine):
        member = _create(client, auth_headers)
        r = client.delete(f"/api/members/{member['id']}", headers=auth_headers)
        assert r.status_code == 200
        assert r.json()["ok"] is True
        assert stored_counts(engine, "ministries")["ministry-ushering"] == 0

    def test_delete_unknown_404(self, client, auth_headers, engine):
        _create(client, auth_headers)
        before = stored_counts(engine, "ministries")
        assert client.delete("/api/members/999", headers=auth_headers).status_code == 404
        assert stored_counts(engine, "ministries") == before

    def test_storage_error_500(self, client, auth_headers, monkeypatch):
        def boom():
            raise StorageError("Storage failure during member listing")
        monkeypatch.setattr(dependencies.get_member_registry(), "list", boom)
        r = client.get("/api/members", headers=auth_headers)
        assert r.status_code == 500
        assert r.json()["detail"] == "Database error"


# ═══════════════════════════════════════════════════════════════════════════
# CATEGORIES
# ═══════════════════════════════════════════════════════════════════════════
class TestCategories:
    def test_listing(self, client, auth_headers):
        _create(client, auth_headers, ministry="hospitality", department="teenagers")
        r = client.get("/api/categories", headers=auth_headers)
        assert r.status_code == 200
        d = r.json()
        assert len(d["ministries"]) == 6
        assert len(d["departments"]) == 5
        hospitality = next(c for c in d["ministries"] if c["slug"] == "ministry-hospitality")
        assert hospitality["member_count"] == 1

    def test_ministries_and_departments(self, client, auth_headers):
        assert len(client.get("/api/ministries", headers=auth_headers).json()) == 6
        assert len(client.get("/api/departments", headers=auth_headers).json()) == 5

    def test_recount_requires_admin(self, client, auth_headers):
        assert client.post("/api/categories/recount", headers=auth_headers).status_code == 403

    def test_recount_as_admin(self, client, engine):
        login(client, "pastor", "pw-admin")
        UserRepository(engine).set_role("pastor", "admin")
        headers = login(client, "pastor", "pw-admin")
        _create(client, headers)
        r = client.post("/api/categories/recount", headers=headers)
        assert r.status_code == 200
        assert r.json()["ministries"]["Ushering"] == 1
        assert r.json()["departments"]["Women"] == 1


# ═══════════════════════════════════════════════════════════════════════════
# FINANCE & DASHBOARD
# ═══════════════════════════════════════════════════════════════════════════
class TestFinance:
    def test_contribution_with_member(self, client, auth_headers):
        member = _create(client, auth_headers)
        r = client.post("/api/contributions", headers=auth_headers, json={
            "member_id": member["id"], "amount": 1500, "method": "M-Pesa", "note": "Tithe",
        })
        assert r.status_code == 201
        assert r.json()["firstname"] == "Grace"
        listed = client.get("/api/contributions", headers=auth_headers).json()
        assert listed[0]["amount"] == 1500.0

    def test_anonymous_contribution(self, client, auth_headers):
        r = client.post("/api/contributions", headers=auth_headers, json={"amount": 200, "method": "Cash"})
        assert r.status_code == 201
        assert r.json()["member_id"] is None

    def test_contribution_unknown_member_400(self, client, auth_headers):
        r = client.post("/api/contributions", headers=auth_headers, json={"member_id": 77, "amount": 10})
        assert r.status_code == 400

    @pytest.mark.parametrize("amount", [0, -5, None])
    def test_contribution_bad_amount_400(self, client, auth_headers, amount):
        r = client.post("/api/contributions", headers=auth_headers, json={"amount": amount})
        assert r.status_code == 400

    def test_expenses(self, client, auth_headers):
        r = client.post("/api/expenses", headers=auth_headers, json={"title": "Sound system", "amount": 800})
        assert r.status_code == 201
        client.post("/api/expenses", headers=auth_headers, json={"title": "Chairs", "amount": 300})
        listed = client.get("/api/expenses", headers=auth_headers).json()
        assert [e["title"] for e in listed] == ["Chairs", "Sound system"]

    def test_expense_missing_title_400(self, client, auth_headers):
        r = client.post("/api/expenses", headers=auth_headers, json={"amount": 10})
        assert r.status_code == 400

    def test_dashboard_summary(self, client, auth_headers):
        _create(client, auth_headers, gender="Female")
        _create(client, auth_headers, firstname="John", gender="male", ministry="Media", department="Men")
        client.post("/api/contributions", headers=auth_headers, json={"amount": 1000})
        client.post("/api/expenses", headers=auth_headers, json={"title": "Fuel", "amount": 250})
        d = client.get("/api/stats/summary", headers=auth_headers).json()
        assert d["total_members"] == 2
        assert d["male"] == 1
        assert d["female"] == 1
        assert d["ministries"]["ministry-media"] == 2
        assert d["departments"]["dept-men"] == 1
        assert d["balance"] == 750.0


# ═══════════════════════════════════════════════════════════════════════════
# STATIC CLIENT
# ═══════════════════════════════════════════════════════════════════════════
class TestClientFiles:
    def test_serves_dashboard_when_present(self, engine, tmp_path, monkeypatch):
        (tmp_path / "index.html").write_text("<h1>Dashboard</h1>")
        monkeypatch.setattr(settings, "CLIENT_DIR", str(tmp_path))
        with TestClient(create_app(engine)) as c:
            assert "Dashboard" in c.get("/").text
            assert c.get("/health").status_code == 200
