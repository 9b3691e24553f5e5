from __future__ import annotations

from datetime import date, datetime

import pytest

from teacher_payroll.core.enums import DeductionType
from teacher_payroll.main import create_app


@pytest.fixture
def container(env):
    env.schedules.add("t1", 1, day_package="MWF", occupied_from=date(2026, 3, 1))
    env.events.add("t1", 1, datetime(2026, 3, 2, 9, 0), joined_at=datetime(2026, 3, 2, 9, 7))
    return env.build()


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def login(client, user_id, role, tenant_id="school-a"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
        sess["tenant_id"] = tenant_id


def test_requires_login(client):
    resp = client.get("/api/salaries/t1?start=2026-03-01&end=2026-03-31")
    assert resp.status_code == 401


def test_teacher_reads_own_salary(client):
    login(client, "t1", "teacher")
    resp = client.get("/api/salaries/t1?start=2026-03-01&end=2026-03-31")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["salary"]["teacher_id"] == "t1"
    assert body["salary"]["lateness_deduction"] == "10.00"
    assert body["salary"]["ledger"][0]["outcome"] == "late"


def test_teacher_cannot_read_colleague(client):
    login(client, "t2", "teacher")
    assert client.get("/api/salaries/t1?start=2026-03-01&end=2026-03-31").status_code == 403


def test_invalid_range_is_400(client):
    login(client, "admin-1", "admin")
    resp = client.get("/api/salaries/t1?start=2026-03-31&end=2026-03-01")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidRange"


def test_unknown_teacher_is_404(client):
    login(client, "admin-1", "admin")
    assert client.get("/api/salaries/ghost?start=2026-03-01&end=2026-03-31").status_code == 404


def test_unknown_school_is_404(client):
    login(client, "admin-1", "admin")
    assert client.get("/api/schools/gamma/salaries/t1?start=2026-03-01&end=2026-03-31").status_code == 404


def test_school_route_by_slug(client):
    login(client, "admin-1", "admin")
    resp = client.get("/api/schools/alpha/salaries/t1?start=2026-03-01&end=2026-03-31")
    assert resp.status_code == 200
    assert resp.get_json()["salary"]["tenant_id"] == "school-a"


def test_controller_cannot_cross_schools(client):
    login(client, "c1", "controller", tenant_id="school-b")
    assert client.get("/api/schools/alpha/salaries/t1?start=2026-03-01&end=2026-03-31").status_code == 403


def test_controller_without_school_is_bound_to_default(client):
    login(client, "c1", "controller", tenant_id=None)
    assert client.get("/api/salaries?school=beta&start=2026-03-01&end=2026-03-31").status_code == 403
    resp = client.get("/api/salaries?start=2026-03-01&end=2026-03-31")
    assert resp.status_code == 200
    assert resp.get_json()["tenant_id"] == "school-a"


def test_store_failure_is_503(env, client):
    env.events.failing_teachers.add("t1")
    login(client, "admin-1", "admin")
    resp = client.get("/api/salaries/t1?start=2026-03-01&end=2026-03-31")
    assert resp.status_code == 503
    assert resp.get_json()["store"] == "delivery_event"


def test_batch_report(client):
    login(client, "c1", "controller")
    resp = client.get("/api/salaries?start=2026-03-01&end=2026-03-31")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["statistics"]["total_teachers"] == 1
    assert body["errors"] == []
    assert "ledger" not in body["results"][0]


def test_export_csv(client):
    login(client, "admin-1", "admin")
    resp = client.get("/api/salaries/export?start=2026-03-01&end=2026-03-31&format=csv")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert b"teacher_id" in resp.data


def test_export_requires_capability(client):
    login(client, "c1", "controller")
    assert client.get("/api/salaries/export?start=2026-03-01&end=2026-03-31").status_code == 403


def test_waive_then_clear_cache(env, client):
    login(client, "admin-1", "admin")
    first = client.get("/api/salaries/t1?start=2026-03-02&end=2026-03-02").get_json()["salary"]
    assert first["net_salary"] == "990.00"

    resp = client.post(
        "/api/waivers",
        json={"start": "2026-03-02", "end": "2026-03-02", "reason": "late link", "teacher_id": "t1"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["affected_teacher_ids"] == ["t1"]
    assert env.waivers.find_waiver("t1", "school-a", date(2026, 3, 2), DeductionType.LATENESS) is not None

    stale = client.get("/api/salaries/t1?start=2026-03-02&end=2026-03-02").get_json()["salary"]
    assert stale["net_salary"] == "990.00"

    cleared = client.post("/api/salaries/cache/clear", json={"teacher_id": "t1"})
    assert cleared.get_json()["removed"] == 1

    fresh = client.get("/api/salaries/t1?start=2026-03-02&end=2026-03-02").get_json()["salary"]
    assert fresh["net_salary"] == "1000.00"
    assert fresh["waived_total"] == "10.00"


def test_waiver_preview(client):
    login(client, "admin-1", "admin")
    resp = client.post("/api/waivers/preview", json={"start": "2026-03-01", "end": "2026-03-06"})
    assert resp.status_code == 200
    candidates = resp.get_json()["candidates"]
    assert [(c["date"], c["deduction_type"]) for c in candidates] == [
        ("2026-03-02", "lateness"),
        ("2026-03-04", "absence"),
        ("2026-03-06", "absence"),
    ]


def test_cache_clear_forbidden_for_teacher(client):
    login(client, "t1", "teacher")
    assert client.post("/api/salaries/cache/clear", json={}).status_code == 403


def test_reassign(env, client):
    env.tenants.add_teacher("t2", "school-a")
    login(client, "r1", "registrar")
    resp = client.post(
        "/api/schedules/reassign",
        json={"student_id": 1, "new_teacher_id": "t2", "change_date": "2026-03-16"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert len(body["closed_assignment_ids"]) == 1
    assert any("mid-month" in w for w in body["warnings"])


def test_reassign_missing_date(client):
    login(client, "admin-1", "admin")
    resp = client.post("/api/schedules/reassign", json={"student_id": 1, "new_teacher_id": "t1"})
    assert resp.status_code == 400
