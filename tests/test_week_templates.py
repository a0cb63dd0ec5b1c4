from __future__ import annotations

import pytest

from tests.conftest import ADMIN_HEADERS, employee_headers


@pytest.fixture()
def employee_id(make_employee):
    return make_employee("Anna", "Verdi")


@pytest.fixture()
def make_template(client, employee_id):
    def _make(days=("2024-01-03",), start="2024-01-01", end="2024-01-07", name="Settimana base"):
        shifts = [
            {"employee_id": employee_id, "date": day, "start_time": "09:00", "end_time": "17:00"}
            for day in days
        ]
        response = client.post(
            "/api/week-templates",
            json={"name": name, "start_date": start, "end_date": end, "shifts": shifts},
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()["id"]

    return _make


def apply(client, template_id, target, **extra):
    return client.post(
        f"/api/week-templates/{template_id}/apply",
        json={"target_date": target, **extra},
        headers=ADMIN_HEADERS,
    )


def shifts_between(client, start, end):
    response = client.get(f"/api/shifts?start={start}&end={end}", headers=ADMIN_HEADERS)
    return response.get_json()["shifts"]


def test_apply_moves_shifts_by_whole_weeks(client, make_template, employee_id):
    template_id = make_template()
    detail = client.get(f"/api/week-templates/{template_id}").get_json()
    assert [shift["date"] for shift in detail["shifts"]] == ["2024-01-03"]

    response = apply(client, template_id, "2024-02-05")
    assert response.status_code == 201
    body = response.get_json()
    assert body["created"] == 1
    assert body["target_date"] == "2024-02-05"
    assert body["failures"] == []

    shifts = shifts_between(client, "2024-02-05", "2024-02-11")
    assert [(s["employee_id"], s["date"], s["start_time"], s["status"]) for s in shifts] == [
        (employee_id, "2024-02-07", "09:00", "draft")
    ]


def test_reapplying_reports_conflicts(client, make_template):
    template_id = make_template()
    assert apply(client, template_id, "2024-02-05").status_code == 201

    again = apply(client, template_id, "2024-02-05")
    assert again.status_code == 207
    body = again.get_json()
    assert body["requested"] == 1
    assert body["created"] == 0
    assert body["failures"][0]["shift"]["date"] == "2024-02-07"
    assert len(shifts_between(client, "2024-02-05", "2024-02-11")) == 1


def test_partial_apply_keeps_created_shifts(client, make_template, make_shift, employee_id):
    template_id = make_template(days=("2024-01-01", "2024-01-03"))
    make_shift(employee_id, "2024-02-07")

    response = apply(client, template_id, "2024-02-05")
    assert response.status_code == 207
    body = response.get_json()
    assert body["created"] == 1
    assert len(body["failures"]) == 1
    assert [s["date"] for s in shifts_between(client, "2024-02-05", "2024-02-11")] == ["2024-02-05", "2024-02-07"]


def test_target_on_other_weekday(client, make_template, app):
    template_id = make_template()
    assert apply(client, template_id, "2024-02-06").status_code == 400

    snapped = apply(client, template_id, "2024-02-06", snap=True)
    assert snapped.status_code == 201
    assert snapped.get_json()["target_date"] == "2024-02-05"

    app.config["WEEK_TEMPLATE_SNAP"] = True
    from_config = apply(client, template_id, "2024-03-06")
    assert from_config.status_code == 201
    assert from_config.get_json()["target_date"] == "2024-03-04"


def test_empty_template_cannot_be_applied(client, make_template):
    template_id = make_template(days=())
    response = apply(client, template_id, "2024-02-05")
    assert response.status_code == 422
    assert "no shifts" in response.get_json()["error"]


def test_template_shifts_must_fall_inside_the_week(client, employee_id):
    response = client.post(
        "/api/week-templates",
        json={
            "name": "Fuori",
            "start_date": "2024-01-01",
            "end_date": "2024-01-07",
            "shifts": [{"employee_id": employee_id, "date": "2024-01-09", "start_time": "09:00", "end_time": "17:00"}],
        },
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 400
    assert client.get("/api/week-templates").get_json()["templates"] == []


def test_capture_stored_week(client, make_shift, employee_id):
    make_shift(employee_id, "2024-01-02")
    make_shift(employee_id, "2024-01-06", start="17:00", end="23:00")
    make_shift(employee_id, "2024-01-09")
    response = client.post(
        "/api/week-templates",
        json={"name": "Catturata", "start_date": "2024-01-01", "end_date": "2024-01-07"},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["shift_count"] == 2

    applied = apply(client, body["id"], "2024-01-15")
    assert applied.get_json()["created"] == 2
    assert [s["date"] for s in shifts_between(client, "2024-01-15", "2024-01-21")] == ["2024-01-16", "2024-01-20"]


def test_delete_template(client, make_template):
    template_id = make_template()
    assert client.delete(f"/api/week-templates/{template_id}", headers=ADMIN_HEADERS).get_json() == {"deleted": 1}
    assert apply(client, template_id, "2024-02-05").status_code == 404
    assert client.get(f"/api/week-templates/{template_id}").status_code == 404


def test_only_admins_manage_templates(client, make_template, employee_id):
    template_id = make_template()
    response = client.post(
        f"/api/week-templates/{template_id}/apply",
        json={"target_date": "2024-02-05"},
        headers=employee_headers(employee_id),
    )
    assert response.status_code == 403
    assert client.delete(f"/api/week-templates/{template_id}", headers=employee_headers(employee_id)).status_code == 403
