from __future__ import annotations

from io import BytesIO
from pathlib import Path

from openpyxl import load_workbook

from shiftboard.app import create_app
from tests.conftest import ADMIN_HEADERS, employee_headers


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.data == b"OK"


def test_index_redirects_to_calendar(client):
    response = client.get("/")
    assert response.status_code == 302
    assert "/api/calendar/month" in response.headers["Location"]


def test_shift_crud(client, make_employee, make_shift):
    emp_id = make_employee()
    shift = make_shift(emp_id, "2024-01-03")
    assert shift["duration"] == 8.0
    assert shift["status"] == "draft"

    updated = client.put(f"/api/shifts/{shift['id']}", json={"end_time": "18:00"}, headers=ADMIN_HEADERS)
    assert updated.status_code == 200
    assert updated.get_json()["duration"] == 9.0

    fetched = client.get(f"/api/shifts/{shift['id']}", headers=ADMIN_HEADERS).get_json()
    assert fetched["end_time"] == "18:00"
    assert fetched["start_time"] == "09:00"

    deleted = client.delete(f"/api/shifts/{shift['id']}", headers=ADMIN_HEADERS)
    assert deleted.get_json() == {"deleted": 1}
    assert client.get(f"/api/shifts/{shift['id']}", headers=ADMIN_HEADERS).status_code == 404


def test_overnight_shift(client, make_employee, make_shift):
    shift = make_shift(make_employee(), "2024-01-05", start="21:00", end="09:00")
    assert shift["duration"] == 12.0


def test_shift_validation(client, make_employee):
    emp_id = make_employee()
    base = {"employee_id": emp_id, "date": "2024-01-03", "start_time": "09:00", "end_time": "17:00"}

    mismatch = client.post("/api/shifts", json={**base, "duration": 7}, headers=ADMIN_HEADERS)
    assert mismatch.status_code == 400
    assert "does not match" in mismatch.get_json()["error"]

    assert client.post("/api/shifts", json={**base, "end_time": "09:00"}, headers=ADMIN_HEADERS).status_code == 400
    assert client.post("/api/shifts", json={**base, "date": "03/01/2024"}, headers=ADMIN_HEADERS).status_code == 400
    assert client.post("/api/shifts", json={**base, "employee_id": "nobody"}, headers=ADMIN_HEADERS).status_code == 404
    assert client.get("/api/shifts?end=2024-01-07", headers=ADMIN_HEADERS).status_code == 400


def test_duplicate_shift_is_a_conflict(client, make_employee, make_shift):
    emp_id = make_employee()
    make_shift(emp_id, "2024-01-03")
    response = client.post(
        "/api/shifts",
        json={"employee_id": emp_id, "date": "2024-01-03", "start_time": "09:00", "end_time": "12:00"},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 409


def test_only_admins_write_shifts(client, make_employee):
    emp_id = make_employee()
    payload = {"employee_id": emp_id, "date": "2024-01-03", "start_time": "09:00", "end_time": "17:00"}
    assert client.post("/api/shifts", json=payload, headers=employee_headers(emp_id)).status_code == 403
    assert client.post("/api/shifts", json=payload).status_code == 403


def test_employees_see_only_their_published_shifts(client, make_employee, make_shift):
    mine = make_employee("Anna", "Verdi")
    other = make_employee("Bruno", "Neri")
    own_shift = make_shift(mine, "2024-01-03")
    make_shift(other, "2024-01-03")
    query = "/api/shifts?start=2024-01-01&end=2024-01-07"

    assert client.get(query, headers=employee_headers(mine)).get_json()["shifts"] == []
    assert client.get(f"/api/shifts/{own_shift['id']}", headers=employee_headers(mine)).status_code == 404

    published = client.post("/api/shifts/publish", json={"start": "2024-01-01", "end": "2024-01-07"}, headers=ADMIN_HEADERS)
    assert published.get_json() == {"published": 2}

    visible = client.get(query, headers=employee_headers(mine)).get_json()["shifts"]
    assert [shift["id"] for shift in visible] == [own_shift["id"]]
    assert visible[0]["status"] == "published"
    assert len(client.get(query, headers=ADMIN_HEADERS).get_json()["shifts"]) == 2


def test_deleting_employee_removes_their_shifts(client, make_employee, make_shift):
    emp_id = make_employee()
    make_shift(emp_id, "2024-01-03")
    assert client.delete(f"/api/employees/{emp_id}", headers=ADMIN_HEADERS).get_json() == {"deleted": 1}
    shifts = client.get("/api/shifts?start=2024-01-01&end=2024-01-07", headers=ADMIN_HEADERS).get_json()["shifts"]
    assert shifts == []


def test_contact_details_hidden_from_colleagues(client, make_employee):
    anna = make_employee("Anna", "Verdi", email="anna@example.com")
    bruno = make_employee("Bruno", "Neri", email="bruno@example.com")
    employees = {
        employee["id"]: employee
        for employee in client.get("/api/employees", headers=employee_headers(bruno)).get_json()["employees"]
    }
    assert employees[anna]["first_name"] == "Anna"
    assert employees[anna]["email"] is None
    assert employees[bruno]["email"] == "bruno@example.com"
    assert client.get("/api/employees/missing", headers=ADMIN_HEADERS).status_code == 404


def test_assign_shift_template(client, make_employee):
    emp_id = make_employee()
    response = client.post(
        "/api/shifts/assign",
        json={"template_id": "tpl-sera", "employee_id": emp_id, "year": 2024, "month": 1, "weekdays": [0]},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 201
    assert response.get_json()["created"] == 5

    shifts = client.get("/api/shifts?start=2024-01-01&end=2024-01-31", headers=ADMIN_HEADERS).get_json()["shifts"]
    assert [shift["date"] for shift in shifts] == ["2024-01-01", "2024-01-08", "2024-01-15", "2024-01-22", "2024-01-29"]
    assert {(shift["start_time"], shift["end_time"], shift["duration"]) for shift in shifts} == {("17:00", "23:00", 6.0)}

    unknown = client.post(
        "/api/shifts/assign",
        json={"template_id": "nope", "employee_id": emp_id, "year": 2024, "month": 1},
        headers=ADMIN_HEADERS,
    )
    assert unknown.status_code == 404


def test_shift_templates(client):
    seeded = client.get("/api/shift-templates").get_json()["templates"]
    assert {template["id"] for template in seeded} == {"tpl-mattina", "tpl-sera", "tpl-lungo"}

    created = client.post(
        "/api/shift-templates",
        json={"name": "Notte", "start_time": "22:00", "end_time": "06:00", "days_of_week": [5, 4, 5]},
        headers=ADMIN_HEADERS,
    )
    assert created.status_code == 201
    body = created.get_json()
    assert body["duration"] == 8.0
    assert body["days_of_week"] == [4, 5]

    bad = client.post(
        "/api/shift-templates",
        json={"name": "Rotto", "start_time": "22:00", "end_time": "06:00", "days_of_week": [7]},
        headers=ADMIN_HEADERS,
    )
    assert bad.status_code == 400


def test_month_calendar(client, make_employee, make_shift):
    emp_id = make_employee()
    make_shift(emp_id, "2024-01-03")
    response = client.get("/api/calendar/month?year=2024&month=1", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    data = response.get_json()
    assert data["title"] == "gennaio 2024"
    assert len(data["days"]) == 42
    assert data["days"][0]["date"] == "2024-01-01"
    by_date = {day["date"]: day for day in data["days"]}
    assert len(by_date["2024-01-03"]["shifts"]) == 1
    assert by_date["2024-02-01"]["is_current_month"] is False

    assert client.get("/api/calendar/month?year=2024&month=13", headers=ADMIN_HEADERS).status_code == 400


def test_week_and_window_calendar(client, make_employee, make_shift):
    emp_id = make_employee()
    make_shift(emp_id, "2024-01-07")
    week = client.get("/api/calendar/week?date=2024-01-03", headers=ADMIN_HEADERS).get_json()
    assert (week["start"], week["end"]) == ("2024-01-01", "2024-01-07")
    assert len(week["days"][-1]["shifts"]) == 1

    window = client.get("/api/calendar/days?anchor=2024-01-10&before=3&after=2", headers=ADMIN_HEADERS).get_json()
    assert [day["date"] for day in window["days"]][0] == "2024-01-07"
    assert len(window["days"]) == 6
    assert client.get("/api/calendar/days?anchor=2024-01-10&before=-1", headers=ADMIN_HEADERS).status_code == 400


def test_hours_report(client, make_employee, make_shift):
    anna = make_employee("Anna", "Verdi")
    bruno = make_employee("Bruno", "Neri")
    make_shift(anna, "2024-01-02", start="12:00", end="17:00")
    make_shift(anna, "2024-01-03", start="17:00", end="20:00")
    make_shift(bruno, "2024-01-04", start="09:00", end="11:00")

    report = client.get("/api/reports/hours?period=week&date=2024-01-03", headers=ADMIN_HEADERS).get_json()
    assert (report["start"], report["end"]) == ("2024-01-01", "2024-01-07")
    assert [(row["employee_id"], row["total_hours"]) for row in report["employees"]] == [(anna, 8.0), (bruno, 2.0)]
    assert report["total_hours"] == 10.0

    assert client.get("/api/reports/hours?period=year&date=2024-01-03", headers=ADMIN_HEADERS).status_code == 400


def test_hours_exports(client, make_employee, make_shift):
    emp_id = make_employee("Anna", "Verdi")
    make_shift(emp_id, "2024-01-03")

    csv_resp = client.get("/api/reports/hours.csv?period=month&date=2024-01-15", headers=ADMIN_HEADERS)
    assert csv_resp.status_code == 200
    assert csv_resp.mimetype == "text/csv"
    assert "hours_2024-01-01_2024-01-31.csv" in csv_resp.headers["Content-Disposition"]
    lines = csv_resp.get_data(as_text=True).splitlines()
    assert lines[0] == "employee_id,employee,hours,shifts"
    assert lines[1] == f"{emp_id},Anna Verdi,8.00,1"

    xlsx_resp = client.get("/api/reports/hours.xlsx?period=month&date=2024-01-15", headers=ADMIN_HEADERS)
    assert xlsx_resp.status_code == 200
    assert "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet" in xlsx_resp.headers["Content-Type"]
    sheet = load_workbook(BytesIO(xlsx_resp.data)).active
    assert sheet.title == "gennaio 2024"
    assert sheet["A1"].value == "Dipendente"
    assert sheet["A2"].value == "Anna Verdi"
    assert sheet["B2"].value == 8.0
    assert sheet["A3"].value == "Totale"


def test_export_hours_command(app, make_employee, make_shift, tmp_path: Path):
    make_shift(make_employee("Anna", "Verdi"), "2024-01-03")
    output = tmp_path / "hours.csv"
    result = app.test_cli_runner().invoke(args=["export-hours", "--month", "2024-01", "--output", str(output)])
    assert result.exit_code == 0, result.output
    assert "written" in result.output
    assert output.read_text(encoding="utf-8").splitlines()[1].endswith("Anna Verdi,8.00,1")


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0, result.output
    assert "Database initialized." in result.output


def test_config_file_is_loaded(tmp_path: Path, monkeypatch):
    config = tmp_path / "shiftboard.yaml"
    config.write_text("week_template_snap: true\nlog_level: debug\n", encoding="utf-8")
    monkeypatch.setenv("SHIFTBOARD_CONFIG", str(config))
    app = create_app({"TESTING": True, "DATABASE": str(tmp_path / "cfg.sqlite")})
    assert app.config["WEEK_TEMPLATE_SNAP"] is True
    assert app.config["LOG_LEVEL"] == "debug"


def test_employee_resolved_from_linked_user(client, make_employee, make_shift):
    emp_id = make_employee("Luca", "Gallo", user_id="luca")
    shift = make_shift(emp_id, "2024-01-03", status="published")
    headers = {"X-Shiftboard-User": "luca", "X-Shiftboard-Role": "employee"}
    shifts = client.get("/api/shifts?start=2024-01-01&end=2024-01-07", headers=headers).get_json()["shifts"]
    assert [s["id"] for s in shifts] == [shift["id"]]
    assert client.get(f"/api/employees/{emp_id}", headers=headers).get_json()["user_id"] == "luca"


def test_assign_across_existing_shift_stores_nothing(app, client, make_employee, make_shift):
    emp_id = make_employee()
    make_shift(emp_id, "2024-01-15", start="17:00", end="23:00")
    seen = []
    app.extensions["shiftboard.events"].subscribe("shifts", seen.append)

    response = client.post(
        "/api/shifts/assign",
        json={"template_id": "tpl-sera", "employee_id": emp_id, "year": 2024, "month": 1, "weekdays": [0]},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 409
    shifts = client.get("/api/shifts?start=2024-01-01&end=2024-01-31", headers=ADMIN_HEADERS).get_json()["shifts"]
    assert [shift["date"] for shift in shifts] == ["2024-01-15"]
    assert seen == []


def test_assign_with_sunday_first_weekdays(client, make_employee):
    emp_id = make_employee()
    response = client.post(
        "/api/shifts/assign",
        json={
            "template_id": "tpl-mattina",
            "employee_id": emp_id,
            "year": 2024,
            "month": 1,
            "weekdays": [0],
            "sunday_first": True,
        },
        headers=ADMIN_HEADERS,
    )
    assert response.get_json()["created"] == 4
    shifts = client.get("/api/shifts?start=2024-01-01&end=2024-01-31", headers=ADMIN_HEADERS).get_json()["shifts"]
    assert [shift["date"] for shift in shifts] == ["2024-01-07", "2024-01-14", "2024-01-21", "2024-01-28"]


def test_calendar_labels(client, make_employee, make_shift):
    make_shift(make_employee("Giulia", "Rossi"), "2024-01-01", start="12:00", end="17:00")
    data = client.get("/api/calendar/week?date=2024-01-03", headers=ADMIN_HEADERS).get_json()
    assert data["days"][0]["day_name"] == "Lunedì"
    assert data["days"][6]["day_name"] == "Domenica"
    assert data["days"][0]["shifts"][0]["label"] == "Giulia R 12:00-17:00"


def test_calendar_outside_supported_years(client):
    for query in (
        "/api/calendar/month?year=0&month=1",
        "/api/calendar/month?year=10000&month=1",
        "/api/calendar/month?year=9999&month=12",
        "/api/calendar/week?date=9999-12-31",
        "/api/calendar/days?anchor=0001-01-01&before=3&after=0",
    ):
        response = client.get(query, headers=ADMIN_HEADERS)
        assert response.status_code == 400, query
        assert "error" in response.get_json()
