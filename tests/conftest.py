from __future__ import annotations

from pathlib import Path

import pytest

from shiftboard.app import create_app

ADMIN_HEADERS = {"X-Shiftboard-User": "boss", "X-Shiftboard-Role": "admin"}


def employee_headers(employee_id: str, user_id: str = "staff") -> dict[str, str]:
    return {
        "X-Shiftboard-User": user_id,
        "X-Shiftboard-Role": "employee",
        "X-Shiftboard-Employee": employee_id,
    }


@pytest.fixture()
def app(tmp_path: Path):
    db_path = tmp_path / "test.sqlite"
    return create_app({
        "TESTING": True,
        "DATABASE": str(db_path),
        "AUTO_INIT_DB": True,
    })


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def make_employee(client):
    def _make(first_name: str = "Giulia", last_name: str = "Rossi", **extra) -> str:
        response = client.post(
            "/api/employees",
            json={"first_name": first_name, "last_name": last_name, **extra},
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 201
        return response.get_json()["id"]

    return _make


@pytest.fixture()
def make_shift(client):
    def _make(employee_id: str, day: str, start: str = "09:00", end: str = "17:00", **extra) -> dict:
        response = client.post(
            "/api/shifts",
            json={"employee_id": employee_id, "date": day, "start_time": start, "end_time": end, **extra},
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make
