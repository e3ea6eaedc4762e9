# tests/test_attendance.py

from datetime import datetime

from electra.schemas.staff import AttendanceCreate
from electra.services.attendance import upsert_record
from tests.conftest import STAFF, login


def staff_id(client):
    return login(client, STAFF)["staff"]["id"]


def test_upsert_record_updates_same_day():
    records = upsert_record([], AttendanceCreate(date="2025-03-10T09:15:00", is_present=True, remarks="on time"))
    records = upsert_record(records, AttendanceCreate(date="2025-03-10T18:00:00", is_present=False))

    assert records == [{"date": "2025-03-10T00:00:00", "is_present": False, "remarks": "on time"}]


def test_record_attendance_twice_same_day_keeps_one_record(client, admin_headers):
    sid = staff_id(client)
    url = f"/api/staff/{sid}/attendance"

    first = client.post(url, json={"date": "2025-03-10", "isPresent": True, "remarks": "late"}, headers=admin_headers)
    second = client.post(url, json={"date": "2025-03-10T15:30:00", "isPresent": False}, headers=admin_headers)

    assert first.status_code == second.status_code == 200
    attendance = second.json()["attendance"]
    assert len(attendance) == 1
    assert attendance[0]["isPresent"] is False
    assert attendance[0]["remarks"] == "late"
    assert attendance[0]["date"].startswith("2025-03-10T00:00:00")


def test_record_attendance_replaces_remarks_when_given(client, admin_headers):
    url = f"/api/staff/{staff_id(client)}/attendance"

    client.post(url, json={"date": "2025-03-10", "remarks": "late"}, headers=admin_headers)
    response = client.post(url, json={"date": "2025-03-10", "remarks": "sick"}, headers=admin_headers)

    assert response.json()["attendance"][0]["remarks"] == "sick"


def test_record_attendance_errors(client, admin_headers):
    sid = staff_id(client)

    bad_date = client.post(f"/api/staff/{sid}/attendance", json={"date": "not-a-date"}, headers=admin_headers)
    assert bad_date.status_code == 400

    missing = client.post("/api/staff/9999/attendance", json={"date": "2025-03-10"}, headers=admin_headers)
    assert missing.status_code == 404


def test_attendance_requires_admin_or_executive(client, staff_headers, executive_headers):
    url = f"/api/staff/{staff_id(client)}/attendance"

    assert client.post(url, json={"date": "2025-03-10"}, headers=staff_headers).status_code == 403
    assert client.post(url, json={"date": "2025-03-10"}, headers=executive_headers).status_code == 200


def test_staff_attendance_range_newest_first(client, admin_headers):
    sid = staff_id(client)
    url = f"/api/staff/{sid}/attendance"
    for day in ("2025-03-01", "2025-03-05", "2025-03-10", "2025-03-20"):
        client.post(url, json={"date": day, "isPresent": True}, headers=admin_headers)

    response = client.get(url, params={"startDate": "2025-03-05", "endDate": "2025-03-10"}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["staffId"] == sid
    dates = [r["date"][:10] for r in body["attendance"]]
    assert dates == ["2025-03-10", "2025-03-05"]

    everything = client.get(url, headers=admin_headers).json()["attendance"]
    assert [r["date"][:10] for r in everything] == ["2025-03-20", "2025-03-10", "2025-03-05", "2025-03-01"]


def test_attendance_by_date_lists_every_staff(client, admin_headers):
    sid = staff_id(client)
    client.post(f"/api/staff/{sid}/attendance", json={"date": "2025-03-10", "isPresent": True}, headers=admin_headers)
    client.post(f"/api/staff/{sid}/attendance", json={"date": "2025-03-11", "isPresent": False}, headers=admin_headers)

    response = client.get("/api/staff/attendance/date", params={"date": "2025-03-10"}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert datetime.fromisoformat(body["date"]) == datetime(2025, 3, 10)
    by_id = {row["staffId"]: row for row in body["staffAttendance"]}
    assert len(by_id) == 3
    assert by_id[sid]["attendance"]["isPresent"] is True
    assert all(row["attendance"] is None for key, row in by_id.items() if key != sid)
    assert all("password" not in row for row in body["staffAttendance"])


def test_attendance_by_date_requires_valid_date(client, admin_headers):
    assert client.get("/api/staff/attendance/date", headers=admin_headers).status_code == 400
    response = client.get("/api/staff/attendance/date", params={"date": "31/03/2025"}, headers=admin_headers)
    assert response.status_code == 400
