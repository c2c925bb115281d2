import pytest
from decimal import Decimal


@pytest.mark.django_db
def test_mark_attendance_upserts(admin_client, employee):
    payload = {"employee": employee.id, "date": "2024-03-01", "present": True}
    r1 = admin_client.post("/api/attendance/mark-attendance/", payload, format="json")
    assert r1.status_code == 201, r1.content
    r2 = admin_client.post("/api/attendance/mark-attendance/", {**payload, "present": False}, format="json")
    assert r2.status_code == 200
    assert r2.json()["present"] is False


@pytest.mark.django_db
def test_monthly_summary(admin_client, employee):
    for day in ("2024-03-01", "2024-03-02"):
        admin_client.post("/api/attendance/mark-attendance/", {"employee": employee.id, "date": day}, format="json")
    admin_client.post("/api/attendance/mark-attendance/", {"employee": employee.id, "date": "2024-03-03", "present": False}, format="json")

    r = admin_client.get("/api/attendance/summary/?month=3&year=2024")
    assert r.status_code == 200
    row = next(item for item in r.json() if item["employee_id"] == employee.id)
    assert row["present_days"] == 2
    assert row["absent_days"] == 1


@pytest.mark.django_db
def test_overtime_requires_presence(admin_client, employee):
    payload = {"employee": employee.id, "date": "2024-03-01", "hours": "2.00"}
    r = admin_client.post("/api/attendance/overtime/", payload, format="json")
    assert r.status_code == 400

    admin_client.post("/api/attendance/mark-attendance/", {"employee": employee.id, "date": "2024-03-01"}, format="json")
    r = admin_client.post("/api/attendance/overtime/", payload, format="json")
    assert r.status_code == 201, r.content
    assert Decimal(r.json()["hours"]) == Decimal("2")


@pytest.mark.django_db
def test_roj_salary_uses_attendance(admin_client, employee):
    employee.employment_type = "daily_roj"
    employee.daily_roj_rate = Decimal("400")
    employee.save()
    for day in ("2024-03-01", "2024-03-02"):
        admin_client.post("/api/attendance/mark-attendance/", {"employee": employee.id, "date": day}, format="json")
    admin_client.post("/api/attendance/overtime/", {"employee": employee.id, "date": "2024-03-01", "hours": "4"}, format="json")

    r = admin_client.get(f"/api/salary/employee/{employee.id}/?month=3&year=2024")
    assert r.json()["presentDays"] == 2
    assert r.json()["grossPay"] == "1000.00"


@pytest.mark.django_db
def test_mark_attendance_rejects_non_string_date(admin_client, employee):
    r = admin_client.post("/api/attendance/mark-attendance/", {"employee": employee.id, "date": 20240301}, format="json")
    assert r.status_code == 400
