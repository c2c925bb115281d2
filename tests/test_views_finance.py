import pytest


@pytest.mark.django_db
def test_duplicate_upad_is_409(admin_client, employee):
    payload = {"employee": employee.id, "month": 3, "year": 2024, "amount": "50"}
    assert admin_client.post("/api/finance/upad/", payload, format="json").status_code == 201
    r = admin_client.post("/api/finance/upad/", payload, format="json")
    assert r.status_code == 409
    assert r.json()["detail"]


@pytest.mark.django_db
def test_upad_list_filters(admin_client, employee):
    admin_client.post("/api/finance/upad/", {"employee": employee.id, "month": 3, "year": 2024, "amount": "50"}, format="json")
    admin_client.post("/api/finance/upad/", {"employee": employee.id, "month": 4, "year": 2024, "amount": "10"}, format="json")
    r = admin_client.get(f"/api/finance/upad/?employee={employee.id}&month=4&year=2024")
    assert [row["amount"] for row in r.json()] == ["10.00"]


@pytest.mark.django_db
def test_loan_flow(admin_client, employee):
    r = admin_client.post("/api/finance/loans/", {
        "employee": employee.id, "start_month": 1, "start_year": 2024,
        "principal": "1000", "default_installment": "100",
    }, format="json")
    assert r.status_code == 201, r.content
    loan_id = r.json()["id"]

    r = admin_client.get(f"/api/finance/loans/summary/{employee.id}/?month=3&year=2024")
    assert r.status_code == 200
    assert r.json()["pendingTotal"] == "1000.00"
    assert r.json()["installmentForMonth"] == "100.00"

    for month in (1, 2):
        r = admin_client.post(f"/api/finance/loans/{loan_id}/transactions/", {"month": month, "year": 2024, "amount": "100"}, format="json")
        assert r.status_code == 201, r.content

    r = admin_client.post(f"/api/finance/loans/{loan_id}/transactions/", {"month": 2, "year": 2024, "amount": "100"}, format="json")
    assert r.status_code == 409

    r = admin_client.get(f"/api/finance/loans/summary/{employee.id}/?month=3&year=2024")
    assert r.json()["pendingTotal"] == "800.00"
    assert r.json()["installmentForMonth"] == "100.00"

    r = admin_client.get(f"/api/finance/loans/data/{employee.id}/")
    assert r.status_code == 200
    assert r.json()["stats"]["totalPaid"] == "200.00"
    assert len(r.json()["loans"][0]["transactions"]) == 2


@pytest.mark.django_db
def test_transaction_edit_and_delete(admin_client, employee):
    from apps.finance import services

    loan = services.create_loan(employee.id, 1, 2024, "200", "100")
    tx = services.create_loan_transaction(loan.id, 1, 2024, "100")

    r = admin_client.patch(f"/api/finance/loan-transactions/{tx.id}/", {"amount": "200"}, format="json")
    assert r.status_code == 200, r.content
    loan.refresh_from_db()
    assert loan.status == "closed"

    r = admin_client.delete(f"/api/finance/loan-transactions/{tx.id}/")
    assert r.status_code == 204
    loan.refresh_from_db()
    assert loan.status == "active"


@pytest.mark.django_db
def test_apply_missing_endpoint(admin_client, employee):
    from apps.finance import services

    services.create_loan(employee.id, 1, 2024, "1000", "100")
    r = admin_client.post(f"/api/finance/loans/apply-missing/{employee.id}/", {"month": 3, "year": 2024}, format="json")
    assert r.status_code == 201
    assert r.json()["created"] == 3


@pytest.mark.django_db
def test_summary_unknown_employee_is_404(admin_client):
    r = admin_client.get("/api/finance/loans/summary/4242/?month=3&year=2024")
    assert r.status_code == 404


@pytest.mark.django_db
def test_admin_can_close_unpaid_loan(admin_client, employee):
    from apps.finance import services
    from apps.finance.models import Loan

    loan = services.create_loan(employee.id, 1, 2024, "1000", "100")
    r = admin_client.patch(f"/api/finance/loans/{loan.id}/", {"status": "closed"}, format="json")
    assert r.status_code == 200, r.content
    assert Loan.objects.get(pk=loan.id).status == "closed"


@pytest.mark.django_db
def test_principal_change_recomputes_status(admin_client, employee):
    from apps.finance import services
    from apps.finance.models import Loan

    loan = services.create_loan(employee.id, 1, 2024, "1000", "100")
    services.create_loan_transaction(loan.id, 1, 2024, "300", mode="manual-payment")
    r = admin_client.patch(f"/api/finance/loans/{loan.id}/", {"principal": "300"}, format="json")
    assert r.status_code == 200, r.content
    assert Loan.objects.get(pk=loan.id).status == "closed"
