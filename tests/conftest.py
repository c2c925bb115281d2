import pytest
from datetime import date
from decimal import Decimal
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.salary.records import EmployeeRecord, LoanRecord, LoanTransactionRecord, UpadRecord, WorkLogRecord
from apps.salary.sources import LedgerSource
from apps.salary.utils import effective_rate

User = get_user_model()


class FakeLedgerSource(LedgerSource):
    """In-memory ledger for engine tests; rates keyed by (part_type, lower job name)."""

    def __init__(self):
        self.employees = {}
        self.work_logs = []
        self.rates = {}
        self.rate_history = {}
        self.employee_rates = {}
        self.upads = {}
        self.loans = []
        self.transactions = []
        self.attendance = {}
        self.overtime = []
        self.rate_calls = 0

    # builders
    def add_employee(self, id, name="Ravi", **kwargs):
        self.employees[id] = EmployeeRecord(id=id, name=name, **kwargs)
        return self.employees[id]

    def add_log(self, employee_id, work_date, part_type, total_parts, rejection=0, job_name="", **kwargs):
        record = WorkLogRecord(
            employee_id=employee_id, work_date=work_date, part_type=part_type,
            total_parts=total_parts, rejection=rejection, job_name=job_name, **kwargs
        )
        self.work_logs.append(record)
        return record

    def set_rate(self, part_type, job_name, rate):
        self.rates[(part_type, job_name.lower())] = Decimal(rate)

    def add_loan(self, id, employee_id, principal, installment, start_month, start_year, status="active"):
        loan = LoanRecord(
            id=id, employee_id=employee_id, start_month=start_month, start_year=start_year,
            principal=Decimal(principal), default_installment=Decimal(installment), status=status,
        )
        self.loans.append(loan)
        return loan

    def add_transaction(self, loan_id, month, year, amount, mode="salary-deduction"):
        loan = next(l for l in self.loans if l.id == loan_id)
        tx = LoanTransactionRecord(
            id=len(self.transactions) + 1, loan_id=loan_id, employee_id=loan.employee_id,
            month=month, year=year, amount=Decimal(amount), mode=mode,
        )
        self.transactions.append(tx)
        return tx

    # LedgerSource
    def get_employee(self, employee_id):
        return self.employees.get(employee_id)

    def list_employees(self, employment_type=None, active_only=True):
        rows = [e for e in self.employees.values() if (e.is_active or not active_only)]
        if employment_type:
            rows = [e for e in rows if e.employment_type == employment_type]
        return sorted(rows, key=lambda e: (e.name, e.id))

    def list_work_logs(self, employee_id, start, end):
        return [
            log for log in self.work_logs
            if log.employee_id == employee_id and start <= log.work_date <= end
        ]

    def get_rate(self, part_type, job_name, year=None, month=None):
        self.rate_calls += 1
        key = (part_type, job_name.strip().lower())
        if key not in self.rates:
            return None
        return effective_rate(self.rates[key], self.rate_history.get(key, []), year, month)

    def get_employee_rate(self, employee_id, kind, year, month):
        return effective_rate(None, self.employee_rates.get((employee_id, kind), []), year, month)

    def get_upad(self, employee_id, month, year):
        amount = self.upads.get((employee_id, month, year))
        if amount is None:
            return None
        return UpadRecord(id=1, employee_id=employee_id, month=month, year=year, amount=Decimal(amount))

    def list_loans(self, employee_id, status=None):
        return [l for l in self.loans if l.employee_id == employee_id and (status is None or l.status == status)]

    def list_loan_transactions(self, loan_id):
        return [tx for tx in self.transactions if tx.loan_id == loan_id]

    def count_present_days(self, employee_id, start, end):
        return sum(
            1 for (emp, day), present in self.attendance.items()
            if emp == employee_id and present and start <= day <= end
        )

    def list_overtime(self, employee_id, start, end):
        return [ot for emp, ot in self.overtime if emp == employee_id and start <= ot.date <= end]


@pytest.fixture
def source():
    return FakeLedgerSource()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username="office", password="pass1234", is_staff=True)


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def employee(db):
    from apps.employees.models import EmployeeProfile

    user = User.objects.create_user(username="ravi", password="pass1234")
    return EmployeeProfile.objects.create(
        user=user, name="Ravi Kumar", username="ravi", department="Rod/Pin Workshop", employment_type="contract"
    )


@pytest.fixture
def worker_client(employee):
    client = APIClient()
    client.force_authenticate(user=employee.user)
    return client


@pytest.fixture
def job_types(db):
    from apps.catalog.models import JobType

    return {
        "assembly": JobType.objects.create(part_type="rod", job_name="ASSEMBLY", rate=Decimal("2.50")),
        "rod_standard": JobType.objects.create(part_type="rod", job_name="Standard", rate=Decimal("1.00")),
        "casting": JobType.objects.create(part_type="sleeve", job_name="CASTING", rate=Decimal("0.75")),
    }


@pytest.fixture
def march_log(employee, job_types):
    from apps.worklogs.models import WorkLog

    return WorkLog.objects.create(
        employee=employee, part_type="rod", job_name="ASSEMBLY",
        total_parts=100, rejection=5, work_date=date(2024, 3, 5),
    )
