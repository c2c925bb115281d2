"""
Ledger sources: everything the salary engine reads comes through here.

``LedgerSource`` names the collaborator contract; ``DjangoLedgerSource``
implements it on top of the ORM. Tests substitute an in-memory source.
"""
import logging
from decimal import Decimal

from django.db.models.functions import Lower

from apps.attendance.models import Attendance, Overtime
from apps.catalog.models import JobType
from apps.employees.models import EmployeeProfile, EmployeeRateHistory
from apps.finance.models import Loan, LoanTransaction, UpadEntry
from apps.worklogs.models import WorkLog

from .records import (
    EmployeeRecord,
    LoanRecord,
    LoanTransactionRecord,
    OvertimeRecord,
    UpadRecord,
    WorkLogRecord,
)
from .utils import effective_rate

logger = logging.getLogger(__name__)


class LedgerSource:
    def get_employee(self, employee_id):
        """Return an EmployeeRecord or None."""
        raise NotImplementedError

    def list_employees(self, employment_type=None, active_only=True):
        raise NotImplementedError

    def list_work_logs(self, employee_id, start, end):
        """Work logs with start <= work_date <= end, by date then creation order."""
        raise NotImplementedError

    def get_rate(self, part_type, job_name, year=None, month=None):
        """Catalog rate for the job effective in (year, month), or None when not configured."""
        raise NotImplementedError

    def get_employee_rate(self, employee_id, kind, year, month):
        """Salary/roj rate-history entry effective in (year, month), or None."""
        raise NotImplementedError

    def get_upad(self, employee_id, month, year):
        raise NotImplementedError

    def list_loans(self, employee_id, status=None):
        raise NotImplementedError

    def list_loan_transactions(self, loan_id):
        raise NotImplementedError

    def count_present_days(self, employee_id, start, end):
        raise NotImplementedError

    def list_overtime(self, employee_id, start, end):
        raise NotImplementedError


def employee_record(profile):
    return EmployeeRecord(
        id=profile.pk,
        name=profile.name,
        employment_type=profile.employment_type,
        department=profile.department or "",
        salary_per_day=profile.salary_per_day or Decimal("0"),
        daily_roj_rate=profile.daily_roj_rate or Decimal("0"),
        is_active=profile.is_active,
    )


def loan_record(loan):
    return LoanRecord(
        id=loan.pk,
        employee_id=loan.employee_id,
        start_month=loan.start_month,
        start_year=loan.start_year,
        principal=loan.principal,
        default_installment=loan.default_installment,
        status=loan.status,
        note=loan.note,
    )


def loan_transaction_record(tx):
    return LoanTransactionRecord(
        id=tx.pk,
        loan_id=tx.loan_id,
        employee_id=tx.employee_id,
        month=tx.month,
        year=tx.year,
        amount=tx.amount,
        mode=tx.mode,
    )


class DjangoLedgerSource(LedgerSource):
    def get_employee(self, employee_id):
        profile = EmployeeProfile.objects.filter(pk=employee_id).first()
        return employee_record(profile) if profile else None

    def list_employees(self, employment_type=None, active_only=True):
        qs = EmployeeProfile.objects.all()
        if active_only:
            qs = qs.filter(is_active=True)
        if employment_type:
            qs = qs.filter(employment_type=employment_type)
        return [employee_record(p) for p in qs.order_by("name", "id")]

    def list_work_logs(self, employee_id, start, end):
        qs = (
            WorkLog.objects.select_related("product")
            .filter(employee_id=employee_id, work_date__gte=start, work_date__lte=end)
            .order_by("work_date", "created_at", "id")
        )
        records = []
        for log in qs:
            product = log.product
            records.append(WorkLogRecord(
                employee_id=log.employee_id,
                work_date=log.work_date,
                part_type=log.part_type,
                total_parts=log.total_parts,
                rejection=log.rejection,
                job_name=log.job_name,
                code=product.code if product else "",
                part_name=product.part_name if product else "",
                rate_snapshot=log.rate_snapshot,
            ))
        return records

    def get_rate(self, part_type, job_name, year=None, month=None):
        job_type = (
            JobType.objects.annotate(name_ci=Lower("job_name"))
            .filter(part_type=part_type, name_ci=(job_name or "").strip().lower())
            .prefetch_related("rate_history")
            .first()
        )
        if job_type is None:
            return None
        history = [(h.effective_from_year, h.effective_from_month, h.rate) for h in job_type.rate_history.all()]
        return effective_rate(job_type.rate, history, year, month)

    def get_employee_rate(self, employee_id, kind, year, month):
        history = [
            (h.effective_from_year, h.effective_from_month, h.rate)
            for h in EmployeeRateHistory.objects.filter(employee_id=employee_id, kind=kind)
        ]
        return effective_rate(None, history, year, month)

    def get_upad(self, employee_id, month, year):
        entry = UpadEntry.objects.filter(employee_id=employee_id, month=month, year=year).first()
        if entry is None:
            return None
        return UpadRecord(
            id=entry.pk,
            employee_id=entry.employee_id,
            month=entry.month,
            year=entry.year,
            amount=entry.amount,
            note=entry.note,
        )

    def list_loans(self, employee_id, status=None):
        qs = Loan.objects.filter(employee_id=employee_id)
        if status:
            qs = qs.filter(status=status)
        return [loan_record(loan) for loan in qs.order_by("created_at", "id")]

    def list_loan_transactions(self, loan_id):
        qs = LoanTransaction.objects.filter(loan_id=loan_id).order_by("year", "month", "created_at", "id")
        return [loan_transaction_record(tx) for tx in qs]

    def count_present_days(self, employee_id, start, end):
        return Attendance.objects.filter(
            employee_id=employee_id, date__gte=start, date__lte=end, present=True
        ).count()

    def list_overtime(self, employee_id, start, end):
        qs = Overtime.objects.filter(employee_id=employee_id, date__gte=start, date__lte=end).order_by("date", "id")
        return [OvertimeRecord(date=ot.date, hours=ot.hours, rate=ot.rate) for ot in qs]
