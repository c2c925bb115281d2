import logging
from decimal import Decimal

from django.db import IntegrityError, transaction

from apps.employees.models import EmployeeProfile
from apps.salary.records import ZERO, check_amount, check_period, period_key
from apps.salary.utils import next_period
from forgetrack.exceptions import DuplicateEntryError, NotFoundError, ValidationError

from .ledger import MANUAL_PAYMENT, SALARY_DEDUCTION
from .models import Loan, LoanTransaction, UpadEntry

logger = logging.getLogger(__name__)

# Paid totals within this much of the principal close the loan
CLOSE_TOLERANCE = Decimal("0.01")
TRANSACTION_MODES = (SALARY_DEDUCTION, MANUAL_PAYMENT)


def _get_employee(employee_id):
    try:
        return EmployeeProfile.objects.get(pk=employee_id)
    except (EmployeeProfile.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Employee not found.")


def _get_loan(loan_id):
    try:
        return Loan.objects.get(pk=loan_id)
    except (Loan.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Loan not found.")


def create_upad(employee_id, month, year, amount, note=""):
    month, year = check_period(month, year)
    amount = check_amount(amount)
    employee = _get_employee(employee_id)
    try:
        with transaction.atomic():
            entry = UpadEntry.objects.create(
                employee=employee, month=month, year=year, amount=amount, note=note or ""
            )
    except IntegrityError as exc:
        logger.info("Rejected duplicate upad for employee %s %02d/%s", employee.pk, month, year)
        raise DuplicateEntryError(
            f"An upad entry already exists for {employee.name} in {month:02d}/{year}."
        ) from exc
    logger.info("Upad %s recorded for employee %s %02d/%s: %s", entry.pk, employee.pk, month, year, amount)
    return entry


def update_upad(entry, month=None, year=None, amount=None, note=None):
    month, year = check_period(month or entry.month, year or entry.year)
    entry.month = month
    entry.year = year
    if amount is not None:
        entry.amount = check_amount(amount)
    if note is not None:
        entry.note = note
    try:
        with transaction.atomic():
            entry.save()
    except IntegrityError as exc:
        raise DuplicateEntryError(f"An upad entry already exists for {month:02d}/{year}.") from exc
    return entry


def create_loan(employee_id, start_month, start_year, principal, default_installment, note=""):
    start_month, start_year = check_period(start_month, start_year)
    principal = check_amount(principal, "principal")
    default_installment = check_amount(default_installment, "default_installment")
    employee = _get_employee(employee_id)
    loan = Loan.objects.create(
        employee=employee,
        start_month=start_month,
        start_year=start_year,
        principal=principal,
        default_installment=default_installment,
        note=note or "",
    )
    logger.info("Loan %s created for employee %s: principal %s, installment %s", loan.pk, employee.pk, principal, default_installment)
    return loan


def paid_total(loan):
    return sum((tx.amount for tx in loan.transactions.all()), ZERO)


def refresh_loan_status(loan):
    """Close a fully repaid loan, reopen a closed one that is no longer repaid."""
    if loan.status == "cancelled":
        return loan
    repaid = loan.principal > 0 and paid_total(loan) >= loan.principal - CLOSE_TOLERANCE
    new_status = "closed" if repaid else "active"
    if new_status != loan.status:
        logger.info("Loan %s status %s -> %s", loan.pk, loan.status, new_status)
        loan.status = new_status
        loan.save(update_fields=["status", "updated_at"])
    return loan


def _check_mode(mode):
    mode = mode or SALARY_DEDUCTION
    if mode not in TRANSACTION_MODES:
        raise ValidationError({"mode": f"Mode must be one of {', '.join(TRANSACTION_MODES)}."})
    return mode


def create_loan_transaction(loan_id, month, year, amount, mode=SALARY_DEDUCTION):
    month, year = check_period(month, year)
    amount = check_amount(amount, allow_zero=False)
    mode = _check_mode(mode)
    loan = _get_loan(loan_id)
    try:
        with transaction.atomic():
            tx = LoanTransaction.objects.create(
                loan=loan, employee_id=loan.employee_id, month=month, year=year, amount=amount, mode=mode
            )
    except IntegrityError as exc:
        logger.info("Rejected second salary deduction for loan %s %02d/%s", loan.pk, month, year)
        raise DuplicateEntryError(
            f"A salary deduction for {month:02d}/{year} is already recorded on this loan."
        ) from exc
    logger.info("Loan %s %s of %s for %02d/%s", loan.pk, mode, amount, month, year)
    refresh_loan_status(loan)
    return tx


def update_loan_transaction(tx, month=None, year=None, amount=None, mode=None):
    month, year = check_period(month or tx.month, year or tx.year)
    tx.month = month
    tx.year = year
    if amount is not None:
        tx.amount = check_amount(amount, allow_zero=False)
    if mode is not None:
        tx.mode = _check_mode(mode)
    try:
        with transaction.atomic():
            tx.save()
    except IntegrityError as exc:
        raise DuplicateEntryError(
            f"A salary deduction for {month:02d}/{year} is already recorded on this loan."
        ) from exc
    refresh_loan_status(tx.loan)
    return tx


def delete_loan_transaction(tx):
    loan = tx.loan
    tx.delete()
    refresh_loan_status(loan)


def apply_missing_installments(employee_id, month, year):
    """
    Record salary deductions for every month up to (year, month) that has no
    transaction yet, per active or closed loan of the employee.

    Each installment is capped at the remaining balance and the walk stops
    once the loan is repaid.
    """
    month, year = check_period(month, year)
    employee = _get_employee(employee_id)
    target = period_key(year, month)
    created = []
    try:
        with transaction.atomic():
            loans = Loan.objects.filter(employee=employee, status__in=["active", "closed"]).order_by("created_at", "id")
            for loan in loans:
                if loan.default_installment <= 0:
                    continue
                existing = list(loan.transactions.all())
                booked = {(tx.year, tx.month) for tx in existing}
                remaining = loan.principal - sum((tx.amount for tx in existing), ZERO)
                y, m = loan.start_year, loan.start_month
                while period_key(y, m) <= target and remaining > 0:
                    if (y, m) not in booked:
                        amount = min(loan.default_installment, remaining)
                        created.append(LoanTransaction.objects.create(
                            loan=loan, employee=employee, month=m, year=y, amount=amount, mode=SALARY_DEDUCTION
                        ))
                        remaining -= amount
                    y, m = next_period(y, m)
                refresh_loan_status(loan)
    except IntegrityError as exc:
        logger.info("Rejected concurrent installment run for employee %s up to %02d/%s", employee.pk, month, year)
        raise DuplicateEntryError("Installments for this period were recorded concurrently; nothing was applied.") from exc
    logger.info("Applied %d missing installments for employee %s up to %02d/%s", len(created), employee.pk, month, year)
    return created
