import logging
from decimal import Decimal

from django.conf import settings

from apps.finance.ledger import loan_summary, upad_amount
from forgetrack.exceptions import NotFoundError, ValidationError

from .rates import RateResolver
from .records import ZERO, SalaryReport, check_period, to_decimal, to_money
from .utils import month_bounds, rollup_month

logger = logging.getLogger(__name__)


def _default_source():
    from .sources import DjangoLedgerSource
    return DjangoLedgerSource()


def _employee_id(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError({"employee_id": "Invalid employee id."})


def _time_based_pay(report, employee, month, year, source):
    """Gross pay for monthly and daily-roj employees: present days x day rate (+ overtime)."""
    start, end = month_bounds(year, month)
    report.present_days = source.count_present_days(employee.id, start, end)
    if employee.employment_type == "monthly":
        rate = source.get_employee_rate(employee.id, "salary", year, month)
        rate = to_decimal(rate if rate is not None else employee.salary_per_day)
        report.base_pay = to_money(rate * report.present_days)
        return
    rate = source.get_employee_rate(employee.id, "roj", year, month)
    rate = to_decimal(rate if rate is not None else employee.daily_roj_rate)
    report.base_pay = to_money(rate * report.present_days)
    default_hourly = rate / Decimal(settings.FORGETRACK_OVERTIME_DIVISOR) if rate > 0 else ZERO
    hours = ZERO
    amount = ZERO
    for row in source.list_overtime(employee.id, start, end):
        row_hours = to_decimal(row.hours)
        row_rate = to_decimal(row.rate) if row.rate is not None else default_hourly
        hours += row_hours
        amount += row_hours * row_rate
    report.overtime_hours = hours
    report.overtime_amount = to_money(amount)


def build_salary_report(employee_id, month, year, source=None, resolver=None):
    """
    Salary for one employee and month.

    Contract workers are paid per ok part from their work logs; monthly and
    daily-roj employees by present days. Upad and the month's loan
    installments are deducted from gross pay. Missing catalog or ledger data
    counts as 0 rather than failing the report.
    """
    month, year = check_period(month, year)
    employee_id = _employee_id(employee_id)
    source = source or _default_source()
    resolver = resolver or RateResolver(source)

    employee = source.get_employee(employee_id)
    if employee is None:
        raise NotFoundError("Employee not found.")

    rollup = rollup_month(employee, month, year, source, resolver)
    report = SalaryReport(rollup=rollup, employment_type=employee.employment_type)

    if employee.employment_type == "contract":
        report.base_pay = rollup.month_total
    else:
        _time_based_pay(report, employee, month, year, source)
    report.gross_pay = report.base_pay + report.overtime_amount

    report.upad_amount = to_money(upad_amount(employee.id, month, year, source))
    loans = loan_summary(employee.id, month, year, source)
    report.loan_deduction = to_money(loans.installment_for_month)
    report.pending_loan = to_money(loans.pending_total)

    logger.info(
        "Salary report employee=%s %02d/%s type=%s gross=%s upad=%s loan=%s net=%s",
        employee.id, month, year, employee.employment_type,
        report.gross_pay, report.upad_amount, report.loan_deduction, report.net_payable,
    )
    return report


def build_salary_sheet(month, year, employment_type=None, source=None):
    """Reports for every active employee, optionally of one employment type."""
    month, year = check_period(month, year)
    source = source or _default_source()
    resolver = RateResolver(source)
    return [
        build_salary_report(employee.id, month, year, source=source, resolver=resolver)
        for employee in source.list_employees(employment_type=employment_type)
    ]
