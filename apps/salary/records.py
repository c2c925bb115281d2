"""
Typed records passed between the ledger source and the salary engine.

Records are plain dataclasses so the aggregation code never touches the ORM;
constructors enforce the invariants the database rows are expected to hold.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import List, Optional

from forgetrack.exceptions import ValidationError

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

MIN_YEAR = 2000
MAX_YEAR = 9999


def to_decimal(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"'{value}' is not a valid amount.")


def to_money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_str(value) -> str:
    return str(to_money(value))


def check_part_counts(total_parts, rejection):
    if total_parts is None or int(total_parts) < 0:
        raise ValidationError({"total_parts": "Total parts cannot be negative."})
    if rejection is None or int(rejection) < 0:
        raise ValidationError({"rejection": "Rejection cannot be negative."})
    if int(rejection) > int(total_parts):
        raise ValidationError({"rejection": "Rejection cannot exceed total parts."})


def check_period(month, year):
    """Coerce and validate a (month, year) pair, returning ints."""
    try:
        month_num = int(month)
        year_num = int(year)
    except (TypeError, ValueError):
        raise ValidationError("Month and year must be integers.")
    if not 1 <= month_num <= 12:
        raise ValidationError({"month": "Month must be between 1 and 12."})
    if not MIN_YEAR <= year_num <= MAX_YEAR:
        raise ValidationError({"year": f"Year must be between {MIN_YEAR} and {MAX_YEAR}."})
    return month_num, year_num


def check_amount(value, name="amount", allow_zero=True) -> Decimal:
    amount = to_decimal(value)
    if amount < 0 or (not allow_zero and amount == 0):
        qualifier = "negative" if allow_zero else "zero or negative"
        raise ValidationError({name: f"{name.replace('_', ' ').capitalize()} cannot be {qualifier}."})
    return amount


def period_key(year, month) -> int:
    return int(year) * 100 + int(month)


@dataclass(frozen=True)
class EmployeeRecord:
    id: int
    name: str
    employment_type: str = "contract"
    department: str = ""
    salary_per_day: Decimal = ZERO
    daily_roj_rate: Decimal = ZERO
    is_active: bool = True


@dataclass(frozen=True)
class WorkLogRecord:
    employee_id: int
    work_date: date
    part_type: str
    total_parts: int
    rejection: int = 0
    job_name: str = ""
    code: str = ""
    part_name: str = ""
    rate_snapshot: Optional[Decimal] = None

    def __post_init__(self):
        check_part_counts(self.total_parts, self.rejection)

    @property
    def ok_parts(self) -> int:
        return self.total_parts - self.rejection


@dataclass(frozen=True)
class UpadRecord:
    id: int
    employee_id: int
    month: int
    year: int
    amount: Decimal
    note: str = ""


@dataclass(frozen=True)
class LoanRecord:
    id: int
    employee_id: int
    start_month: int
    start_year: int
    principal: Decimal
    default_installment: Decimal
    status: str = "active"
    note: str = ""

    def started_by(self, year, month) -> bool:
        return period_key(self.start_year, self.start_month) <= period_key(year, month)


@dataclass(frozen=True)
class LoanTransactionRecord:
    id: int
    loan_id: int
    employee_id: int
    month: int
    year: int
    amount: Decimal
    mode: str = "salary-deduction"

    def is_before(self, year, month) -> bool:
        return period_key(self.year, self.month) < period_key(year, month)

    def is_in(self, year, month) -> bool:
        return self.year == int(year) and self.month == int(month)


@dataclass(frozen=True)
class OvertimeRecord:
    date: date
    hours: Decimal
    rate: Optional[Decimal] = None


@dataclass
class LineItem:
    job_name: str
    part_type: str
    total_parts: int
    rejection: int
    ok_parts: int
    rate: Decimal
    amount: Decimal
    code: str = ""
    part_name: str = ""

    def as_dict(self):
        return {
            "jobName": self.job_name,
            "partType": self.part_type,
            "code": self.code,
            "partName": self.part_name,
            "totalParts": self.total_parts,
            "rejection": self.rejection,
            "okParts": self.ok_parts,
            "rate": str(self.rate),
            "amount": money_str(self.amount),
        }


@dataclass
class DailyLog:
    date: date
    logs: List[LineItem] = field(default_factory=list)
    day_total: Decimal = ZERO

    def as_dict(self):
        return {
            "date": self.date.isoformat(),
            "logs": [item.as_dict() for item in self.logs],
            "dayTotal": money_str(self.day_total),
        }


@dataclass
class MonthlyRollup:
    employee_id: int
    employee_name: str
    month: int
    year: int
    daily_logs: List[DailyLog] = field(default_factory=list)
    month_total: Decimal = ZERO

    def as_dict(self):
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "month": self.month,
            "year": self.year,
            "dailyLogs": [day.as_dict() for day in self.daily_logs],
            "monthTotal": money_str(self.month_total),
        }


@dataclass
class LoanBreakdown:
    loan_id: int
    principal: Decimal
    paid_total: Decimal
    pending: Decimal
    installment: Decimal

    def as_dict(self):
        return {
            "loanId": self.loan_id,
            "principal": money_str(self.principal),
            "paidTotal": money_str(self.paid_total),
            "pending": money_str(self.pending),
            "installment": money_str(self.installment),
        }


@dataclass
class LoanSummary:
    pending_total: Decimal = ZERO
    installment_for_month: Decimal = ZERO
    loans: List[LoanBreakdown] = field(default_factory=list)

    def as_dict(self):
        return {
            "pendingTotal": money_str(self.pending_total),
            "installmentForMonth": money_str(self.installment_for_month),
            "loans": [loan.as_dict() for loan in self.loans],
        }


@dataclass
class SalaryReport:
    rollup: MonthlyRollup
    employment_type: str
    present_days: int = 0
    base_pay: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    overtime_amount: Decimal = ZERO
    gross_pay: Decimal = ZERO
    upad_amount: Decimal = ZERO
    loan_deduction: Decimal = ZERO
    pending_loan: Decimal = ZERO

    @property
    def month_total(self) -> Decimal:
        return self.rollup.month_total

    @property
    def net_payable(self) -> Decimal:
        return self.gross_pay - self.upad_amount - self.loan_deduction

    def as_dict(self):
        data = self.rollup.as_dict()
        data.update({
            "employmentType": self.employment_type,
            "presentDays": self.present_days,
            "basePay": money_str(self.base_pay),
            "overtimeHours": str(self.overtime_hours),
            "overtimeAmount": money_str(self.overtime_amount),
            "grossPay": money_str(self.gross_pay),
            "upadAmount": money_str(self.upad_amount),
            "loanDeduction": money_str(self.loan_deduction),
            "pendingLoan": money_str(self.pending_loan),
            "netPayable": money_str(self.net_payable),
        })
        return data
