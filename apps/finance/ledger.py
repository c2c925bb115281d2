"""
Advance (upad) and loan ledger computations.

Nothing here writes: the installment figures are a preview of what the
month's salary would deduct. Recording deductions is done explicitly through
``apps.finance.services``.
"""
from apps.salary.records import ZERO, LoanBreakdown, LoanSummary, check_period

SALARY_DEDUCTION = "salary-deduction"
MANUAL_PAYMENT = "manual-payment"


def upad_amount(employee_id, month, year, source):
    entry = source.get_upad(employee_id, month, year)
    return entry.amount if entry is not None else ZERO


def installment_for_month(loan, transactions, year, month):
    """
    Installment a loan contributes to (year, month).

    A salary deduction already recorded for the month is used as-is.
    Otherwise the default installment is capped at the balance left after
    every payment dated before the month. Loans starting later give 0.
    """
    if not loan.started_by(year, month):
        return ZERO
    recorded = [tx.amount for tx in transactions if tx.mode == SALARY_DEDUCTION and tx.is_in(year, month)]
    if recorded:
        return sum(recorded, ZERO)
    paid_before = sum((tx.amount for tx in transactions if tx.is_before(year, month)), ZERO)
    remaining = max(ZERO, loan.principal - paid_before)
    return min(loan.default_installment, remaining)


def _recorded_deduction(transactions, year, month):
    return any(tx.mode == SALARY_DEDUCTION and tx.is_in(year, month) for tx in transactions)


def loan_summary(employee_id, month, year, source):
    """
    Pending balance of the active loans and the installments due in the month.

    A loan closed by its final salary deduction still contributes that
    deduction to the month it was recorded in; its balance is not pending.
    """
    month, year = check_period(month, year)
    summary = LoanSummary()
    for loan in source.list_loans(employee_id):
        if loan.status not in ("active", "closed"):
            continue
        transactions = source.list_loan_transactions(loan.id)
        if loan.status == "closed" and not _recorded_deduction(transactions, year, month):
            continue
        paid_total = sum((tx.amount for tx in transactions), ZERO)
        pending = max(ZERO, loan.principal - paid_total)
        installment = installment_for_month(loan, transactions, year, month)
        if loan.status == "active":
            summary.pending_total += pending
        summary.installment_for_month += installment
        summary.loans.append(LoanBreakdown(
            loan_id=loan.id,
            principal=loan.principal,
            paid_total=paid_total,
            pending=pending,
            installment=installment,
        ))
    return summary


def net_deduction(employee_id, month, year, source):
    month, year = check_period(month, year)
    summary = loan_summary(employee_id, month, year, source)
    return upad_amount(employee_id, month, year, source) + summary.installment_for_month
