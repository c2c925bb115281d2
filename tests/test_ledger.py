import pytest
from decimal import Decimal

from apps.finance.ledger import installment_for_month, loan_summary, net_deduction, upad_amount
from forgetrack.exceptions import ValidationError


def test_upad_lookup_defaults_to_zero(source):
    assert upad_amount(1, 3, 2024, source) == Decimal("0")
    source.upads[(1, 3, 2024)] = "50"
    assert upad_amount(1, 3, 2024, source) == Decimal("50")


def test_loan_summary_before_and_after_deductions(source):
    source.add_loan(1, employee_id=1, principal="1000", installment="100", start_month=1, start_year=2024)

    summary = loan_summary(1, 3, 2024, source)
    assert summary.pending_total == Decimal("1000")
    assert summary.installment_for_month == Decimal("100")

    source.add_transaction(1, 1, 2024, "100")
    source.add_transaction(1, 2, 2024, "100")
    summary = loan_summary(1, 3, 2024, source)
    assert summary.pending_total == Decimal("800")
    assert summary.installment_for_month == Decimal("100")
    assert summary.loans[0].paid_total == Decimal("200")


def test_loan_starting_after_month_contributes_nothing(source):
    source.add_loan(1, employee_id=1, principal="1000", installment="100", start_month=5, start_year=2024)
    summary = loan_summary(1, 3, 2024, source)
    assert summary.installment_for_month == Decimal("0")
    assert summary.pending_total == Decimal("1000")


def test_installment_capped_at_remaining_balance(source):
    loan = source.add_loan(1, employee_id=1, principal="250", installment="100", start_month=1, start_year=2024)
    source.add_transaction(1, 1, 2024, "100")
    source.add_transaction(1, 2, 2024, "100")
    transactions = source.list_loan_transactions(1)
    assert installment_for_month(loan, transactions, 2024, 3) == Decimal("50")
    assert installment_for_month(loan, transactions, 2023, 12) == Decimal("0")


def test_recorded_deduction_is_used_for_its_month(source):
    loan = source.add_loan(1, employee_id=1, principal="1000", installment="100", start_month=1, start_year=2024)
    source.add_transaction(1, 3, 2024, "60")
    assert installment_for_month(loan, source.list_loan_transactions(1), 2024, 3) == Decimal("60")


def test_manual_payment_reduces_balance_only(source):
    loan = source.add_loan(1, employee_id=1, principal="1000", installment="100", start_month=1, start_year=2024)
    source.add_transaction(1, 2, 2024, "500", mode="manual-payment")
    transactions = source.list_loan_transactions(1)
    assert installment_for_month(loan, transactions, 2024, 3) == Decimal("100")
    source.add_transaction(1, 2, 2024, "450", mode="manual-payment")
    assert installment_for_month(loan, source.list_loan_transactions(1), 2024, 3) == Decimal("50")


def test_only_active_loans_are_summarised(source):
    source.add_loan(1, employee_id=1, principal="300", installment="100", start_month=1, start_year=2024)
    source.add_loan(2, employee_id=1, principal="500", installment="50", start_month=1, start_year=2024, status="closed")
    source.add_loan(3, employee_id=1, principal="200", installment="20", start_month=1, start_year=2024, status="cancelled")
    summary = loan_summary(1, 3, 2024, source)
    assert [row.loan_id for row in summary.loans] == [1]
    assert summary.pending_total == Decimal("300")


def test_net_deduction_combines_upad_and_installments(source):
    source.upads[(1, 3, 2024)] = "50"
    source.add_loan(1, employee_id=1, principal="1000", installment="100", start_month=1, start_year=2024)
    source.add_loan(2, employee_id=1, principal="40", installment="100", start_month=2, start_year=2024)
    assert net_deduction(1, 3, 2024, source) == Decimal("190")


def test_summary_rejects_bad_month(source):
    with pytest.raises(ValidationError):
        loan_summary(1, 13, 2024, source)


def test_summary_as_dict(source):
    source.add_loan(4, employee_id=1, principal="1000", installment="100", start_month=1, start_year=2024)
    data = loan_summary(1, 3, 2024, source).as_dict()
    assert data["pendingTotal"] == "1000.00"
    assert data["installmentForMonth"] == "100.00"
    assert data["loans"][0]["loanId"] == 4


def test_closed_loan_keeps_its_final_deduction(source):
    source.add_loan(1, employee_id=1, principal="100", installment="100", start_month=3, start_year=2024, status="closed")
    source.add_transaction(1, 3, 2024, "100")

    march = loan_summary(1, 3, 2024, source)
    assert march.installment_for_month == Decimal("100")
    assert march.pending_total == Decimal("0")
    assert loan_summary(1, 4, 2024, source).loans == []
