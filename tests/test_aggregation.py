from datetime import date
from decimal import Decimal

from apps.salary.rates import RateResolver
from apps.salary.utils import aggregate_day, month_bounds, next_period, rollup_month


def test_single_entry_day_and_month(source):
    emp = source.add_employee(1, "Ravi")
    source.set_rate("rod", "ASSEMBLY", "2.50")
    source.add_log(1, date(2024, 3, 5), "rod", 100, rejection=5, job_name="ASSEMBLY")

    rollup = rollup_month(emp, 3, 2024, source, RateResolver(source))

    assert len(rollup.daily_logs) == 1
    day = rollup.daily_logs[0]
    assert day.day_total == Decimal("237.50")
    assert day.logs[0].ok_parts == 95
    assert rollup.month_total == Decimal("237.50")


def test_empty_day_totals_zero(source):
    day = aggregate_day(date(2024, 3, 5), [], RateResolver(source))
    assert day.logs == []
    assert day.day_total == Decimal("0")


def test_line_items_keep_entry_order(source):
    source.set_rate("sleeve", "CASTING", "0.75")
    source.set_rate("sleeve", "BORE GRINDING", "1.10")
    first = source.add_log(1, date(2024, 3, 5), "sleeve", 10, job_name="CASTING")
    second = source.add_log(1, date(2024, 3, 5), "sleeve", 10, job_name="BORE GRINDING")

    day = aggregate_day(date(2024, 3, 5), [second, first], RateResolver(source))

    assert [item.job_name for item in day.logs] == ["BORE GRINDING", "CASTING"]
    assert day.day_total == Decimal("18.50")


def test_month_total_is_sum_of_days_and_repeatable(source):
    emp = source.add_employee(1, "Ravi")
    source.set_rate("rod", "ASSEMBLY", "2.50")
    source.set_rate("pin", "Standard", "0.333")
    source.add_log(1, date(2024, 3, 9), "pin", 7)
    source.add_log(1, date(2024, 3, 1), "rod", 3, rejection=1, job_name="assembly")
    source.add_log(1, date(2024, 3, 9), "rod", 4, job_name="ASSEMBLY")
    source.add_log(1, date(2024, 4, 1), "rod", 50, job_name="ASSEMBLY")

    first = rollup_month(emp, 3, 2024, source, RateResolver(source))
    second = rollup_month(emp, 3, 2024, source, RateResolver(source))

    assert [d.date for d in first.daily_logs] == [date(2024, 3, 1), date(2024, 3, 9)]
    assert first.month_total == sum(d.day_total for d in first.daily_logs)
    assert first.month_total == second.month_total == Decimal("17.33")


def test_unpriced_job_counts_zero(source):
    emp = source.add_employee(1, "Ravi")
    source.add_log(1, date(2024, 3, 5), "rod", 20, job_name="UNKNOWN JOB")
    rollup = rollup_month(emp, 3, 2024, source, RateResolver(source))
    assert rollup.month_total == Decimal("0")
    assert rollup.daily_logs[0].logs[0].rate == Decimal("0")


def test_snapshot_rate_wins_over_catalog(source):
    emp = source.add_employee(1, "Ravi")
    source.set_rate("rod", "ASSEMBLY", "9.99")
    source.add_log(1, date(2024, 3, 5), "rod", 10, job_name="ASSEMBLY", rate_snapshot=Decimal("2.00"))
    assert rollup_month(emp, 3, 2024, source, RateResolver(source)).month_total == Decimal("20.00")


def test_rollup_output_shape(source):
    emp = source.add_employee(7, "Meena")
    data = rollup_month(emp, 2, 2024, source, RateResolver(source)).as_dict()
    assert data == {
        "employeeId": 7,
        "employeeName": "Meena",
        "month": 2,
        "year": 2024,
        "dailyLogs": [],
        "monthTotal": "0.00",
    }


def test_month_helpers():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert next_period(2024, 12) == (2025, 1)
    assert next_period(2024, 3) == (2024, 4)
