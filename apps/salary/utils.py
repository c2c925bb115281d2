from calendar import monthrange
from collections import OrderedDict
from datetime import date
from decimal import Decimal

from .records import (
    ZERO,
    DailyLog,
    LineItem,
    MonthlyRollup,
    period_key,
    to_decimal,
    to_money,
)


def month_bounds(year, month):
    """First and last calendar day of the month, as plain dates."""
    last_day = monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def next_period(year, month):
    if month == 12:
        return year + 1, 1
    return year, month + 1


def effective_rate(base_rate, history, year=None, month=None):
    """
    Rate applicable to (year, month).

    ``history`` is an iterable of (effective_from_year, effective_from_month,
    rate). The latest entry not after the target month wins; otherwise the
    base rate is returned. Without a target period the base rate is used.
    """
    if year is None or month is None:
        return base_rate
    target = period_key(year, month)
    applicable = [
        (period_key(y, m), rate)
        for y, m, rate in history
        if y and m and period_key(y, m) <= target
    ]
    if not applicable:
        return base_rate
    return max(applicable, key=lambda item: item[0])[1]


def entry_rate(entry, resolver):
    if entry.rate_snapshot is not None:
        return to_decimal(entry.rate_snapshot)
    return resolver.resolve(
        entry.part_type, entry.job_name, entry.work_date.year, entry.work_date.month
    )


def aggregate_day(work_date, entries, resolver):
    """
    Line items and total for one employee's day.

    Items keep the order the entries were recorded in. Rejected parts are
    never paid: amount = ok parts x rate.
    """
    items = []
    for entry in entries:
        rate = entry_rate(entry, resolver)
        ok_parts = entry.ok_parts
        items.append(LineItem(
            job_name=entry.job_name,
            part_type=entry.part_type,
            code=entry.code,
            part_name=entry.part_name,
            total_parts=entry.total_parts,
            rejection=entry.rejection,
            ok_parts=ok_parts,
            rate=rate,
            amount=to_money(Decimal(ok_parts) * rate),
        ))
    day_total = sum((item.amount for item in items), ZERO)
    return DailyLog(date=work_date, logs=items, day_total=day_total)


def rollup_month(employee, month, year, source, resolver):
    start, end = month_bounds(year, month)
    by_date = OrderedDict()
    for entry in source.list_work_logs(employee.id, start, end):
        if not start <= entry.work_date <= end:
            continue
        by_date.setdefault(entry.work_date, []).append(entry)

    daily_logs = [aggregate_day(d, by_date[d], resolver) for d in sorted(by_date)]
    month_total = sum((day.day_total for day in daily_logs), ZERO)
    return MonthlyRollup(
        employee_id=employee.id,
        employee_name=employee.name,
        month=month,
        year=year,
        daily_logs=daily_logs,
        month_total=month_total,
    )
