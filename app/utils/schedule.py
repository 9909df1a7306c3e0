"""
Biweekly ("quincenal") due dates.

Installments only ever fall on the 1st or the 15th of a month.
"""
from datetime import date


def _first_of_next_month(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def next_on_or_after(d: date) -> date:
    """Closest anchor (1st or 15th) that is not before ``d``."""
    if d.day <= 1:
        return d.replace(day=1)
    if d.day <= 15:
        return d.replace(day=15)
    return _first_of_next_month(d)


def next_strictly_after(d: date) -> date:
    """Closest anchor (1st or 15th) strictly after ``d``."""
    if d.day <= 1:
        return d.replace(day=15)
    if d.day <= 15:
        return _first_of_next_month(d)
    return _first_of_next_month(d).replace(day=15)


def build_schedule(loan_date: date, installments_count: int) -> list[date]:
    """Due dates for installments 1..n, strictly increasing."""
    dates = []
    current = next_on_or_after(loan_date)
    for i in range(1, installments_count + 1):
        due = current if i == 1 else next_strictly_after(current)
        dates.append(due)
        current = due
    return dates
