from datetime import date, datetime
from typing import Any, Optional


def parse_hire_date(hire_date_input: Any) -> Optional[date]:
    """
    Accept a date, a datetime or an ISO-format string.

    Returns None if the value is missing or malformed.
    """
    if hire_date_input is None:
        return None

    if isinstance(hire_date_input, datetime):
        return hire_date_input.date()
    if isinstance(hire_date_input, date):
        return hire_date_input
    if isinstance(hire_date_input, str):
        try:
            return datetime.strptime(hire_date_input[:10], "%Y-%m-%d").date()
        except (ValueError, TypeError):
            return None
    return None


def compute_tenure_months(hire_date_input: Any, as_of: Optional[date] = None) -> int:
    """
    Whole calendar months between hire_date and as_of.

    A month only counts once its day-of-month has been reached, so an
    employee hired on the 20th completes a month on the 20th of the next
    month. Missing, malformed or future hire dates give 0.
    """
    hire_date = parse_hire_date(hire_date_input)
    as_of = as_of or date.today()

    if hire_date is None or hire_date > as_of:
        return 0

    months = (as_of.year - hire_date.year) * 12 + (as_of.month - hire_date.month)
    if as_of.day < hire_date.day:
        months -= 1
    return max(months, 0)
