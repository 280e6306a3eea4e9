"""
Centralized date/time utilities
Timestamps are stored in UTC, due dates are compared against the local calendar day
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union


def get_current_datetime() -> datetime:
    """
    Get current datetime in UTC
    
    Returns:
        Current timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def get_today() -> date:
    """
    Get the current local calendar day
    
    Returns:
        Today's date
    """
    return date.today()


def to_date(value: Optional[Union[date, datetime]]) -> Optional[date]:
    """
    Reduce a date or datetime to its calendar day
    
    Args:
        value: Date, datetime or None
        
    Returns:
        Date without time-of-day, or None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def add_days(day: date, days: int) -> date:
    """Shift a calendar day by a number of days"""
    return day + timedelta(days=days)
