"""
Search, filter and sort helpers over task sequences
"""

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union
from todo_app.models.query import SortCriterion
from todo_app.models.task import Priority, Task, is_blank
from todo_app.utils.date_utils import to_date
from todo_app.utils.error_handler import ValidationError


DateLike = Union[date, datetime]


def validate_search_term(search_term: Optional[str]) -> str:
    """
    Reject blank search terms

    Raises:
        ValidationError: If search_term is None, empty or whitespace
    """
    if is_blank(search_term):
        raise ValidationError("Search term cannot be null or empty")
    return search_term


def valid_search_terms(search_terms: Sequence[Optional[str]]) -> List[str]:
    """
    Keep the non-blank search terms

    Args:
        search_terms: Raw terms

    Returns:
        Non-blank terms

    Raises:
        ValidationError: If no term, or only blank terms, were given
    """
    if not search_terms:
        raise ValidationError("At least one search term must be provided")

    terms = [term for term in search_terms if not is_blank(term)]
    if not terms:
        raise ValidationError("At least one non-empty search term must be provided")
    return terms


def matches_term(task: Task, search_term: str, include_categories: bool = False) -> bool:
    """
    Case-insensitive substring match against the title (and optionally categories)

    Args:
        task: Task to check
        search_term: Substring to look for
        include_categories: Also match against category names

    Returns:
        True if the term is found
    """
    needle = search_term.casefold()
    if needle in task.title.casefold():
        return True
    if include_categories:
        return any(needle in category.casefold() for category in task.categories)
    return False


def filter_tasks(
    tasks: Iterable[Task],
    is_completed: Optional[bool] = None,
    priority: Optional[Priority] = None,
    include_overdue: bool = False,
    include_due_today: bool = False,
    due_date_range: Optional[Tuple[DateLike, DateLike]] = None,
    categories: Optional[Sequence[str]] = None,
    match_all_categories: bool = False,
) -> List[Task]:
    """
    Apply a conjunction of optional filters

    Due date filters are exclusive: overdue wins over due today,
    which wins over the date range.

    Args:
        tasks: Tasks to filter
        is_completed: Keep only completed (True) or pending (False) tasks
        priority: Keep only tasks with this priority
        include_overdue: Keep only overdue tasks
        include_due_today: Keep only tasks due today
        due_date_range: Inclusive (start, end) range on the due date's calendar day
        categories: Keep tasks having any (or all) of these categories
        match_all_categories: Require all categories instead of any

    Returns:
        Matching tasks in collection order
    """
    result = list(tasks)

    if is_completed is not None:
        result = [task for task in result if task.is_completed == is_completed]

    if priority is not None:
        wanted = Priority.parse(priority)
        result = [task for task in result if task.priority == wanted]

    if include_overdue:
        result = [task for task in result if task.is_overdue]
    elif include_due_today:
        result = [task for task in result if task.is_due_today]
    elif due_date_range is not None:
        start_date, end_date = (to_date(value) for value in due_date_range)
        result = [
            task for task in result
            if task.due_date is not None and start_date <= task.due_date <= end_date
        ]

    if categories:
        if match_all_categories:
            result = [task for task in result if task.has_all_categories(categories)]
        else:
            result = [task for task in result if task.has_any_category(categories)]

    return result


def _sorted_by(tasks: List[Task], criterion: SortCriterion, descending: bool) -> List[Task]:
    criterion = SortCriterion(criterion)

    if criterion == SortCriterion.DUE_DATE:
        # Tasks without a due date go last in both directions
        dated = [task for task in tasks if task.due_date is not None]
        undated = [task for task in tasks if task.due_date is None]
        return sorted(dated, key=lambda task: task.due_date, reverse=descending) + undated

    if criterion == SortCriterion.TITLE:
        key = lambda task: task.title.casefold()
    elif criterion == SortCriterion.PRIORITY:
        key = lambda task: task.priority.rank
    elif criterion == SortCriterion.CREATED_AT:
        key = lambda task: task.created_at
    else:
        key = lambda task: task.is_completed

    return sorted(tasks, key=key, reverse=descending)


def sort_tasks(
    tasks: Iterable[Task],
    primary: SortCriterion,
    secondary: Optional[SortCriterion] = None,
    descending_primary: bool = False,
    descending_secondary: bool = False,
) -> List[Task]:
    """
    Sort tasks by a primary and an optional secondary criterion

    Both passes are stable sorts: the secondary pass runs first, so the
    primary pass keeps the secondary order inside groups of equal primary keys.

    Args:
        tasks: Tasks to sort
        primary: Primary criterion
        secondary: Tie-breaking criterion
        descending_primary: Sort primary criterion descending
        descending_secondary: Sort secondary criterion descending

    Returns:
        New sorted list
    """
    result = list(tasks)
    if secondary is not None:
        result = _sorted_by(result, secondary, descending_secondary)
    return _sorted_by(result, primary, descending_primary)


def collect_categories(tasks: Iterable[Task]) -> List[str]:
    """
    Distinct categories in use, case-insensitively deduplicated

    The first-seen spelling is kept; the result is sorted alphabetically
    ignoring case.
    """
    seen: Dict[str, str] = {}
    for task in tasks:
        for category in task.categories:
            seen.setdefault(category.casefold(), category)
    return sorted(seen.values(), key=str.casefold)
