"""
Display formatting utilities for the presentation layer
"""

from typing import Optional
from todo_app.config.constants import DUE_DATE_FORMAT, TITLE_PREVIEW_LENGTH
from todo_app.models.task import Priority, Task


PRIORITY_LABELS = {
    Priority.LOW: "low",
    Priority.MEDIUM: "medium",
    Priority.HIGH: "high",
}


def format_due_date(task: Task) -> Optional[str]:
    """
    Format the due date relative to today

    Args:
        task: Task data

    Returns:
        "overdue by N days", "due today", "due tomorrow", "due in N days"
        or the bare date for completed tasks; None without due date
    """
    days = task.days_until_due
    if days is None:
        return None

    formatted_date = task.due_date.strftime(DUE_DATE_FORMAT)
    if task.is_completed:
        return formatted_date

    if days < 0:
        overdue = -days
        return f"{formatted_date} (overdue by {overdue} day{'s' if overdue != 1 else ''})"
    if days == 0:
        return f"{formatted_date} (due today)"
    if days == 1:
        return f"{formatted_date} (due tomorrow)"
    return f"{formatted_date} (due in {days} days)"


def format_task(task: Task) -> str:
    """
    Format a task as a single list line

    Args:
        task: Task data

    Returns:
        Formatted line, e.g. "[✓] Buy milk | ⚡ high | 📅 17.10.2026 | 🏷️ home, errands"
    """
    mark = "✓" if task.is_completed else " "
    title = task.title
    if len(title) > TITLE_PREVIEW_LENGTH:
        title = title[:TITLE_PREVIEW_LENGTH] + "..."

    parts = [f"[{mark}] {title}", f"⚡ {PRIORITY_LABELS[task.priority]}"]

    due = format_due_date(task)
    if due:
        parts.append(f"📅 {due}")

    if task.categories:
        parts.append(f"🏷️ {task.categories_string()}")

    return " | ".join(parts)


def format_task_counts(total: int, completed: int, pending: int) -> str:
    """Format the counters shown under the task list"""
    return f"Total: {total} | Completed: {completed} | Pending: {pending}"
