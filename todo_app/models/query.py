"""
Query models: sort criteria and list views
"""

from enum import Enum


class SortCriterion(str, Enum):
    """Task sort criteria"""
    TITLE = "title"
    PRIORITY = "priority"
    CREATED_AT = "created_at"
    DUE_DATE = "due_date"
    COMPLETION_STATUS = "completion_status"


class TaskListFilter(str, Enum):
    """Views offered by the task list (all / completed / pending)"""
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
