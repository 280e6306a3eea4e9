"""
Task model
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, List, Optional
from uuid import UUID, uuid4
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from todo_app.config.constants import (
    CATEGORY_SEPARATOR,
    NO_CATEGORIES_LABEL,
)
from todo_app.utils.date_utils import add_days, get_current_datetime, get_today, to_date
from todo_app.utils.error_handler import ValidationError


class Priority(str, Enum):
    """Task priority, ordered Low < Medium < High"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Position of the priority in the total order"""
        return _PRIORITY_RANKS[self]

    @classmethod
    def from_rank(cls, rank: int) -> "Priority":
        for priority, priority_rank in _PRIORITY_RANKS.items():
            if priority_rank == rank:
                return priority
        raise ValueError(f"Unknown priority rank: {rank}")

    @classmethod
    def parse(cls, value: Any) -> "Priority":
        """
        Parse priority from its name (any case), its rank, or a Priority

        Args:
            value: "High", "high", 2, Priority.HIGH...

        Returns:
            Priority member
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.from_rank(value)
        if isinstance(value, str):
            for priority in cls:
                if priority.value.lower() == value.strip().lower():
                    return priority
        raise ValueError(f"Unknown priority: {value!r}")

    def __lt__(self, other):
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank >= other.rank


_PRIORITY_RANKS = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
}


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings"""
    return value is None or not value.strip()


def normalize_categories(categories: Optional[Iterable[Any]]) -> List[Any]:
    """
    Trim categories, drop blank ones and remove case-insensitive duplicates

    The first occurrence wins and insertion order is kept.

    Args:
        categories: Raw category values

    Returns:
        Normalized category list
    """
    if categories is None:
        return []

    normalized: List[Any] = []
    seen = set()
    for category in categories:
        if not isinstance(category, str):
            # Left for pydantic to reject
            normalized.append(category)
            continue
        if is_blank(category):
            continue
        trimmed = category.strip()
        key = trimmed.casefold()
        if key in seen:
            continue
        seen.add(key)
        normalized.append(trimmed)
    return normalized


def coerce_due_date(value: Any) -> Any:
    """Reduce datetimes and ISO datetime strings to a calendar day"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


class TaskCreate(BaseModel):
    """Task creation model"""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = Field(None, alias="dueDate")
    categories: List[str] = Field(default_factory=list)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, value: Any) -> Any:
        return Priority.parse(value) if value is not None else Priority.MEDIUM

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, value: Any) -> Any:
        return coerce_due_date(value)

    @field_validator("categories", mode="before")
    @classmethod
    def validate_categories(cls, value: Any) -> Any:
        return normalize_categories(value)


class Task(BaseModel):
    """A single todo item"""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4, frozen=True)
    title: str
    is_completed: bool = Field(False, alias="isCompleted")
    created_at: datetime = Field(default_factory=get_current_datetime, alias="createdAt", frozen=True)
    completed_at: Optional[datetime] = Field(None, alias="completedAt")
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = Field(None, alias="dueDate")
    categories: List[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, value: Any) -> Any:
        if value is None:
            raise TypeError("Task title cannot be None")
        if isinstance(value, str) and is_blank(value):
            raise ValueError("Task title cannot be empty or whitespace")
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, value: Any) -> Any:
        return Priority.parse(value) if value is not None else Priority.MEDIUM

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, value: Any) -> Any:
        return coerce_due_date(value)

    @field_validator("categories", mode="before")
    @classmethod
    def validate_categories(cls, value: Any) -> Any:
        return normalize_categories(value)

    @model_validator(mode="after")
    def validate_completion(self) -> "Task":
        if not self.is_completed:
            self.completed_at = None
        elif self.completed_at is None:
            raise ValueError("Completed task must have a completion timestamp")
        return self

    @classmethod
    def from_create(cls, data: TaskCreate) -> "Task":
        """
        Build a new task from a creation model

        Args:
            data: Title, priority, due date and categories

        Returns:
            New incomplete task
        """
        return cls(
            title=data.title,
            priority=data.priority,
            due_date=data.due_date,
            categories=data.categories,
        )

    # ---- completion ----

    def mark_completed(self) -> None:
        """Mark the task as completed; completion time is kept on repeated calls"""
        if not self.is_completed:
            self.is_completed = True
            self.completed_at = get_current_datetime()

    def mark_incomplete(self) -> None:
        self.is_completed = False
        self.completed_at = None

    # ---- field updates ----

    def update_title(self, new_title: Optional[str]) -> None:
        """
        Update the task title

        Args:
            new_title: New title

        Raises:
            ValidationError: If new_title is None, empty or whitespace
        """
        if is_blank(new_title):
            raise ValidationError("Task title cannot be null, empty, or whitespace")
        self.title = new_title

    def update_priority(self, new_priority: Priority) -> None:
        self.priority = Priority.parse(new_priority)

    def update_due_date(self, new_due_date: Optional[date]) -> None:
        """Set the due date, or remove it with None"""
        self.due_date = to_date(new_due_date)

    # ---- due date queries ----

    @property
    def is_overdue(self) -> bool:
        return (
            self.due_date is not None
            and not self.is_completed
            and self.due_date < get_today()
        )

    @property
    def is_due_today(self) -> bool:
        return (
            self.due_date is not None
            and not self.is_completed
            and self.due_date == get_today()
        )

    def is_due_within(self, days: int) -> bool:
        """
        Check whether the task is due between today and today + days (inclusive)

        Args:
            days: Number of days to look ahead

        Returns:
            True if the task is pending and due in the window
        """
        if self.due_date is None or self.is_completed:
            return False

        today = get_today()
        return today <= self.due_date <= add_days(today, days)

    @property
    def days_until_due(self) -> Optional[int]:
        """Days until the due date (negative if overdue), None without due date"""
        if self.due_date is None:
            return None
        return (self.due_date - get_today()).days

    # ---- categories ----

    def add_category(self, category: Optional[str]) -> bool:
        """
        Add a category if it doesn't already exist (case-insensitive)

        Args:
            category: Category to add

        Returns:
            True if the category was added, False if it already existed

        Raises:
            ValidationError: If category is None, empty or whitespace
        """
        if is_blank(category):
            raise ValidationError("Category cannot be null, empty, or whitespace")

        trimmed = category.strip()
        if self.has_category(trimmed):
            return False

        self.categories.append(trimmed)
        return True

    def remove_category(self, category: Optional[str]) -> bool:
        """
        Remove a category (case-insensitive)

        Returns:
            True if the category was removed, False if it didn't exist
        """
        if is_blank(category):
            return False

        key = category.strip().casefold()
        for existing in self.categories:
            if existing.casefold() == key:
                self.categories.remove(existing)
                return True
        return False

    def has_category(self, category: Optional[str]) -> bool:
        if is_blank(category):
            return False
        key = category.strip().casefold()
        return any(existing.casefold() == key for existing in self.categories)

    def has_any_category(self, categories: Optional[Iterable[str]]) -> bool:
        if categories is None:
            return False
        return any(self.has_category(category) for category in categories)

    def has_all_categories(self, categories: Optional[Iterable[str]]) -> bool:
        if categories is None:
            return True
        return all(self.has_category(category) for category in categories)

    def clear_categories(self) -> None:
        self.categories.clear()

    def replace_categories(self, new_categories: Optional[Iterable[str]]) -> None:
        """Replace all categories; blank entries are skipped"""
        self.categories.clear()
        if new_categories is None:
            return
        for category in new_categories:
            if not is_blank(category):
                self.add_category(category)

    @property
    def category_count(self) -> int:
        return len(self.categories)

    def categories_string(self) -> str:
        """Comma-separated categories, or a placeholder when there are none"""
        if not self.categories:
            return NO_CATEGORIES_LABEL
        return CATEGORY_SEPARATOR.join(self.categories)
