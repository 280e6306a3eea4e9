"""
Task management service
"""

from typing import Iterable, List, Optional, Sequence, Tuple
from uuid import UUID
from todo_app.models.query import SortCriterion, TaskListFilter
from todo_app.models.task import Priority, Task, TaskCreate, is_blank
from todo_app.services import task_query
from todo_app.services.persistence_service import DataPersistenceService
from todo_app.services.task_query import DateLike
from todo_app.utils.error_handler import ValidationError
from todo_app.utils.logger import logger


class TodoService:
    """
    Service owning the in-memory task collection

    Synchronous methods only change memory. Each ``*_async`` mutation runs
    its synchronous counterpart and, only when it succeeded, saves the whole
    collection through the persistence service.
    """

    def __init__(self, persistence_service: Optional[DataPersistenceService] = None):
        """
        Initialize todo service

        Args:
            persistence_service: Persistence service (optional, creates a default one)
        """
        self._tasks: List[Task] = []
        self.persistence = persistence_service or DataPersistenceService()
        self.logger = logger

    # ---- collection state ----

    @property
    def tasks(self) -> Tuple[Task, ...]:
        """Snapshot of all tasks in insertion order"""
        return tuple(self._tasks)

    @property
    def total_task_count(self) -> int:
        return len(self._tasks)

    @property
    def completed_task_count(self) -> int:
        return sum(1 for task in self._tasks if task.is_completed)

    @property
    def pending_task_count(self) -> int:
        return sum(1 for task in self._tasks if not task.is_completed)

    @staticmethod
    def _validate_title(title: Optional[str]) -> str:
        if is_blank(title):
            raise ValidationError("Task title cannot be null, empty, or whitespace")
        return title.strip()

    # ---- CRUD ----

    def add_task(
        self,
        title: Optional[str],
        priority: Priority = Priority.MEDIUM,
        due_date: Optional[DateLike] = None,
        categories: Optional[Iterable[str]] = None,
    ) -> Task:
        """
        Add a new task

        Args:
            title: Task title (trimmed before storage)
            priority: Task priority
            due_date: Optional due date
            categories: Optional categories

        Returns:
            The created task

        Raises:
            ValidationError: If title is None, empty or whitespace
        """
        data = TaskCreate(
            title=self._validate_title(title),
            priority=priority,
            due_date=due_date,
            categories=list(categories) if categories is not None else [],
        )
        task = Task.from_create(data)
        self._tasks.append(task)
        self.logger.debug(f"Task added: id='{task.id}', title='{task.title}'")
        return task

    def remove_task(self, task_id: UUID) -> bool:
        """
        Remove a task

        Returns:
            True if the task was found and removed
        """
        task = self.get_task(task_id)
        if task is None:
            return False
        self._tasks.remove(task)
        self.logger.debug(f"Task removed: id='{task_id}'")
        return True

    def get_task(self, task_id: UUID) -> Optional[Task]:
        return next((task for task in self._tasks if task.id == task_id), None)

    def toggle_completion(self, task_id: UUID) -> bool:
        """
        Flip the completion state of a task

        Returns:
            True if the task was found and toggled
        """
        task = self.get_task(task_id)
        if task is None:
            return False
        if task.is_completed:
            task.mark_incomplete()
        else:
            task.mark_completed()
        return True

    def edit_title(self, task_id: UUID, new_title: Optional[str]) -> bool:
        """
        Update the title of a task

        Args:
            task_id: Task ID
            new_title: New title (trimmed before storage)

        Returns:
            True if the task was found and updated

        Raises:
            ValidationError: If new_title is blank, whether or not the task exists
        """
        title = self._validate_title(new_title)
        task = self.get_task(task_id)
        if task is None:
            return False
        task.update_title(title)
        return True

    def update_priority(self, task_id: UUID, new_priority: Priority) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False
        task.update_priority(new_priority)
        return True

    def update_due_date(self, task_id: UUID, new_due_date: Optional[DateLike]) -> bool:
        """Set or remove (None) a task's due date; True if the task was found"""
        task = self.get_task(task_id)
        if task is None:
            return False
        task.update_due_date(new_due_date)
        return True

    def clear_all(self) -> None:
        self._tasks.clear()

    # ---- categories ----

    def add_category(self, task_id: UUID, category: Optional[str]) -> bool:
        """
        Add a category to a task

        Returns:
            True if the task was found and the category added,
            False if the task is missing or already has the category

        Raises:
            ValidationError: If category is blank, whether or not the task exists
        """
        if is_blank(category):
            raise ValidationError("Category cannot be null, empty, or whitespace")
        task = self.get_task(task_id)
        if task is None:
            return False
        return task.add_category(category)

    def remove_category(self, task_id: UUID, category: Optional[str]) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False
        return task.remove_category(category)

    def replace_categories(self, task_id: UUID, categories: Optional[Iterable[str]]) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False
        task.replace_categories(categories)
        return True

    def clear_categories(self, task_id: UUID) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False
        task.clear_categories()
        return True

    # ---- read views ----

    def get_tasks(self, view: TaskListFilter = TaskListFilter.ALL) -> List[Task]:
        """Tasks for a list view (all, completed or pending)"""
        view = TaskListFilter(view)
        if view == TaskListFilter.COMPLETED:
            return self.get_completed_tasks()
        if view == TaskListFilter.PENDING:
            return self.get_pending_tasks()
        return list(self._tasks)

    def get_completed_tasks(self) -> List[Task]:
        return [task for task in self._tasks if task.is_completed]

    def get_pending_tasks(self) -> List[Task]:
        return [task for task in self._tasks if not task.is_completed]

    def get_tasks_by_priority(self, priority: Priority) -> List[Task]:
        priority = Priority.parse(priority)
        return [task for task in self._tasks if task.priority == priority]

    def get_high_priority_tasks(self) -> List[Task]:
        return self.get_tasks_by_priority(Priority.HIGH)

    def get_medium_priority_tasks(self) -> List[Task]:
        return self.get_tasks_by_priority(Priority.MEDIUM)

    def get_low_priority_tasks(self) -> List[Task]:
        return self.get_tasks_by_priority(Priority.LOW)

    def get_overdue_tasks(self) -> List[Task]:
        return [task for task in self._tasks if task.is_overdue]

    def get_tasks_due_today(self) -> List[Task]:
        return [task for task in self._tasks if task.is_due_today]

    def get_tasks_due_within(self, days: int) -> List[Task]:
        return [task for task in self._tasks if task.is_due_within(days)]

    def get_tasks_with_due_dates(self) -> List[Task]:
        return [task for task in self._tasks if task.due_date is not None]

    def get_tasks_without_due_dates(self) -> List[Task]:
        return [task for task in self._tasks if task.due_date is None]

    def get_tasks_with_categories(self) -> List[Task]:
        return [task for task in self._tasks if task.categories]

    def get_tasks_without_categories(self) -> List[Task]:
        return [task for task in self._tasks if not task.categories]

    def get_tasks_by_category(self, category: str) -> List[Task]:
        return [task for task in self._tasks if task.has_category(category)]

    def get_tasks_by_any_category(self, categories: Iterable[str]) -> List[Task]:
        categories = list(categories) if categories is not None else None
        return [task for task in self._tasks if task.has_any_category(categories)]

    def get_tasks_by_all_categories(self, categories: Iterable[str]) -> List[Task]:
        categories = list(categories) if categories is not None else None
        return [task for task in self._tasks if task.has_all_categories(categories)]

    def get_all_categories(self) -> List[str]:
        """Distinct categories in use, sorted alphabetically"""
        return task_query.collect_categories(self._tasks)

    # ---- search, filter, sort ----

    def search_tasks(self, search_term: Optional[str], include_categories: bool = False) -> List[Task]:
        """
        Find tasks whose title contains the term (case-insensitive)

        Args:
            search_term: Substring to look for
            include_categories: Also match against category names

        Returns:
            Matching tasks

        Raises:
            ValidationError: If search_term is blank
        """
        term = task_query.validate_search_term(search_term)
        return [
            task for task in self._tasks
            if task_query.matches_term(task, term, include_categories)
        ]

    def search_tasks_any_terms(self, *search_terms: str, include_categories: bool = False) -> List[Task]:
        """Tasks matching any of the terms (OR)"""
        terms = task_query.valid_search_terms(search_terms)
        return [
            task for task in self._tasks
            if any(task_query.matches_term(task, term, include_categories) for term in terms)
        ]

    def search_tasks_all_terms(self, *search_terms: str, include_categories: bool = False) -> List[Task]:
        """Tasks matching every term (AND)"""
        terms = task_query.valid_search_terms(search_terms)
        return [
            task for task in self._tasks
            if all(task_query.matches_term(task, term, include_categories) for term in terms)
        ]

    def search_tasks_with_filters(
        self,
        search_term: Optional[str],
        is_completed: Optional[bool] = None,
        priority: Optional[Priority] = None,
        include_overdue: bool = False,
        include_due_today: bool = False,
    ) -> List[Task]:
        """
        Search by title, then narrow the result with filters

        Overdue takes precedence over due today.

        Raises:
            ValidationError: If search_term is blank
        """
        matches = self.search_tasks(search_term)
        return task_query.filter_tasks(
            matches,
            is_completed=is_completed,
            priority=priority,
            include_overdue=include_overdue,
            include_due_today=include_due_today,
        )

    def filter_tasks(
        self,
        is_completed: Optional[bool] = None,
        priority: Optional[Priority] = None,
        include_overdue: bool = False,
        include_due_today: bool = False,
        due_date_range: Optional[Tuple[DateLike, DateLike]] = None,
        categories: Optional[Sequence[str]] = None,
        match_all_categories: bool = False,
    ) -> List[Task]:
        """
        Tasks matching every given filter

        Only one due date filter applies: overdue, else due today, else the range.
        """
        return task_query.filter_tasks(
            self._tasks,
            is_completed=is_completed,
            priority=priority,
            include_overdue=include_overdue,
            include_due_today=include_due_today,
            due_date_range=due_date_range,
            categories=categories,
            match_all_categories=match_all_categories,
        )

    def get_tasks_sorted(
        self,
        primary_sort: SortCriterion,
        secondary_sort: Optional[SortCriterion] = None,
        descending_primary: bool = False,
        descending_secondary: bool = False,
    ) -> List[Task]:
        return task_query.sort_tasks(
            self._tasks,
            primary_sort,
            secondary_sort,
            descending_primary=descending_primary,
            descending_secondary=descending_secondary,
        )

    # ---- persistence ----

    async def load_tasks_async(self) -> None:
        """Replace the in-memory collection with the tasks stored on disk"""
        loaded = await self.persistence.load_tasks()

        seen_ids = set()
        tasks = []
        for task in loaded:
            if task.id in seen_ids:
                self.logger.warning(f"Skipping duplicate task id '{task.id}' in {self.persistence.get_data_file_path()}")
                continue
            seen_ids.add(task.id)
            tasks.append(task)

        self._tasks.clear()
        self._tasks.extend(tasks)
        self.logger.info(f"Loaded {len(self._tasks)} tasks")

    async def save_tasks_async(self) -> None:
        """Save the whole collection"""
        await self.persistence.save_tasks(self._tasks)

    async def _save_if(self, changed: bool) -> bool:
        if changed:
            await self.save_tasks_async()
        return changed

    async def add_task_async(
        self,
        title: Optional[str],
        priority: Priority = Priority.MEDIUM,
        due_date: Optional[DateLike] = None,
        categories: Optional[Iterable[str]] = None,
    ) -> Task:
        task = self.add_task(title, priority=priority, due_date=due_date, categories=categories)
        await self.save_tasks_async()
        return task

    async def remove_task_async(self, task_id: UUID) -> bool:
        return await self._save_if(self.remove_task(task_id))

    async def toggle_completion_async(self, task_id: UUID) -> bool:
        return await self._save_if(self.toggle_completion(task_id))

    async def edit_title_async(self, task_id: UUID, new_title: Optional[str]) -> bool:
        return await self._save_if(self.edit_title(task_id, new_title))

    async def update_priority_async(self, task_id: UUID, new_priority: Priority) -> bool:
        return await self._save_if(self.update_priority(task_id, new_priority))

    async def update_due_date_async(self, task_id: UUID, new_due_date: Optional[DateLike]) -> bool:
        return await self._save_if(self.update_due_date(task_id, new_due_date))

    async def add_category_async(self, task_id: UUID, category: Optional[str]) -> bool:
        return await self._save_if(self.add_category(task_id, category))

    async def remove_category_async(self, task_id: UUID, category: Optional[str]) -> bool:
        return await self._save_if(self.remove_category(task_id, category))

    async def replace_categories_async(self, task_id: UUID, categories: Optional[Iterable[str]]) -> bool:
        return await self._save_if(self.replace_categories(task_id, categories))

    async def clear_categories_async(self, task_id: UUID) -> bool:
        return await self._save_if(self.clear_categories(task_id))

    async def clear_all_async(self) -> None:
        self.clear_all()
        await self.save_tasks_async()
