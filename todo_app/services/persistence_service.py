"""
Persistence service for storing tasks in a JSON file
"""

import json
import os
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Union
from todo_app.config.constants import (
    APP_DATA_DIR_NAME,
    DATA_FILE_NAME,
    FILE_ENCODING,
    JSON_INDENT,
)
from todo_app.config.settings import settings
from todo_app.models.task import Task
from todo_app.utils.error_handler import PersistenceError
from todo_app.utils.logger import logger


def get_default_data_file_path() -> Path:
    """
    Get the default data file path in the per-user local application data directory

    Returns:
        Path like <local app data>/TodoApp/tasks.json
    """
    if sys.platform == "win32":
        base_dir = os.getenv("LOCALAPPDATA") or Path.home() / "AppData" / "Local"
    elif sys.platform == "darwin":
        base_dir = Path.home() / "Library" / "Application Support"
    else:
        base_dir = os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share"
    return Path(base_dir) / APP_DATA_DIR_NAME / DATA_FILE_NAME


class DataPersistenceService:
    """Service for saving and loading the whole task collection as JSON"""

    def __init__(self, data_file: Optional[Union[str, Path]] = None):
        """
        Initialize persistence service

        Args:
            data_file: Path to data file (optional, uses DATA_FILE_PATH setting or default location)
        """
        if data_file is None:
            data_file = settings.DATA_FILE_PATH or get_default_data_file_path()
        self.data_file = Path(data_file)
        self.logger = logger

        # Ensure directory exists
        self.data_file.parent.mkdir(parents=True, exist_ok=True)

    async def save_tasks(self, tasks: Iterable[Task]) -> None:
        """
        Save tasks to the data file, overwriting it

        Args:
            tasks: Tasks to save, in order

        Raises:
            PersistenceError: If serialization or writing fails
        """
        try:
            payload = [task.model_dump(mode="json", by_alias=True) for task in tasks]
            content = json.dumps(payload, ensure_ascii=False, indent=JSON_INDENT)
            self.data_file.write_text(content, encoding=FILE_ENCODING)
        except Exception as e:
            raise PersistenceError(
                f"Failed to save tasks to {self.data_file}", self.data_file, e
            ) from e
        self.logger.debug(f"Saved {len(payload)} tasks to {self.data_file}")

    async def load_tasks(self) -> List[Task]:
        """
        Load tasks from the data file

        Returns:
            Loaded tasks, or an empty list if the file is missing or empty

        Raises:
            PersistenceError: If reading or deserialization fails
        """
        try:
            if not self.data_file.exists():
                self.logger.debug(f"Data file {self.data_file} not found, starting empty")
                return []

            content = self.data_file.read_text(encoding=FILE_ENCODING)
            if not content.strip():
                return []

            data = json.loads(content)
            if data is None:
                return []
            if not isinstance(data, list):
                raise ValueError(f"Expected a JSON array of tasks, got {type(data).__name__}")

            tasks = [Task.model_validate(item) for item in data]
        except Exception as e:
            raise PersistenceError(
                f"Failed to load tasks from {self.data_file}", self.data_file, e
            ) from e
        self.logger.debug(f"Loaded {len(tasks)} tasks from {self.data_file}")
        return tasks

    def data_file_exists(self) -> bool:
        """Check if the data file exists"""
        return self.data_file.exists()

    def delete_data_file(self) -> bool:
        """
        Delete the data file if it exists

        Returns:
            True if the file was deleted, False if it didn't exist
        """
        if self.data_file.exists():
            self.data_file.unlink()
            self.logger.info(f"Deleted data file {self.data_file}")
            return True
        return False

    def get_data_file_path(self) -> Path:
        """Get the path to the data file"""
        return self.data_file
