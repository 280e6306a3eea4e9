"""
Pytest configuration and fixtures
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from todo_app.services.persistence_service import DataPersistenceService
from todo_app.services.todo_service import TodoService


@pytest.fixture
def data_file(tmp_path):
    """Path of a task data file inside a temporary directory"""
    return tmp_path / "data" / "tasks.json"


@pytest.fixture
def persistence_service(data_file):
    """Persistence service with temporary file"""
    return DataPersistenceService(data_file=data_file)


@pytest.fixture
def todo_service(persistence_service):
    """Todo service backed by a temporary data file"""
    return TodoService(persistence_service)


@pytest.fixture
def mock_persistence_service(data_file):
    """Mock persistence service"""
    service = MagicMock(spec=DataPersistenceService)
    service.save_tasks = AsyncMock(return_value=None)
    service.load_tasks = AsyncMock(return_value=[])
    service.get_data_file_path.return_value = data_file
    return service


@pytest.fixture
def service_with_mock(mock_persistence_service):
    """Todo service with mocked persistence"""
    return TodoService(mock_persistence_service)
