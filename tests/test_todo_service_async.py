"""
Tests for todo service persistence (async operations)
"""

import pytest
from datetime import date
from uuid import uuid4
from todo_app.models.task import Priority
from todo_app.services.persistence_service import DataPersistenceService
from todo_app.services.todo_service import TodoService
from todo_app.utils.error_handler import PersistenceError, ValidationError


@pytest.mark.asyncio
async def test_add_task_async_persists(todo_service, persistence_service):
    """Test that adding a task saves the collection"""
    task = await todo_service.add_task_async("Persisted", priority=Priority.HIGH)

    loaded = await persistence_service.load_tasks()
    assert [t.id for t in loaded] == [task.id]
    assert loaded[0].priority == Priority.HIGH


@pytest.mark.asyncio
async def test_add_task_async_blank_title_does_not_save(service_with_mock, mock_persistence_service):
    """Test that validation failures never reach persistence"""
    with pytest.raises(ValidationError):
        await service_with_mock.add_task_async("   ")

    mock_persistence_service.save_tasks.assert_not_called()


@pytest.mark.asyncio
async def test_mutations_save_whole_collection(service_with_mock, mock_persistence_service):
    """Test that each successful mutation saves once with every task"""
    first = service_with_mock.add_task("First")
    second = service_with_mock.add_task("Second")

    assert await service_with_mock.toggle_completion_async(first.id) is True
    assert await service_with_mock.edit_title_async(second.id, "Renamed") is True
    assert await service_with_mock.update_priority_async(second.id, Priority.LOW) is True
    assert await service_with_mock.update_due_date_async(second.id, date(2030, 1, 1)) is True
    assert await service_with_mock.add_category_async(first.id, "Work") is True
    assert await service_with_mock.replace_categories_async(first.id, ["Home"]) is True
    assert await service_with_mock.remove_category_async(first.id, "home") is True
    assert await service_with_mock.clear_categories_async(first.id) is True
    assert await service_with_mock.remove_task_async(first.id) is True

    assert mock_persistence_service.save_tasks.await_count == 9
    saved = mock_persistence_service.save_tasks.await_args.args[0]
    assert [t.title for t in saved] == ["Renamed"]


@pytest.mark.asyncio
async def test_not_found_mutations_skip_save(service_with_mock, mock_persistence_service):
    """Test that not-found results never trigger a save"""
    missing = uuid4()

    assert await service_with_mock.remove_task_async(missing) is False
    assert await service_with_mock.toggle_completion_async(missing) is False
    assert await service_with_mock.edit_title_async(missing, "x") is False
    assert await service_with_mock.update_priority_async(missing, Priority.HIGH) is False
    assert await service_with_mock.update_due_date_async(missing, None) is False
    assert await service_with_mock.add_category_async(missing, "Work") is False
    assert await service_with_mock.remove_category_async(missing, "Work") is False
    assert await service_with_mock.replace_categories_async(missing, ["Work"]) is False
    assert await service_with_mock.clear_categories_async(missing) is False

    mock_persistence_service.save_tasks.assert_not_called()


@pytest.mark.asyncio
async def test_not_found_mutations_do_not_create_file(todo_service, persistence_service):
    """Test that failed async mutations leave no data file behind"""
    missing = uuid4()

    assert await todo_service.remove_task_async(missing) is False
    assert await todo_service.toggle_completion_async(missing) is False
    assert await todo_service.edit_title_async(missing, "x") is False

    assert persistence_service.data_file_exists() is False


@pytest.mark.asyncio
async def test_duplicate_category_skips_save(service_with_mock, mock_persistence_service):
    """Test that adding an existing category is not saved"""
    task = service_with_mock.add_task("Task", categories=["Work"])

    assert await service_with_mock.add_category_async(task.id, "WORK") is False
    mock_persistence_service.save_tasks.assert_not_called()


@pytest.mark.asyncio
async def test_load_tasks_async_replaces_collection(todo_service, persistence_service):
    """Test that loading discards unsaved in-memory tasks"""
    saved = await todo_service.add_task_async("Saved")
    todo_service.add_task("Unsaved")

    await todo_service.load_tasks_async()

    assert [t.id for t in todo_service.tasks] == [saved.id]


@pytest.mark.asyncio
async def test_load_tasks_async_without_file(todo_service):
    """Test loading when no data file exists"""
    todo_service.add_task("In memory")

    await todo_service.load_tasks_async()

    assert todo_service.total_task_count == 0


@pytest.mark.asyncio
async def test_load_tasks_async_with_empty_file(todo_service, data_file):
    """Test loading an existing but empty data file"""
    data_file.write_text("", encoding="utf-8")

    await todo_service.load_tasks_async()

    assert todo_service.total_task_count == 0


@pytest.mark.asyncio
async def test_load_skips_duplicate_ids(service_with_mock, mock_persistence_service):
    """Test that duplicate ids in the file keep the first occurrence"""
    source = TodoService(mock_persistence_service)
    task = source.add_task("Original")
    mock_persistence_service.load_tasks.return_value = [task, task.model_copy(update={"title": "Copy"})]

    await service_with_mock.load_tasks_async()

    assert [t.title for t in service_with_mock.tasks] == ["Original"]


@pytest.mark.asyncio
async def test_save_and_reload_in_new_service(todo_service, data_file):
    """Test that a second service sees the saved tasks"""
    task = await todo_service.add_task_async("Shared", categories=["Home"])
    await todo_service.toggle_completion_async(task.id)

    other = TodoService(DataPersistenceService(data_file=data_file))
    await other.load_tasks_async()

    restored = other.get_task(task.id)
    assert restored is not None
    assert restored.is_completed is True
    assert restored.completed_at == task.completed_at
    assert restored.categories == ["Home"]


@pytest.mark.asyncio
async def test_persistence_failure_propagates_and_keeps_memory(tmp_path):
    """Test that save failures reach the caller and memory is intact"""
    target = tmp_path / "tasks.json"
    target.mkdir()
    service = TodoService(DataPersistenceService(data_file=target))

    with pytest.raises(PersistenceError):
        await service.add_task_async("Kept")

    assert [t.title for t in service.tasks] == ["Kept"]


@pytest.mark.asyncio
async def test_clear_all_async_saves_empty_collection(todo_service, persistence_service):
    """Test clearing and saving"""
    await todo_service.add_task_async("One")

    await todo_service.clear_all_async()

    assert await persistence_service.load_tasks() == []
    assert persistence_service.data_file_exists() is True


@pytest.mark.asyncio
async def test_save_tasks_async_unconditional(service_with_mock, mock_persistence_service):
    """Test explicit save with an empty collection"""
    await service_with_mock.save_tasks_async()

    mock_persistence_service.save_tasks.assert_awaited_once()
