"""Unit tests for TaskRepository with a mocked session."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from tasks.domain.aggregates import Task
from tasks.domain.value_objects import TaskId, TaskScope
from tasks.infrastructure.models import TaskModel
from tasks.infrastructure.observability import TaskRepositoryProbe
from tasks.infrastructure.task_repository import TaskRepository
from tasks.ports.repositories import ITaskRepository

SCOPE = TaskScope(tenant_id="01ARZ3NDEKTSV4RRFFQ69G5FAV", user_id="user-1")


@pytest.fixture
def mock_session():
    """Create mock async session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_probe():
    """Create mock repository probe."""
    return MagicMock(spec=TaskRepositoryProbe)


@pytest.fixture
def repository(mock_session, mock_probe):
    """Create repository with mock session."""
    return TaskRepository(session=mock_session, probe=mock_probe)


def scalar_result(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def task_model(task_id: str, name: str = "Write") -> TaskModel:
    now = datetime.now(timezone.utc)
    return TaskModel(
        id=task_id,
        tenant_id=SCOPE.tenant_id,
        user_id=SCOPE.user_id,
        name=name,
        done=False,
        description=None,
        priority="medium",
        due_date=None,
        created_at=now,
        updated_at=now,
    )


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_implements_protocol(self, repository):
        """Repository should implement ITaskRepository protocol."""
        assert isinstance(repository, ITaskRepository)


class TestSave:
    """Tests for TaskRepository.save()."""

    @pytest.mark.asyncio
    async def test_adds_new_task(self, repository, mock_session, mock_probe):
        """A task without a row is inserted in its scope."""
        task = Task.create(scope=SCOPE, name="Write")
        mock_session.execute.return_value = scalar_result(None)

        await repository.save(task)

        added = mock_session.add.call_args[0][0]
        assert isinstance(added, TaskModel)
        assert added.id == task.id.value
        assert (added.tenant_id, added.user_id) == (SCOPE.tenant_id, SCOPE.user_id)
        assert added.name == "Write"
        mock_session.flush.assert_awaited_once()
        mock_probe.task_saved.assert_called_once_with(task.id.value, SCOPE.tenant_id)

    @pytest.mark.asyncio
    async def test_updates_existing_row(self, repository, mock_session):
        """An existing row is changed in place."""
        task = Task.create(scope=SCOPE, name="Write")
        model = task_model(task.id.value)
        mock_session.execute.return_value = scalar_result(model)
        task.apply_update(name="Rewrite", done=True)

        await repository.save(task)

        mock_session.add.assert_not_called()
        assert model.name == "Rewrite"
        assert model.done is True
        assert model.updated_at == task.updated_at

    @pytest.mark.asyncio
    async def test_writes_details(self, repository, mock_session):
        """description, priority and due_date are written to the row."""
        due = datetime(2025, 6, 1, tzinfo=timezone.utc)
        task = Task.create(
            scope=SCOPE,
            name="Write",
            description="Quarterly numbers",
            priority="high",
            due_date=due,
        )
        mock_session.execute.return_value = scalar_result(None)

        await repository.save(task)

        added = mock_session.add.call_args[0][0]
        assert added.description == "Quarterly numbers"
        assert added.priority == "high"
        assert added.due_date == due


class TestReads:
    """Tests for get() and list_in_scope()."""

    @pytest.mark.asyncio
    async def test_get_maps_to_domain(self, repository, mock_session):
        """A row becomes a Task in its scope."""
        task_id = TaskId.generate().value
        mock_session.execute.return_value = scalar_result(task_model(task_id))

        task = await repository.get(TaskId(task_id), SCOPE)

        assert task.id == TaskId(task_id)
        assert task.scope == SCOPE
        assert task.name == "Write"
        assert task.priority == "medium"
        assert task.description is None
        assert task.due_date is None

    @pytest.mark.asyncio
    async def test_get_missing(self, repository, mock_session):
        """No row gives None."""
        mock_session.execute.return_value = scalar_result(None)

        assert await repository.get(TaskId.generate(), SCOPE) is None

    @pytest.mark.asyncio
    async def test_list_in_scope(self, repository, mock_session, mock_probe):
        """Every row in the scope is returned in order."""
        result = MagicMock()
        result.scalars.return_value.all.return_value = [
            task_model(TaskId.generate().value, "a"),
            task_model(TaskId.generate().value, "b"),
        ]
        mock_session.execute.return_value = result

        tasks = await repository.list_in_scope(SCOPE)

        assert [t.name for t in tasks] == ["a", "b"]
        mock_probe.tasks_listed.assert_called_once_with(SCOPE.tenant_id, 2)

    @pytest.mark.asyncio
    async def test_list_in_scope_is_newest_first(self, repository, mock_session):
        """Rows are ordered by created_at descending."""
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_session.execute.return_value = result

        await repository.list_in_scope(SCOPE)

        stmt = mock_session.execute.call_args[0][0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        order_by = sql.split("ORDER BY", 1)[1]
        assert "tasks.created_at DESC" in order_by
        assert "tasks.id DESC" in order_by


class TestDelete:
    """Tests for TaskRepository.delete()."""

    @pytest.mark.asyncio
    async def test_deleted(self, repository, mock_session, mock_probe):
        """One affected row means deleted."""
        mock_session.execute.return_value = MagicMock(rowcount=1)
        task_id = TaskId.generate()

        assert await repository.delete(task_id, SCOPE) is True
        mock_probe.task_deleted.assert_called_once_with(task_id.value, SCOPE.tenant_id)

    @pytest.mark.asyncio
    async def test_not_found(self, repository, mock_session, mock_probe):
        """No affected rows means nothing to delete."""
        mock_session.execute.return_value = MagicMock(rowcount=0)

        assert await repository.delete(TaskId.generate(), SCOPE) is False
        mock_probe.task_deleted.assert_not_called()
