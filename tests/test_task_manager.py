"""Tests for the task collection manager."""

from datetime import date

import pytest

from common.exceptions import RecordNotFoundError, StoreRequestError, StoreUnavailableError, ValidationError
from controller.models.patches import TaskDraft, TaskPatch
from controller.models.records import Reference, Task, TaskPriority, TaskStatus


def make_task(task_id, name, status='New', priority='Medium', description='', tags=''):
    return Task(Id=task_id, Name=name, status_c=status, priority_c=priority, description_c=description, Tags=tags)


@pytest.fixture
def seeded_store(fake_store):
    fake_store.seed('task_c', Name='Draft budget', status_c='New', priority_c='High', Tags='finance')
    fake_store.seed('task_c', Name='Upload scans', status_c='In Progress', priority_c='Medium',
                    description_c='Scan the signed contracts')
    fake_store.seed('task_c', Name='Archive photos', status_c='Completed', priority_c='Low', Tags='media')
    return fake_store


class TestLoad:

    @pytest.mark.asyncio
    async def test_load_orders_newest_first(self, task_manager, seeded_store):
        tasks = await task_manager.load()

        assert [t.name for t in tasks] == ['Archive photos', 'Upload scans', 'Draft budget']

    @pytest.mark.asyncio
    async def test_load_empty(self, task_manager):
        assert await task_manager.load() == []

    @pytest.mark.asyncio
    async def test_load_surfaces_remote_errors(self, task_manager, fake_store):
        fake_store.unavailable = True

        with pytest.raises(StoreUnavailableError):
            await task_manager.load()

        assert len(fake_store.calls_for('fetch')) == 1

    @pytest.mark.asyncio
    async def test_get_missing_task(self, task_manager):
        with pytest.raises(RecordNotFoundError, match='Task with ID 5 not found'):
            await task_manager.get(5)


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_prepends_with_defaults(self, task_manager, seeded_store):
        await task_manager.load()

        task = await task_manager.create(TaskDraft(name='Call vendor'))

        assert task_manager.tasks[0] is task
        assert task.status == TaskStatus.NEW
        assert task.priority == TaskPriority.MEDIUM
        assert len(task_manager.tasks) == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize('name', ['', '   '])
    async def test_create_blank_name_makes_no_remote_call(self, task_manager, fake_store, name):
        with pytest.raises(ValidationError, match='Task name is required'):
            await task_manager.create(TaskDraft(name=name))

        assert fake_store.calls == []
        assert task_manager.tasks == []

    @pytest.mark.asyncio
    async def test_create_failure_leaves_cache(self, task_manager, fake_store):
        fake_store.fail_create_names.add('Rejected')

        with pytest.raises(StoreRequestError):
            await task_manager.create(TaskDraft(name='Rejected'))

        assert task_manager.tasks == []


class TestUpdate:

    @pytest.mark.asyncio
    async def test_status_update_leaves_other_fields(self, task_manager, seeded_store):
        await task_manager.load()
        before = task_manager.tasks[1]

        updated = await task_manager.update(before.id, TaskPatch(status_c='Completed'))

        assert updated.status == TaskStatus.COMPLETED
        assert updated.model_dump(exclude={'status'}) == before.model_dump(exclude={'status'})
        assert seeded_store.updates_for('task_c', before.id) == [{'Id': before.id, 'status_c': 'Completed'}]

    @pytest.mark.asyncio
    async def test_change_status(self, task_manager, seeded_store):
        await task_manager.load()
        task_id = task_manager.tasks[0].id

        await task_manager.change_status(task_id, TaskStatus.ON_HOLD)

        assert task_manager.cached(task_id).status == TaskStatus.ON_HOLD

    @pytest.mark.asyncio
    async def test_update_merges_references_and_dates(self, task_manager, seeded_store):
        await task_manager.load()
        task_id = task_manager.tasks[0].id

        updated = await task_manager.update(task_id, TaskPatch(assigned_to=7, due_date='2024-06-30', upload=None))

        assert updated.assigned_to == Reference(id=7)
        assert updated.due_date == date(2024, 6, 30)
        assert updated.upload is None
        assert seeded_store.updates_for('task_c', task_id) == [
            {'Id': task_id, 'assigned_to_c': 7, 'due_date_c': '2024-06-30', 'upload_c': None}
        ]

    @pytest.mark.asyncio
    async def test_update_blank_name_rejected(self, task_manager, seeded_store):
        await task_manager.load()

        with pytest.raises(ValidationError):
            await task_manager.update(task_manager.tasks[0].id, TaskPatch(name=' '))

        assert seeded_store.calls_for('update') == []

    @pytest.mark.asyncio
    async def test_empty_patch_makes_no_remote_call(self, task_manager, seeded_store):
        await task_manager.load()
        task = task_manager.tasks[0]

        assert await task_manager.update(task.id, TaskPatch()) is task
        assert seeded_store.calls_for('update') == []

    @pytest.mark.asyncio
    async def test_update_task_not_loaded_makes_no_remote_call(self, task_manager, seeded_store):
        with pytest.raises(RecordNotFoundError, match='Task with ID 1 is not loaded'):
            await task_manager.update(1, TaskPatch(status=TaskStatus.COMPLETED))

        assert seeded_store.calls_for('update') == []
        assert seeded_store.tables['task_c'][1]['status_c'] == 'New'

    @pytest.mark.asyncio
    async def test_update_failure_leaves_cache(self, task_manager, seeded_store):
        await task_manager.load()
        task = task_manager.tasks[0]
        seeded_store.fail_update_when = lambda rtype, fields: True

        with pytest.raises(StoreRequestError):
            await task_manager.update(task.id, TaskPatch(name='Renamed'))

        assert task_manager.cached(task.id) is task


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_remote_then_local(self, task_manager, seeded_store):
        await task_manager.load()
        task_id = task_manager.tasks[0].id

        await task_manager.delete(task_id)

        assert task_manager.cached(task_id) is None
        assert task_id not in seeded_store.tables['task_c']

    @pytest.mark.asyncio
    async def test_delete_failure_keeps_task(self, task_manager, seeded_store):
        await task_manager.load()
        task_id = task_manager.tasks[0].id
        seeded_store.fail_delete_ids.add(task_id)

        with pytest.raises(StoreRequestError):
            await task_manager.delete(task_id)

        assert task_manager.cached(task_id) is not None


class TestFilter:

    @pytest.fixture
    def manager(self, task_manager):
        task_manager.tasks = [
            make_task(1, 'Draft budget', 'New', 'High', tags='finance'),
            make_task(2, 'Upload scans', 'In Progress', 'Medium', description='Scan the signed CONTRACTS'),
            make_task(3, 'Archive photos', 'Completed', 'Low', tags='media'),
            make_task(4, 'Review contract', 'New', 'Low'),
        ]
        return task_manager

    def test_all_returns_everything(self, manager):
        assert [t.id for t in manager.filter()] == [1, 2, 3, 4]

    def test_status_filter(self, manager):
        assert [t.id for t in manager.filter(status='New')] == [1, 4]

    def test_priority_filter_accepts_enum(self, manager):
        assert [t.id for t in manager.filter(priority=TaskPriority.LOW)] == [3, 4]

    def test_search_is_case_insensitive_across_fields(self, manager):
        assert [t.id for t in manager.filter(search='contract')] == [2, 4]
        assert [t.id for t in manager.filter(search='FINANCE')] == [1]

    def test_filters_combine(self, manager):
        assert [t.id for t in manager.filter(status='New', priority='Low', search='review')] == [4]
        assert manager.filter(status='Cancelled') == []

    def test_filter_is_exact_subset(self, manager):
        statuses = ['All'] + [s.value for s in TaskStatus]
        priorities = ['All'] + [p.value for p in TaskPriority]
        for status in statuses:
            for priority in priorities:
                for search in ['', 'an', 'photo']:
                    expected = [
                        t for t in manager.tasks
                        if status in ('All', t.status.value)
                        and priority in ('All', t.priority.value)
                        and (not search or any(search in v.lower() for v in (t.name, t.description, t.tags)))
                    ]
                    assert manager.filter(status, priority, search) == expected

    def test_filter_does_not_touch_store(self, manager, fake_store):
        manager.filter(status='New', search='x')

        assert fake_store.calls == []
