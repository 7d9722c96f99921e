"""Session-local task collection mirrored from the record store."""

from typing import List, Optional

from common.constants import FILTER_ALL
from common.exceptions import RecordNotFoundError, StoreRequestError
from common.logging_config import get_logger
from controller.models.patches import TaskDraft, TaskPatch
from controller.models.records import Task, TaskPriority, TaskStatus
from controller.services.task_service import TaskService
from controller.validation import validate_task_name

logger = get_logger(__name__)


class TaskManager:
    """
    Keeps the loaded tasks newest first and mirrors every successful
    remote mutation into that list.

    Only the first page of the store is loaded; the active task set is
    expected to fit in it.
    """

    def __init__(self, task_service: TaskService):
        self.task_service = task_service
        self.tasks: List[Task] = []

    def cached(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    async def load(self) -> List[Task]:
        self.tasks = await self.task_service.get_all()
        logger.info(f"Loaded {len(self.tasks)} task(s)")
        return self.tasks

    async def get(self, task_id: int) -> Task:
        """Fetch a task from the store; raises RecordNotFoundError when it does not exist."""
        return await self.task_service.get_by_id(task_id)

    async def create(self, draft: TaskDraft) -> Task:
        """
        Create a task and put it at the top of the list.

        Raises:
            ValidationError: If the name is blank; nothing is sent to the store
        """
        validate_task_name(draft.name)
        task = await self.task_service.create(draft)
        self.tasks = [task] + self.tasks
        logger.info(f"Created task {task.id}")
        return task

    async def update(self, task_id: int, patch: TaskPatch) -> Task:
        """
        Apply a partial update remotely, then to the cached copy.

        Fields not set on the patch are left untouched in both places.

        Returns:
            The updated cached task

        Raises:
            RecordNotFoundError: If the task is not loaded; nothing is sent to the store
            ValidationError: If the patch sets a blank name
        """
        current = self.cached(task_id)
        if current is None:
            raise RecordNotFoundError(f"Task with ID {task_id} is not loaded")

        if "name" in patch.model_fields_set:
            validate_task_name(patch.name)

        if patch.is_empty():
            return current

        await self.task_service.update(task_id, patch)

        updated = patch.apply_to(self.cached(task_id) or current)
        self.tasks = [updated if task.id == task_id else task for task in self.tasks]

        logger.info(f"Updated task {task_id}: {sorted(patch.model_fields_set)}")
        return updated

    async def change_status(self, task_id: int, status: TaskStatus) -> Task:
        return await self.update(task_id, TaskPatch(status=status))

    async def delete(self, task_id: int) -> None:
        """Delete remotely, then drop from the list. Asking the user to confirm is up to the caller."""
        if not await self.task_service.delete(task_id):
            raise StoreRequestError(f"Store did not confirm deletion of task {task_id}")
        self.tasks = [task for task in self.tasks if task.id != task_id]
        logger.info(f"Deleted task {task_id}")

    def filter(self, status: str = FILTER_ALL, priority: str = FILTER_ALL, search: str = "") -> List[Task]:
        """
        Filter the cached tasks without touching the store.

        Args:
            status: Exact status, or "All"
            priority: Exact priority, or "All"
            search: Case-insensitive text looked up in name, description and tags; empty matches all

        Returns:
            Matching tasks in cache order
        """
        status_value = status.value if isinstance(status, TaskStatus) else status
        priority_value = priority.value if isinstance(priority, TaskPriority) else priority

        return [
            task for task in self.tasks
            if (status_value == FILTER_ALL or task.status.value == status_value)
            and (priority_value == FILTER_ALL or task.priority.value == priority_value)
            and (not search or task.matches_search(search))
        ]
