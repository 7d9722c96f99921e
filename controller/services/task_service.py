"""Task record service."""

from typing import List, Optional

from common.constants import TASK_RECORD_TYPE
from controller.models.patches import TaskDraft, TaskPatch
from controller.models.records import Task, TaskPriority, TaskStatus
from controller.services.base import RecordService
from store.schemas import WhereCondition

SUMMARY_FIELDS = (
    "Name",
    "Tags",
    "description_c",
    "status_c",
    "priority_c",
    "due_date_c",
    "assigned_to_c",
    "CreatedOn",
)


class TaskService(RecordService[Task]):
    record_type = TASK_RECORD_TYPE
    label = "Task"
    model = Task
    fields = (
        "Name",
        "Tags",
        "description_c",
        "status_c",
        "priority_c",
        "due_date_c",
        "assigned_to_c",
        "upload_c",
        "upload_session_c",
        "CreatedOn",
        "ModifiedOn",
        "CreatedBy",
        "ModifiedBy",
    )

    async def create(self, draft: TaskDraft) -> Task:
        return await self._create(draft.to_fields())

    async def update(self, task_id: int, patch: TaskPatch) -> Optional[Task]:
        """Send only the fields set on the patch; omitted fields stay untouched in the store."""
        return await self._update(task_id, patch.to_fields())

    async def update_status(self, task_id: int, status: TaskStatus) -> Optional[Task]:
        return await self.update(task_id, TaskPatch(status=status))

    async def update_priority(self, task_id: int, priority: TaskPriority) -> Optional[Task]:
        return await self.update(task_id, TaskPatch(priority=priority))

    async def assign_task(self, task_id: int, assignee_id: Optional[int]) -> Optional[Task]:
        return await self.update(task_id, TaskPatch(assigned_to=assignee_id))

    async def get_tasks_by_status(self, status: TaskStatus) -> List[Task]:
        where = [WhereCondition(field_name="status_c", values=[TaskStatus(status).value])]
        return await self.fetch(where=where, fields=SUMMARY_FIELDS)

    async def get_tasks_by_priority(self, priority: TaskPriority) -> List[Task]:
        where = [WhereCondition(field_name="priority_c", values=[TaskPriority(priority).value])]
        return await self.fetch(where=where, fields=SUMMARY_FIELDS)
