from fastapi import Depends, Header, HTTPException, Request, status

from core.application.batch_update import BatchUpdateUseCase
from core.application.create_task import CreateTaskUseCase
from core.application.delete_task import DeleteTaskUseCase
from core.application.list_tasks import (
    GetTaskUseCase,
    ListTasksUseCase,
    TaskStatisticsUseCase,
)
from core.application.patch_task import (
    AddTagsUseCase,
    UpdatePriorityUseCase,
    UpdateStatusUseCase,
)
from core.application.subtasks import (
    AddSubtaskUseCase,
    RemoveSubtaskUseCase,
    UpdateSubtaskUseCase,
)
from core.application.undo import UndoCoordinator
from core.application.update_task import UpdateTaskUseCase
from infrastructure.container import Container


def get_container(request: Request) -> Container:
    return request.app.state.container


def current_user_id(x_user_id: str = Header(...)) -> str:
    """Identidad ya resuelta por el proxy de autenticación."""
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user id"
        )
    return user_id


def create_task_use_case(c: Container = Depends(get_container)) -> CreateTaskUseCase:
    return c.create_task


def update_task_use_case(c: Container = Depends(get_container)) -> UpdateTaskUseCase:
    return c.update_task


def delete_task_use_case(c: Container = Depends(get_container)) -> DeleteTaskUseCase:
    return c.delete_task


def get_task_use_case(c: Container = Depends(get_container)) -> GetTaskUseCase:
    return c.get_task


def list_tasks_use_case(c: Container = Depends(get_container)) -> ListTasksUseCase:
    return c.list_tasks


def statistics_use_case(
    c: Container = Depends(get_container),
) -> TaskStatisticsUseCase:
    return c.statistics


def update_status_use_case(
    c: Container = Depends(get_container),
) -> UpdateStatusUseCase:
    return c.update_status


def update_priority_use_case(
    c: Container = Depends(get_container),
) -> UpdatePriorityUseCase:
    return c.update_priority


def add_tags_use_case(c: Container = Depends(get_container)) -> AddTagsUseCase:
    return c.add_tags


def batch_update_use_case(c: Container = Depends(get_container)) -> BatchUpdateUseCase:
    return c.batch_update


def undo_coordinator(c: Container = Depends(get_container)) -> UndoCoordinator:
    return c.undo


def add_subtask_use_case(c: Container = Depends(get_container)) -> AddSubtaskUseCase:
    return c.add_subtask


def update_subtask_use_case(
    c: Container = Depends(get_container),
) -> UpdateSubtaskUseCase:
    return c.update_subtask


def remove_subtask_use_case(
    c: Container = Depends(get_container),
) -> RemoveSubtaskUseCase:
    return c.remove_subtask
