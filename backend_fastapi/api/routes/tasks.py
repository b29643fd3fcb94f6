from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from backend_fastapi.api.deps import (
    add_subtask_use_case,
    add_tags_use_case,
    batch_update_use_case,
    create_task_use_case,
    current_user_id,
    delete_task_use_case,
    get_task_use_case,
    list_tasks_use_case,
    remove_subtask_use_case,
    statistics_use_case,
    undo_coordinator,
    update_priority_use_case,
    update_status_use_case,
    update_subtask_use_case,
    update_task_use_case,
)
from backend_fastapi.api.schemas import (
    BatchUpdateResponse,
    PriorityBody,
    StatisticsResponse,
    StatusBody,
    TagsBody,
)
from core.application.batch_update import BatchUpdateCommand, BatchUpdateUseCase
from core.application.create_task import (
    CreateTaskCommand,
    CreateTaskUseCase,
    SubtaskInput,
)
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
    UpdateSubtaskCommand,
    UpdateSubtaskUseCase,
)
from core.application.undo import UndoCoordinator
from core.application.update_task import UpdateTaskCommand, UpdateTaskUseCase
from core.domain.models.task import Task, TaskFilter, TaskPriority, TaskStatus

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post(
    "",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    summary="Crear una nueva tarea",
)
def create_task(
    cmd: CreateTaskCommand,
    user_id: str = Depends(current_user_id),
    use_case: CreateTaskUseCase = Depends(create_task_use_case),
) -> Task:
    """
    Crea una nueva tarea para el usuario.

    - **title** / **description**: obligatorios.
    - **status**, **priority**: por defecto pending / medium.
    - **due_date**: por defecto dentro de 7 días.
    - **subtasks**: subtareas iniciales (opcional).
    """
    return use_case.execute(user_id, cmd)


@router.get(
    "",
    response_model=list[Task],
    summary="Listar y filtrar tareas",
)
def list_tasks(
    status_filter: TaskStatus | None = Query(None, alias="status"),
    priority: TaskPriority | None = None,
    due_before: datetime | None = None,
    q: str | None = None,
    user_id: str = Depends(current_user_id),
    use_case: ListTasksUseCase = Depends(list_tasks_use_case),
) -> list[Task]:
    """
    Tareas del usuario, de la más reciente a la más antigua.

    - **status** / **priority**: filtros exactos.
    - **due_before**: vencimiento menor o igual a la fecha indicada.
    - **q**: texto a buscar en título o descripción.
    """
    filters = TaskFilter(
        status=status_filter, priority=priority, due_before=due_before, text=q
    )
    return use_case.execute(user_id, filters)


@router.get(
    "/statistics",
    response_model=StatisticsResponse,
    summary="Estadísticas de tareas del usuario",
)
def task_statistics(
    user_id: str = Depends(current_user_id),
    use_case: TaskStatisticsUseCase = Depends(statistics_use_case),
) -> StatisticsResponse:
    return StatisticsResponse.from_domain(use_case.execute(user_id))


@router.post(
    "/batch",
    response_model=BatchUpdateResponse,
    summary="Actualizar estado/prioridad de varias tareas",
)
def batch_update(
    cmd: BatchUpdateCommand,
    user_id: str = Depends(current_user_id),
    use_case: BatchUpdateUseCase = Depends(batch_update_use_case),
) -> BatchUpdateResponse:
    return BatchUpdateResponse(modified_count=use_case.execute(user_id, cmd))


@router.get(
    "/{task_id}",
    response_model=Task,
    summary="Obtener una tarea",
)
def get_task(
    task_id: UUID,
    user_id: str = Depends(current_user_id),
    use_case: GetTaskUseCase = Depends(get_task_use_case),
) -> Task:
    return use_case.execute(task_id, user_id)


@router.put(
    "/{task_id}",
    response_model=Task,
    summary="Editar una tarea existente",
)
def update_task(
    task_id: UUID,
    cmd: UpdateTaskCommand,
    user_id: str = Depends(current_user_id),
    use_case: UpdateTaskUseCase = Depends(update_task_use_case),
) -> Task:
    """
    Modifica los datos de una tarea; el cambio se puede deshacer durante 30s.

    - **title**, **description**: nuevos valores.
    - **status**, **priority**: si se omiten vuelven a pending / medium.
    - **due_date**: si se omite se conserva.
    """
    return use_case.execute(task_id, user_id, cmd)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar una tarea",
)
def delete_task(
    task_id: UUID,
    user_id: str = Depends(current_user_id),
    use_case: DeleteTaskUseCase = Depends(delete_task_use_case),
) -> None:
    use_case.execute(task_id, user_id)


@router.patch(
    "/{task_id}/status",
    response_model=Task,
    summary="Cambiar el estado de una tarea",
)
def update_status(
    task_id: UUID,
    body: StatusBody,
    user_id: str = Depends(current_user_id),
    use_case: UpdateStatusUseCase = Depends(update_status_use_case),
) -> Task:
    return use_case.execute(task_id, user_id, body.status)


@router.patch(
    "/{task_id}/priority",
    response_model=Task,
    summary="Cambiar la prioridad de una tarea",
)
def update_priority(
    task_id: UUID,
    body: PriorityBody,
    user_id: str = Depends(current_user_id),
    use_case: UpdatePriorityUseCase = Depends(update_priority_use_case),
) -> Task:
    return use_case.execute(task_id, user_id, body.priority)


@router.patch(
    "/{task_id}/tags",
    response_model=Task,
    summary="Añadir etiquetas (sin duplicados)",
)
def add_tags(
    task_id: UUID,
    body: TagsBody,
    user_id: str = Depends(current_user_id),
    use_case: AddTagsUseCase = Depends(add_tags_use_case),
) -> Task:
    return use_case.execute(task_id, user_id, body.tags)


@router.post(
    "/{task_id}/undo",
    response_model=Task,
    summary="Deshacer el último cambio (ventana de 30s)",
)
def undo_last_change(
    task_id: UUID,
    user_id: str = Depends(current_user_id),
    coordinator: UndoCoordinator = Depends(undo_coordinator),
) -> Task:
    return coordinator.undo(task_id, user_id)


@router.post(
    "/{task_id}/subtasks",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    summary="Añadir una subtarea",
)
def add_subtask(
    task_id: UUID,
    data: SubtaskInput,
    user_id: str = Depends(current_user_id),
    use_case: AddSubtaskUseCase = Depends(add_subtask_use_case),
) -> Task:
    return use_case.execute(task_id, user_id, data)


@router.patch(
    "/{task_id}/subtasks/{subtask_id}",
    response_model=Task,
    summary="Editar una subtarea",
)
def update_subtask(
    task_id: UUID,
    subtask_id: UUID,
    cmd: UpdateSubtaskCommand,
    user_id: str = Depends(current_user_id),
    use_case: UpdateSubtaskUseCase = Depends(update_subtask_use_case),
) -> Task:
    return use_case.execute(task_id, subtask_id, user_id, cmd)


@router.delete(
    "/{task_id}/subtasks/{subtask_id}",
    response_model=Task,
    summary="Eliminar una subtarea",
)
def remove_subtask(
    task_id: UUID,
    subtask_id: UUID,
    user_id: str = Depends(current_user_id),
    use_case: RemoveSubtaskUseCase = Depends(remove_subtask_use_case),
) -> Task:
    return use_case.execute(task_id, subtask_id, user_id)
