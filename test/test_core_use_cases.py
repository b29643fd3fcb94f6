import unittest
from datetime import timedelta
from uuid import uuid4

from core.application.batch_update import BatchUpdateCommand
from core.application.create_task import CreateTaskCommand, SubtaskInput
from core.application.subtasks import UpdateSubtaskCommand
from core.application.update_task import UpdateTaskCommand
from core.domain.errors import NotFoundError, ValidationError
from core.domain.models.task import TaskFilter, TaskPriority, TaskStatus
from infrastructure.container import Container

from fakes import T0, FakeClock, InMemoryHistoryRepository, InMemoryTaskRepository


class _UseCaseTestBase(unittest.TestCase):
    user = "user-1"

    def setUp(self) -> None:
        self.clock = FakeClock()
        self.repo = InMemoryTaskRepository()
        self.history = InMemoryHistoryRepository()
        self.container = Container(self.repo, self.history, clock=self.clock)

    def _create(self, n_subtasks: int = 0, user: str | None = None, **kwargs):
        cmd = CreateTaskCommand(
            title=kwargs.pop("title", "Preparar informe"),
            description=kwargs.pop("description", "Informe trimestral de ventas"),
            subtasks=[SubtaskInput(title=f"Paso {i + 1}") for i in range(n_subtasks)],
            **kwargs,
        )
        return self.container.create_task.execute(user or self.user, cmd)


class CreateTaskTests(_UseCaseTestBase):
    def test_crear_tarea_aplica_valores_por_defecto(self) -> None:
        task = self._create()

        self.assertEqual(task.status, TaskStatus.PENDING)
        self.assertEqual(task.priority, TaskPriority.MEDIUM)
        self.assertEqual(task.progress, 0)
        self.assertEqual(task.color, "#3B82F6")
        self.assertEqual(task.due_date, T0 + timedelta(days=7))
        self.assertEqual(task.target_date, T0 + timedelta(days=7))
        self.assertEqual(task.created_at, T0)
        self.assertEqual(self.repo.get(task.id), task)

    def test_crear_tarea_con_subtareas_completadas_calcula_progreso(self) -> None:
        cmd = CreateTaskCommand(
            title="Mudanza",
            description="Organizar la mudanza",
            subtasks=[
                SubtaskInput(title="Cajas", status=TaskStatus.COMPLETED),
                SubtaskInput(title="Camión"),
            ],
        )

        task = self.container.create_task.execute(self.user, cmd)

        self.assertEqual(task.progress, 50)
        self.assertEqual(task.status, TaskStatus.IN_PROGRESS)
        self.assertEqual(task.subtasks[0].completed_at, T0)

    def test_titulo_corto_es_invalido(self) -> None:
        with self.assertRaises(ValidationError):
            self._create(title="ab")
        self.assertEqual(self.repo.list(self.user), [])

    def test_estado_desconocido_es_invalido(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self._create(status="archived")
        self.assertIn("Invalid status", ctx.exception.message)

    def test_tags_se_limpian_y_deduplican(self) -> None:
        task = self._create(tags=[" trabajo", "urgente", "trabajo", " "])

        self.assertEqual(task.tags, ["trabajo", "urgente"])


class UpdateAndUndoTests(_UseCaseTestBase):
    def test_update_y_undo_restaura_el_estado_previo(self) -> None:
        task = self._create()

        self.container.update_task.execute(
            task.id,
            self.user,
            UpdateTaskCommand(title="A nuevo", description="Informe trimestral de ventas"),
        )
        self.clock.advance(10)
        restored = self.container.undo.undo(task.id, self.user)

        self.assertEqual(restored.title, "Preparar informe")
        self.assertEqual(self.repo.get(task.id).title, "Preparar informe")
        self.assertEqual(self.history.snapshots, [])

    def test_segundo_undo_no_tiene_nada_que_deshacer(self) -> None:
        task = self._create()
        self.container.update_priority.execute(task.id, self.user, "high")
        self.container.undo.undo(task.id, self.user)

        with self.assertRaises(NotFoundError) as ctx:
            self.container.undo.undo(task.id, self.user)
        self.assertEqual(ctx.exception.message, "No recent changes to undo")

    def test_undo_dentro_de_la_ventana(self) -> None:
        task = self._create()
        self.container.update_priority.execute(task.id, self.user, "high")

        self.clock.advance(29)
        restored = self.container.undo.undo(task.id, self.user)

        self.assertEqual(restored.priority, TaskPriority.MEDIUM)

    def test_undo_fuera_de_la_ventana_falla(self) -> None:
        task = self._create()
        self.container.update_priority.execute(task.id, self.user, "high")

        self.clock.advance(31)
        with self.assertRaises(NotFoundError):
            self.container.undo.undo(task.id, self.user)
        self.assertEqual(self.repo.get(task.id).priority, TaskPriority.HIGH)

    def test_undo_usa_el_snapshot_mas_reciente(self) -> None:
        task = self._create()
        self.container.update_priority.execute(task.id, self.user, "high")
        self.clock.advance(1)
        self.container.update_priority.execute(task.id, self.user, "low")

        restored = self.container.undo.undo(task.id, self.user)

        self.assertEqual(restored.priority, TaskPriority.HIGH)
        self.assertEqual(len(self.history.snapshots), 1)

    def test_undo_de_otro_usuario_no_encuentra_nada(self) -> None:
        task = self._create()
        self.container.update_priority.execute(task.id, self.user, "high")

        with self.assertRaises(NotFoundError):
            self.container.undo.undo(task.id, "intruso")

    def test_update_invalido_no_cambia_nada_ni_deja_snapshot(self) -> None:
        task = self._create()

        with self.assertRaises(ValidationError):
            self.container.update_task.execute(
                task.id,
                self.user,
                UpdateTaskCommand(title="Nuevo título", description="abc"),
            )

        self.assertEqual(self.repo.get(task.id), task)
        self.assertEqual(self.history.snapshots, [])

    def test_update_sin_estado_ni_prioridad_vuelve_a_los_defaults(self) -> None:
        task = self._create(status=TaskStatus.IN_PROGRESS, priority=TaskPriority.HIGH)
        due = task.due_date

        updated = self.container.update_task.execute(
            task.id,
            self.user,
            UpdateTaskCommand(title="Otro título", description="Otra descripción"),
        )

        self.assertEqual(updated.status, TaskStatus.PENDING)
        self.assertEqual(updated.priority, TaskPriority.MEDIUM)
        self.assertEqual(updated.due_date, due)

    def test_update_de_tarea_inexistente(self) -> None:
        with self.assertRaises(NotFoundError):
            self.container.update_task.execute(
                uuid4(),
                self.user,
                UpdateTaskCommand(title="Nada", description="No existe"),
            )

    def test_update_de_tarea_ajena_se_reporta_como_inexistente(self) -> None:
        task = self._create(user="otro")

        with self.assertRaises(NotFoundError):
            self.container.update_task.execute(
                task.id,
                self.user,
                UpdateTaskCommand(title="Robada", description="No debería pasar"),
            )
        self.assertEqual(self.repo.get(task.id).title, "Preparar informe")

    def test_purge_expired_elimina_snapshots_caducados(self) -> None:
        task = self._create()
        self.container.update_priority.execute(task.id, self.user, "high")
        self.clock.advance(31)

        self.assertEqual(self.container.undo.purge_expired(), 1)
        self.assertEqual(self.history.snapshots, [])


class PatchTests(_UseCaseTestBase):
    def test_update_status_completed_marca_completed_at(self) -> None:
        task = self._create()
        self.clock.advance(60)

        updated = self.container.update_status.execute(task.id, self.user, "completed")

        self.assertEqual(updated.status, TaskStatus.COMPLETED)
        self.assertEqual(updated.completed_at, T0 + timedelta(seconds=60))
        self.assertEqual(len(self.history.snapshots), 1)

    def test_update_status_invalido(self) -> None:
        task = self._create()

        with self.assertRaises(ValidationError):
            self.container.update_status.execute(task.id, self.user, "done")
        self.assertEqual(self.history.snapshots, [])

    def test_add_tags_hace_union_sin_duplicados(self) -> None:
        task = self._create(tags=["a", "b"])

        updated = self.container.add_tags.execute(task.id, self.user, ["b", "c"])

        self.assertEqual(updated.tags, ["a", "b", "c"])

    def test_delete_borra_la_tarea_y_su_historial(self) -> None:
        task = self._create()
        self.container.update_priority.execute(task.id, self.user, "high")

        self.container.delete_task.execute(task.id, self.user)

        self.assertIsNone(self.repo.get(task.id))
        self.assertEqual(self.history.snapshots, [])
        with self.assertRaises(NotFoundError):
            self.container.get_task.execute(task.id, self.user)


class BatchAndQueryTests(_UseCaseTestBase):
    def test_batch_solo_modifica_tareas_del_usuario(self) -> None:
        mine = [self._create(), self._create()]
        foreign = self._create(user="otro")

        modified = self.container.batch_update.execute(
            self.user,
            BatchUpdateCommand(
                task_ids=[mine[0].id, mine[1].id, foreign.id],
                status=TaskStatus.COMPLETED,
            ),
        )

        self.assertEqual(modified, 2)
        self.assertEqual(self.repo.get(mine[0].id).status, TaskStatus.COMPLETED)
        self.assertEqual(self.repo.get(foreign.id).status, TaskStatus.PENDING)
        self.assertEqual(self.history.snapshots, [])

    def test_batch_completed_marca_completed_at(self) -> None:
        task = self._create()
        self.clock.advance(60)

        self.container.batch_update.execute(
            self.user,
            BatchUpdateCommand(task_ids=[task.id], status=TaskStatus.COMPLETED),
        )

        stored = self.repo.get(task.id)
        self.assertEqual(stored.status, TaskStatus.COMPLETED)
        self.assertEqual(stored.completed_at, T0 + timedelta(seconds=60))

    def test_batch_completed_conserva_completed_at_previo(self) -> None:
        task = self._create()
        self.container.update_status.execute(task.id, self.user, "completed")
        self.container.update_status.execute(task.id, self.user, "pending")
        self.clock.advance(60)

        self.container.batch_update.execute(
            self.user,
            BatchUpdateCommand(task_ids=(task.id,), status=TaskStatus.COMPLETED),
        )

        self.assertEqual(self.repo.get(task.id).completed_at, T0)

    def test_batch_sin_cambios_es_invalido(self) -> None:
        task = self._create()

        with self.assertRaises(ValidationError):
            self.container.batch_update.execute(
                self.user, BatchUpdateCommand(task_ids=[task.id])
            )

    def test_batch_sin_ids_devuelve_cero(self) -> None:
        modified = self.container.batch_update.execute(
            self.user, BatchUpdateCommand(priority=TaskPriority.HIGH)
        )

        self.assertEqual(modified, 0)

    def test_list_filtra_por_usuario_estado_y_texto(self) -> None:
        self._create(title="Comprar pan")
        self.clock.advance(1)
        urgent = self._create(title="Pagar impuestos", priority=TaskPriority.HIGH)
        self._create(user="otro", title="Pagar alquiler")

        self.assertEqual(len(self.container.list_tasks.execute(self.user)), 2)
        result = self.container.list_tasks.execute(
            self.user, TaskFilter(priority=TaskPriority.HIGH, text="  pagar ")
        )
        self.assertEqual([t.id for t in result], [urgent.id])

    def test_estadisticas(self) -> None:
        a = self._create(priority=TaskPriority.HIGH)
        self._create()
        self._create(user="otro")
        self.container.update_status.execute(a.id, self.user, "completed")

        stats = self.container.statistics.execute(self.user)

        self.assertEqual(stats.total_tasks, 2)
        self.assertEqual(stats.completed_tasks, 1)
        self.assertEqual(stats.pending_tasks, 1)
        self.assertEqual(stats.high_priority_tasks, 1)
        self.assertEqual(stats.completion_rate, 50.0)


class SubtaskTests(_UseCaseTestBase):
    def _complete(self, task, index: int):
        return self.container.update_subtask.execute(
            task.id,
            task.subtasks[index].id,
            self.user,
            UpdateSubtaskCommand(status=TaskStatus.COMPLETED),
        )

    def test_completar_dos_de_cuatro_subtareas(self) -> None:
        task = self._create(n_subtasks=4)

        self._complete(task, 0)
        updated = self._complete(task, 1)

        self.assertEqual(updated.progress, 50)
        self.assertEqual(updated.status, TaskStatus.IN_PROGRESS)
        self.assertIsNone(updated.completed_at)

    def test_completar_todas_las_subtareas_completa_la_tarea(self) -> None:
        task = self._create(n_subtasks=2)

        self._complete(task, 0)
        self.clock.advance(5)
        updated = self._complete(task, 1)

        self.assertEqual(updated.progress, 100)
        self.assertEqual(updated.status, TaskStatus.COMPLETED)
        self.assertEqual(updated.completed_at, T0 + timedelta(seconds=5))

    def test_undo_de_subtarea_restaura_progreso(self) -> None:
        task = self._create(n_subtasks=2)
        self._complete(task, 0)

        restored = self.container.undo.undo(task.id, self.user)

        self.assertEqual(restored.progress, 0)
        self.assertEqual(restored.subtasks[0].status, TaskStatus.PENDING)

    def test_dependencia_invalida_no_persiste(self) -> None:
        task = self._create(n_subtasks=2)

        with self.assertRaises(ValidationError):
            self.container.update_subtask.execute(
                task.id,
                task.subtasks[0].id,
                self.user,
                UpdateSubtaskCommand(dependencies=[uuid4()]),
            )
        self.assertEqual(self.repo.get(task.id), task)
        self.assertEqual(self.history.snapshots, [])

    def test_add_subtask_recalcula_progreso(self) -> None:
        task = self._create(n_subtasks=1)
        self._complete(task, 0)

        updated = self.container.add_subtask.execute(
            task.id, self.user, SubtaskInput(title="Extra")
        )

        self.assertEqual(len(updated.subtasks), 2)
        self.assertEqual(updated.progress, 50)

    def test_remove_subtask_limpia_dependencias(self) -> None:
        task = self._create(n_subtasks=2)
        first, second = task.subtasks
        self.container.update_subtask.execute(
            task.id,
            second.id,
            self.user,
            UpdateSubtaskCommand(dependencies=[first.id]),
        )

        updated = self.container.remove_subtask.execute(task.id, first.id, self.user)

        self.assertEqual([s.id for s in updated.subtasks], [second.id])
        self.assertEqual(updated.subtasks[0].dependencies, [])

    def test_subtarea_inexistente(self) -> None:
        task = self._create(n_subtasks=1)

        with self.assertRaises(NotFoundError):
            self.container.remove_subtask.execute(task.id, uuid4(), self.user)


if __name__ == "__main__":
    unittest.main()
