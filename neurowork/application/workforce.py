"""Application service layer for the workforce dashboard."""
from __future__ import annotations

import logging
from typing import Any, Callable

from neurowork.core import employees as employee_rules
from neurowork.core import products as product_rules
from neurowork.core import tasks as task_engine
from neurowork.core.views import VIEWS, tasks_for_employee
from neurowork.core.validation import AuthorizationError, NotFoundError, ValidationError, parse_flag
from neurowork.domain import Employee, Product, Snapshot, Task
from neurowork.infrastructure import (
    AnalysisClient,
    InMemoryPersistence,
    ProductReport,
    SnapshotStore,
    WorkloadReport,
    get_analysis_client,
)
from neurowork.infrastructure.analysis import (
    CHAT_FALLBACK,
    ChatHistory,
    fallback_company_report,
    fallback_product_report,
    fallback_workload_report,
)

logger = logging.getLogger(__name__)


class WorkforceService:
    """Coordinates workforce use cases on top of the snapshot store.

    Every mutating call names the acting employee. The task engine itself
    trusts the ids it is given; this layer is where the acting employee is
    checked against the operation.
    """

    def __init__(
        self,
        store: SnapshotStore,
        analysis_client: Callable[[], AnalysisClient] = get_analysis_client,
    ) -> None:
        self._store = store
        self._analysis_client = analysis_client

    @property
    def store(self) -> SnapshotStore:
        return self._store

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def snapshot(self) -> Snapshot:
        return self._store.snapshot

    def list_employees(self) -> list[Employee]:
        return employee_rules.sorted_team(self.snapshot().employees)

    def get_employee(self, employee_id: str) -> Employee:
        employee = self.snapshot().find_employee(employee_id)
        if employee is None:
            raise NotFoundError(f"employee {employee_id} not found")
        return employee

    def list_tasks(self, view: str = "all", *, employee_id: str | None = None) -> list[Task]:
        selector = VIEWS.get(view)
        if selector is None:
            raise ValidationError(f"unknown task view: {view}")
        tasks = selector(self.snapshot().tasks)
        if employee_id:
            tasks = tasks_for_employee(tasks, employee_id)
        return tasks

    def get_task(self, task_id: str) -> Task:
        return self._task_in(self.snapshot(), task_id)

    def list_products(self) -> list[Product]:
        return list(self.snapshot().products)

    def get_product(self, product_id: str) -> Product:
        return self._product_in(self.snapshot(), product_id)

    def company_overview(self) -> dict[str, object]:
        products = self.snapshot().products
        return {
            "history": product_rules.aggregate_company_history(products),
            "totals": product_rules.summarize_company(products),
            "margins": {product.id: product_rules.product_margin(product) for product in products},
        }

    # ------------------------------------------------------------------
    # session
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> Employee | None:
        return employee_rules.authenticate(self.snapshot(), email, password)

    def _actor(self, snapshot: Snapshot, actor_id: str | None, *, privileged: bool = False) -> Employee:
        if not actor_id:
            raise AuthorizationError("an acting employee is required")
        actor = snapshot.find_employee(actor_id)
        if actor is None:
            raise AuthorizationError(f"unknown acting employee {actor_id}")
        if privileged and not actor.access_level.is_privileged:
            raise AuthorizationError("only a ceo or manager may do this")
        return actor

    def _commit(
        self,
        actor_id: str | None,
        producer: Callable[[Snapshot, Employee], Snapshot],
        *,
        privileged: bool = False,
    ) -> Snapshot:
        """Check the actor and run ``producer`` inside one store commit.

        Returns the snapshot this call committed, so callers read their own
        write rather than whatever a later commit left behind.
        """

        def guarded(snapshot: Snapshot) -> Snapshot:
            actor = self._actor(snapshot, actor_id, privileged=privileged)
            return producer(snapshot, actor)

        return self._store.apply_mutation(guarded)

    @staticmethod
    def _task_in(snapshot: Snapshot, task_id: str) -> Task:
        task = snapshot.find_task(task_id)
        if task is None:
            raise NotFoundError(f"task {task_id} not found")
        return task

    @staticmethod
    def _product_in(snapshot: Snapshot, product_id: str) -> Product:
        product = snapshot.find_product(product_id)
        if product is None:
            raise NotFoundError(f"product {product_id} not found")
        return product

    # ------------------------------------------------------------------
    # task use cases
    # ------------------------------------------------------------------
    def create_task(self, actor_id: str | None, fields: dict[str, Any]) -> Task:
        created: list[Task] = []

        def producer(snapshot: Snapshot, actor: Employee) -> Snapshot:
            updated, task = task_engine.create_task(
                snapshot,
                title=fields.get("title", ""),
                description=fields.get("description", ""),
                long_description=fields.get("long_description"),
                type=fields.get("type", ""),
                priority=fields.get("priority", ""),
                estimated_hours=fields.get("estimated_hours"),
                required_skills=fields.get("required_skills"),
                is_group_task=parse_flag(fields.get("is_group_task"), "is_group_task"),
                required_people=fields.get("required_people"),
            )
            created.append(task)
            return updated

        self._commit(actor_id, producer, privileged=True)
        return created[0]

    def delete_task(self, actor_id: str | None, task_id: str) -> None:
        self._commit(
            actor_id,
            lambda snapshot, actor: task_engine.delete_task(snapshot, task_id),
            privileged=True,
        )

    def assign_task(self, actor_id: str | None, task_id: str) -> Task:
        snapshot = self._commit(
            actor_id,
            lambda snapshot, actor: task_engine.assign_individual(snapshot, task_id, actor.id),
        )
        return self._task_in(snapshot, task_id)

    def toggle_group_membership(self, actor_id: str | None, task_id: str) -> Task:
        snapshot = self._commit(
            actor_id,
            lambda snapshot, actor: task_engine.toggle_group_membership(snapshot, task_id, actor.id),
        )
        return self._task_in(snapshot, task_id)

    def update_progress(
        self,
        actor_id: str | None,
        task_id: str,
        progress: float,
        long_description: str | None = None,
    ) -> Task:
        snapshot = self._commit(
            actor_id,
            lambda snapshot, actor: task_engine.update_progress(snapshot, task_id, progress, long_description),
        )
        return self._task_in(snapshot, task_id)

    def add_note(self, actor_id: str | None, task_id: str, text: str) -> Task:
        snapshot = self._commit(actor_id, lambda snapshot, actor: task_engine.add_note(snapshot, task_id, text))
        return self._task_in(snapshot, task_id)

    def add_file(self, actor_id: str | None, task_id: str, name: str) -> Task:
        snapshot = self._commit(actor_id, lambda snapshot, actor: task_engine.add_file(snapshot, task_id, name))
        return self._task_in(snapshot, task_id)

    # ------------------------------------------------------------------
    # profiles
    # ------------------------------------------------------------------
    def update_profile(self, actor_id: str | None, employee_id: str, fields: dict[str, Any]) -> Employee:
        def producer(snapshot: Snapshot, actor: Employee) -> Snapshot:
            if actor.id != employee_id and not actor.access_level.is_privileged:
                raise AuthorizationError("employees may only edit their own profile")
            return employee_rules.update_profile(
                snapshot,
                employee_id,
                bio=fields.get("bio"),
                resume_link=fields.get("resume_link"),
                portfolio_link=fields.get("portfolio_link"),
                skills=fields.get("skills"),
            )

        snapshot = self._commit(actor_id, producer)
        employee = snapshot.find_employee(employee_id)
        if employee is None:
            raise NotFoundError(f"employee {employee_id} not found")
        return employee

    # ------------------------------------------------------------------
    # products
    # ------------------------------------------------------------------
    def update_product_description(self, actor_id: str | None, product_id: str, description: str) -> Product:
        snapshot = self._commit(
            actor_id,
            lambda snapshot, actor: product_rules.update_product_description(snapshot, product_id, description),
            privileged=True,
        )
        return self._product_in(snapshot, product_id)

    def add_dev_comment(self, actor_id: str | None, product_id: str, text: str) -> Product:
        snapshot = self._commit(
            actor_id,
            lambda snapshot, actor: product_rules.add_dev_comment(snapshot, product_id, actor.name, text),
        )
        return self._product_in(snapshot, product_id)

    def add_server_log(
        self,
        actor_id: str | None,
        product_id: str,
        kind: str,
        description: str,
        duration_minutes: int | str = 60,
    ) -> Product:
        snapshot = self._commit(
            actor_id,
            lambda snapshot, actor: product_rules.add_server_log(
                snapshot, product_id, kind, description, duration_minutes=duration_minutes
            ),
        )
        return self._product_in(snapshot, product_id)

    def report_bug(self, actor_id: str | None, product_id: str, fields: dict[str, Any]) -> Product:
        snapshot = self._commit(
            actor_id,
            lambda snapshot, actor: product_rules.report_bug(
                snapshot,
                product_id,
                severity=fields.get("severity", ""),
                title=fields.get("title", ""),
                description=fields.get("description", ""),
                reported_by=fields.get("reported_by") or actor.name,
            ),
        )
        return self._product_in(snapshot, product_id)

    def toggle_bug_status(self, actor_id: str | None, product_id: str, bug_id: str) -> Product:
        snapshot = self._commit(
            actor_id,
            lambda snapshot, actor: product_rules.toggle_bug_status(snapshot, product_id, bug_id),
        )
        return self._product_in(snapshot, product_id)

    # ------------------------------------------------------------------
    # AI analysis
    # ------------------------------------------------------------------
    # The client only ever sees the committed, immutable snapshot, so it
    # cannot change store state. Any failure degrades to a fallback report.
    def analyze_workload(self) -> WorkloadReport:
        snapshot = self.snapshot()
        try:
            return self._analysis_client().analyze_workload(snapshot.employees, snapshot.tasks)
        except Exception:
            logger.error("Workload analysis failed; returning fallback report", exc_info=True)
            return fallback_workload_report()

    def analyze_product(self, product_id: str) -> ProductReport:
        product = self.get_product(product_id)
        try:
            return self._analysis_client().analyze_product(product)
        except Exception:
            logger.error("Product analysis failed for %s; returning fallback report", product_id, exc_info=True)
            return fallback_product_report()

    def analyze_company(self) -> ProductReport:
        snapshot = self.snapshot()
        try:
            return self._analysis_client().analyze_company(snapshot.products)
        except Exception:
            logger.error("Company analysis failed; returning fallback report", exc_info=True)
            return fallback_company_report()

    def chat(self, message: str, history: ChatHistory = ()) -> str:
        snapshot = self.snapshot()
        try:
            return self._analysis_client().chat(message, history, snapshot.employees, snapshot.tasks)
        except Exception:
            logger.error("AI chat failed; returning fallback reply", exc_info=True)
            return CHAT_FALLBACK

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def reset_data(self, actor_id: str | None) -> None:
        """Discard the stored state and restore the default dataset."""

        self._actor(self.snapshot(), actor_id, privileged=True)
        self._store.reset()

    def reset(self) -> None:
        self._store.reset()


_service = WorkforceService(SnapshotStore(InMemoryPersistence()))


def configure_workforce_service(service: WorkforceService) -> None:
    """Install the service used by the HTTP routes."""

    global _service
    _service = service


def get_workforce_service() -> WorkforceService:
    """Return the singleton workforce service for the process."""

    return _service


def reset_workforce_state() -> None:
    """Reset the in-memory store (used in tests)."""

    _service.reset()
