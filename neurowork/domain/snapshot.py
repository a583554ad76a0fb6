"""The atomically visible state of the organisation."""
from __future__ import annotations

from dataclasses import dataclass, replace

from .entities import Employee, Product, Task, WorkloadEntry


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Employees, tasks and products at one instant.

    Collections are tuples so a committed snapshot can be shared with readers
    without copying.
    """

    employees: tuple[Employee, ...] = ()
    tasks: tuple[Task, ...] = ()
    products: tuple[Product, ...] = ()
    workload_ledger: tuple[WorkloadEntry, ...] = ()

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------
    def find_employee(self, employee_id: str) -> Employee | None:
        return next((item for item in self.employees if item.id == employee_id), None)

    def find_task(self, task_id: str) -> Task | None:
        return next((item for item in self.tasks if item.id == task_id), None)

    def find_product(self, product_id: str) -> Product | None:
        return next((item for item in self.products if item.id == product_id), None)

    # ------------------------------------------------------------------
    # copy-on-write helpers
    # ------------------------------------------------------------------
    def with_employee(self, employee: Employee) -> "Snapshot":
        employees = tuple(employee if item.id == employee.id else item for item in self.employees)
        return replace(self, employees=employees)

    def with_task(self, task: Task) -> "Snapshot":
        tasks = tuple(task if item.id == task.id else item for item in self.tasks)
        return replace(self, tasks=tasks)

    def with_product(self, product: Product) -> "Snapshot":
        products = tuple(product if item.id == product.id else item for item in self.products)
        return replace(self, products=products)
