from __future__ import annotations

from typing import Optional

from ..common.validators import normalize_name
from ..core.exceptions import IdentityResolutionError
from .model import Employee
from .repository import EmployeeRepository


class EmployeeDirectory:
    """Resolve free-text terminal names to stable employee ids.

    Name collisions are rejected instead of grouping different people together.
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def resolve(self, display_name: str) -> int:
        key = normalize_name(display_name)
        if not key:
            raise IdentityResolutionError("empty display name")

        matches = [e for e in self._employees.find_by_display_name(key) if e.is_active]
        if not matches:
            raise IdentityResolutionError(f"unknown employee {display_name!r}")
        if len(matches) > 1:
            raise IdentityResolutionError(f"{len(matches)} employees share the name {display_name!r}")
        return matches[0].employee_id

    def get(self, employee_id: int) -> Optional[Employee]:
        return self._employees.get_by_id(employee_id)
