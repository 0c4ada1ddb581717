from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Read-only view of the identity store."""

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_display_name(self, normalized_name: str) -> Sequence[Employee]:
        """Employees whose whitespace-stripped name equals ``normalized_name``."""

        raise NotImplementedError
