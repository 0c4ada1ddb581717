from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Identity record owned by the HR directory."""

    employee_id: int
    display_name: str
    employee_number: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    annual_salary: Decimal = Decimal("0")
    is_active: bool = True
