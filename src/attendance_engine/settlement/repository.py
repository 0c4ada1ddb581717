from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PeriodStatus
from .model import QuarterlySettlement, SettlementPeriod


class SettlementRepository(Protocol):
    def create_period(self, *, name: str, start_date: date, end_date: date) -> SettlementPeriod:
        raise NotImplementedError

    def get_period(self, period_id: int) -> Optional[SettlementPeriod]:
        raise NotImplementedError

    def list_periods(self) -> Sequence[SettlementPeriod]:
        raise NotImplementedError

    def update_status(self, period_id: int, *, expected: PeriodStatus, new: PeriodStatus) -> bool:
        """Compare-and-set on the status column; False when it was not ``expected``."""

        raise NotImplementedError

    def complete_with_settlements(self, period_id: int, settlements: Sequence[QuarterlySettlement]) -> None:
        """Store the rows and flip ``settlement_completed`` in one transaction.

        Raises ``SettlementConflictError`` (and stores nothing) when the flag
        was already set.
        """

        raise NotImplementedError

    def list_settlements(self, period_id: int) -> Sequence[QuarterlySettlement]:
        raise NotImplementedError

    def has_active_period_covering(self, day: date) -> bool:
        raise NotImplementedError
