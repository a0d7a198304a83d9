"""
Period service
Administrative workflow shared by schedule and menu periods: creation rules,
date changes, deletion, entry batch replacement and the read views. Every
operation runs the activation sweep first.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel

from ..config.settings import settings
from ..core.clock import Clock, utc_today
from ..core.database import DatabaseManager, db_manager
from ..core.exceptions import (
    ActivePeriodExistsError,
    InvalidPeriodDatesError,
    PeriodNotFoundError,
    SweepError,
    ValidationError,
)
from ..engine.scope import PeriodScope
from ..engine.store import PeriodStore
from ..engine.sweep import ActivationSweep, SweepReport
from ..engine.validator import BatchValidator
from ..models.base import WEEK_DAYS
from ..models.period import Period, PeriodCreate, PeriodDetail, PeriodKind, PeriodUpdate
from .oplog import log_operation
from .settings_service import SettingsService

logger = logging.getLogger(__name__)


class PeriodService:
    """Period workflow for one scope family; subclasses set ``scope``"""

    scope: PeriodScope

    def __init__(
        self,
        db: DatabaseManager = None,
        clock: Clock = None,
        settings_service: SettingsService = None,
    ):
        self.db = db or db_manager
        self.clock = clock or utc_today
        self.store = PeriodStore(self.db, self.scope)
        self.sweep = ActivationSweep(self.db, self.scope)
        self.settings_service = settings_service or SettingsService(self.db)
        self.validator = BatchValidator(self.scope, self.settings_service.get_config, self.sweep)

    # Scope hooks

    def ensure_scope(self, scope_key: Any) -> None:
        """Raise when the scope key does not exist"""

    def scope_label(self, scope_key: Any) -> str:
        return str(scope_key)

    # Lifecycle

    def refresh(self, strict: bool = True) -> Optional[SweepReport]:
        """
        Run the activation sweep for today.

        Write paths pass strict=True and propagate a failure; read paths log
        it and carry on with whatever the store currently holds.
        """
        try:
            return self.sweep.run(self.clock())
        except SweepError as e:
            if strict:
                raise
            logger.warning("Serving %s data without a complete sweep (stage %s): %s",
                           self.scope.name, e.stage, e.message)
            return None

    # Periods

    def create_period(self, scope_key: Any, kind: PeriodKind, data: PeriodCreate,
                      actor_id: Optional[int] = None) -> Period:
        """Create a current (active now) or scheduled (future) period"""
        kind = PeriodKind(kind)
        today = self.clock()
        self.ensure_scope(scope_key)
        self._check_creation(kind, data, today)

        self.refresh()
        start = data.start_date or today
        if start <= today and self.store.find_active(scope_key):
            raise ActivePeriodExistsError(
                f"An active {self.scope.name} period already exists for {self.scope_label(scope_key)}",
                details={"scope_key": scope_key, "start_date": start.isoformat()},
            )

        if kind == PeriodKind.CURRENT:
            name = "-".join([
                self.scope_label(scope_key),
                data.start_date.isoformat() if data.start_date else "open",
                data.end_date.isoformat() if data.end_date else "open",
            ])
        else:
            name = data.name

        period = self.store.create(
            scope_key, name, start, data.end_date, is_active=kind == PeriodKind.CURRENT
        )
        log_operation(self.db, actor_id, f"{self.scope.name}_period_create",
                      {"period_id": period.id, "scope_key": scope_key, "kind": kind.value})
        return period

    def update_period(self, period_id: int, data: PeriodUpdate,
                      actor_id: Optional[int] = None) -> Period:
        """Change the dates of a period; activity follows the new start date"""
        provided = data.model_fields_set & {"start_date", "end_date"}
        if not provided:
            raise InvalidPeriodDatesError("At least one of start_date or end_date must be provided")
        today = self.clock()
        if data.start_date is not None:
            self._check_lead_time(data.start_date, today)

        self.refresh()
        period = self._require_period(period_id)
        start = data.start_date or period.start_date
        end = data.end_date if "end_date" in provided else period.end_date
        if end is not None and start >= end:
            raise InvalidPeriodDatesError("end_date must be after start_date")

        prefix = period.name.split("-")[0]
        name = f"{prefix}-{start.isoformat()}-{end.isoformat() if end else 'open'}"

        updated = self.store.update(
            period_id, start_date=start, end_date=end, is_active=today >= start, name=name
        )
        log_operation(self.db, actor_id, f"{self.scope.name}_period_update",
                      {"period_id": period_id, "start_date": start, "end_date": end})
        return updated

    def delete_period(self, period_id: int, actor_id: Optional[int] = None) -> None:
        self.refresh()
        self._require_period(period_id)
        self.store.delete_periods([period_id])
        log_operation(self.db, actor_id, f"{self.scope.name}_period_delete", {"period_id": period_id})

    def replace_entries(self, period_id: int, entries: Sequence[BaseModel],
                        actor_id: Optional[int] = None) -> PeriodDetail:
        """Validate a full batch and swap it in for the period's entries"""
        if not entries:
            raise ValidationError(f"No {self.scope.rules.entry_label}s provided")

        self.refresh()
        self._require_period(period_id)
        self.validator.validate(entries, self.clock())

        with self.db.transaction():
            # the post-validation sweep may have expired the period
            period = self._require_period(period_id)
            stored = self.store.replace_entries(period_id, entries)
            log_operation(self.db, actor_id, f"{self.scope.name}_entries_replace",
                          {"period_id": period_id, "count": len(stored)})
        return PeriodDetail(**period.model_dump(), entries=stored)

    # Read views

    def get_period(self, period_id: int) -> PeriodDetail:
        self.refresh(strict=False)
        return self._detail(self._require_period(period_id))

    def list_periods(self, scope_key: Any) -> Dict[str, List[PeriodDetail]]:
        """Active and upcoming periods of one scope"""
        self.ensure_scope(scope_key)
        self.refresh(strict=False)
        return {
            "current": [self._detail(p) for p in self.store.find_active(scope_key)],
            "upcoming": [self._detail(p) for p in self.store.find_upcoming(self.clock(), scope_key)],
        }

    def weekly_view(self, scope_key: Any) -> Dict[str, Any]:
        """Entries of the active period grouped by operating day"""
        self.ensure_scope(scope_key)
        self.refresh(strict=False)
        active = self.store.find_active(scope_key)
        if not active:
            raise PeriodNotFoundError(
                f"No active {self.scope.name} period found for {self.scope_label(scope_key)}"
            )
        period = active[-1]
        week: Dict[str, List[Dict[str, Any]]] = {day: [] for day in WEEK_DAYS}
        for entry in self.store.find_entries(period.id):
            week[entry["day_of_week"]].append(entry)
        return {
            "period_id": period.id,
            "name": period.name,
            "start_date": period.start_date,
            "end_date": period.end_date,
            "days": week,
        }

    # Helpers

    def _require_period(self, period_id: int) -> Period:
        period = self.store.get(period_id)
        if period is None:
            raise PeriodNotFoundError(
                f"{self.scope.name.capitalize()} period not found",
                details={"period_id": period_id},
            )
        return period

    def _detail(self, period: Period) -> PeriodDetail:
        return PeriodDetail(**period.model_dump(), entries=self.store.find_entries(period.id))

    def _check_creation(self, kind: PeriodKind, data: PeriodCreate, today: date) -> None:
        if kind == PeriodKind.SCHEDULED:
            if not data.name:
                raise ValidationError("A scheduled period needs a name")
            if data.start_date is None:
                raise InvalidPeriodDatesError("A scheduled period needs a start date")

        start = data.start_date or today
        if data.end_date is not None and data.end_date <= start:
            raise InvalidPeriodDatesError("end_date must be after start_date")
        if data.start_date is not None:
            self._check_lead_time(data.start_date, today)

    def _check_lead_time(self, start: date, today: date) -> None:
        if abs((start - today).days) > settings.period_lead_days:
            raise InvalidPeriodDatesError(
                f"start date must be within {settings.period_lead_days} days of today"
            )
