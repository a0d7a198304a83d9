"""
Activation sweep.

Idempotent lifecycle pass over one period family, run inline before every
read or write against that family. There is no background scheduler: date
transitions happen the first time anyone touches the data.

Stages, in order:

1. expire    - delete periods (entries first) whose end date is more than one
               day in the past
2. activate  - activate periods starting today
3. catch up  - activate periods whose start passed while nobody swept
4. resolve   - per scope, keep only the active period with the latest start

Each stage commits on its own. A failing stage stops the pass and raises
SweepError; stages already run keep their effect.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Dict, List

from ..core.exceptions import DatabaseError, SweepError
from ..core.database import DatabaseManager
from .scope import PeriodScope
from .store import PeriodStore

logger = logging.getLogger(__name__)

GRACE_PERIOD = timedelta(days=1)
ONE_DAY = timedelta(days=1)


@dataclass
class SweepReport:
    """What one pass changed"""
    scope: str
    today: date
    expired: List[int] = field(default_factory=list)
    activated: List[int] = field(default_factory=list)
    caught_up: List[int] = field(default_factory=list)
    resolved: Dict[Any, List[int]] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.expired or self.activated or self.caught_up or self.resolved)


class ActivationSweep:
    """Lifecycle maintenance for one period family"""

    def __init__(self, db: DatabaseManager, scope: PeriodScope):
        self.scope = scope
        self.store = PeriodStore(db, scope)

    def run(self, today: date) -> SweepReport:
        report = SweepReport(scope=self.scope.name, today=today)

        report.expired = self._stage("expire", lambda: self.store.delete_ended_before(today - GRACE_PERIOD))
        report.activated = self._stage("activate", lambda: self.store.activate_starting_between(today, today + ONE_DAY))
        report.caught_up = self._stage("catch_up", lambda: self.store.activate_started_before(today))
        report.resolved = self._stage("resolve", self._resolve_conflicts)

        if report.changed:
            logger.info(
                "%s sweep for %s: expired=%s activated=%s caught_up=%s resolved=%s",
                self.scope.name, today, report.expired, report.activated,
                report.caught_up, report.resolved,
            )
        else:
            logger.debug("%s sweep for %s: nothing to do", self.scope.name, today)
        return report

    def _stage(self, stage: str, action: Callable[[], Any]) -> Any:
        try:
            return action()
        except DatabaseError as e:
            raise SweepError(
                f"{self.scope.name} sweep failed during {stage}: {e.message}",
                stage=stage,
                scope=self.scope.name,
            ) from e

    def _resolve_conflicts(self) -> Dict[Any, List[int]]:
        """Delete every active period but the latest-starting one, per scope"""
        resolved: Dict[Any, List[int]] = {}
        # The active set is read inside the deleting transaction.
        with self.store.db.transaction():
            by_scope: Dict[Any, List] = defaultdict(list)
            for period in self.store.find_active():
                by_scope[period.scope_key].append(period)

            for scope_key, periods in by_scope.items():
                if len(periods) < 2:
                    continue
                stale = [p.id for p in periods[:-1]]
                logger.warning(
                    "%s scope %s has %d active periods, deleting %s",
                    self.scope.name, scope_key, len(periods), stale,
                )
                self.store.delete_periods(stale)
                resolved[scope_key] = stale
        return resolved
