"""
Batch validation for period entries.

Checks a full replacement batch of slots or meals before it is persisted.
Entries are grouped by day; for each day, in first-seen order, the checks run
as: day capacity, duplicates, then per-entry structural rules. The first
failure is raised.
"""

import logging
from collections import OrderedDict
from datetime import date
from typing import Any, Callable, List, Optional, Sequence

from ..core.exceptions import ConfigMissingError, DayCapacityExceededError, DuplicateEntryError
from ..models.settings import TimingConfig
from .grid import generate_slot_grid
from .scope import PeriodScope
from .sweep import ActivationSweep

logger = logging.getLogger(__name__)

ConfigLoader = Callable[[], Optional[TimingConfig]]


def group_by_day(entries: Sequence[Any]) -> "OrderedDict[str, List[Any]]":
    grouped: "OrderedDict[str, List[Any]]" = OrderedDict()
    for entry in entries:
        grouped.setdefault(entry.day_of_week, []).append(entry)
    return grouped


def validate_batch(entries: Sequence[Any], rules, config: Optional[TimingConfig]) -> None:
    """Raise the first rule violation found in the batch"""
    if config is None and rules.requires_config:
        raise ConfigMissingError("Nursery configuration not found")

    grid = generate_slot_grid(config) if config is not None else []
    limit = rules.max_per_day(config)

    for day, day_entries in group_by_day(entries).items():
        if len(day_entries) > limit:
            raise DayCapacityExceededError(
                f"The number of {rules.entry_label}s for {day} exceeds the limit of {limit}",
                day=day, limit=limit, count=len(day_entries),
            )

        seen = set()
        for index, entry in enumerate(day_entries, start=1):
            key = rules.duplicate_key(entry)
            if key in seen:
                raise DuplicateEntryError(
                    f"Duplicate {rules.entry_label} detected: {rules.describe(entry)}",
                    day=day, index=index,
                )
            seen.add(key)

        for index, entry in enumerate(day_entries, start=1):
            rules.check_entry(entry, index, config, grid)


class BatchValidator:
    """Validates a batch against fresh configuration, then sweeps"""

    def __init__(self, scope: PeriodScope, config_loader: ConfigLoader, sweep: ActivationSweep):
        self.scope = scope
        self.config_loader = config_loader
        self.sweep = sweep

    def validate(self, entries: Sequence[Any], today: date) -> Optional[TimingConfig]:
        """Validate and return the configuration the batch was checked against"""
        config = self.config_loader()
        validate_batch(entries, self.scope.rules, config)
        logger.debug("%s batch of %d entries accepted", self.scope.name, len(entries))
        # An accepted batch is also a lifecycle refresh point.
        self.sweep.run(today)
        return config
