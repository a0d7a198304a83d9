"""
Batch validation tests for schedule slots and menu meals
"""

import pytest

from nursery_server.core.exceptions import (
    ConfigMissingError,
    DayCapacityExceededError,
    DuplicateEntryError,
    ForbiddenFieldError,
    IncompleteStructureError,
    InvalidDurationError,
    MisalignedStartError,
)
from nursery_server.engine.rules import MenuRules, ScheduleRules
from nursery_server.engine.scope import MENU_SCOPE, SCHEDULE_SCOPE
from nursery_server.engine.validator import BatchValidator, group_by_day, validate_batch
from nursery_server.models.menu import MenuMealIn
from nursery_server.models.settings import DEFAULT_TIMING_CONFIG

from .conftest import TODAY, slot

schedule_rules = ScheduleRules()
menu_rules = MenuRules(meals_per_day=3)


def meal(day="MONDAY", meal_type="Lunch", **fields) -> MenuMealIn:
    return MenuMealIn(day_of_week=day, meal_type=meal_type, **fields)


def lunch(day="MONDAY", **extra) -> MenuMealIn:
    fields = dict(starter="Soup", main_course="Chicken", side_dish="Rice",
                  dessert="Yogurt", drink="Water")
    fields.update(extra)
    return meal(day, "Lunch", **fields)


class RecordingSweep:
    def __init__(self):
        self.runs = []

    def run(self, today):
        self.runs.append(today)


class TestScheduleBatch:
    """Slot batches against the default 08:45 / 09:30 / 12:15 / 13:00 grid"""

    def test_valid_week(self):
        entries = [
            slot("MONDAY", "08:45", "09:15"),
            slot("MONDAY", "13:00", "13:30", activity="Music"),
            slot("SUNDAY", "09:30", "10:00"),
        ]
        validate_batch(entries, schedule_rules, DEFAULT_TIMING_CONFIG)

    def test_missing_configuration(self):
        with pytest.raises(ConfigMissingError):
            validate_batch([slot()], schedule_rules, None)

    def test_duplicate_slot_names_the_day(self):
        entries = [slot("MONDAY", "08:45", "09:15"), slot("MONDAY", "08:45", "09:15", activity="Reading")]

        with pytest.raises(DuplicateEntryError) as exc_info:
            validate_batch(entries, schedule_rules, DEFAULT_TIMING_CONFIG)

        assert exc_info.value.day == "MONDAY"
        assert exc_info.value.details["day"] == "MONDAY"
        assert exc_info.value.error_code == "DUPLICATE_ENTRY"

    def test_same_slot_on_different_days_is_fine(self):
        entries = [slot("MONDAY", "08:45", "09:15"), slot("TUESDAY", "08:45", "09:15")]
        validate_batch(entries, schedule_rules, DEFAULT_TIMING_CONFIG)

    def test_day_capacity(self):
        entries = [
            slot("TUESDAY", start, end)
            for start, end in [("08:45", "09:15"), ("09:30", "10:00"), ("12:15", "12:45"),
                               ("13:00", "13:30"), ("13:45", "14:15")]
        ]

        with pytest.raises(DayCapacityExceededError) as exc_info:
            validate_batch(entries, schedule_rules, DEFAULT_TIMING_CONFIG)

        assert exc_info.value.details["limit"] == 4
        assert exc_info.value.day == "TUESDAY"

    def test_capacity_is_checked_before_duplicates(self):
        entries = [slot("MONDAY", "08:45", "09:15")] * 5

        with pytest.raises(DayCapacityExceededError):
            validate_batch(entries, schedule_rules, DEFAULT_TIMING_CONFIG)

    def test_duplicates_are_checked_before_alignment(self):
        entries = [slot("MONDAY", "09:00", "09:30"), slot("MONDAY", "09:00", "09:30")]

        with pytest.raises(DuplicateEntryError):
            validate_batch(entries, schedule_rules, DEFAULT_TIMING_CONFIG)

    def test_days_are_checked_in_first_seen_order(self):
        entries = [
            slot("WEDNESDAY", "08:00", "08:30"),
            slot("MONDAY", "08:45", "09:15"),
            slot("MONDAY", "08:45", "09:15"),
        ]

        with pytest.raises(MisalignedStartError) as exc_info:
            validate_batch(entries, schedule_rules, DEFAULT_TIMING_CONFIG)

        assert exc_info.value.day == "WEDNESDAY"

    def test_end_before_start(self):
        with pytest.raises(InvalidDurationError) as exc_info:
            validate_batch([slot("MONDAY", "09:15", "08:45")], schedule_rules, DEFAULT_TIMING_CONFIG)
        assert exc_info.value.index == 1

    def test_wrong_duration(self):
        with pytest.raises(InvalidDurationError) as exc_info:
            validate_batch([slot("MONDAY", "08:45", "09:30")], schedule_rules, DEFAULT_TIMING_CONFIG)
        assert exc_info.value.details["expected_minutes"] == 30

    def test_misaligned_start_lists_allowed_times(self):
        entries = [slot("MONDAY", "08:45", "09:15"), slot("MONDAY", "10:00", "10:30")]

        with pytest.raises(MisalignedStartError) as exc_info:
            validate_batch(entries, schedule_rules, DEFAULT_TIMING_CONFIG)

        error = exc_info.value
        assert error.index == 2
        assert error.details["allowed"] == ["08:45", "09:30", "12:15", "13:00"]
        assert "08:45, 09:30, 12:15, 13:00" in error.message

    def test_five_slot_configuration_allows_a_fifth_slot(self):
        config = DEFAULT_TIMING_CONFIG.model_copy(update={"slots_per_day": 5})
        entries = [
            slot("MONDAY", start, end)
            for start, end in [("08:45", "09:15"), ("09:30", "10:00"), ("10:15", "10:45"),
                               ("13:00", "13:30"), ("13:45", "14:15")]
        ]
        validate_batch(entries, schedule_rules, config)


class TestMenuBatch:

    def test_full_day(self):
        entries = [
            meal("MONDAY", "Breakfast", drink="Milk", snack="Bread"),
            lunch("MONDAY"),
            meal("MONDAY", "Gouter", drink="Juice", snack="Biscuit"),
        ]
        validate_batch(entries, menu_rules, None)

    def test_lunch_with_snack_is_forbidden(self):
        with pytest.raises(ForbiddenFieldError) as exc_info:
            validate_batch([lunch("MONDAY", snack="Cookie")], menu_rules, None)

        assert exc_info.value.details["fields"] == ["snack"]
        assert exc_info.value.error_code == "FORBIDDEN_FIELD"

    def test_incomplete_breakfast(self):
        with pytest.raises(IncompleteStructureError) as exc_info:
            validate_batch([meal("SUNDAY", "Breakfast", drink="Milk")], menu_rules, None)
        assert exc_info.value.details["fields"] == ["snack"]

    def test_empty_string_does_not_fill_a_field(self):
        with pytest.raises(IncompleteStructureError):
            validate_batch([meal("SUNDAY", "Gouter", drink="Milk", snack="")], menu_rules, None)

    def test_any_non_empty_value_counts_as_present(self):
        with pytest.raises(ForbiddenFieldError):
            validate_batch([lunch("MONDAY", snack=" ")], menu_rules, None)

        validate_batch([meal("SUNDAY", "Gouter", drink="Milk", snack=" ")], menu_rules, None)

    def test_breakfast_with_a_course(self):
        entry = meal("SUNDAY", "Breakfast", drink="Milk", snack="Bread", starter="Salad")

        with pytest.raises(ForbiddenFieldError) as exc_info:
            validate_batch([entry], menu_rules, None)
        assert exc_info.value.details["fields"] == ["starter"]

    def test_incomplete_is_reported_before_forbidden(self):
        entry = meal("SUNDAY", "Lunch", main_course="Fish", snack="Cookie")

        with pytest.raises(IncompleteStructureError):
            validate_batch([entry], menu_rules, None)

    def test_duplicate_meal_type(self):
        entries = [lunch("MONDAY"), lunch("MONDAY", main_course="Fish")]

        with pytest.raises(DuplicateEntryError) as exc_info:
            validate_batch(entries, menu_rules, None)
        assert exc_info.value.day == "MONDAY"

    def test_special_note_is_always_allowed(self):
        validate_batch([lunch("MONDAY", special_note="No nuts")], menu_rules, None)


def test_group_by_day_keeps_first_seen_order():
    entries = [slot("THURSDAY"), slot("MONDAY"), slot("THURSDAY", "09:30", "10:00")]

    grouped = group_by_day(entries)

    assert list(grouped) == ["THURSDAY", "MONDAY"]
    assert len(grouped["THURSDAY"]) == 2


class TestBatchValidator:

    def test_sweeps_after_an_accepted_batch(self):
        sweep = RecordingSweep()
        validator = BatchValidator(SCHEDULE_SCOPE, lambda: DEFAULT_TIMING_CONFIG, sweep)

        config = validator.validate([slot()], TODAY)

        assert config == DEFAULT_TIMING_CONFIG
        assert sweep.runs == [TODAY]

    def test_rejected_batch_does_not_sweep(self):
        sweep = RecordingSweep()
        validator = BatchValidator(SCHEDULE_SCOPE, lambda: DEFAULT_TIMING_CONFIG, sweep)

        with pytest.raises(MisalignedStartError):
            validator.validate([slot("MONDAY", "08:00", "08:30")], TODAY)
        assert sweep.runs == []

    def test_configuration_is_loaded_on_every_call(self):
        configs = [DEFAULT_TIMING_CONFIG, DEFAULT_TIMING_CONFIG.model_copy(update={"opening_time": "07:30"})]
        validator = BatchValidator(SCHEDULE_SCOPE, lambda: configs.pop(0), RecordingSweep())

        validator.validate([slot("MONDAY", "08:45", "09:15")], TODAY)
        with pytest.raises(MisalignedStartError):
            validator.validate([slot("MONDAY", "08:45", "09:15")], TODAY)

    def test_menu_batches_need_no_configuration(self):
        sweep = RecordingSweep()
        validator = BatchValidator(MENU_SCOPE, lambda: None, sweep)

        assert validator.validate([lunch()], TODAY) is None
        assert sweep.runs == [TODAY]
