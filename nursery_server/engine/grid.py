"""
Slot grid generation.

Turns the facility timing configuration into the ordered start times of the
day's activity slots. The day is laid out as::

    opening | breakfast | interval | slot | interval | slot ... |
    lunch | interval | nap | interval | slot | interval | slot ... |
    snack -> closing

The morning holds ceil(slots_per_day / 2) slots, so a five-slot day puts
three slots before lunch. The same layout feeds both batch validation and
the closing time shown in the settings screen.
"""

from typing import List

from ..models.settings import TimingConfig

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(value: str) -> int:
    """'HH:MM' -> minutes since midnight"""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Minutes since midnight -> zero padded 'HH:MM'"""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def morning_slot_count(slots_per_day: int) -> int:
    return (slots_per_day + 1) // 2


def generate_slot_minutes(config: TimingConfig) -> List[int]:
    """Slot start times in minutes since midnight"""
    starts: List[int] = []
    morning = morning_slot_count(config.slots_per_day)
    next_start = (
        time_to_minutes(config.opening_time)
        + config.breakfast_duration
        + config.slot_interval
    )

    for position in range(config.slots_per_day):
        if position == morning:
            next_start += config.lunch_duration + config.slot_interval
            next_start += config.nap_duration + config.slot_interval
        starts.append(next_start)
        next_start += config.slot_duration + config.slot_interval

    return starts


def generate_slot_grid(config: TimingConfig) -> List[str]:
    """Ordered 'HH:MM' start times, one per slot of the day"""
    return [minutes_to_time(m) for m in generate_slot_minutes(config)]


def closing_minutes(config: TimingConfig) -> int:
    last_start = generate_slot_minutes(config)[-1]
    return last_start + config.slot_duration + config.slot_interval + config.snack_duration


def closing_time(config: TimingConfig) -> str:
    """End of the day: last slot, one interval, then the afternoon snack"""
    return minutes_to_time(closing_minutes(config))
