# coding: utf-8

"""Flat view of an Entry for CSV-based reporting tools.

The projection is lossy and one-directional:
only status, health, voltage and temperature are kept.
"""

from dataclasses import dataclass

DESC_BATTERY_STATE = "Battery state change"
CATEGORY_BATTERY_STATE = "Battery State"
SOURCE_SYSTEM = "system"


@dataclass(frozen=True)
class FlatRecord:
    desc: str
    category: str
    start: int
    value: str
    source: str

    def as_row(self):
        """Returns the record as a tuple for csv.writer."""
        return (self.desc, self.category, self.start, self.value, self.source)


def project(entry):
    """Convert an :class:`~entry.Entry` into a :class:`FlatRecord`.

    Value is comma-joined ``key=value`` fragments of status, health,
    volt and temp in this order. Empty strings and non-positive numbers
    are omitted.
    """
    values = []
    if entry.status:
        values.append("status={0}".format(entry.status))
    if entry.health:
        values.append("health={0}".format(entry.health))
    if entry.voltage > 0:
        values.append("volt={0}".format(entry.voltage))
    if entry.temperature > 0:
        values.append("temp={0}".format(entry.temperature))

    return FlatRecord(desc=DESC_BATTERY_STATE,
                      category=CATEGORY_BATTERY_STATE,
                      start=entry.timestamp_ms,
                      value=",".join(values),
                      source=SOURCE_SYSTEM)
