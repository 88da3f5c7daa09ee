# coding: utf-8

"""Parsed record of one battery history line."""

import datetime
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import FrozenSet, Mapping

from . import _common

_EPOCH = datetime.datetime(1970, 1, 1)


def utcnow():
    """Current UTC time as a naive datetime, same basis as timestamp_ms."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def _empty_mapping():
    return MappingProxyType({})


@dataclass(frozen=True)
class Entry:
    """One parsed Format 2 line.

    Scalar fields keep their defaults (0 or "") when the line does not
    report them. A value that fails to parse as its declared kind is also
    left at the default, so 0 here does not tell a reported zero from
    a skipped value.

    The containers are always present, possibly empty:

    * states: state name -> bool (read-only mapping)
    * wake_reasons: frozenset of reason strings
    * rail_charges: rail name -> charge (read-only mapping)

    states and rail_charges are left out of the hash (mappings are unhashable),
    so equal entries hash equal.
    """
    timestamp: datetime.datetime
    timestamp_ms: int = 0
    timestamp_synthetic: bool = False
    sequence: int = 0
    state_bits: int = 0
    battery_percent: int = 0
    voltage: int = 0
    temperature: int = 0
    charge_micro_ah: int = 0
    status: str = ""
    health: str = ""
    plug_type: str = ""
    data_conn: str = ""
    phone_signal_strength: str = ""
    wifi_signal_strength: int = 0
    wifi_supplicant_state: str = ""
    device_idle_mode: str = ""
    states: Mapping[str, bool] = field(default_factory=_empty_mapping, hash=False)
    wake_reasons: FrozenSet[str] = field(default=frozenset())
    rail_charges: Mapping[str, int] = field(default_factory=_empty_mapping, hash=False)


# scalar attributes that field rules may assign
SCALAR_FIELDS = frozenset(f.name for f in fields(Entry)
                          if f.name not in ("timestamp", "states",
                                            "wake_reasons", "rail_charges"))


def _to_milliseconds(dt):
    if dt.tzinfo is not None:
        dt = dt.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return (dt - _EPOCH) // datetime.timedelta(milliseconds=1)


class EntryBuilder:
    """Mutable accumulator for one line, frozen by :meth:`build`.

    Field rules write scalars with :meth:`set_field` and fill
    the three containers directly. A builder must not be shared
    between lines.
    """

    def __init__(self):
        self.timestamp = None
        self.timestamp_synthetic = False
        self.scalars = {}
        self.states = {}
        self.wake_reasons = set()
        self.rail_charges = {}

    def set_header(self, d):
        """Take timestamp and numeric header items from a parsed header dict."""
        self.timestamp = d[_common.KEY_TIMESTAMP]
        self.timestamp_synthetic = d.get(_common.KEY_TIMESTAMP_SYNTHETIC, False)
        for key in ("sequence", "state_bits"):
            if key in d:
                self.set_field(key, d[key])
        return self

    def set_field(self, name, value):
        if name not in SCALAR_FIELDS:
            raise KeyError(name)
        self.scalars[name] = value

    def build(self):
        timestamp = self.timestamp
        synthetic = self.timestamp_synthetic
        if timestamp is None:
            timestamp = utcnow()
            synthetic = True
        kwargs = dict(self.scalars)
        kwargs["timestamp_ms"] = _to_milliseconds(timestamp)
        kwargs["timestamp_synthetic"] = synthetic
        return Entry(timestamp=timestamp,
                     states=MappingProxyType(dict(self.states)),
                     wake_reasons=frozenset(self.wake_reasons),
                     rail_charges=MappingProxyType(dict(self.rail_charges)),
                     **kwargs)

