# coding: utf-8

import logging
import re
from abc import ABC, abstractmethod
from types import MappingProxyType

from . import _common
from .entry import EntryBuilder, SCALAR_FIELDS

_logger = logging.getLogger(__name__)

_INT_BITS_32 = 32
_INT_BITS_64 = 64
_INT_PATTERN = re.compile(r'[+-]?[0-9]+', re.ASCII)

# token shapes in the remainder
_PAIR_PATTERN = re.compile(r'(\w+)=([^,\s]+)', re.ASCII)
_TOGGLE_PATTERN = re.compile(r'([+-])(\w+)', re.ASCII)
_WAKE_REASON_PATTERN = re.compile(r'wake_reason=[0-9]+:"([^"]+)"', re.ASCII)

# characters allowed around a toggle token
_TOGGLE_BEFORE = frozenset(" +-")
_TOGGLE_AFTER = frozenset(" +-,")


def parse_int(value, bits):
    """Parse a signed decimal integer that fits in the given bit width.

    Returns:
        int, or None if the value is not such an integer.
    """
    if _INT_PATTERN.fullmatch(value) is None:
        return None
    v = int(value)
    limit = 1 << (bits - 1)
    if -limit <= v < limit:
        return v
    else:
        return None


class FieldExtractor:
    """Parser for the remainder part of battery history lines.

    The remainder is a free-form sequence of tokens in different shapes
    (key=value pairs, +/- state toggles, quoted wake reasons).
    Each action scans the whole remainder for its own token shape,
    and writes the results into an :class:`~entry.EntryBuilder`.
    Actions do not consume the string, so they can be applied in any order.

    Actions do not know about quoting either: a key=value or +/- token
    inside the quoted text of a wake reason (e.g.,
    ``wake_reason=0:"irq status=bogus +gps x"``) is also picked up
    by ScalarPairs and Toggles.

    Args:
        actions (list of any action): Extraction rules.
    """

    def __init__(self, actions):
        self._l_act = actions

    def process_line(self, remainder, builder=None):
        """Apply all actions to a remainder string.

        Args:
            remainder (str): free-form part of a line.
            builder (:obj:`~entry.EntryBuilder`, optional):
                builder to populate. A new one is used if not given.

        Returns:
            :obj:`~entry.EntryBuilder`
        """
        if builder is None:
            builder = EntryBuilder()
        for act in self._l_act:
            act.do(remainder, builder)
        return builder


class _ActionBase(ABC):

    @abstractmethod
    def do(self, remainder, builder):
        raise NotImplementedError


# field variants for ScalarPairs

class _FieldBase(ABC):

    @abstractmethod
    def assign(self, builder, key, value):
        """Write value into builder.

        Returns:
            bool: False if the value is skipped.
        """
        raise NotImplementedError


class StringField(_FieldBase):
    """Store the value as is into Entry attribute `name`."""

    def __init__(self, name):
        self.name = name

    def assign(self, builder, key, value):
        builder.set_field(self.name, value)
        return True

    def __repr__(self):
        return "{0}({1!r})".format(self.__class__.__name__, self.name)


class _IntField(StringField):
    bits = _INT_BITS_64

    def assign(self, builder, key, value):
        v = parse_int(value, self.bits)
        if v is None:
            return False
        builder.set_field(self.name, v)
        return True


class Int32Field(_IntField):
    """Store a 32-bit integer into Entry attribute `name`."""
    bits = _INT_BITS_32


class Int64Field(_IntField):
    """Store a 64-bit integer into Entry attribute `name`."""
    bits = _INT_BITS_64


class RailChargeField(_FieldBase):
    """Store a 64-bit integer into rail_charges, keyed by the identifier."""

    def assign(self, builder, key, value):
        v = parse_int(value, _INT_BITS_64)
        if v is None:
            return False
        builder.rail_charges[key] = v
        return True

    def __repr__(self):
        return "RailChargeField()"


DEFAULT_RAILS = ("modemRailChargemAh", "wifiRailChargemAh")

_default_fields = {
    "status": StringField("status"),
    "health": StringField("health"),
    "plug": StringField("plug_type"),
    "data_conn": StringField("data_conn"),
    "phone_signal_strength": StringField("phone_signal_strength"),
    "wifi_suppl": StringField("wifi_supplicant_state"),
    "device_idle": StringField("device_idle_mode"),
    "volt": Int32Field("voltage"),
    "temp": Int32Field("temperature"),
    "wifi_signal_strength": Int32Field("wifi_signal_strength"),
    "charge": Int64Field("charge_micro_ah"),
}
_default_fields.update({rail: RailChargeField() for rail in DEFAULT_RAILS})
DEFAULT_FIELDS = MappingProxyType(_default_fields)


def iter_pairs(remainder):
    """Yields (identifier, value) of every key=value token."""
    for mo in _PAIR_PATTERN.finditer(remainder):
        yield mo.group(1), mo.group(2)


def iter_toggles(remainder):
    """Yields (state name, bool) of every accepted toggle token, in order.

    A ``+name`` or ``-name`` candidate is accepted only if:

    * it does not include "=" (e.g., ``+wake_lock=...`` is not a toggle),
    * the character before it, if any, is a space, "+" or "-",
    * the character after it, if any, is a space, "+", "-" or ",".

    The boundaries are tested at the position of the candidate itself,
    so a rejected occurrence does not hide a later valid one.
    """
    length = len(remainder)
    for mo in _TOGGLE_PATTERN.finditer(remainder):
        if "=" in mo.group(0):
            continue
        start, end = mo.span()
        if start > 0 and remainder[start - 1] not in _TOGGLE_BEFORE:
            continue
        if end < length and remainder[end] not in _TOGGLE_AFTER:
            continue
        yield mo.group(2), mo.group(1) == "+"


def iter_wake_reasons(remainder):
    """Yields the quoted text of every wake_reason token."""
    for mo in _WAKE_REASON_PATTERN.finditer(remainder):
        yield mo.group(1)


class ScalarPairs(_ActionBase):
    """Assign ``identifier=value`` tokens to Entry fields.

    Identifiers are looked up in a fixed table of field variants
    (:class:`StringField`, :class:`Int32Field`, :class:`Int64Field`,
    :class:`RailChargeField`). Unknown identifiers are ignored.
    Values that fail to parse as integers are skipped,
    leaving the field in its default.

    Args:
        table (dict, optional): identifier -> field variant.
            Defaults to DEFAULT_FIELDS.
        rails (list of str, optional): additional rail identifiers
            stored in rail_charges.
    """

    def __init__(self, table=None, rails=None):
        if table is None:
            table = DEFAULT_FIELDS
        self._table = dict(table)
        if rails is not None:
            for rail in rails:
                self._table[rail] = RailChargeField()
        self._definition_check(self._table)

    @staticmethod
    def _definition_check(table):
        for key, variant in table.items():
            if not isinstance(variant, _FieldBase):
                msg = "invalid field variant for {0}: {1!r}".format(key, variant)
                raise _common.ParserDefinitionError(msg)
            name = getattr(variant, "name", None)
            if name is not None and name not in SCALAR_FIELDS:
                msg = "unknown Entry field {0} for {1}".format(name, key)
                raise _common.ParserDefinitionError(msg)

    def do(self, remainder, builder):
        for key, value in iter_pairs(remainder):
            variant = self._table.get(key)
            if variant is None:
                continue
            if not variant.assign(builder, key, value):
                _logger.debug("skip %s=%s: not a valid %r", key, value, variant)
        return builder


class Toggles(_ActionBase):
    """Record ``+state`` / ``-state`` tokens in states.
    The last occurrence of a state name in the line wins.
    See :func:`iter_toggles` for the token boundaries.
    """

    def do(self, remainder, builder):
        for name, active in iter_toggles(remainder):
            builder.states[name] = active
        return builder


class WakeReasons(_ActionBase):
    """Record ``wake_reason=N:"text"`` tokens in wake_reasons."""

    def do(self, remainder, builder):
        builder.wake_reasons.update(iter_wake_reasons(remainder))
        return builder
