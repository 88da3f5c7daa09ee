# coding: utf-8

import copy
import datetime
import logging
import re
from abc import ABC, abstractmethod

from . import _common
from .entry import utcnow

_logger = logging.getLogger(__name__)

_KEY_TIMESTAMP = _common.KEY_TIMESTAMP
_KEY_TIMESTAMP_SYNTHETIC = _common.KEY_TIMESTAMP_SYNTHETIC
_KEY_REMAINDER = _common.KEY_REMAINDER

# keys for internal processing
_KEY_DATE = "date"
_KEY_TIME = "time"
_KEY_YEAR = "year"


class HeaderParser:
    """Parser for header parts of battery history lines.

    A HeaderParser rule is represented with a list of :class:`Item`.
    HeaderParser joins the item patterns with the separator into
    one regular expression, and tests that it matches the whole input line.
    If matched, HeaderParser extracts values for the items.

    One :class:`Remainder` item is mandatory; it keeps the free-form part
    of the line for the field extraction rules.

    Timestamps are reformatted from a :class:`MonthDay` item (value "date"),
    a :class:`Time` item (value "time") and the "year" in defaults,
    because Format 2 lines do not carry the year.
    If the combination is not a valid calendar timestamp (e.g., Feb 30),
    the current wall-clock time (UTC) is used instead
    and "timestamp_synthetic" is set to True.
    The line itself is not rejected in that case.

    Args:
        items (list of :class:`Item`): header format rule.
        separator (str, optional): Separator characters between items.
            Defaults to white spaces.
        defaults (dict, optional): Default values for items missing
            in the line. Usually {"year": ...}.
            If "year" is not given, the current year is used.
    """

    def __init__(self, items, separator=None, defaults=None):
        self._l_item = items
        self._defaults = defaults if defaults is not None else dict()

        self._remainder_check(items)
        self._duplication_check(items)

        restr = self.make_pattern_separator(items, separator)
        self._reobj = re.compile(restr, re.ASCII)

    @property
    def pattern(self):
        return self._reobj

    @staticmethod
    def _remainder_check(items):
        names = [item.value_name for item in items]
        if _KEY_REMAINDER not in names:
            msg = "one Remainder Item is mandatory in header rules"
            raise _common.ParserDefinitionError(msg)

    @staticmethod
    def _duplication_check(items):
        names = [item.match_name for item in items]
        if len(names) > len(set(names)):
            msg = "Given items include duplicated match names"
            raise _common.ParserDefinitionError(msg)

    @staticmethod
    def make_pattern_separator(items, separator):
        if separator is None:
            sep = r'\s+'
        else:
            sep = r'[' + re.escape(separator) + r']+'
        return '^' + sep.join(item.get_regex() for item in items) + '$'

    def _reformat_timestamp(self, ret):
        year = ret.pop(_KEY_YEAR, None)
        if year is None:
            year = datetime.datetime.now().year
        kwargs = {_KEY_YEAR: year}
        kwargs.update(ret.pop(_KEY_DATE, {}))
        kwargs.update(ret.pop(_KEY_TIME, {}))

        try:
            dt = datetime.datetime(**kwargs)
        except (TypeError, ValueError) as e:
            _logger.debug("invalid timestamp %s (%s); using current time",
                          kwargs, e)
            ret[_KEY_TIMESTAMP] = utcnow()
            ret[_KEY_TIMESTAMP_SYNTHETIC] = True
        else:
            ret[_KEY_TIMESTAMP] = dt
            ret[_KEY_TIMESTAMP_SYNTHETIC] = False
        return ret

    def process_line(self, line):
        """Parse header part of a line.

        Args:
            line (str): A log line without surrounding white spaces.

        Returns:
            dict: Parsed items, or None if the line does not match.
        """
        d_items = copy.copy(self._defaults)
        mo = self._reobj.match(line)
        if mo is None:
            return None
        for item in self._l_item:
            key, val = item.pick(mo)
            d_items[key] = val
        return self._reformat_timestamp(d_items)


class Item(ABC):
    """Base class of items, components of header parts."""
    _match_name = "variable"
    _value_name = "variable"

    @property
    @abstractmethod
    def pattern(self):
        """str: Get regular expression pattern string for this *Item class*."""
        raise NotImplementedError

    @property
    def match_name(self):
        """str: Group name of this Item in the combined pattern.
        Match names cannot be duplicated in a HeaderParser rule.
        """
        return self._match_name

    @property
    def value_name(self):
        """str: Key of this Item in the parsed header dict."""
        return self._value_name

    def test(self, string):
        """Test this Item will match the input string or not.
        Only for debugging rules; it compiles a new pattern for every call.

        Returns:
            re.Match or None
        """
        pattern = re.compile(r'^' + self.get_regex() + r'$', re.ASCII)
        return pattern.match(string)

    def get_regex(self):
        return r'(?P<' + self.match_name + r'>' + self.pattern + ')'

    def pick(self, mo):
        """Returns a tuple of :attr:`~Item.value_name` and the value
        extracted by :meth:`Item.pick_value`."""
        return self.value_name, self.pick_value(mo)

    def pick_value(self, mo):
        """Get a value from the MatchObject. Defaults to the matched string."""
        return mo[self.match_name]


class MonthDay(Item):
    """Item for month and day without year.

    | e.g., :samp:`01-11` for January 11
    """
    _match_name = "monthday"
    _value_name = _KEY_DATE

    @property
    def pattern(self):
        return r'(?P<month>[0-9]{2})-(?P<day>[0-9]{2})'

    def pick_value(self, mo):
        """Returns dict of month and day (not validated as a calendar date)."""
        return {"month": int(mo.group("month")),
                "day": int(mo.group("day"))}


class Time(Item):
    """Item for time of day with milliseconds.

    | e.g., :samp:`12:11:14.405`
    """
    _match_name = "msec_time"
    _value_name = _KEY_TIME

    @property
    def pattern(self):
        return (r'(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})'
                r'\.(?P<millisecond>[0-9]{3})')

    def pick_value(self, mo):
        """Returns dict of hour, minute, second and microsecond."""
        return {"hour": int(mo.group("hour")),
                "minute": int(mo.group("minute")),
                "second": int(mo.group("second")),
                "microsecond": int(mo.group("millisecond")) * 1000}


class Remainder(Item):
    """Item for the free-form rest of the line."""
    _match_name = _KEY_REMAINDER
    _value_name = _KEY_REMAINDER

    @property
    def pattern(self):
        return r'.*'


class NamedItem(Item, ABC):
    """A base class of namable items.
    The name is used as match name and value name.
    """

    def __init__(self, name):
        self._name = name

    @property
    def match_name(self):
        return self._name

    @property
    def value_name(self):
        return self._name


class Digit(NamedItem):
    """:class:`NamedItem` for a decimal value."""
    pattern = r'[0-9]+'

    def pick_value(self, mo):
        """Returns integer."""
        return int(mo[self._name])


class HexDigit(NamedItem):
    """:class:`NamedItem` for a lowercase hexadecimal value.

    | e.g., :samp:`c4002820`
    """
    pattern = r'[0-9a-f]+'

    def pick_value(self, mo):
        """Returns integer."""
        return int(mo[self._name], 16)
