# coding: utf-8

"""batterylog.preset is a submodule to provide default settings
for the battery history Format 2 lines."""

import datetime

from ._common import HistoryParser
from .header import HeaderParser, MonthDay, Time, Digit, HexDigit, Remainder
from .fields import FieldExtractor, ScalarPairs, Toggles, WakeReasons


def default_header_items():
    """Items of the Format 2 header.

    * month-day (:class:`~batterylog.header.MonthDay`), e.g., ``01-11``
    * time (:class:`~batterylog.header.Time`), e.g., ``12:11:14.405``
    * sequence number (:class:`~batterylog.header.Digit`), e.g., ``075``
    * state bitmask (:class:`~batterylog.header.HexDigit`), e.g., ``c4002820``
    * remainder (:class:`~batterylog.header.Remainder`)
    """
    return [MonthDay(),
            Time(),
            Digit("sequence"),
            HexDigit("state_bits"),
            Remainder()]


def default_header_parser(year=None):
    """Generate :class:`~batterylog.header.HeaderParser` of Format 2 lines.

    Args:
        year (int, optional): year used for timestamps.
            Defaults to the current year.
    """
    if year is None:
        year = datetime.datetime.now().year
    return HeaderParser(default_header_items(), defaults={"year": year})


def default_field_extractor(rails=None):
    """Generate :class:`~batterylog.fields.FieldExtractor`
    with scalar pairs, toggles and wake reasons.

    Args:
        rails (list of str, optional): rail identifiers
            in addition to the default ones.
    """
    return FieldExtractor([ScalarPairs(rails=rails),
                           Toggles(),
                           WakeReasons()])


def default(year=None, rails=None):
    """Generate :class:`~batterylog.HistoryParser` of default settings.
    :func:`~batterylog.init_parser` generates same instance without any arguments.
    """
    return HistoryParser(default_header_parser(year),
                         default_field_extractor(rails))
