# coding: utf-8

import configparser

from . import _common
from . import detect
from . import preset

_SECTION_GENERAL = "general"
_SECTION_FIELDS = "fields"


def _read_config(fp):
    conf = configparser.ConfigParser(interpolation=None)
    with open(fp) as f:
        conf.read_file(f)
    return conf


def _get_list(conf, section, option):
    # ignore line feed
    s = conf.get(section, option, fallback="")
    s = s.replace('\r\n', '').replace('\n', '')
    return [r.strip() for r in s.split(',') if r.strip() != ""]


def _get_year(conf):
    try:
        return conf.getint(_SECTION_GENERAL, "year", fallback=None)
    except ValueError as e:
        msg = "invalid year in config: {0}".format(e)
        raise _common.ParserDefinitionError(msg) from e


def load_from_config(fp):
    """Load a :class:`~batterylog.HistoryParser` from configparser text file.

    Example:
        .. code-block:: ini

            [general]
            year = 2026

            [fields]
            rails = modemRailChargemAh, wifiRailChargemAh, bluetoothRailChargemAh

    All options are optional. The default year is the current year,
    and the rails are added to the default rail identifiers.

    Args:
        fp (str): file path of configparser text file.

    Returns:
        :class:`~batterylog.HistoryParser`
    """
    conf = _read_config(fp)
    rails = _get_list(conf, _SECTION_FIELDS, "rails")
    return preset.default(year=_get_year(conf), rails=rails or None)


def load_detector_config(fp):
    """Load keyword arguments of :func:`~batterylog.detect.classify`
    from configparser text file ([general] legacy_marker option).

    Returns:
        dict
    """
    conf = _read_config(fp)
    marker = conf.get(_SECTION_GENERAL, "legacy_marker",
                      fallback=detect.LEGACY_MARKER).strip()
    if marker == "":
        raise _common.ParserDefinitionError("legacy_marker must not be empty")
    return {"legacy_marker": marker}
