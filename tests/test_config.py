import os
import tempfile
import unittest

import batterylog
from batterylog.detect import FORMAT_LEGACY, FORMAT_READABLE


class TestConfig(unittest.TestCase):

    def _write(self, text):
        fd, path = tempfile.mkstemp(suffix=".conf")
        with os.fdopen(fd, "w") as f:
            f.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_load(self):
        path = self._write("[general]\n"
                           "year = 2024\n"
                           "legacy_marker = v1,h,\n"
                           "\n"
                           "[fields]\n"
                           "rails = bluetoothRailChargemAh,\n"
                           "    gpsRailChargemAh\n")
        parser = batterylog.load_from_config(path)
        e = parser.process_line("02-29 01:02:03.004 001 1 "
                                "bluetoothRailChargemAh=7 gpsRailChargemAh=8 modemRailChargemAh=9")
        assert e.timestamp.year == 2024
        assert e.timestamp_synthetic is False
        assert dict(e.rail_charges) == {"bluetoothRailChargemAh": 7,
                                        "gpsRailChargemAh": 8,
                                        "modemRailChargemAh": 9}

        kwargs = batterylog.load_detector_config(path)
        assert kwargs == {"legacy_marker": "v1,h,"}
        assert batterylog.classify("v1,h,0\n01-11 12:11:14.405 075 c4002820 +running",
                                   **kwargs) == FORMAT_LEGACY

    def test_empty(self):
        path = self._write("")
        parser = batterylog.load_from_config(path)
        e = parser.process_line("01-11 12:11:14.405 075 c4002820 modemRailChargemAh=1")
        assert dict(e.rail_charges) == {"modemRailChargemAh": 1}
        kwargs = batterylog.load_detector_config(path)
        assert batterylog.classify("01-11 12:11:14.405 075 c4002820 +running",
                                   **kwargs) == FORMAT_READABLE

    def test_invalid(self):
        path = self._write("[general]\nyear = last\n")
        with self.assertRaises(batterylog.ParserDefinitionError):
            batterylog.load_from_config(path)

        path = self._write("[general]\nlegacy_marker =\n")
        with self.assertRaises(batterylog.ParserDefinitionError):
            batterylog.load_detector_config(path)
