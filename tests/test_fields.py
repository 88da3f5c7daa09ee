import unittest

from batterylog.fields import *


def _extract(remainder, actions=None):
    if actions is None:
        from batterylog.preset import default_field_extractor
        fe = default_field_extractor()
    else:
        fe = FieldExtractor(actions)
    return fe.process_line(remainder).build()


class TestScalarPairs(unittest.TestCase):

    def test_default(self):
        remainder = "status=discharging health=good plug=none temp=254 volt=4170 charge=3887"
        e = _extract(remainder, [ScalarPairs()])
        assert e.status == "discharging"
        assert e.health == "good"
        assert e.plug_type == "none"
        assert e.temperature == 254
        assert e.voltage == 4170
        assert e.charge_micro_ah == 3887

    def test_network(self):
        remainder = ("data_conn=nr phone_signal_strength=great wifi_signal_strength=4 "
                     "wifi_suppl=completed device_idle=full")
        e = _extract(remainder, [ScalarPairs()])
        assert e.data_conn == "nr"
        assert e.phone_signal_strength == "great"
        assert e.wifi_signal_strength == 4
        assert e.wifi_supplicant_state == "completed"
        assert e.device_idle_mode == "full"

    def test_comma_separated(self):
        e = _extract("status=charging,health=good,volt=4200", [ScalarPairs()])
        assert e.status == "charging"
        assert e.health == "good"
        assert e.voltage == 4200

    def test_rail_charges(self):
        e = _extract("modemRailChargemAh=0 wifiRailChargemAh=12 status=discharging",
                     [ScalarPairs()])
        assert dict(e.rail_charges) == {"modemRailChargemAh": 0,
                                        "wifiRailChargemAh": 12}
        assert e.status == "discharging"

    def test_extra_rails(self):
        e = _extract("bluetoothRailChargemAh=5 modemRailChargemAh=1",
                     [ScalarPairs(rails=["bluetoothRailChargemAh"])])
        assert dict(e.rail_charges) == {"bluetoothRailChargemAh": 5,
                                        "modemRailChargemAh": 1}

        e = _extract("bluetoothRailChargemAh=5", [ScalarPairs()])
        assert len(e.rail_charges) == 0

    def test_invalid_number(self):
        remainder = "volt=abc temp=-12 charge=1.5 wifi_signal_strength=99999999999 status=full"
        e = _extract(remainder, [ScalarPairs()])
        assert e.voltage == 0
        assert e.temperature == -12
        assert e.charge_micro_ah == 0
        assert e.wifi_signal_strength == 0
        assert e.status == "full"

    def test_invalid_rail(self):
        e = _extract("modemRailChargemAh=n/a wifiRailChargemAh=3", [ScalarPairs()])
        assert dict(e.rail_charges) == {"wifiRailChargemAh": 3}

    def test_unknown_identifier(self):
        from batterylog import Entry
        e = _extract("+wifi_radio_extra=1 wake_lock=3 bogus=7", [ScalarPairs()])
        assert e == Entry(timestamp=e.timestamp, timestamp_ms=e.timestamp_ms,
                          timestamp_synthetic=e.timestamp_synthetic)

    def test_int_range(self):
        assert parse_int("2147483647", 32) == 2147483647
        assert parse_int("2147483648", 32) is None
        assert parse_int("-2147483648", 32) == -2147483648
        assert parse_int("9223372036854775807", 64) == 9223372036854775807
        assert parse_int("9223372036854775808", 64) is None
        assert parse_int("+7", 32) == 7
        assert parse_int("1_000", 32) is None
        assert parse_int(" 1", 32) is None
        assert parse_int("", 32) is None

    def test_table_definition(self):
        from batterylog import ParserDefinitionError
        with self.assertRaises(ParserDefinitionError):
            ScalarPairs(table={"volt": Int32Field("volts")})
        with self.assertRaises(ParserDefinitionError):
            ScalarPairs(table={"volt": "voltage"})

        sp = ScalarPairs(table={"level": Int32Field("battery_percent")})
        e = _extract("level=75 volt=4000", [sp])
        assert e.battery_percent == 75
        assert e.voltage == 0

    def test_default_table_read_only(self):
        with self.assertRaises(TypeError):
            DEFAULT_FIELDS["volt"] = StringField("status")
        assert DEFAULT_FIELDS["volt"].name == "voltage"
        e = _extract("volt=4000", [ScalarPairs()])
        assert e.voltage == 4000


class TestToggles(unittest.TestCase):

    def test_last_write_wins(self):
        e = _extract("+running +wifi -running", [Toggles()])
        assert dict(e.states) == {"running": False, "wifi": True}

    def test_adjacent(self):
        assert list(iter_toggles("+running-wifi")) == [("running", True)]
        assert list(iter_toggles("+running -wifi,+gps")) == [
            ("running", True), ("wifi", False)]

    def test_prefix_identifier(self):
        # following character is not a delimiter
        e = _extract("+wifi_radio_extra=1", [Toggles()])
        assert "wifi_radio" not in e.states
        assert "wifi_radio_extra" not in e.states

    def test_rich_token(self):
        e = _extract('+wake_lock=1000:"*alarm*:TIME_TICK"')
        assert "wake_lock" not in e.states
        assert len(e.states) == 0

        e = _extract('-wake_lock=u0a231:"*alarm*" -cellular_high_tx_power')
        assert dict(e.states) == {"cellular_high_tx_power": False}

    def test_preceding_character(self):
        assert list(iter_toggles("temp=-5")) == []
        assert list(iter_toggles("a+b")) == []
        assert list(iter_toggles("x -screen")) == [("screen", False)]

    def test_boundary_position(self):
        # a rejected occurrence does not shadow a later valid one
        assert list(iter_toggles("x+gps +gps")) == [("gps", True)]


class TestWakeReasons(unittest.TestCase):

    def test_default(self):
        e = _extract('+running wake_reason=0:"100 wlan_wake"', [WakeReasons()])
        assert e.wake_reasons == frozenset(["100 wlan_wake"])

    def test_duplicates(self):
        remainder = ('wake_reason=0:"rtc_alarm" wake_reason=1:"wlan_wake" '
                     'wake_reason=2:"rtc_alarm"')
        e = _extract(remainder, [WakeReasons()])
        assert e.wake_reasons == frozenset(["rtc_alarm", "wlan_wake"])

    def test_mismatch(self):
        assert list(iter_wake_reasons('wake_reason=x:"a"')) == []
        assert list(iter_wake_reasons('wake_reason=0:""')) == []
        assert list(iter_wake_reasons('wake_reason=0:unquoted')) == []


class TestFieldExtractor(unittest.TestCase):

    remainder = ('+running -wifi status=charging volt=4170 '
                 'wake_reason=0:"rtc_alarm" modemRailChargemAh=3')

    def test_all(self):
        e = _extract(self.remainder)
        assert dict(e.states) == {"running": True, "wifi": False}
        assert e.status == "charging"
        assert e.voltage == 4170
        assert e.wake_reasons == frozenset(["rtc_alarm"])
        assert dict(e.rail_charges) == {"modemRailChargemAh": 3}

    def test_tokens_in_quoted_text(self):
        e = _extract('wake_reason=0:"irq status=bogus +gps x"')
        assert e.wake_reasons == frozenset(["irq status=bogus +gps x"])
        assert e.status == "bogus"
        assert dict(e.states) == {"gps": True}

    def test_order_independent(self):
        e1 = _extract(self.remainder, [ScalarPairs(), Toggles(), WakeReasons()])
        e2 = _extract(self.remainder, [WakeReasons(), Toggles(), ScalarPairs()])
        assert e1.states == e2.states
        assert e1.wake_reasons == e2.wake_reasons
        assert e1.rail_charges == e2.rail_charges
        assert (e1.status, e1.voltage) == (e2.status, e2.voltage)

    def test_repeat(self):
        from batterylog.preset import default_field_extractor
        fe = default_field_extractor()
        builder = fe.process_line(self.remainder)
        first = builder.build()
        fe.process_line(self.remainder, builder)
        second = builder.build()
        assert first.states == second.states
        assert first.wake_reasons == second.wake_reasons
        assert first.rail_charges == second.rail_charges
        assert first.voltage == second.voltage

    def test_empty(self):
        e = _extract("")
        assert e.states is not None and len(e.states) == 0
        assert e.wake_reasons == frozenset()
        assert e.rail_charges is not None and len(e.rail_charges) == 0
