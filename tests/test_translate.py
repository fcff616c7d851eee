"""Tests for status and command translation."""

import dataclasses

import pytest

from vallox_bridge.air_quality import AirQuality
from vallox_bridge.protocol import (
    CanonicalStatus,
    FanMode,
    ProfileWrite,
    ValuesWrite,
    format_status,
)
from vallox_bridge.translate import command_mode, command_speed, translate_status

RUNNING = {
    "A_CYC_MODE": 0,
    "A_CYC_FAN_SPEED": 40,
    "A_CYC_CO2_SENSOR_0": 900,
    "A_CYC_TEMP_SUPPLY_AIR": 18.4,
    "A_CYC_RH_VALUE": 52,
}


class TestTranslateStatus:
    """Tests for raw poll -> CanonicalStatus."""

    def test_running(self, profile_table):
        status = translate_status(RUNNING, 3, profile_table)
        assert status == CanonicalStatus(
            power=True,
            fan_mode=FanMode.BOOST,
            fan_speed=40,
            temperature=18.4,
            relative_humidity=52,
            co2=900,
        )
        assert status.air_quality == AirQuality.MODERATE

    def test_stopped_ignores_other_registers(self, profile_table):
        raw = dict(RUNNING, A_CYC_MODE=5)
        status = translate_status(raw, 3, profile_table)
        assert status.power is False
        assert status.fan_mode == FanMode.OFF
        assert status.fan_speed is None
        # Sensors are still reported while stopped
        assert status.co2 == 900

    def test_unknown_profile_while_running(self, profile_table):
        status = translate_status(RUNNING, 0, profile_table)
        assert status.power is True
        assert status.fan_mode == FanMode.OFF

    def test_partial_response(self, profile_table):
        """Missing registers become None rather than errors."""
        status = translate_status({"A_CYC_MODE": 0}, 1, profile_table)
        assert status.power is True
        assert status.fan_mode == FanMode.HOME
        assert status.fan_speed is None
        assert status.temperature is None
        assert status.relative_humidity is None
        assert status.co2 is None
        assert status.air_quality == AirQuality.UNKNOWN

    def test_missing_mode_register_is_off(self, profile_table):
        status = translate_status({"A_CYC_CO2_SENSOR_0": 500}, 1, profile_table)
        assert status.power is False
        assert status.fan_mode == FanMode.OFF

    def test_zero_is_not_missing(self, profile_table):
        status = translate_status(dict(RUNNING, A_CYC_FAN_SPEED=0), 1, profile_table)
        assert status.fan_speed == 0

    def test_status_is_immutable(self, profile_table):
        status = translate_status(RUNNING, 1, profile_table)
        with pytest.raises(dataclasses.FrozenInstanceError):
            status.power = False

    def test_format_status(self, profile_table):
        text = format_status(translate_status(RUNNING, 1, profile_table))
        assert "Power: Yes" in text
        assert "Fan mode: home" in text
        assert "CO2: 900 ppm" in text
        assert "Supply air temperature: 18.4 °C" in text

    def test_format_status_skips_unobserved(self, profile_table):
        text = format_status(translate_status({"A_CYC_MODE": 5}, 1, profile_table))
        assert text.splitlines() == ["Power: No", "Fan mode: off"]

    def test_field_metadata_holds_display_keys_only(self):
        for f in dataclasses.fields(CanonicalStatus):
            assert set(f.metadata) == {"sensor", "name", "unit", "enabled_default"}


class TestCommandMode:
    """Tests for fan mode -> register writes."""

    def test_off_only_stops(self, profile_table):
        assert command_mode(FanMode.OFF, profile_table) == [ValuesWrite({"A_CYC_MODE": 5})]

    def test_mode_register_before_profile(self, profile_table):
        assert command_mode(FanMode.AWAY, profile_table) == [
            ValuesWrite({"A_CYC_MODE": 0}),
            ProfileWrite(2),
        ]

    def test_unknown_name_writes_home(self, profile_table):
        assert command_mode("unknown-name", profile_table) == [
            ValuesWrite({"A_CYC_MODE": 0}),
            ProfileWrite(1),
        ]

    def test_off_as_string(self, profile_table):
        assert command_mode("OFF", profile_table) == command_mode(FanMode.OFF, profile_table)


class TestCommandSpeed:
    """Tests for speed -> register writes."""

    def test_zero_is_off(self, profile_table):
        assert command_speed(0, profile_table) == command_mode(FanMode.OFF, profile_table)

    def test_speed_uses_fireplace(self, profile_table):
        assert command_speed(55, profile_table) == [
            ValuesWrite({"A_CYC_FIREPLACE_EXTR_FAN": 55, "A_CYC_FIREPLACE_SUPP_FAN": 55}),
            ValuesWrite({"A_CYC_MODE": 0}),
            ProfileWrite(4),
        ]

    @pytest.mark.parametrize("speed", [-1, 101])
    def test_out_of_range(self, profile_table, speed):
        with pytest.raises(ValueError, match="Speed must be"):
            command_speed(speed, profile_table)
