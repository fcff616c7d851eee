"""Status and command translation.

translate_status() turns one raw poll (metrics + profile) into a
CanonicalStatus. command_mode() / command_speed() turn a canonical command
into the ordered list of register writes the unit expects.

Write order matters: a profile write is ignored by the unit while the mode
register still says stopped, so the mode register is always written first.
"""

from __future__ import annotations

from .mapping import mode_to_profile, profile_to_mode
from .protocol import (
    CanonicalStatus,
    FanMode,
    Metric,
    ModeRegister,
    ProfileTable,
    ProfileWrite,
    RawMetrics,
    RawWrite,
    ValuesWrite,
)


def translate_status(
    raw: RawMetrics,
    profile: int | None,
    profile_table: ProfileTable,
) -> CanonicalStatus:
    """Build a status snapshot from a raw poll.

    Missing registers become None fields; this never raises on a partial
    response. A missing mode register reads as powered off.

    Args:
        raw: Metric key -> register value, possibly partial
        profile: Raw profile value reported by the device
        profile_table: Profile name -> raw value

    Returns:
        CanonicalStatus for this poll
    """
    power = raw.get(Metric.MODE) == ModeRegister.RUNNING

    if power:
        fan_mode = profile_to_mode(profile, profile_table)
        fan_speed = raw.get(Metric.FAN_SPEED)
    else:
        fan_mode = FanMode.OFF
        fan_speed = None

    return CanonicalStatus(
        power=power,
        fan_mode=fan_mode,
        fan_speed=fan_speed,
        temperature=raw.get(Metric.TEMP_SUPPLY_AIR),
        relative_humidity=raw.get(Metric.RH),
        co2=raw.get(Metric.CO2),
    )


def command_mode(mode: FanMode | str, profile_table: ProfileTable) -> list[RawWrite]:
    """Writes needed to switch the unit to a fan mode.

    OFF only stops the unit. Any other mode starts the unit and then selects
    the profile; unknown names select HOME.
    """
    if mode == FanMode.OFF:
        return [ValuesWrite({Metric.MODE: ModeRegister.STOPPED})]

    return [
        ValuesWrite({Metric.MODE: ModeRegister.RUNNING}),
        ProfileWrite(mode_to_profile(mode, profile_table)),
    ]


def command_speed(speed: int, profile_table: ProfileTable) -> list[RawWrite]:
    """Writes needed to run the fans at a fixed speed.

    A nonzero speed always goes through the fireplace override: both
    fireplace fan registers are set, then the FIREPLACE profile is selected.
    Speed 0 is the same as commanding OFF.

    Raises:
        ValueError: If speed is outside 0-100
    """
    if not 0 <= speed <= 100:
        raise ValueError(f"Speed must be between 0 and 100, got {speed}")

    if speed == 0:
        return command_mode(FanMode.OFF, profile_table)

    return [
        ValuesWrite({
            Metric.FIREPLACE_EXTRACT_FAN: speed,
            Metric.FIREPLACE_SUPPLY_FAN: speed,
        }),
        *command_mode(FanMode.FIREPLACE, profile_table),
    ]
