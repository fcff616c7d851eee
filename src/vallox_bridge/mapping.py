"""Translation between device profiles, fan modes and speed percentages.

The unit knows four named profiles (Home, Away, Boost, Fireplace) plus an
on/off mode register. Hosts usually think in terms of a fan with a mode and
a 0-100 speed. The functions here convert between the two views. None of
them raise on unknown input; they fall back to documented defaults instead.
"""

from __future__ import annotations

from .protocol import FanMode, ModeSpeedTable, ProfileTable


def _mode_name(mode: FanMode | str) -> str:
    return mode.value if isinstance(mode, FanMode) else str(mode)


def profile_to_mode(raw_profile: int | None, profile_table: ProfileTable) -> FanMode:
    """Resolve a raw profile value to a fan mode.

    Args:
        raw_profile: Profile value reported by the device
        profile_table: Profile name -> raw value

    Returns:
        Matching FanMode, or FanMode.OFF if the value has no table entry
        or its name is not a fan mode
    """
    names = {value: name for name, value in profile_table.items()}
    name = names.get(raw_profile)
    try:
        return FanMode(name)
    except ValueError:
        return FanMode.OFF


def mode_to_profile(mode: FanMode | str, profile_table: ProfileTable) -> int:
    """Resolve a fan mode (or profile name) to a raw profile value.

    Names without a table entry, OFF included, resolve to the HOME profile.

    Raises:
        KeyError: If the table has no HOME entry either
    """
    name = _mode_name(mode)
    if name in profile_table:
        return profile_table[name]
    return profile_table[FanMode.HOME.value]


def speed_to_mode(speed: int, table: ModeSpeedTable) -> FanMode:
    """Bucket a speed percentage into AWAY, HOME or BOOST.

    A speed of 0 is always OFF. Thresholds are inclusive upper bounds:
    speed <= away is AWAY, speed <= home is HOME, anything above is BOOST.
    """
    if speed == 0:
        return FanMode.OFF
    if speed <= table.away:
        return FanMode.AWAY
    if speed <= table.home:
        return FanMode.HOME
    return FanMode.BOOST


def mode_to_approx_speed(
    mode: FanMode | str,
    table: ModeSpeedTable,
    fireplace_speed: int = 0,
) -> int:
    """Approximate speed percentage for a fan mode.

    Args:
        mode: Fan mode to convert
        table: Configured per-profile speeds
        fireplace_speed: Last speed commanded for the fireplace override,
            which is not part of the table

    Returns:
        Table speed for AWAY/HOME/BOOST, fireplace_speed for FIREPLACE,
        0 for OFF or unknown modes
    """
    name = _mode_name(mode)
    if name == FanMode.FIREPLACE.value:
        return fireplace_speed
    speeds = {
        FanMode.AWAY.value: table.away,
        FanMode.HOME.value: table.home,
        FanMode.BOOST.value: table.boost,
    }
    return speeds.get(name, 0)
