"""Vallox metrics protocol - Register names, data model and client capability.

This module describes the parts of the Vallox MV websocket protocol that the
bridge relies on. The unit exposes its state as named integer registers
("metrics") plus a separate profile selector.

Protocol overview:
- Every value is addressed by a metric key such as ``A_CYC_MODE``
- The mode register is an on/off switch: 0=running, 5=stopped
- The profile selector picks the operating program (Home, Away, Boost,
  Fireplace) and is independent of the mode register
- Fireplace is a timed manual override; its fan speeds live in their own
  registers (``A_CYC_FIREPLACE_EXTR_FAN`` / ``A_CYC_FIREPLACE_SUPP_FAN``)
- Per-profile fan speeds are configured in ``A_CYC_*_SPEED_SETTING`` (percent)

Registers are read and written through a MetricsClient. The library ships
ValloxMetricsClient (see connect.py), but anything implementing the protocol
below will do.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Protocol, Union

from .air_quality import AirQuality, classify


def sensor(name: str, *, unit: str | None = None, enabled_default: bool = True) -> dict:
    """Field metadata marking a status field as a displayable reading."""
    return {"sensor": True, "name": name, "unit": unit, "enabled_default": enabled_default}


def format_status(data: "CanonicalStatus", enabled_only: bool = True) -> str:
    """Format a status snapshot for display, one reading per line.

    Fields that were not observed (None) are left out.

    Args:
        data: CanonicalStatus instance
        enabled_only: If True, skip readings hidden by default
    """
    lines = []
    for f in dataclasses.fields(data):
        meta = f.metadata
        value = getattr(data, f.name)
        if not meta.get("sensor") or value is None:
            continue
        if enabled_only and not meta["enabled_default"]:
            continue

        if isinstance(value, Enum):
            text = value.value.lower()
        elif isinstance(value, bool):
            text = "Yes" if value else "No"
        elif isinstance(value, float):
            text = f"{value:.1f}"
        else:
            text = str(value)

        unit = meta["unit"]
        lines.append(f"{meta['name']}: {text} {unit}" if unit else f"{meta['name']}: {text}")

    return "\n".join(lines)

# =============================================================================
# Metric Registry
# =============================================================================


class Metric:
    """Metric keys (register names) used by the bridge."""

    # Live state
    MODE = "A_CYC_MODE"                             # 0=running, 5=stopped
    FAN_SPEED = "A_CYC_FAN_SPEED"                   # Current fan speed (%)
    CO2 = "A_CYC_CO2_SENSOR_0"                      # CO2 concentration (ppm)
    TEMP_SUPPLY_AIR = "A_CYC_TEMP_SUPPLY_AIR"       # Supply air temperature
    RH = "A_CYC_RH_VALUE"                           # Relative humidity (%)

    # Per-profile speed configuration (%)
    HOME_SPEED = "A_CYC_HOME_SPEED_SETTING"
    AWAY_SPEED = "A_CYC_AWAY_SPEED_SETTING"
    BOOST_SPEED = "A_CYC_BOOST_SPEED_SETTING"

    # Fireplace (manual override) fan speeds (%)
    FIREPLACE_EXTRACT_FAN = "A_CYC_FIREPLACE_EXTR_FAN"
    FIREPLACE_SUPPLY_FAN = "A_CYC_FIREPLACE_SUPP_FAN"

    # Identification (read-only)
    MACHINE_MODEL = "A_CYC_MACHINE_MODEL"
    SERIAL_NUMBER_MSW = "A_CYC_SERIAL_NUMBER_MSW"
    SERIAL_NUMBER_LSW = "A_CYC_SERIAL_NUMBER_LSW"
    SW_VERSION_MAJOR = "A_CYC_APPL_SW_VERSION_7"
    SW_VERSION_MINOR = "A_CYC_APPL_SW_VERSION_8"
    SW_VERSION_PATCH = "A_CYC_APPL_SW_VERSION_9"


class ModeRegister:
    """Values of the mode register (A_CYC_MODE)."""

    RUNNING = 0
    STOPPED = 5


STATUS_METRICS: frozenset[str] = frozenset({
    Metric.MODE,
    Metric.RH,
    Metric.FAN_SPEED,
    Metric.CO2,
    Metric.TEMP_SUPPLY_AIR,
})

MODE_SPEED_METRICS: frozenset[str] = frozenset({
    Metric.HOME_SPEED,
    Metric.AWAY_SPEED,
    Metric.BOOST_SPEED,
})

BASIC_INFO_METRICS: frozenset[str] = frozenset({
    Metric.MACHINE_MODEL,
    Metric.SERIAL_NUMBER_LSW,
    Metric.SERIAL_NUMBER_MSW,
    Metric.SW_VERSION_MAJOR,
    Metric.SW_VERSION_MINOR,
    Metric.SW_VERSION_PATCH,
})

# A_CYC_MACHINE_MODEL -> model name
VALLOX_MODELS: dict[int, str] = {
    0: "Vallox 096 MV",
    1: "Vallox 110 MV",
    2: "Vallox 145 MV",
    3: "Vallox 245 MV",
    4: "Vallox 270 MV",
    5: "Vallox 350 MV",
    6: "Vallox 510 MV",
    7: "Vallox 75 MV",
    8: "Vallox 060 MV",
}
UNKNOWN_MODEL = "Vallox Unknown Model"

# Seconds between scheduled polls
POLL_INTERVAL = 60.0

DEFAULT_PORT = 80

# =============================================================================
# Data Model
# =============================================================================

RawMetrics = Mapping[str, Union[int, float]]
ProfileTable = Mapping[str, int]


class FanMode(str, Enum):
    """Discrete fan modes.

    Values match the device profile names, so a mode can be looked up
    directly in a profile table. OFF is not a profile: it mirrors the
    stopped mode register.
    """

    OFF = "OFF"
    AWAY = "AWAY"
    HOME = "HOME"
    BOOST = "BOOST"
    FIREPLACE = "FIREPLACE"


@dataclass(frozen=True)
class CanonicalStatus:
    """Protocol-agnostic snapshot of the unit, produced once per poll.

    Fields that were not present in the poll response are None, so "not
    observed this cycle" stays distinct from "observed as zero".
    """

    power: bool = field(metadata=sensor("Power"))
    fan_mode: FanMode | None = field(default=None, metadata=sensor("Fan mode"))
    fan_speed: int | None = field(default=None, metadata=sensor("Fan speed", unit="%"))
    temperature: float | None = field(default=None, metadata=sensor(
        "Supply air temperature", unit="°C"
    ))
    relative_humidity: int | None = field(default=None, metadata=sensor("Humidity", unit="%"))
    co2: int | None = field(default=None, metadata=sensor("CO2", unit="ppm"))

    @property
    def air_quality(self) -> AirQuality:
        """Air quality bucket for the CO2 reading."""
        return classify(self.co2)


@dataclass(frozen=True)
class ModeSpeedTable:
    """Fan speed (%) configured for each named profile.

    Bucketing assumes away <= home <= boost; the device does not enforce it.
    """

    away: int
    home: int
    boost: int


@dataclass(frozen=True)
class BasicInfo:
    """Identification of the unit. Read once, never polled."""

    name: str
    serial: str
    software_version: str


@dataclass(frozen=True)
class ValuesWrite:
    """Write one or more metric registers in a single request."""

    values: Mapping[str, int]


@dataclass(frozen=True)
class ProfileWrite:
    """Switch the active profile."""

    profile: int


RawWrite = Union[ValuesWrite, ProfileWrite]

# =============================================================================
# Metrics Client
# =============================================================================


class TransportError(Exception):
    """Raised when the unit cannot be reached or rejects a request."""


class MetricsClient(Protocol):
    """Capability the bridge needs from a transport.

    Implementations own their connection lifecycle and raise TransportError
    on I/O failure. A response to fetch_metrics may hold only a subset of the
    requested keys.
    """

    @property
    def profile_table(self) -> ProfileTable: ...

    async def fetch_metrics(self, keys: frozenset[str] | set[str]) -> dict[str, int]: ...

    async def fetch_profile(self) -> int: ...

    async def write_values(self, values: Mapping[str, int]) -> None: ...

    async def write_profile(self, value: int) -> None: ...
