"""Connection helpers for Vallox units.

This module adapts the vallox-websocket-api client to the MetricsClient
protocol and provides configuration for standalone use.

Example:
    from vallox_bridge.connect import ValloxConfig, open_device

    device = open_device(ValloxConfig("192.168.1.50"), listener)
    await device.start_polling()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Mapping

from vallox_websocket_api import Profile, Vallox
from vallox_websocket_api.exceptions import ValloxException

from .client import ValloxDevice
from .protocol import DEFAULT_PORT, FanMode, ProfileTable, TransportError
from .scheduler import StatusListener

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValloxConfig:
    """Address of a Vallox unit."""

    address: str
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls) -> "ValloxConfig":
        """Read VALLOX_ADDRESS and VALLOX_PORT from the environment.

        Raises:
            ValueError: If VALLOX_ADDRESS is not set or the port is not a number
        """
        address = os.environ.get("VALLOX_ADDRESS")
        if not address:
            raise ValueError("VALLOX_ADDRESS is not set")
        return cls(address=address, port=int(os.environ.get("VALLOX_PORT", DEFAULT_PORT)))

    @property
    def host(self) -> str:
        """Host string for the websocket client (address[:port])."""
        if self.port == DEFAULT_PORT:
            return self.address
        return f"{self.address}:{self.port}"


class ValloxMetricsClient:
    """MetricsClient backed by the Vallox websocket API.

    The websocket client opens a connection per request, so there is no
    connection lifecycle to manage here.

    Args:
        client: vallox_websocket_api.Vallox instance
    """

    def __init__(self, client: Vallox) -> None:
        self._client = client
        # Only the fan-mode profiles are mapped; anything else reads as OFF
        self._profile_table: dict[str, int] = {
            mode.value: int(Profile[mode.value])
            for mode in FanMode
            if mode is not FanMode.OFF
        }

    @classmethod
    def create(cls, address: str, port: int = DEFAULT_PORT) -> "ValloxMetricsClient":
        """Create a client for the unit at address:port."""
        return cls(Vallox(ValloxConfig(address, port).host))

    @property
    def profile_table(self) -> ProfileTable:
        return self._profile_table

    async def fetch_metrics(self, keys: Iterable[str]) -> dict[str, int]:
        """Read metrics. Keys the unit does not report are left out."""
        try:
            metrics = await self._client.fetch_metrics(sorted(keys))
        except (ValloxException, OSError) as err:
            raise TransportError(f"Failed to fetch metrics: {err}") from err
        return {key: value for key, value in metrics.items() if value is not None}

    async def fetch_profile(self) -> int:
        try:
            data = await self._client.fetch_metric_data()
        except (ValloxException, OSError) as err:
            raise TransportError(f"Failed to fetch profile: {err}") from err
        return int(data.profile)

    async def write_values(self, values: Mapping[str, int]) -> None:
        try:
            await self._client.set_values(dict(values))
        except (ValloxException, OSError) as err:
            raise TransportError(f"Failed to write {sorted(values)}: {err}") from err

    async def write_profile(self, value: int) -> None:
        try:
            await self._client.set_profile(Profile(value))
        except (ValloxException, OSError) as err:
            raise TransportError(f"Failed to set profile {value}: {err}") from err


def open_device(
    config: ValloxConfig,
    listener: StatusListener,
    **kwargs,
) -> ValloxDevice:
    """Create a ValloxDevice for the unit described by config.

    Args:
        config: Unit address
        listener: Receives status snapshots
        **kwargs: Passed to ValloxDevice (poll_interval, single_flight)
    """
    _LOGGER.debug("Opening Vallox unit at %s", config.host)
    return ValloxDevice(ValloxMetricsClient.create(config.address, config.port), listener, **kwargs)
