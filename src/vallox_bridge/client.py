"""Vallox device - Primary interface for hosts bridging a ventilation unit.

This module provides ValloxDevice, which wraps a MetricsClient with polling,
status translation and fan commands.

Example:
    class Printer:
        def on_status(self, status):
            print(format_status(status))

    device = ValloxDevice(ValloxMetricsClient.create("192.168.1.50"), Printer())
    await device.start_polling()
    await device.change_fan_mode(FanMode.BOOST)
"""

from __future__ import annotations

import logging

from .mapping import mode_to_approx_speed, speed_to_mode
from .protocol import (
    BASIC_INFO_METRICS,
    MODE_SPEED_METRICS,
    POLL_INTERVAL,
    UNKNOWN_MODEL,
    VALLOX_MODELS,
    BasicInfo,
    CanonicalStatus,
    FanMode,
    Metric,
    MetricsClient,
    ModeSpeedTable,
    ProfileWrite,
    RawWrite,
    ValuesWrite,
)
from .scheduler import PollingScheduler, StatusListener
from .translate import command_mode, command_speed

_LOGGER = logging.getLogger(__name__)


def _version_part(value: int) -> str:
    # Version registers hold the number scaled by 256
    part = value / 256
    return str(int(part)) if part.is_integer() else str(part)


class _Recorder:
    """Keeps the last snapshot before passing it on."""

    def __init__(self, listener: StatusListener) -> None:
        self.listener = listener
        self.last_status: CanonicalStatus | None = None

    def on_status(self, status: CanonicalStatus) -> None:
        self.last_status = status
        self.listener.on_status(status)


class ValloxDevice:
    """Bridge between one Vallox unit and a status listener.

    The caller owns the metrics client; this class provides polling,
    translation and commands only. Every successful poll, scheduled or
    triggered by a command, is delivered to the listener.

    Args:
        client: Metrics client connected to the unit
        listener: Receives a CanonicalStatus on every successful poll
        poll_interval: Seconds between scheduled polls
        single_flight: Coalesce overlapping polls (see PollingScheduler)

    Example:
        device = ValloxDevice(client, listener)
        info = await device.get_basic_info()
        await device.start_polling()
        await device.change_fan_speed(45)
    """

    def __init__(
        self,
        client: MetricsClient,
        listener: StatusListener,
        *,
        poll_interval: float = POLL_INTERVAL,
        single_flight: bool = False,
    ) -> None:
        self._client = client
        self._recorder = _Recorder(listener)
        self._scheduler = PollingScheduler(
            client, self._recorder, interval=poll_interval, single_flight=single_flight
        )
        self._fireplace_speed = 0

    async def start_polling(self) -> None:
        """Deliver a status now and then every poll interval."""
        await self._scheduler.start()

    def stop_polling(self) -> None:
        """Stop scheduled polling. A poll already in flight may still deliver."""
        self._scheduler.stop()

    @property
    def is_polling(self) -> bool:
        return self._scheduler.is_running

    @property
    def last_status(self) -> CanonicalStatus | None:
        """Return the most recently delivered status, or None."""
        return self._recorder.last_status

    async def get_status(self) -> CanonicalStatus | None:
        """Poll the unit once and deliver the result to the listener."""
        return await self._scheduler.poll_and_deliver()

    async def get_basic_info(self) -> BasicInfo:
        """Read model name, serial number and software version.

        Returns:
            BasicInfo for the unit

        Raises:
            TransportError: If the unit could not be read
        """
        metrics = await self._client.fetch_metrics(BASIC_INFO_METRICS)

        model = metrics.get(Metric.MACHINE_MODEL)
        serial = (metrics.get(Metric.SERIAL_NUMBER_MSW, 0) << 16) + metrics.get(
            Metric.SERIAL_NUMBER_LSW, 0
        )
        version = ".".join(
            _version_part(metrics.get(key, 0))
            for key in (Metric.SW_VERSION_MAJOR, Metric.SW_VERSION_MINOR, Metric.SW_VERSION_PATCH)
        )

        return BasicInfo(
            name=VALLOX_MODELS.get(model, UNKNOWN_MODEL),
            serial=str(serial),
            software_version=version,
        )

    async def get_mode_speeds(self) -> ModeSpeedTable:
        """Read the configured fan speed of the Away, Home and Boost profiles.

        Always reads the unit; the settings can change between calls.

        Raises:
            TransportError: If the unit could not be read
            ValueError: If the response lacks any of the speed settings
        """
        metrics = await self._client.fetch_metrics(MODE_SPEED_METRICS)
        missing = MODE_SPEED_METRICS.difference(metrics)
        if missing:
            raise ValueError(f"Mode speed settings missing from response: {sorted(missing)}")

        return ModeSpeedTable(
            away=metrics[Metric.AWAY_SPEED],
            home=metrics[Metric.HOME_SPEED],
            boost=metrics[Metric.BOOST_SPEED],
        )

    async def fan_mode_for_speed(
        self, speed: int, table: ModeSpeedTable | None = None
    ) -> FanMode:
        """Bucket a speed percentage into AWAY, HOME or BOOST.

        Args:
            speed: Speed percentage (0 is OFF)
            table: Mode speeds to use; read from the unit if None
        """
        if speed == 0:
            return FanMode.OFF
        if table is None:
            table = await self.get_mode_speeds()
        return speed_to_mode(speed, table)

    async def speed_for_fan_mode(
        self, mode: FanMode | str, table: ModeSpeedTable | None = None
    ) -> int:
        """Approximate speed percentage of a fan mode.

        FIREPLACE reports the last speed set through change_fan_speed().

        Args:
            mode: Fan mode
            table: Mode speeds to use; read from the unit if None
        """
        if mode in (FanMode.OFF, FanMode.FIREPLACE):
            return mode_to_approx_speed(mode, ModeSpeedTable(0, 0, 0), self._fireplace_speed)
        if table is None:
            table = await self.get_mode_speeds()
        return mode_to_approx_speed(mode, table, self._fireplace_speed)

    async def change_fan_mode(self, mode: FanMode | str) -> CanonicalStatus | None:
        """Switch the unit to a fan mode.

        OFF stops the unit. Names that are not profiles select HOME.

        Returns:
            Status polled after the change

        Raises:
            TransportError: If a write or the follow-up poll fails
        """
        await self._execute(command_mode(mode, self._client.profile_table))
        return await self._scheduler.poll_and_deliver()

    async def change_fan_speed(self, speed: int) -> CanonicalStatus | None:
        """Run the fans at a fixed speed using the fireplace override.

        Speed 0 stops the unit.

        Args:
            speed: Speed percentage (0-100)

        Returns:
            Status polled after the change

        Raises:
            ValueError: If speed is outside 0-100
            TransportError: If a write or the follow-up poll fails
        """
        writes = command_speed(speed, self._client.profile_table)
        await self._execute(writes)
        if speed:
            self._fireplace_speed = speed
        return await self._scheduler.poll_and_deliver()

    async def _execute(self, writes: list[RawWrite]) -> None:
        for write in writes:
            if isinstance(write, ValuesWrite):
                _LOGGER.debug("Writing values %s", dict(write.values))
                await self._client.write_values(write.values)
            elif isinstance(write, ProfileWrite):
                _LOGGER.debug("Writing profile %s", write.profile)
                await self._client.write_profile(write.profile)
