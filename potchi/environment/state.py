"""EnvironmentState — an immutable snapshot of the plant's surroundings.

Each mutation of the environment produces a new snapshot via
``dataclasses.replace`` so that readers never observe a half-applied
update.  Domain limits and the rounding/clamping helpers used on every
write live here as well.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Hard domains enforced on every write
HUMIDITY_RANGE = (0, 100)
MOISTURE_RANGE = (0, 100)
TEMPERATURE_RANGE = (-10, 60)
LIGHT_RANGE = (0, 20000)

# Narrower "display" ranges used by randomize() and the renderer
DISPLAY_TEMPERATURE_RANGE = (0, 50)
DISPLAY_LIGHT_RANGE = (0, 2000)

DEFAULT_DAY_CYCLE_SECONDS = 30.0
MIN_DAY_CYCLE_SECONDS = 5.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties going toward positive infinity.

    ``round_half_up(12.5) == 13`` and ``round_half_up(-0.5) == 0``, unlike
    the built-in ``round`` which rounds ties to even.
    """
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    """Constrain *value* to the closed interval ``[low, high]``."""
    return max(low, min(high, value))


def clamp_round(
    value: float,
    bounds: tuple[int, int],
    fallback: int | None = None,
) -> int:
    """Clamp *value* into *bounds* and round it half-up.

    Clamping first keeps infinities in range.  NaN has no position in the
    interval, so it yields *fallback* (the lower bound when omitted).
    """
    low, high = bounds
    if math.isnan(value):
        return low if fallback is None else fallback
    return int(round_half_up(clamp(value, low, high)))


@dataclass(frozen=True)
class EnvironmentState:
    """Current environmental readings around the plant.

    Attributes:
        humidity: Air humidity in percent (0-100).
        moisture: Soil moisture in percent (0-100).
        temperature: Air temperature in degrees Celsius (-10-60).
        light_exposure: Light level in lux (0-20000).
        sim_time_seconds: Elapsed simulated time.
        day_cycle_seconds: Length of one full day/night cycle (>= 5).
        is_sleeping: Whether the plant has been put to sleep.
        last_light_before_sleep: Light level saved by ``sleep()``, restored
            by ``wake()``.  Only meaningful while sleeping.
    """

    humidity: int = 50
    moisture: int = 50
    temperature: int = 25
    light_exposure: int = 400
    sim_time_seconds: float = 0.0
    day_cycle_seconds: float = DEFAULT_DAY_CYCLE_SECONDS
    is_sleeping: bool = False
    last_light_before_sleep: int | None = None

    @property
    def phase(self) -> float:
        """Fractional position (0.0-1.0) within the current day cycle."""
        return (self.sim_time_seconds % self.day_cycle_seconds) / self.day_cycle_seconds
