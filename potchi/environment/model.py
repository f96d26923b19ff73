"""EnvironmentModel — the owner of the plant's environmental state.

The model holds a single ``EnvironmentState`` snapshot and exposes the
user actions (watering, sleep/wake, direct overrides) plus the periodic
``simulate_step`` that advances the day/night cycle.  Every operation:

1. Reads the current snapshot under the model lock
2. Derives the new values, clamping each to its domain and rounding
   (a NaN input leaves the affected field unchanged)
3. Swaps in a whole new snapshot
4. Notifies subscribers with the new snapshot

All random draws go through the injected ``rng`` so that stepping and
randomising are reproducible with a seeded generator.
"""

from __future__ import annotations

import logging
import math
import numbers
import threading
from collections import deque
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from potchi.environment.state import (
    DEFAULT_DAY_CYCLE_SECONDS,
    DISPLAY_LIGHT_RANGE,
    DISPLAY_TEMPERATURE_RANGE,
    HUMIDITY_RANGE,
    LIGHT_RANGE,
    MIN_DAY_CYCLE_SECONDS,
    MOISTURE_RANGE,
    TEMPERATURE_RANGE,
    EnvironmentState,
    clamp,
    clamp_round,
    round_half_up,
)
from potchi.mood import Mood, mood_for

if TYPE_CHECKING:
    from numpy.random import Generator

    from potchi.simulation.config import SimulationConfig

logger = logging.getLogger(__name__)

Listener = Callable[[EnvironmentState], None]

DEFAULT_WATER_AMOUNT = 30
DEFAULT_SLEEP_LUX = 50
DEFAULT_WAKE_LUX = 800
DEFAULT_HISTORY_SIZE = 20

# Daylight peak and noise amplitudes
_PEAK_LIGHT = 2000.0
_LIGHT_NOISE = 40.0
_TEMP_NOISE = 0.3
_HUMIDITY_NOISE = 0.3
_EVAP_JITTER = 0.6

# Diurnal temperature curve: 22 +/- 6 degrees
_BASE_TEMPERATURE = 22.0
_TEMPERATURE_SWING = 6.0
_SMOOTHING = 0.06

# Largest possible humidity change in either direction
_HUMIDITY_SPAN = (-HUMIDITY_RANGE[1], HUMIDITY_RANGE[1])

# Below this light level the air is treated as night-time humid
_NIGHT_LIGHT = 200


@dataclass(frozen=True)
class ActionRecord:
    """One entry in the model's recent-action history.

    Attributes:
        name: Action name, e.g. ``"water"``.
        sim_time_seconds: Simulated time at which the action happened.
        detail: Short human-readable description of the effect.
    """

    name: str
    sim_time_seconds: float
    detail: str


def _is_number(value: Any) -> bool:
    """Return True for finite real numbers, excluding booleans."""
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _number_or_default(value: Any, default: float) -> float:
    """Coerce *value* to a float, using *default* when missing, zero or junk."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or number == 0:
        return default
    return number


class EnvironmentModel:
    """Mutable container for the plant's environment.

    Construct one per process and hand it to whatever drives the clock
    and renders the display.

    Attributes:
        rng: Random source used by ``simulate_step`` and ``randomize``.
        history: Most recent user actions, oldest first.
    """

    def __init__(
        self,
        state: EnvironmentState | None = None,
        rng: Generator | None = None,
        history_size: int = DEFAULT_HISTORY_SIZE,
    ) -> None:
        """Initialise the model.

        Args:
            state: Starting snapshot (defaults to ``EnvironmentState()``).
            rng: Random source; a fresh unseeded generator if omitted.
            history_size: Number of actions kept in ``history``.
        """
        self._state = state if state is not None else EnvironmentState()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.history: deque[ActionRecord] = deque(maxlen=history_size)
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: SimulationConfig) -> EnvironmentModel:
        """Build a model seeded and sized from a SimulationConfig."""
        cycle = max(
            MIN_DAY_CYCLE_SECONDS,
            _number_or_default(config.day_cycle_seconds, DEFAULT_DAY_CYCLE_SECONDS),
        )
        return cls(
            state=EnvironmentState(day_cycle_seconds=cycle),
            rng=np.random.default_rng(config.seed),
            history_size=config.history_size,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> EnvironmentState:
        """The current immutable snapshot."""
        return self._state

    @property
    def mood(self) -> Mood:
        """Mood classified from the current snapshot."""
        return mood_for(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* to be called with every new snapshot.

        Returns:
            A callable that removes the listener again.  Calling it more
            than once is harmless.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Direct overrides
    # ------------------------------------------------------------------

    def set_humidity(self, value: float) -> None:
        """Set humidity, rounded and clamped to 0-100 %."""
        with self._lock:
            humidity = clamp_round(value, HUMIDITY_RANGE, self._state.humidity)
            self._commit("set_humidity", humidity=humidity)

    def set_temperature(self, value: float) -> None:
        """Set temperature, rounded and clamped to -10-60 degrees."""
        with self._lock:
            temperature = clamp_round(
                value,
                TEMPERATURE_RANGE,
                self._state.temperature,
            )
            self._commit("set_temperature", temperature=temperature)

    def set_light_exposure(self, value: float) -> None:
        """Set light exposure, rounded and clamped to 0-20000 lux."""
        with self._lock:
            light = clamp_round(value, LIGHT_RANGE, self._state.light_exposure)
            self._commit("set_light_exposure", light_exposure=light)

    def set_moisture(self, value: float) -> None:
        """Set soil moisture; local humidity follows a quarter of the change.

        Args:
            value: New moisture in percent (rounded and clamped).
        """
        with self._lock:
            state = self._state
            moisture = clamp_round(value, MOISTURE_RANGE, state.moisture)
            delta = round_half_up((moisture - state.moisture) * 0.25)
            humidity = int(clamp(state.humidity + delta, *HUMIDITY_RANGE))
            self._commit("set_moisture", moisture=moisture, humidity=humidity)

    def set_day_cycle_seconds(self, seconds: Any = DEFAULT_DAY_CYCLE_SECONDS) -> None:
        """Set the day/night cycle length.

        Non-numeric, zero or missing values fall back to 30 seconds;
        anything shorter than 5 seconds is raised to 5.
        """
        cycle = max(
            MIN_DAY_CYCLE_SECONDS,
            _number_or_default(seconds, DEFAULT_DAY_CYCLE_SECONDS),
        )
        self._commit("set_day_cycle_seconds", day_cycle_seconds=cycle)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def water(self, amount: float = DEFAULT_WATER_AMOUNT) -> None:
        """Water the plant.

        Soil moisture rises by *amount* and humidity by half of it, both
        clamped to 0-100 %.

        Args:
            amount: Water added, in moisture percent (assumed >= 0).
        """
        with self._lock:
            state = self._state
            moisture = clamp_round(
                state.moisture + amount,
                MOISTURE_RANGE,
                state.moisture,
            )
            rise = clamp_round(amount * 0.5, _HUMIDITY_SPAN, 0)
            humidity = int(clamp(state.humidity + rise, *HUMIDITY_RANGE))
            self._commit("water", moisture=moisture, humidity=humidity)

    def sleep(self, target_lux: float = DEFAULT_SLEEP_LUX) -> None:
        """Dim the light and remember the previous level for ``wake()``.

        Calling this while already asleep saves the dimmed light, so the
        original level is lost.
        """
        with self._lock:
            self._commit(
                "sleep",
                last_light_before_sleep=self._state.light_exposure,
                light_exposure=clamp_round(
                    target_lux,
                    LIGHT_RANGE,
                    self._state.light_exposure,
                ),
                is_sleeping=True,
            )

    def wake(self, restore_lux: float | None = None) -> None:
        """Restore the light level and leave the sleeping state.

        Args:
            restore_lux: Explicit light level.  When omitted, the level
                saved by ``sleep()`` is used, or 800 lux if none was saved.
        """
        with self._lock:
            if restore_lux is None:
                saved = self._state.last_light_before_sleep
                restore_lux = saved if saved is not None else DEFAULT_WAKE_LUX
            self._commit(
                "wake",
                light_exposure=clamp_round(
                    restore_lux,
                    LIGHT_RANGE,
                    self._state.light_exposure,
                ),
                last_light_before_sleep=None,
                is_sleeping=False,
            )

    def randomize(self) -> None:
        """Draw fresh demo values from the display ranges.

        Humidity and moisture are drawn from 0-100, temperature from 0-50
        and light from 0-2000, all inclusive.
        """
        with self._lock:
            self._commit(
                "randomize",
                humidity=self._randint(*HUMIDITY_RANGE),
                moisture=self._randint(*MOISTURE_RANGE),
                temperature=self._randint(*DISPLAY_TEMPERATURE_RANGE),
                light_exposure=self._randint(*DISPLAY_LIGHT_RANGE),
            )

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def simulate_step(self, delta_seconds: Any = 1, scale: Any = 1) -> EnvironmentState:
        """Advance the simulation by one step.

        Light follows a half-rectified sine over the day cycle, temperature
        eases toward a diurnal target, soil dries faster in heat and light,
        and humidity drifts toward a level implied by the soil moisture.

        Args:
            delta_seconds: Simulated seconds to advance.  Negative and
                non-numeric values fall back to 1 so time never runs backwards.
            scale: Multiplier on moisture loss (zero or non-numbers -> 1).

        Returns:
            The new snapshot.
        """
        valid_delta = _is_number(delta_seconds) and delta_seconds >= 0
        delta = delta_seconds if valid_delta else 1
        evap_scale = scale if _is_number(scale) and scale != 0 else 1

        with self._lock:
            state = self._state
            sim_time = state.sim_time_seconds + delta
            cycle = state.day_cycle_seconds
            phase = (sim_time % cycle) / cycle
            wave = math.sin(phase * math.pi * 2 - math.pi / 2)

            day_phase = max(0.0, wave)
            target_light = round_half_up(
                _PEAK_LIGHT * day_phase + self._noise(_LIGHT_NOISE),
            )

            diurnal_temp = _BASE_TEMPERATURE + _TEMPERATURE_SWING * wave
            temperature = clamp_round(
                state.temperature
                + (diurnal_temp - state.temperature) * _SMOOTHING
                + self._noise(_TEMP_NOISE),
                TEMPERATURE_RANGE,
            )

            evap_factor = 0.03 + temperature / 800 + target_light / 15000
            jitter = 1 + float(self.rng.uniform(0, _EVAP_JITTER))
            moisture_loss = max(0.0, evap_factor * jitter * evap_scale)
            moisture = clamp_round(state.moisture - moisture_loss, MOISTURE_RANGE)

            night_boost = 10 if target_light < _NIGHT_LIGHT else 0
            implied_humidity = clamp_round(moisture * 0.6 + night_boost, HUMIDITY_RANGE)
            humidity_delta = round_half_up(
                (implied_humidity - state.humidity) * _SMOOTHING
                + self._noise(_HUMIDITY_NOISE),
            )
            humidity = int(clamp(state.humidity + humidity_delta, *HUMIDITY_RANGE))

            return self._commit(
                None,
                sim_time_seconds=sim_time,
                light_exposure=int(clamp(target_light, *LIGHT_RANGE)),
                temperature=temperature,
                moisture=moisture,
                humidity=humidity,
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _noise(self, amplitude: float) -> float:
        return float(self.rng.uniform(-amplitude, amplitude))

    def _randint(self, low: int, high: int) -> int:
        return int(self.rng.integers(low, high, endpoint=True))

    def _commit(self, action: str | None, **changes: Any) -> EnvironmentState:
        """Swap in a new snapshot, record the action and notify listeners.

        Args:
            action: Name recorded in ``history``; None for simulation ticks.
            **changes: Fields to replace on the current snapshot.
        """
        with self._lock:
            self._state = replace(self._state, **changes)
            state = self._state
            listeners = list(self._listeners)
            if action is not None:
                detail = ", ".join(f"{k}={v}" for k, v in changes.items())
                self.history.append(
                    ActionRecord(action, state.sim_time_seconds, detail),
                )
                logger.debug("%s: %s", action, detail)

        for listener in listeners:
            listener(state)
        return state
