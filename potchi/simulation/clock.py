"""SimulationClock — the periodic trigger that drives the model.

The clock calls ``EnvironmentModel.simulate_step`` at a fixed real-time
interval.  It can be driven three ways:

1. ``advance(elapsed)`` from a frame loop (the pygame client)
2. ``run(ticks)`` for a fixed number of ticks (headless mode, tests)
3. ``run_forever()`` which sleeps between ticks until ``stop()``

A failing tick is logged and discarded so that scheduling continues.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from potchi.environment.model import EnvironmentModel
    from potchi.simulation.config import SimulationConfig

logger = logging.getLogger(__name__)


class SimulationClock:
    """Drives an EnvironmentModel forward tick by tick.

    Attributes:
        model: The model being stepped.
        interval: Real seconds between ticks.
        delta_seconds: Simulated seconds passed to each step.
        scale: Evaporation multiplier passed to each step.
        ticks: Number of ticks attempted.
        failed_ticks: Number of ticks whose exception was swallowed.
        running: False once ``stop()`` has been called.
    """

    def __init__(
        self,
        model: EnvironmentModel,
        interval: float = 1.0,
        delta_seconds: float = 1.0,
        scale: float = 1.0,
    ) -> None:
        self.model = model
        self.interval = interval
        self.delta_seconds = delta_seconds
        self.scale = scale
        self.ticks = 0
        self.failed_ticks = 0
        self.running = True
        self._accumulator = 0.0

    @classmethod
    def from_config(
        cls,
        model: EnvironmentModel,
        config: SimulationConfig,
    ) -> SimulationClock:
        """Build a clock using the tick settings of *config*."""
        return cls(
            model,
            interval=config.tick_interval,
            delta_seconds=config.delta_seconds,
            scale=config.evaporation_scale,
        )

    def tick(self) -> bool:
        """Run one simulation step.

        Returns:
            True if the step succeeded, False if it raised.
        """
        self.ticks += 1
        try:
            self.model.simulate_step(self.delta_seconds, self.scale)
        except Exception:
            self.failed_ticks += 1
            logger.exception("Simulation tick %d failed", self.ticks)
            return False
        return True

    def advance(self, elapsed: float) -> int:
        """Account for *elapsed* real seconds and run any ticks now due.

        Partial intervals carry over to the next call.

        Args:
            elapsed: Real seconds since the previous call.

        Returns:
            Number of ticks run.
        """
        if self.interval <= 0:
            return 0
        self._accumulator += elapsed
        steps = int(self._accumulator / self.interval)
        self._accumulator -= steps * self.interval
        for _ in range(steps):
            self.tick()
        return steps

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.tick()

    def run_forever(self, sleep: Callable[[float], None] = time.sleep) -> None:
        """Tick every ``interval`` seconds until ``stop()`` is called.

        Args:
            sleep: Function used to wait between ticks.
        """
        logger.info("Clock started (interval=%.2fs)", self.interval)
        while self.running:
            self.tick()
            if not self.running:
                break
            sleep(self.interval)
        logger.info("Clock stopped after %d ticks", self.ticks)

    def stop(self) -> None:
        """Stop ``run_forever`` after the current tick."""
        self.running = False
