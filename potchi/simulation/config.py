"""Config — load simulation parameters from YAML files.

Tunable constants (day length, tick rate, action defaults, RNG seed)
live in YAML and are parsed into a typed dataclass here.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay (None = fresh entropy).
        day_cycle_seconds: Simulated seconds in one day/night cycle.
        tick_interval: Real seconds between simulation ticks.
        delta_seconds: Simulated seconds advanced per tick.
        evaporation_scale: Multiplier on per-tick soil moisture loss.
        water_amount: Moisture added by the water action.
        sleep_lux: Light level the sleep action dims to.
        history_size: Number of recent actions kept for display.
    """

    seed: int | None = None
    day_cycle_seconds: float = 30.0
    tick_interval: float = 1.0
    delta_seconds: float = 1.0
    evaporation_scale: float = 1.0
    water_amount: float = 30.0
    sleep_lux: float = 50.0
    history_size: int = 20

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            day_cycle_seconds=data.get("day_cycle_seconds", cls.day_cycle_seconds),
            tick_interval=data.get("tick_interval", cls.tick_interval),
            delta_seconds=data.get("delta_seconds", cls.delta_seconds),
            evaporation_scale=data.get(
                "evaporation_scale",
                cls.evaporation_scale,
            ),
            water_amount=data.get("water_amount", cls.water_amount),
            sleep_lux=data.get("sleep_lux", cls.sleep_lux),
            history_size=data.get("history_size", cls.history_size),
        )
