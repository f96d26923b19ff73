"""Entry point for ``python -m potchi``.

Loads the default YAML config, builds the environment model and its
clock, and either opens a Pygame window or runs headless for a fixed
number of ticks.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from potchi.environment.model import EnvironmentModel
from potchi.logger import setup_logger
from potchi.simulation.clock import SimulationClock
from potchi.simulation.config import SimulationConfig

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="potchi",
        description="Potchi - potted plant environment simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and print the final state",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=60,
        help="Ticks to run in headless mode (default: 60)",
    )
    parser.add_argument(
        "--log-dir",
        type=pathlib.Path,
        default=None,
        help="Directory for a rotating log file",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def run_headless(model: EnvironmentModel, clock: SimulationClock, ticks: int) -> None:
    """Run *ticks* ticks and print the resulting state and mood."""
    clock.run(ticks)
    state = model.state
    mood = model.mood
    print(
        f"t={state.sim_time_seconds:.0f}s "
        f"humidity={state.humidity}% moisture={state.moisture}% "
        f"temperature={state.temperature}C light={state.light_exposure}lx "
        f"mood={mood.label} {mood.emoji}",
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create model and clock, launch renderer."""
    args = build_parser().parse_args(argv)
    setup_logger(args.log_dir, debug=args.debug)

    config = SimulationConfig.from_yaml(args.config)
    model = EnvironmentModel.from_config(config)
    clock = SimulationClock.from_config(model, config)
    logger.info(
        "Loaded %s (day cycle %.0fs, seed %s)",
        args.config,
        model.state.day_cycle_seconds,
        config.seed,
    )

    if args.headless:
        run_headless(model, clock, args.ticks)
        return

    from potchi.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(
        model,
        clock,
        water_amount=config.water_amount,
        sleep_lux=config.sleep_lux,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
