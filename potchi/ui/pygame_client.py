"""Pygame display for the Potchi environment model.

Renders the four readings as progress bars, the current mood, and the
recent action history.  The renderer never computes simulation logic:
it subscribes to the model, redraws from the latest snapshot, and maps
key presses onto model actions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pygame

from potchi.environment.state import (
    DISPLAY_LIGHT_RANGE,
    DISPLAY_TEMPERATURE_RANGE,
    HUMIDITY_RANGE,
    MOISTURE_RANGE,
    EnvironmentState,
)
from potchi.mood import Mood, mood_for

if TYPE_CHECKING:
    from potchi.environment.model import EnvironmentModel
    from potchi.simulation.clock import SimulationClock

# Colour palette
_BG = (24, 28, 24)
_TEXT = (210, 220, 200)
_BAR_BG = (50, 56, 50)

_BAR_COLOURS: dict[str, tuple[int, int, int]] = {
    "humidity": (90, 170, 230),
    "moisture": (120, 90, 60),
    "temperature": (230, 120, 70),
    "light_exposure": (240, 210, 80),
}

_MOOD_COLOURS: dict[Mood, tuple[int, int, int]] = {
    Mood.DROWNING: (80, 120, 255),
    Mood.THIRSTY: (230, 160, 60),
    Mood.HOT: (240, 90, 60),
    Mood.COLD: (150, 200, 255),
    Mood.SLEEPY: (160, 140, 200),
    Mood.HAPPY: (120, 220, 120),
}

# Day cycle adjustment per +/- key press
_CYCLE_STEP = 5.0


def display_percent(value: float, low: float, high: float) -> float:
    """Map *value* onto 0-100 % of the display range ``[low, high]``."""
    if high <= low:
        return 0.0
    return max(0.0, min(100.0, (value - low) / (high - low) * 100.0))


def bar_rows(state: EnvironmentState) -> list[tuple[str, str, float]]:
    """Return ``(key, caption, percent)`` rows for the four bars."""
    return [
        (
            "humidity",
            f"Humidity     {state.humidity:>5d} %",
            display_percent(state.humidity, *HUMIDITY_RANGE),
        ),
        (
            "moisture",
            f"Moisture     {state.moisture:>5d} %",
            display_percent(state.moisture, *MOISTURE_RANGE),
        ),
        (
            "temperature",
            f"Temperature  {state.temperature:>5d} C",
            display_percent(state.temperature, *DISPLAY_TEMPERATURE_RANGE),
        ),
        (
            "light_exposure",
            f"Light        {state.light_exposure:>5d} lx",
            display_percent(state.light_exposure, *DISPLAY_LIGHT_RANGE),
        ),
    ]


class PygameRenderer:
    """Renders an EnvironmentModel into a Pygame window.

    Attributes:
        model: The environment model to display and control.
        clock: The simulation clock advanced once per frame.
        water_amount: Moisture added per water key press.
        sleep_lux: Light level used by the sleep key.
    """

    def __init__(
        self,
        model: EnvironmentModel,
        clock: SimulationClock,
        water_amount: float = 30.0,
        sleep_lux: float = 50.0,
    ) -> None:
        """Initialise the renderer and open the window.

        Args:
            model: The model to render.
            clock: Clock stepped from the frame loop.
            water_amount: Moisture added per water key press.
            sleep_lux: Light level used by the sleep key.
        """
        self.model = model
        self.clock = clock
        self.water_amount = water_amount
        self.sleep_lux = sleep_lux
        self._snapshot = model.state
        self._unsubscribe = model.subscribe(self._on_change)

        pygame.init()
        self.screen = pygame.display.set_mode((520, 420))
        pygame.display.set_caption("Potchi")
        self.frame_clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.big_font = pygame.font.SysFont(None, 40)
        self.running = True
        self.paused = False

    def _on_change(self, state: EnvironmentState) -> None:
        self._snapshot = state

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, advance the clock, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.frame_clock.tick(fps) / 1000.0
            self._handle_events()
            if not self.paused:
                self.clock.advance(dt)
            self._draw()

        self._unsubscribe()
        self.clock.stop()
        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)

    def _handle_key(self, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            self.paused = not self.paused
        elif key == pygame.K_w:
            self.model.water(self.water_amount)
        elif key == pygame.K_s:
            self.model.sleep(self.sleep_lux)
        elif key == pygame.K_a:
            self.model.wake()
        elif key == pygame.K_r:
            self.model.randomize()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            cycle = self._snapshot.day_cycle_seconds
            self.model.set_day_cycle_seconds(cycle + _CYCLE_STEP)
        elif key == pygame.K_MINUS:
            cycle = self._snapshot.day_cycle_seconds
            self.model.set_day_cycle_seconds(cycle - _CYCLE_STEP)

    def _draw(self) -> None:
        """Render one frame from a single snapshot."""
        state = self._snapshot
        self.screen.fill(_BG)
        self._draw_mood(state)
        self._draw_bars(state)
        self._draw_info_panel(state)
        pygame.display.flip()

    def _draw_mood(self, state: EnvironmentState) -> None:
        mood = mood_for(state)
        surf = self.big_font.render(
            f"{mood.emoji}  {mood.label}",
            True,
            _MOOD_COLOURS[mood],
        )
        self.screen.blit(surf, (20, 16))

    def _draw_bars(self, state: EnvironmentState) -> None:
        """Draw one labelled progress bar per reading."""
        y = 70
        for key, caption, percent in bar_rows(state):
            surf = self.font.render(caption, True, _TEXT)
            self.screen.blit(surf, (20, y))
            pygame.draw.rect(self.screen, _BAR_BG, (250, y, 250, 14))
            width = int(250 * percent / 100.0)
            if width > 0:
                pygame.draw.rect(self.screen, _BAR_COLOURS[key], (250, y, width, 14))
            y += 26

    def _draw_info_panel(self, state: EnvironmentState) -> None:
        """Draw time, controls and recent actions below the bars."""
        y = 185
        lines = [
            f"Sim time: {state.sim_time_seconds:.0f}s  "
            f"phase {state.phase:.2f}  cycle {state.day_cycle_seconds:.0f}s",
            f"{'PAUSED' if self.paused else 'RUNNING'}"
            f"{'  (asleep)' if state.is_sleeping else ''}",
            "",
            "W water  S sleep  A wake  R randomize",
            "+/- day cycle  SPACE pause  ESC quit",
            "",
            "--- Recent actions ---",
        ]
        lines += [
            f"{record.sim_time_seconds:>6.0f}s {record.name}"
            for record in list(self.model.history)[-6:]
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (20, y))
            y += 18
