"""Mood — a stateless classification of how the plant is feeling.

The mood is recomputed from scratch on every query; nothing about the
previous mood is remembered.  Rules are checked in strict priority order
and the first match wins.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from potchi.environment.state import EnvironmentState


class Mood(Enum):
    """The six mutually exclusive moods, each with a label and kaomoji."""

    DROWNING = ("Drowning", "(ﾟДﾟ;)")
    THIRSTY = ("Thirsty", "(´；ω；`)")
    HOT = ("Hot", "(; ﾟДﾟ)")
    COLD = ("Cold", "(｡•́_•̀｡)")
    SLEEPY = ("Sleepy", "(－ω－)")
    HAPPY = ("Happy", "(◕‿◕)")

    def __init__(self, label: str, emoji: str) -> None:
        self.label = label
        self.emoji = emoji


def classify_mood(moisture: float, temperature: float, light_exposure: float) -> Mood:
    """Classify the plant's mood from its current readings.

    Priority: soil water first, then temperature, then light.

    Args:
        moisture: Soil moisture in percent.
        temperature: Air temperature in degrees Celsius.
        light_exposure: Light level in lux.

    Returns:
        The first matching Mood.
    """
    if moisture > 80:
        return Mood.DROWNING
    if moisture < 30:
        return Mood.THIRSTY
    if temperature > 35:
        return Mood.HOT
    if temperature < 15:
        return Mood.COLD
    if light_exposure < 200:
        return Mood.SLEEPY
    return Mood.HAPPY


def mood_for(state: EnvironmentState) -> Mood:
    """Classify the mood of an environment snapshot."""
    return classify_mood(state.moisture, state.temperature, state.light_exposure)
