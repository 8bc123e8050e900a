"""Synthetic readings for exercising a local server."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

DEFAULT_STEP = 5 * 60
_DAY = 24 * 60 * 60


@dataclass
class GeneratorState:
    """Position of a synthetic series; advanced by :func:`next_sample`."""

    timestamp: int
    step: int = DEFAULT_STEP
    baseline: float = 20.0
    amplitude: float = 5.0
    emitted: int = 0


def next_sample(state: GeneratorState) -> tuple[int, float]:
    """Return the next (timestamp, value) pair and advance ``state``."""
    phase = 2 * math.pi * (state.timestamp % _DAY) / _DAY
    sample = (state.timestamp, round(state.baseline + state.amplitude * math.sin(phase), 2))
    state.timestamp += state.step
    state.emitted += 1
    return sample


def generate(state: GeneratorState, count: int) -> Iterator[tuple[int, float]]:
    for _ in range(count):
        yield next_sample(state)
