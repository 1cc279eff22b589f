from __future__ import annotations

import random

from pygame.math import Vector2


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_range(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def next_point(self, width: float, height: float, margin: float = 0.0) -> Vector2:
        return Vector2(
            self.next_range(margin, max(margin, width - margin)),
            self.next_range(margin, max(margin, height - margin)),
        )
