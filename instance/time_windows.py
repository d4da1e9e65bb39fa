"""
SoftRoute - Time Window Assigner
Draws one fixed-length window per order inside the planning horizon.
"""

import random
from typing import Optional

from .models import ConfigurationError


class TimeWindowAssigner:

    def __init__(self, horizon: int, duration: int, rng: Optional[random.Random] = None):
        if duration <= 0:
            raise ConfigurationError(f"Time window duration must be positive, got {duration}")
        if duration >= horizon:
            raise ConfigurationError(
                f"Time window duration ({duration}) must be shorter than the horizon ({horizon})"
            )
        self.horizon = horizon
        self.duration = duration
        self._rng = rng if rng is not None else random.Random()

    def draw(self) -> tuple[int, int]:
        start = self._rng.randint(0, self.horizon - self.duration)
        return start, start + self.duration

    def assign(self, num_nodes: int, depot: int = 0) -> list[tuple[int, int]]:
        """The depot is open for the whole horizon; every order gets a drawn window."""
        return [
            (0, self.horizon) if node == depot else self.draw()
            for node in range(num_nodes)
        ]
