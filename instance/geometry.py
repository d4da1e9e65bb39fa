"""
SoftRoute - Geometry & Distance Service
Random integer locations on a grid, Manhattan distances and travel times.
"""

import collections
import random
from typing import Optional


Location = collections.namedtuple("Location", "x y")


class LocationContainer:
    """
    Stores node coordinates in insertion order; the i-th location added is
    node i. Distances are Manhattan, which keeps arithmetic integral and
    mimics a grid-like road network.
    """

    def __init__(self, speed: int, rng: Optional[random.Random] = None):
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}")
        self.speed = speed
        self._rng = rng if rng is not None else random.Random()
        self._locations: list[Location] = []

    def add_random_location(self, x_max: int, y_max: int) -> Location:
        location = Location(self._rng.randint(0, x_max), self._rng.randint(0, y_max))
        self._locations.append(location)
        return location

    def add_location(self, x: int, y: int) -> Location:
        location = Location(x, y)
        self._locations.append(location)
        return location

    def __len__(self) -> int:
        return len(self._locations)

    def __getitem__(self, node: int) -> Location:
        return self._locations[node]

    @property
    def locations(self) -> tuple[Location, ...]:
        return tuple(self._locations)

    def manhattan_distance(self, from_node: int, to_node: int) -> int:
        a, b = self._locations[from_node], self._locations[to_node]
        return abs(a.x - b.x) + abs(a.y - b.y)

    def manhattan_time(self, from_node: int, to_node: int) -> int:
        # Rounded up, so a nonzero distance never takes zero seconds.
        return -(-self.manhattan_distance(from_node, to_node) // self.speed)
