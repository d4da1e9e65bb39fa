"""
SoftRoute - Demand Generator
"""

import random
from typing import Optional, Sequence


class Demand:
    """
    Demand per node, zero at the depot.

    demand(i, j) is the capacity transit of arc i -> j: load is picked up on
    arrival at j, so the value belongs to the destination.
    """

    def __init__(self, values: Optional[Sequence[int]] = None, depot: int = 0):
        if values is not None and values[depot] != 0:
            raise ValueError("The depot must have zero demand")
        self.depot = depot
        self._demand: Optional[list[int]] = list(values) if values is not None else None

    def _values(self) -> list[int]:
        if self._demand is None:
            raise RuntimeError("Demand values have not been drawn; call initialize() first")
        return self._demand

    def node_demand(self, node: int) -> int:
        return self._values()[node]

    def demand(self, from_node: int, to_node: int) -> int:
        return self._values()[to_node]

    @property
    def values(self) -> list[int]:
        return list(self._values())

    @property
    def total(self) -> int:
        return sum(self._values())


class RandomDemand(Demand):
    """One pseudo-random demand in [demand_min, demand_max] per order."""

    def __init__(
        self,
        num_nodes: int,
        depot: int,
        rng: Optional[random.Random] = None,
        demand_min: int = 1,
        demand_max: int = 5,
    ):
        if not 1 <= demand_min <= demand_max:
            raise ValueError(f"Invalid demand range [{demand_min}, {demand_max}]")
        super().__init__(depot=depot)
        self.num_nodes = num_nodes
        self.demand_min = demand_min
        self.demand_max = demand_max
        self._rng = rng if rng is not None else random.Random()

    def initialize(self) -> None:
        self._demand = [
            0 if node == self.depot else self._rng.randint(self.demand_min, self.demand_max)
            for node in range(self.num_nodes)
        ]
