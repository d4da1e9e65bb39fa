"""SoftRoute - service time plus travel time transit."""

from typing import Callable


class ServiceTimePlusTransition:
    """
    Time spent on arc i -> j: service at the origin (proportional to its
    demand) followed by the travel to j.
    """

    def __init__(
        self,
        time_per_demand_unit: int,
        demand: Callable[[int], int],
        transition_time: Callable[[int, int], int],
    ):
        self.time_per_demand_unit = time_per_demand_unit
        self._demand = demand
        self._transition_time = transition_time

    def compute(self, from_node: int, to_node: int) -> int:
        return (
            self.time_per_demand_unit * self._demand(from_node)
            + self._transition_time(from_node, to_node)
        )
