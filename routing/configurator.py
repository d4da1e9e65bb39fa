"""
SoftRoute - Model Configurator
Turns an Instance and a RoutingRequest into a routing model on a backend.

Steps must run in this order, each exactly once:

    set_arc_costs -> add_capacity_dimension -> add_time_dimension
    -> add_time_windows -> add_disjunctions -> [add_same_vehicle_groups]
    -> solve

The bracketed step runs only, and then must run, when same-vehicle costs are
enabled. After solve() the configurator is sealed.
"""

import logging
from enum import Enum
from typing import Optional, Sequence

from instance.models import Instance

from .backend import RoutingAssignment, RoutingBackend
from .models import ConfigurationError, RoutingRequest

logger = logging.getLogger(__name__)

CAPACITY = "Capacity"
TIME = "Time"


class ConfiguratorStage(int, Enum):
    EMPTY = 0
    COSTED = 1
    CAPACITY = 2
    TIME = 3
    WINDOWED = 4
    DISJOINED = 5
    GROUPED = 6
    SEALED = 7


def same_vehicle_groups(nodes: Sequence[int], group_size: int) -> list[list[int]]:
    """Consecutive groups of `group_size` nodes; the last one may be shorter."""
    return [list(nodes[i:i + group_size]) for i in range(0, len(nodes), group_size)]


class ModelConfigurator:

    def __init__(self, backend: RoutingBackend, instance: Instance, request: RoutingRequest):
        self.backend = backend
        self.instance = instance
        self.request = request
        self.stage = ConfiguratorStage.EMPTY

    def _require(self, expected: ConfiguratorStage, action: str) -> None:
        if self.stage != expected:
            raise ConfigurationError(
                f"Cannot {action} in stage {self.stage.name}; expected {expected.name}"
            )

    @property
    def capacity_bound(self) -> int:
        if self.request.hard_capacity_enabled:
            return self.request.vehicle_hard_capacity
        # No route can carry more than everything there is.
        return self.instance.total_demand

    def set_arc_costs(self) -> None:
        self._require(ConfiguratorStage.EMPTY, "set arc costs")
        cost = self.backend.register_transit_callback(self.instance.distance)
        self.backend.set_arc_cost_evaluator_of_all_vehicles(cost)
        self.stage = ConfiguratorStage.COSTED

    def add_capacity_dimension(self) -> None:
        self._require(ConfiguratorStage.COSTED, "add the capacity dimension")
        demand = self.backend.register_transit_callback(self.instance.demand.demand)
        self.backend.add_dimension(demand, 0, self.capacity_bound, True, CAPACITY)

        if self.request.soft_capacity_enabled:
            for vehicle in range(self.request.num_vehicles):
                self.backend.set_end_cumul_soft_upper_bound(
                    CAPACITY, vehicle,
                    self.request.vehicle_soft_capacity,
                    self.request.vehicle_soft_capacity_cost,
                )
        logger.debug(
            "Capacity dimension: bound %d, soft capacity %d",
            self.capacity_bound, self.request.vehicle_soft_capacity,
        )
        self.stage = ConfiguratorStage.CAPACITY

    def add_time_dimension(self) -> None:
        self._require(ConfiguratorStage.CAPACITY, "add the time dimension")
        horizon = self.instance.horizon
        transit = self.backend.register_transit_callback(self.instance.transit_time.compute)
        self.backend.add_dimension(transit, horizon, horizon, True, TIME)
        self.stage = ConfiguratorStage.TIME

    def add_time_windows(self) -> None:
        self._require(ConfiguratorStage.TIME, "add time windows")
        for order in self.instance.orders:
            start, end = self.instance.time_window(order)
            self.backend.set_cumul_range(TIME, order, start, end)
        self.stage = ConfiguratorStage.WINDOWED

    def add_disjunctions(self) -> None:
        self._require(ConfiguratorStage.WINDOWED, "add disjunctions")
        for order in self.instance.orders:
            self.backend.add_disjunction([order], self.request.drop_penalty)
        self.stage = ConfiguratorStage.DISJOINED

    def add_same_vehicle_groups(self) -> None:
        if not self.request.use_same_vehicle_costs:
            raise ConfigurationError("Same vehicle costs are disabled")
        self._require(ConfiguratorStage.DISJOINED, "add same vehicle groups")
        groups = same_vehicle_groups(self.instance.orders, self.request.max_nodes_per_group)
        for group in groups:
            self.backend.add_soft_same_vehicle_constraint(group, self.request.same_vehicle_cost)
        logger.debug("Added %d same vehicle groups", len(groups))
        self.stage = ConfiguratorStage.GROUPED

    def configure(self) -> None:
        self.set_arc_costs()
        self.add_capacity_dimension()
        self.add_time_dimension()
        self.add_time_windows()
        self.add_disjunctions()
        if self.request.use_same_vehicle_costs:
            self.add_same_vehicle_groups()

    def solve(self, parameters) -> Optional[RoutingAssignment]:
        if self.request.use_same_vehicle_costs:
            self._require(ConfiguratorStage.GROUPED, "solve")
        else:
            self._require(ConfiguratorStage.DISJOINED, "solve")
        self.stage = ConfiguratorStage.SEALED
        return self.backend.solve(parameters)
