"""
SoftRoute - Routing Solver Backend
The narrow contract between the model configurator and a routing engine,
and its implementation on top of Google OR-Tools.

Callbacks handed to a backend take node indices. Translating solver indices
(which duplicate the depot per vehicle) back to nodes is the backend's job.
"""

import abc
import collections
import logging
from typing import Callable, Optional, Sequence

from google.protobuf import text_format
from ortools.constraint_solver import pywrapcp

from .models import ConfigurationError

logger = logging.getLogger(__name__)

# cumuls maps dimension name -> (min, max) of the cumul variable at that visit.
Visit = collections.namedtuple("Visit", "node cumuls")
# routes holds one list of visits per vehicle, depot start and end included.
RoutingAssignment = collections.namedtuple("RoutingAssignment", "objective routes")

TransitCallback = Callable[[int, int], int]


class RoutingBackend(abc.ABC):

    @classmethod
    @abc.abstractmethod
    def search_parameters(cls, override: str = ""):
        """Default search parameters merged with a (partial) text override."""

    @abc.abstractmethod
    def register_transit_callback(self, callback: TransitCallback) -> int:
        ...

    @abc.abstractmethod
    def set_arc_cost_evaluator_of_all_vehicles(self, callback_index: int) -> None:
        ...

    @abc.abstractmethod
    def add_dimension(
        self, callback_index: int, slack_max: int, capacity: int,
        fix_start_cumul_to_zero: bool, name: str,
    ) -> None:
        ...

    @abc.abstractmethod
    def set_cumul_range(self, dimension: str, node: int, lower: int, upper: int) -> None:
        ...

    @abc.abstractmethod
    def set_end_cumul_soft_upper_bound(
        self, dimension: str, vehicle: int, upper_bound: int, coefficient: int,
    ) -> None:
        ...

    @abc.abstractmethod
    def add_disjunction(self, nodes: Sequence[int], penalty: int) -> None:
        ...

    @abc.abstractmethod
    def add_soft_same_vehicle_constraint(self, nodes: Sequence[int], cost: int) -> None:
        ...

    @abc.abstractmethod
    def solve(self, parameters) -> Optional[RoutingAssignment]:
        """Blocking solve. Returns None when no solution was found."""


class OrToolsBackend(RoutingBackend):

    def __init__(self, num_nodes: int, num_vehicles: int, depot: int = 0):
        self.num_vehicles = num_vehicles
        self.manager = pywrapcp.RoutingIndexManager(num_nodes, num_vehicles, depot)
        self.routing = pywrapcp.RoutingModel(self.manager)
        self._callbacks: list[Callable[[int, int], int]] = []
        self._dimensions: list[str] = []

    @classmethod
    def search_parameters(cls, override: str = ""):
        parameters = pywrapcp.DefaultRoutingSearchParameters()
        try:
            text_format.Merge(override, parameters)
        except text_format.ParseError as e:
            raise ConfigurationError(f"Malformed routing search parameters: {e}") from e
        return parameters

    def register_transit_callback(self, callback: TransitCallback) -> int:
        manager = self.manager

        def transit(from_index, to_index):
            return callback(manager.IndexToNode(from_index), manager.IndexToNode(to_index))

        # The routing model does not own the Python callable.
        self._callbacks.append(transit)
        return self.routing.RegisterTransitCallback(transit)

    def set_arc_cost_evaluator_of_all_vehicles(self, callback_index: int) -> None:
        self.routing.SetArcCostEvaluatorOfAllVehicles(callback_index)

    def add_dimension(
        self, callback_index: int, slack_max: int, capacity: int,
        fix_start_cumul_to_zero: bool, name: str,
    ) -> None:
        if not self.routing.AddDimension(
            callback_index, slack_max, capacity, fix_start_cumul_to_zero, name
        ):
            raise ConfigurationError(f"Dimension '{name}' could not be added")
        self._dimensions.append(name)

    def set_cumul_range(self, dimension: str, node: int, lower: int, upper: int) -> None:
        cumul = self.routing.GetDimensionOrDie(dimension).CumulVar(self.manager.NodeToIndex(node))
        cumul.SetRange(lower, upper)

    def set_end_cumul_soft_upper_bound(
        self, dimension: str, vehicle: int, upper_bound: int, coefficient: int,
    ) -> None:
        self.routing.GetDimensionOrDie(dimension).SetCumulVarSoftUpperBound(
            self.routing.End(vehicle), upper_bound, coefficient
        )

    def add_disjunction(self, nodes: Sequence[int], penalty: int) -> None:
        self.routing.AddDisjunction([self.manager.NodeToIndex(n) for n in nodes], penalty)

    def add_soft_same_vehicle_constraint(self, nodes: Sequence[int], cost: int) -> None:
        self.routing.AddSoftSameVehicleConstraint(
            [self.manager.NodeToIndex(n) for n in nodes], cost
        )

    def solve(self, parameters) -> Optional[RoutingAssignment]:
        solution = self.routing.SolveWithParameters(parameters)
        if not solution:
            logger.info("Routing solver returned no solution (status %s)", self.routing.status())
            return None

        dimensions = [(name, self.routing.GetDimensionOrDie(name)) for name in self._dimensions]
        routes = []
        for vehicle in range(self.num_vehicles):
            visits = []
            index = self.routing.Start(vehicle)
            while True:
                cumuls = {
                    name: (solution.Min(dim.CumulVar(index)), solution.Max(dim.CumulVar(index)))
                    for name, dim in dimensions
                }
                visits.append(Visit(self.manager.IndexToNode(index), cumuls))
                if self.routing.IsEnd(index):
                    break
                index = solution.Value(self.routing.NextVar(index))
            routes.append(visits)
        return RoutingAssignment(objective=solution.ObjectiveValue(), routes=routes)
