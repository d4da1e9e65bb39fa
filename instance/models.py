"""
SoftRoute - Instance Data Models
Pydantic schemas for the synthetic CVRPTW instance: generation parameters,
nodes, and the generated instance itself.

An Instance is plain, serializable data. On construction it rebuilds the
distance, demand and transit-time services from its nodes, so the same
object can be generated, shipped as JSON, and fed back to the configurator.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, PrivateAttr, model_validator

from .demand import Demand
from .geometry import LocationContainer
from .timing import ServiceTimePlusTransition


DEPOT = 0
INT64_MAX = 2 ** 63 - 1


class ConfigurationError(ValueError):
    """Raised when parameters are rejected before any model is built."""


def _check_int64(what: str, value: int) -> None:
    if value > INT64_MAX:
        raise ValueError(f"{what} ({value}) does not fit in a 64-bit integer")


# ─────────────────────────────────────────────
# Input Models
# ─────────────────────────────────────────────

class InstanceRequest(BaseModel):
    """
    Parameters of a synthetic instance.
    Orders are placed uniformly on an integer grid, get a small random
    demand, and a fixed-length time window inside the planning horizon.
    Distances are in meters, times in seconds.
    """
    num_orders: int = Field(100, gt=0, le=1_000_000, description="Number of orders (nodes besides the depot)")
    use_deterministic_random_seed: bool = Field(False, description="Use the fixed base seed")
    seed: Optional[int] = Field(None, ge=0, le=INT64_MAX, description="Explicit base seed; overrides the deterministic flag")
    x_max: int = Field(100_000, gt=0, le=INT64_MAX, description="Grid width")
    y_max: int = Field(100_000, gt=0, le=INT64_MAX, description="Grid height")
    speed: int = Field(10, gt=0, le=INT64_MAX, description="Travel speed in meters per second")
    demand_min: int = Field(1, ge=1, le=INT64_MAX)
    demand_max: int = Field(5, ge=1, le=INT64_MAX)
    time_per_demand_unit: int = Field(300, ge=0, le=INT64_MAX, description="Service seconds per unit of demand")
    horizon: int = Field(24 * 3600, gt=0, le=INT64_MAX, description="Length of the planning day")
    time_window_duration: int = Field(5 * 3600, gt=0, le=INT64_MAX, description="Width of every order's time window")

    @model_validator(mode="after")
    def validate_ranges(self):
        if self.demand_min > self.demand_max:
            raise ValueError(
                f"demand_min ({self.demand_min}) must not exceed demand_max ({self.demand_max})"
            )
        if self.time_window_duration >= self.horizon:
            raise ValueError(
                f"time_window_duration ({self.time_window_duration}) must be shorter "
                f"than the horizon ({self.horizon})"
            )
        num_nodes = self.num_orders + 1
        # A route visits each node at most once, so these bound every cumul.
        _check_int64("Total route distance", (self.x_max + self.y_max) * num_nodes)
        _check_int64("Total demand", self.demand_max * num_nodes)
        _check_int64(
            "Arc time transit",
            self.time_per_demand_unit * self.demand_max + self.x_max + self.y_max,
        )
        return self


# ─────────────────────────────────────────────
# Generated Instance
# ─────────────────────────────────────────────

class Node(BaseModel):
    index: int = Field(..., ge=0, le=INT64_MAX)
    x: int = Field(..., ge=0, le=INT64_MAX)
    y: int = Field(..., ge=0, le=INT64_MAX)
    demand: int = Field(0, ge=0, le=INT64_MAX)
    time_window_start: int = Field(..., ge=0, le=INT64_MAX)
    time_window_end: int = Field(..., ge=0, le=INT64_MAX)


class Instance(BaseModel):
    """
    A fully generated CVRPTW instance. Node 0 is the depot, where every
    route starts and ends.
    """
    nodes: list[Node] = Field(..., min_length=2)
    speed: int = Field(..., gt=0, le=INT64_MAX)
    time_per_demand_unit: int = Field(..., ge=0, le=INT64_MAX)
    horizon: int = Field(..., gt=0, le=INT64_MAX)
    seed: Optional[int] = Field(None, description="Base seed the instance was drawn from")

    _locations: LocationContainer = PrivateAttr()
    _demand: Demand = PrivateAttr()
    _transit_time: ServiceTimePlusTransition = PrivateAttr()

    @model_validator(mode="after")
    def validate_nodes(self):
        for position, node in enumerate(self.nodes):
            if node.index != position:
                raise ValueError(f"Node at position {position} has index {node.index}")
            if node.time_window_end > self.horizon:
                raise ValueError(f"Time window of node {position} ends after the horizon")
            if node.time_window_end <= node.time_window_start:
                raise ValueError(f"Time window of node {position} is empty")
        if self.nodes[DEPOT].demand != 0:
            raise ValueError("The depot must have zero demand")
        span = max(n.x for n in self.nodes) + max(n.y for n in self.nodes)
        _check_int64("Total route distance", span * len(self.nodes))
        _check_int64("Total demand", sum(n.demand for n in self.nodes))
        _check_int64(
            "Arc time transit",
            self.time_per_demand_unit * max(n.demand for n in self.nodes) + span,
        )
        return self

    def model_post_init(self, __context) -> None:
        self._locations = LocationContainer(self.speed)
        for node in self.nodes:
            self._locations.add_location(node.x, node.y)
        self._demand = Demand([node.demand for node in self.nodes], DEPOT)
        self._transit_time = ServiceTimePlusTransition(
            self.time_per_demand_unit,
            self._demand.node_demand,
            self._locations.manhattan_time,
        )

    @property
    def depot(self) -> int:
        return DEPOT

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_orders(self) -> int:
        return len(self.nodes) - 1

    @property
    def orders(self) -> list[int]:
        return [node.index for node in self.nodes if node.index != DEPOT]

    @property
    def total_demand(self) -> int:
        return self._demand.total

    @property
    def locations(self) -> LocationContainer:
        return self._locations

    @property
    def demand(self) -> Demand:
        return self._demand

    @property
    def transit_time(self) -> ServiceTimePlusTransition:
        return self._transit_time

    def distance(self, from_node: int, to_node: int) -> int:
        return self._locations.manhattan_distance(from_node, to_node)

    def time_window(self, node: int) -> tuple[int, int]:
        n = self.nodes[node]
        return n.time_window_start, n.time_window_end
