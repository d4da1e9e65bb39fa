"""
SoftRoute - Routing Data Models
Pydantic schemas for the soft-capacitated CVRPTW: fleet and penalty
parameters in, per-vehicle routes and cost breakdown out.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from instance.models import INT64_MAX, ConfigurationError, InstanceRequest  # noqa: F401


class RoutingStatus(str, Enum):
    FEASIBLE = "feasible"
    PARTIAL = "partial"
    NO_SOLUTION = "no_solution"


class RoutingRequest(BaseModel):
    """
    Complete routing request.
    Generates an instance from `instance`, then routes it with a fleet of
    identical vehicles. Exceeding the soft capacity is allowed at
    `vehicle_soft_capacity_cost` per extra unit; the hard capacity is never
    exceeded. Orders may be dropped at `drop_penalty` each.
    """
    instance: InstanceRequest = Field(default_factory=InstanceRequest)
    num_vehicles: int = Field(20, gt=0, le=10_000, description="Fleet size")
    vehicle_hard_capacity: int = Field(80, ge=0, le=INT64_MAX, description="0 disables the hard capacity")
    vehicle_soft_capacity: int = Field(40, ge=0, le=INT64_MAX, description="0 disables the soft capacity")
    vehicle_soft_capacity_cost: int = Field(5000, ge=0, le=INT64_MAX, description="Cost per unit above the soft capacity")
    use_same_vehicle_costs: bool = Field(False, description="Penalize splitting order groups across vehicles")
    max_nodes_per_group: int = Field(10, gt=0, le=INT64_MAX)
    same_vehicle_cost: int = Field(1000, ge=0, le=INT64_MAX)
    drop_penalty: int = Field(10_000_000, ge=0, le=INT64_MAX, description="Cost of leaving one order unserved")
    routing_search_parameters: str = Field(
        "", description="Text-format RoutingSearchParameters (possibly partial) overriding the defaults"
    )

    @model_validator(mode="after")
    def validate_capacities(self):
        if self.hard_capacity_enabled and self.soft_capacity_enabled:
            if self.vehicle_soft_capacity >= self.vehicle_hard_capacity:
                raise ValueError("The hard capacity must be higher than the soft capacity.")
        return self

    @property
    def hard_capacity_enabled(self) -> bool:
        return self.vehicle_hard_capacity > 0

    @property
    def soft_capacity_enabled(self) -> bool:
        return self.vehicle_soft_capacity > 0


class RouteStop(BaseModel):
    node: int
    demand: int = Field(0, ge=0)
    load: int = Field(..., ge=0, description="Cumulative load after serving this node")
    time_min: int = Field(..., ge=0)
    time_max: int = Field(..., ge=0)
    time_window_start: int = Field(..., ge=0)
    time_window_end: int = Field(..., ge=0)


class VehicleRoute(BaseModel):
    vehicle: int
    stops: list[RouteStop] = Field(default_factory=list, description="Visits, depot start and end included")
    total_distance: int = Field(0, ge=0)
    total_load: int = Field(0, ge=0)
    capacity_overage: int = Field(0, ge=0)
    capacity_overage_cost: int = Field(0, ge=0)
    num_orders: int = Field(0, ge=0)
    is_used: bool = Field(False)


class SameVehicleGroup(BaseModel):
    nodes: list[int]
    vehicles: list[int] = Field(default_factory=list)
    cost: int = Field(0, ge=0)


class RoutingMetrics(BaseModel):
    objective_value: int = Field(0)
    total_distance: int = Field(0)
    total_load: int = Field(0)
    vehicles_used: int = Field(0)
    vehicles_available: int = Field(0)
    orders_served: int = Field(0)
    orders_dropped: int = Field(0)
    drop_penalty_cost: int = Field(0)
    capacity_overage_cost: int = Field(0)
    same_vehicle_cost: int = Field(0)
    solve_time_seconds: float = Field(...)


class RoutingResponse(BaseModel):
    """
    Routing result. `routes` has one entry per vehicle, used or not.
    """
    status: RoutingStatus
    message: str = Field(..., description="Human-readable status message")
    seed: Optional[int] = Field(None, description="Base seed of the routed instance")
    routes: list[VehicleRoute] = Field(default_factory=list)
    metrics: Optional[RoutingMetrics] = None
    dropped_orders: list[int] = Field(default_factory=list)
    same_vehicle_groups: list[SameVehicleGroup] = Field(default_factory=list)
