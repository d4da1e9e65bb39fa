"""
SoftRoute - Plan Reporter
Reads a RoutingAssignment back into response models, and renders a plan as
text for the command line.
"""

from instance.models import Instance

from .backend import RoutingAssignment
from .configurator import CAPACITY, TIME, same_vehicle_groups
from .models import (
    RoutingRequest, RoutingResponse, RoutingStatus,
    VehicleRoute, RouteStop, RoutingMetrics, SameVehicleGroup,
)


def capacity_overage_cost(load: int, soft_capacity: int, unit_cost: int) -> int:
    if soft_capacity <= 0:
        return 0
    return max(0, load - soft_capacity) * unit_cost


def _build_route(vehicle: int, visits, instance: Instance, request: RoutingRequest) -> VehicleRoute:
    stops = []
    for visit in visits:
        node = instance.nodes[visit.node]
        time_min, time_max = visit.cumuls[TIME]
        stops.append(RouteStop(
            node=visit.node,
            demand=node.demand,
            load=visit.cumuls[CAPACITY][0],
            time_min=time_min,
            time_max=time_max,
            time_window_start=node.time_window_start,
            time_window_end=node.time_window_end,
        ))

    distance = sum(
        instance.distance(a.node, b.node) for a, b in zip(visits, visits[1:])
    )
    end_load = stops[-1].load
    overage = end_load - request.vehicle_soft_capacity if request.soft_capacity_enabled else 0
    num_orders = len(visits) - 2
    return VehicleRoute(
        vehicle=vehicle,
        stops=stops,
        total_distance=distance,
        total_load=end_load,
        capacity_overage=max(0, overage),
        capacity_overage_cost=capacity_overage_cost(
            end_load, request.vehicle_soft_capacity, request.vehicle_soft_capacity_cost
        ),
        num_orders=num_orders,
        is_used=num_orders > 0,
    )


def _build_groups(routes: list[VehicleRoute], instance: Instance, request: RoutingRequest) -> list[SameVehicleGroup]:
    vehicle_of = {
        stop.node: route.vehicle
        for route in routes for stop in route.stops[1:-1]
    }
    groups = []
    for nodes in same_vehicle_groups(instance.orders, request.max_nodes_per_group):
        vehicles = sorted({vehicle_of[n] for n in nodes if n in vehicle_of})
        groups.append(SameVehicleGroup(
            nodes=nodes,
            vehicles=vehicles,
            cost=max(0, len(vehicles) - 1) * request.same_vehicle_cost,
        ))
    return groups


def build_response(
    request: RoutingRequest,
    instance: Instance,
    assignment: RoutingAssignment,
    solve_time: float,
) -> RoutingResponse:
    routes = [
        _build_route(vehicle, visits, instance, request)
        for vehicle, visits in enumerate(assignment.routes)
    ]
    served = {stop.node for route in routes for stop in route.stops[1:-1]}
    dropped = [order for order in instance.orders if order not in served]
    groups = _build_groups(routes, instance, request) if request.use_same_vehicle_costs else []

    used_routes = [r for r in routes if r.is_used]
    metrics = RoutingMetrics(
        objective_value=assignment.objective,
        total_distance=sum(r.total_distance for r in routes),
        total_load=sum(r.total_load for r in routes),
        vehicles_used=len(used_routes),
        vehicles_available=len(routes),
        orders_served=len(served),
        orders_dropped=len(dropped),
        drop_penalty_cost=len(dropped) * request.drop_penalty,
        capacity_overage_cost=sum(r.capacity_overage_cost for r in routes),
        same_vehicle_cost=sum(g.cost for g in groups),
        solve_time_seconds=round(solve_time, 3),
    )

    status = RoutingStatus.PARTIAL if dropped else RoutingStatus.FEASIBLE
    msg_parts = [
        f"Solution found in {solve_time:.2f}s with cost {assignment.objective}.",
        f"{len(used_routes)}/{len(routes)} vehicles used.",
        f"{len(served)} orders served.",
    ]
    if dropped:
        msg_parts.append(f"{len(dropped)} orders dropped.")
    if metrics.capacity_overage_cost:
        msg_parts.append(f"Capacity overage cost: {metrics.capacity_overage_cost}.")

    return RoutingResponse(
        status=status,
        message=" ".join(msg_parts),
        seed=instance.seed,
        routes=routes,
        metrics=metrics,
        dropped_orders=dropped,
        same_vehicle_groups=groups,
    )


def format_plan(response: RoutingResponse) -> str:
    if response.status == RoutingStatus.NO_SOLUTION:
        return response.message

    lines = [f"Cost {response.metrics.objective_value}"]
    if response.dropped_orders:
        lines.append("Dropped orders: " + " ".join(str(o) for o in response.dropped_orders))
    if response.same_vehicle_groups:
        lines.append(f"Same vehicle costs: {response.metrics.same_vehicle_cost}")
        for group in response.same_vehicle_groups:
            vehicles = " ".join(str(v) for v in group.vehicles)
            lines.append(f"  Group {group.nodes[0]}-{group.nodes[-1]}: vehicles [{vehicles}] cost {group.cost}")

    for route in response.routes:
        if not route.is_used:
            lines.append(f"Route #{route.vehicle}: Empty")
            continue
        visits = " -> ".join(
            f"{s.node} Load({s.load}) Time({s.time_min}, {s.time_max})" for s in route.stops
        )
        lines.append(f"Route #{route.vehicle}: {visits}")
        if route.capacity_overage_cost:
            lines.append(
                f"  over soft capacity by {route.capacity_overage}, cost {route.capacity_overage_cost}"
            )
    return "\n".join(lines)
