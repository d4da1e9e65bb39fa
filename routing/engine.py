"""
SoftRoute - Soft-Capacity CVRPTW Engine
Generates an instance, configures it as a routing model, and solves it with
Google OR-Tools.

Capacity is modeled as a dimension whose hard bound caps the load, plus a
soft upper bound on each route's final load: loading more than the soft
capacity is allowed but costs `vehicle_soft_capacity_cost` per unit.
Every order may be dropped at a large penalty, so tight time windows degrade
to unserved orders instead of a failed solve.
"""

import logging
import time
from typing import Optional

from instance import generate_instance
from instance.models import Instance

from .backend import OrToolsBackend
from .configurator import ModelConfigurator
from .models import RoutingRequest, RoutingResponse, RoutingStatus
from .reporter import build_response

logger = logging.getLogger(__name__)


def solve_cvrptw(
    request: RoutingRequest,
    instance: Optional[Instance] = None,
    backend_cls=OrToolsBackend,
) -> RoutingResponse:
    """
    Solve a soft-capacity CVRPTW.

    1. Parses the search parameter override (fails before anything is built)
    2. Generates the instance, unless one is given
    3. Configures capacity, time, windows, disjunctions and groups
    4. Solves and reads the assignment back into a response
    """
    t0 = time.time()
    parameters = backend_cls.search_parameters(request.routing_search_parameters)

    if instance is None:
        instance = generate_instance(request.instance)
    logger.info(
        "Routing %d orders with %d vehicles (hard capacity %d, soft capacity %d)",
        instance.num_orders, request.num_vehicles,
        request.vehicle_hard_capacity, request.vehicle_soft_capacity,
    )

    backend = backend_cls(instance.num_nodes, request.num_vehicles, instance.depot)
    configurator = ModelConfigurator(backend, instance, request)
    configurator.configure()
    assignment = configurator.solve(parameters)
    solve_time = time.time() - t0

    if assignment is None:
        logger.info("No solution found.")
        return RoutingResponse(
            status=RoutingStatus.NO_SOLUTION,
            message="No solution found.",
            seed=instance.seed,
        )

    response = build_response(request, instance, assignment, solve_time)
    logger.info(response.message)
    return response
