"""
SoftRoute - Instance Generator
Builds a reproducible CVRPTW instance from an InstanceRequest.

Locations, demands and time windows each draw from their own random
stream. The streams are derived from one base seed and a component label, so
a seeded run is reproducible and no component's draws shift another's.
"""

import logging
import random

from .demand import RandomDemand
from .geometry import LocationContainer
from .models import DEPOT, Instance, InstanceRequest, Node
from .time_windows import TimeWindowAssigner

logger = logging.getLogger(__name__)

DETERMINISTIC_SEED = 7777777


def get_seed(deterministic: bool) -> int:
    if deterministic:
        return DETERMINISTIC_SEED
    return random.SystemRandom().randrange(2 ** 31)


def component_random(seed: int, component: str) -> random.Random:
    return random.Random(f"{seed}:{component}")


def generate_instance(request: InstanceRequest) -> Instance:
    seed = request.seed if request.seed is not None else get_seed(request.use_deterministic_random_seed)
    num_nodes = request.num_orders + 1

    locations = LocationContainer(request.speed, component_random(seed, "locations"))
    for _ in range(num_nodes):
        locations.add_random_location(request.x_max, request.y_max)

    demand = RandomDemand(
        num_nodes, DEPOT, component_random(seed, "demand"),
        request.demand_min, request.demand_max,
    )
    demand.initialize()

    windows = TimeWindowAssigner(
        request.horizon, request.time_window_duration, component_random(seed, "time_windows"),
    ).assign(num_nodes, DEPOT)

    nodes = [
        Node(
            index=node,
            x=locations[node].x,
            y=locations[node].y,
            demand=demand.node_demand(node),
            time_window_start=windows[node][0],
            time_window_end=windows[node][1],
        )
        for node in range(num_nodes)
    ]
    logger.info(
        "Generated instance: %d orders, total demand %d, seed %d",
        request.num_orders, demand.total, seed,
    )
    return Instance(
        nodes=nodes,
        speed=request.speed,
        time_per_demand_unit=request.time_per_demand_unit,
        horizon=request.horizon,
        seed=seed,
    )
