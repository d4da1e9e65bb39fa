"""SoftRoute Routing - soft-capacity CVRPTW via OR-Tools."""
from .models import *  # noqa: F401,F403
from .engine import solve_cvrptw  # noqa: F401
