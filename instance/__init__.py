"""SoftRoute Instance - synthetic CVRPTW instance generation."""
from .models import *  # noqa: F401,F403
from .engine import generate_instance  # noqa: F401
