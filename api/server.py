"""
SoftRoute - FastAPI + MCP Server
The interface layer: exposes instance generation and the soft-capacity
CVRPTW solver as HTTP endpoints and MCP tools for AI agents.

Architecture:
  FastAPI endpoints → fastapi-mcp auto-wraps → MCP protocol → AI agents discover & call

Two tools exposed:
  1. generate_instance - Draw a reproducible synthetic CVRPTW instance
  2. solve_cvrptw - Generate, configure and solve a soft-capacity CVRPTW
"""

import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from instance import generate_instance
from instance.models import ConfigurationError, Instance, InstanceRequest
from routing.engine import solve_cvrptw
from routing.models import RoutingRequest, RoutingResponse


# ─────────────────────────────────────────────
# App Configuration
# ─────────────────────────────────────────────

APP_NAME = "SoftRoute"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = """
**Soft-Capacity Vehicle Routing** - synthetic CVRPTW instances solved with Google OR-Tools.

### Capabilities
- **Instance generation**: random orders on a grid, demands, and time windows; reproducible by seed
- **Soft capacity**: loading a vehicle beyond its soft capacity costs extra per unit; the hard capacity is never exceeded
- **Time windows**: service time proportional to demand plus Manhattan travel time
- **Order dropping**: unreachable orders are skipped at a fixed penalty instead of failing the solve
- **Same-vehicle groups**: optionally keep consecutive orders on one vehicle
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    print(f"🚀 {APP_NAME} v{APP_VERSION} starting...")
    print(f"   MCP endpoint: /mcp")
    print(f"   Docs: /docs")
    yield
    print(f"👋 {APP_NAME} shutting down.")


app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    description=APP_DESCRIPTION,
    lifespan=lifespan,
)

# CORS - allow all origins for MCP agent access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─────────────────────────────────────────────
# Request tracking middleware
# ─────────────────────────────────────────────

_request_count = 0
_total_solve_time = 0.0


@app.middleware("http")
async def track_requests(request: Request, call_next):
    """Track request count and timing for the info endpoint."""
    global _request_count, _total_solve_time
    start = time.time()
    response = await call_next(request)
    elapsed = time.time() - start
    if request.url.path in ("/generate_instance", "/solve_cvrptw"):
        _request_count += 1
        _total_solve_time += elapsed
    return response


# ─────────────────────────────────────────────
# Health & Info Endpoints
# ─────────────────────────────────────────────

@app.get("/", operation_id="root", summary="Server info and status")
async def root():
    """Returns server info, available tools, and usage statistics."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "operational",
        "tools": [
            {
                "name": "generate_instance",
                "description": "Generate a synthetic CVRPTW instance (locations, demands, time windows).",
                "endpoint": "/generate_instance",
            },
            {
                "name": "solve_cvrptw",
                "description": "Solve a soft-capacity CVRPTW and return per-vehicle routes with a cost breakdown.",
                "endpoint": "/solve_cvrptw",
            },
        ],
        "stats": {
            "requests_served": _request_count,
            "total_solve_time_seconds": round(_total_solve_time, 2),
        },
        "mcp_endpoint": "/mcp",
    }


@app.get("/health", operation_id="health_check", summary="Health check")
async def health():
    """Simple health check for monitoring and load balancers."""
    return {"status": "healthy", "version": APP_VERSION}


# ─────────────────────────────────────────────
# Core Tool Endpoints
# ─────────────────────────────────────────────

@app.post(
    "/generate_instance",
    response_model=Instance,
    operation_id="generate_instance",
    summary="Generate a synthetic CVRPTW instance",
    description="""
Draws order locations on an integer grid, a demand per order, and a
fixed-length time window per order inside the planning horizon. Node 0 is the
depot. Pass `seed` (or `use_deterministic_random_seed`) for a reproducible
instance; the seed used is always returned.

**Example**:
```json
{"num_orders": 10, "use_deterministic_random_seed": true}
```
""",
    tags=["Instances"],
)
def generate_instance_endpoint(request: InstanceRequest) -> Instance:
    return generate_instance(request)


@app.post(
    "/solve_cvrptw",
    response_model=RoutingResponse,
    operation_id="solve_cvrptw",
    summary="Solve a soft-capacity CVRPTW",
    description="""
Generates an instance from `instance`, configures it as an OR-Tools routing
model, and solves it.

**Model**:
- Arc cost: Manhattan distance
- Capacity: hard bound `vehicle_hard_capacity` (0 = disabled); load above
  `vehicle_soft_capacity` costs `vehicle_soft_capacity_cost` per unit
- Time: service time per demand unit + travel time, waiting allowed, one
  time window per order
- Every order may be dropped at `drop_penalty`
- Optional same-vehicle costs for consecutive order groups

`routing_search_parameters` takes a partial text-format
RoutingSearchParameters, e.g. `time_limit { seconds: 10 }`. A malformed
override is rejected with 422.

**Example**:
```json
{
  "instance": {"num_orders": 20, "use_deterministic_random_seed": true},
  "num_vehicles": 4,
  "vehicle_hard_capacity": 30,
  "vehicle_soft_capacity": 20,
  "vehicle_soft_capacity_cost": 100,
  "routing_search_parameters": "time_limit { seconds: 5 }"
}
```
""",
    tags=["Routing"],
)
def solve_cvrptw_endpoint(request: RoutingRequest) -> RoutingResponse:
    return solve_cvrptw(request)


# ─────────────────────────────────────────────
# Error Handlers
# ─────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc):
    """Return helpful error messages for malformed requests."""
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "message": "Invalid request format. Check the schema at /docs for required fields.",
            "details": str(exc),
        },
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc):
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "message": "Invalid configuration.",
            "details": str(exc),
        },
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc):
    """Catch-all for server errors."""
    return JSONResponse(
        status_code=500,
        content={
            "status": "error",
            "message": "Internal server error. Please try again or contact support.",
        },
    )


# ─────────────────────────────────────────────
# MCP Integration
# ─────────────────────────────────────────────

try:
    from fastapi_mcp import FastApiMCP

    mcp = FastApiMCP(
        app,
        name="SoftRoute",
        description=(
            "Soft-capacity vehicle routing with time windows. Generates synthetic "
            "CVRPTW instances and solves them with OR-Tools, reporting routes, "
            "dropped orders and capacity overage costs."
        ),
        describe_all_responses=True,
        describe_full_response_schema=True,
    )
    mcp.mount()
    print("✅ MCP server mounted at /mcp")
except ImportError:
    print("⚠️  fastapi-mcp not installed. MCP endpoint disabled. Install with: pip install fastapi-mcp")
except Exception as e:
    print(f"⚠️  MCP mount failed: {e}. Server running without MCP.")


# ─────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("api.server:app", host="0.0.0.0", port=port, reload=True)
