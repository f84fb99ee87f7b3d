import os
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config.settings import ALLOWED_ORIGINS, STACKS_NETWORK, SUPABASE_ANON_KEY, SUPABASE_URL
from src.exceptions import DashboardError
from src.routers import router as api_router
from src.routers.deps import close_clients
from src.utils.logger import logger
from src.utils.startup_validation import validate_startup

# Run startup validation
logger.info("AIBTC Dashboard API starting up...")
if not validate_startup():
    logger.error("Startup validation failed. Please check configuration.")
    # Keep serving so health checks can report the problem

app = FastAPI(title="AIBTC Dashboard API", version="0.1.0")

logger.info(f"Allowed origins: {ALLOWED_ORIGINS}")

# Add CORS middleware FIRST (so it wraps everything and runs first)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["*"],
)
logger.info("CORS middleware configured")

# Passive: user-scoped routes enforce authentication through get_current_user
if SUPABASE_URL and SUPABASE_ANON_KEY:
    from src.auth.middleware import SupabaseAuthMiddleware

    app.add_middleware(SupabaseAuthMiddleware)
    logger.info("Supabase authentication middleware enabled (passive mode)")
else:
    logger.info("Supabase authentication disabled (SUPABASE_URL or SUPABASE_ANON_KEY not set)")


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    if exc.code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(exc.to_dict(), status_code=exc.code)


@app.get("/healthz")
def healthz() -> dict:
    """Health check with configuration status."""
    health_status = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "network": STACKS_NETWORK,
    }

    required_vars = ["SUPABASE_URL", "SUPABASE_ANON_KEY"]
    missing_vars = [var for var in required_vars if not os.environ.get(var)]
    if missing_vars:
        health_status["config"] = f"missing: {', '.join(missing_vars)}"
        health_status["status"] = "error"
    else:
        health_status["config"] = "ok"

    return health_status


@app.on_event("shutdown")
async def shutdown_event():
    """Close upstream HTTP clients on application shutdown."""
    logger.info("Shutting down AIBTC Dashboard API...")
    await close_clients()


# Mount API routes
app.include_router(api_router)
