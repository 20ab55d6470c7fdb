"""
Application factory and FastAPI app configuration.
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from startup_dcf import SCENARIO_ORDER
from startup_dcf_service.api.router import router as api_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("startup_dcf_service")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="Startup DCF Engine API",
        version="0.1.0",
        description="REST API for adoption-curve driven startup DCF valuations",
    )

    application.include_router(api_router)

    @application.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"Incoming request: {request.method} {request.url.path}")
        start_time = time.time()
        try:
            response = await call_next(request)
            elapsed = time.time() - start_time
            response.headers["X-Process-Time"] = f"{elapsed:.4f}"
            logger.info(
                f"Request completed: {request.method} {request.url.path} "
                f"Status: {response.status_code} Time: {elapsed:.4f}s"
            )
            return response
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} Error: {str(e)}")
            return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    endpoints = [f"{method} {route.path}" for route in api_router.routes for method in sorted(route.methods)]

    @application.get("/")
    def read_root():
        return {
            "message": "Startup DCF Engine API is running",
            "scenarios": list(SCENARIO_ORDER),
            "endpoints": endpoints,
        }

    return application


# Module-level app instance for uvicorn
app = create_app()
