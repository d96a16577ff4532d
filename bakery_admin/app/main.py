#!/usr/bin/env python3
"""
Main FastAPI application for the bakery admin backend.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..data.database import create_tables
from ..schemas.io_models import ErrorResponse, HealthResponse
from ..utils.logger import get_logger
from .config import Config
from .exceptions import AdminError
from .routes import analytics, auth, customers, dashboard, orders, predictions, products, reports, settings, stock

logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    logger.info("Bakery admin API started")
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Bakery Admin API",
    description="Admin backend for the bakery storefront: catalog, orders, customers and analytics",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AdminError)
async def admin_error_handler(request: Request, exc: AdminError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (401, 403, 404, 409, 422, 502)}

for module in (auth, products, orders, customers, dashboard, analytics, reports, stock, settings, predictions):
    app.include_router(module.router, responses=ERROR_RESPONSES)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", time=datetime.now())


if __name__ == "__main__":
    import uvicorn
    Config.debug_print()
    uvicorn.run(app, host="0.0.0.0", port=8000)
