"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from meal_planner.api import auth, grocery, ingredients, planner, recipes, websocket
from meal_planner.api.dependencies import NOT_CONFIGURED_DETAIL
from meal_planner.config import get_settings
from meal_planner.services.data_backend import (
    BackendError,
    BackendNotConfiguredError,
    StorageQuotaExceededError,
)
from meal_planner.services.planner import PlannerRegistry

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    app.state.planner_registry = PlannerRegistry(max_sessions=settings.planner_max_sessions)
    if not settings.is_backend_configured:
        logger.info("DATABASE_URL not set: serving sample and locally stored recipes only")
    yield


app = FastAPI(
    title="Meal Planner API",
    description="Recipe catalog, weekly meal planner and auto-generated grocery list",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173", "http://localhost:8080"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(BackendNotConfiguredError)
async def backend_not_configured_handler(request: Request, exc: BackendNotConfiguredError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": NOT_CONFIGURED_DETAIL},
    )


@app.exception_handler(StorageQuotaExceededError)
async def quota_exceeded_handler(request: Request, exc: StorageQuotaExceededError):
    return JSONResponse(
        status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
        content={"detail": f"Local storage is full: {exc}"},
    )


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    logger.warning(f"Backend error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "The data backend is unavailable, please try again"},
    )


# Register routers
app.include_router(auth.router)
app.include_router(recipes.router)
app.include_router(ingredients.router)
app.include_router(planner.router)
app.include_router(grocery.router)
app.include_router(websocket.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "backend": "remote" if settings.is_backend_configured else "local",
    }
