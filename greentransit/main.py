import logging
import os
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Load env from the working directory before settings are read
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv()

from greentransit import __version__
from greentransit.api import achievements, health, profile, routes, stats, streaks, tasks, trips
from greentransit.core.config import settings, validate_config
from greentransit.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from greentransit.core.logging import configure_logging
from greentransit.core.middleware.request_id import RequestIdMiddleware

configure_logging(settings.ENV, settings.LOG_LEVEL)
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("greentransit")
    logger.info("Starting Green Transit backend...")
    app.state.startup_time = time.time()
    try:
        yield
    finally:
        logging.getLogger("greentransit").info("Stopping Green Transit backend...")


app = FastAPI(title="Green Transit", version=__version__, lifespan=lifespan)

# Middlewares
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(HTTPException, http_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["health"])
app.include_router(trips.router, tags=["trips"])
app.include_router(profile.router, tags=["profile"])
app.include_router(achievements.router, tags=["achievements"])
app.include_router(tasks.router, tags=["tasks"])
app.include_router(streaks.router, tags=["streaks"])
app.include_router(stats.router, tags=["stats"])
app.include_router(routes.router, tags=["routes"])
