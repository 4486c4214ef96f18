# taghra_api/main.py
"""
FastAPI application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from taghra_shared.config import config
from taghra_shared.models import Place, PlaceCategory, SubmissionStatus, User, UserRole

from .database import AsyncSessionLocal, create_tables
from .dependencies import get_cache
from .errors import DependencyError, TaghraError
from .routers import (
    health_router, places_router, reviews_router, submissions_router, users_router
)
from .utils.rating_updater import update_all_place_ratings

# Logging setup
logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Request locations that are not field names
_LOCATION_PREFIXES = {"query", "body", "path", "header", "cookie"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    logger.info("Starting Taghra places API...")

    await create_tables()
    logger.info("✅ Database tables ready")

    if config.SEED_DEMO_DATA:
        await create_demo_data()

    yield

    logger.info("Shutting down...")
    await get_cache().close()


async def create_demo_data():
    """Demo user and a few verified places around Casablanca, if the table is empty"""
    async with AsyncSessionLocal() as session:
        try:
            result = await session.execute(select(Place.id).limit(1))
            if result.first() is not None:
                return

            demo_user = User(
                email="demo@taghra.ma",
                full_name="Demo User",
                role=UserRole.USER.value,
            )
            session.add(demo_user)

            session.add_all([
                Place(
                    name="Café Maure",
                    category=PlaceCategory.FOOD.value,
                    description="Mint tea and pastries by the old medina",
                    address="Boulevard des Almohades, Casablanca",
                    latitude=33.6027,
                    longitude=-7.6186,
                    price_level=1,
                    tags=["tea", "terrace"],
                    status=SubmissionStatus.APPROVED.value,
                ),
                Place(
                    name="Clinique Anfa",
                    category=PlaceCategory.HEALTH.value,
                    description="General practice and emergencies",
                    address="Boulevard d'Anfa, Casablanca",
                    latitude=33.5886,
                    longitude=-7.6322,
                    price_level=3,
                    status=SubmissionStatus.APPROVED.value,
                ),
                Place(
                    name="Cabinet Vétérinaire Maârif",
                    category=PlaceCategory.VET.value,
                    address="Rue Abou Al Waqt, Maârif, Casablanca",
                    latitude=33.5792,
                    longitude=-7.6330,
                    price_level=2,
                    status=SubmissionStatus.APPROVED.value,
                ),
                Place(
                    name="Arrondissement Sidi Belyout",
                    category=PlaceCategory.ADMIN.value,
                    description="Civil status documents and legalisation",
                    address="Rue Tahar Sebti, Casablanca",
                    latitude=33.5950,
                    longitude=-7.6155,
                    price_level=1,
                    status=SubmissionStatus.APPROVED.value,
                ),
            ])
            await session.flush()

            await update_all_place_ratings(session)
            await session.commit()
            logger.info("✅ Demo data created")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Failed to create demo data: {e}")


app = FastAPI(
    title="Taghra Places API",
    description="Nearby places with points-gated search radius",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ========== ERROR HANDLERS ==========

@app.exception_handler(TaghraError)
async def taghra_error_handler(request: Request, exc: TaghraError):
    if isinstance(exc, DependencyError):
        logger.warning(f"{request.method} {request.url.path}: {exc.message} ({exc.__cause__!r})")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if str(part) not in _LOCATION_PREFIXES]
        details.append({
            "field": ".".join(loc) or "request",
            "message": error.get("msg", "Invalid value"),
        })
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation failed", "details": details},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


# ========== ROUTERS ==========

app.include_router(health_router)
app.include_router(places_router, prefix="/api")
app.include_router(reviews_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(submissions_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "message": "Taghra places API is running",
        "docs": "/docs",
        "version": "1.0.0",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
