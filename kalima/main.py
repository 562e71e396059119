"""
Kalima Backend - Main FastAPI Application
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import time

from kalima.config import settings
from kalima.exceptions import KalimaError, StoreError, ValidationError
from kalima.api.routes import articles, categories, static_pages, users, sitemap
from kalima.services.firestore_store import FirestoreStore
from kalima.services.identity import FirebaseIdentityProvider
from kalima.services.uniqueness import SlugGuard

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("kalima")

STORE_FAILURE_MESSAGES = {
    "GET": "Failed to load",
    "DELETE": "Failed to delete",
}


# Define lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(f"Dev mode: {settings.DEV_MODE}")

    store = FirestoreStore.from_settings(settings)
    app.state.store = store
    app.state.slug_guard = SlugGuard(store)
    app.state.identity = FirebaseIdentityProvider()
    logger.info("Firestore store initialized")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}")


# Create FastAPI application with lifespan
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Kalima Backend API - multilingual articles, categories and static pages",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    """Hide store internals behind a generic message; the cause is logged"""
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    message = STORE_FAILURE_MESSAGES.get(request.method, "Failed to save")
    return JSONResponse(status_code=exc.status_code, content={"message": message})


@app.exception_handler(KalimaError)
async def kalima_exception_handler(request: Request, exc: KalimaError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body") or "body",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Invalid request", "errors": errors})


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "message": str(exc) if settings.DEBUG else "Internal server error",
        },
    )


app.include_router(articles.router)
app.include_router(categories.router)
app.include_router(static_pages.router)
app.include_router(users.router)
app.include_router(sitemap.router)


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API health check"""
    return {
        "status": "online",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "message": "Welcome to Kalima API",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check endpoint"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "debug_mode": settings.DEBUG,
        "firebase_configured": bool(
            settings.FIREBASE_CREDENTIALS_PATH or settings.FIREBASE_CREDENTIALS_JSON
            or settings.FIREBASE_EMULATOR_HOST
        ),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "kalima.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
