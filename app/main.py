import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from app.config import CORS_HEADERS, get_settings
from app.database import engine, Base
from app.routers import auth, generation, images

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting %s", settings.app_name)
    if settings.auto_create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    if not settings.ai_gateway_api_key:
        logger.warning("AI_GATEWAY_API_KEY is not set; image generation will fail")

    yield

    # Shutdown
    logger.info("Shutting down %s", settings.app_name)
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="""
    ## AI Image Studio API

    This API allows you to:

    1. **Create an account** and sign in to get a bearer token
    2. **Generate images** from a text prompt using a multimodal AI model
    3. **Edit images** by sending one of your previous images along with a new prompt
    4. **Browse, download and delete** your generated images

    ### How it works:

    1. **Generation**: Your prompt is forwarded to the AI gateway. The resulting image
       (a remote URL or an inline base64 data URI) is stored in your gallery.

    2. **Editing**: Pass `edit_image_id` with a new prompt like "make the sky purple".
       The edited image is stored as a new entry; the original is kept.

    3. **Privacy**: Images are only ever visible to the account that created them.

    ### Example prompts:
    - "a red circle on a white background"
    - "sunset between the mountains"
    - "a cozy cafe interior, watercolor style"
    """,
    version="1.0.0",
    lifespan=lifespan,
)


# CORS: every preflight gets an empty 200, every response the same permissive headers
@app.middleware("http")
async def cors_headers(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc) if settings.debug else "Internal server error",
            "type": type(exc).__name__,
        },
        headers=CORS_HEADERS,
    )


# Include routers
app.include_router(auth.router, prefix="/api/v1")
app.include_router(generation.router, prefix="/api/v1")
app.include_router(images.router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "sign_up": "POST /api/v1/auth/signup",
            "sign_in": "POST /api/v1/auth/login",
            "sign_out": "POST /api/v1/auth/logout",
            "session": "GET /api/v1/auth/session",
            "generate_image_function": "POST /api/v1/generate-image",
            "create_image": "POST /api/v1/images",
            "list_images": "GET /api/v1/images",
            "get_image": "GET /api/v1/images/{image_id}",
            "download_image": "GET /api/v1/images/{image_id}/download",
            "delete_image": "DELETE /api/v1/images/{image_id}",
        }
    }
