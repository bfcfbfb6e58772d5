import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings
from app.middleware import error_envelope_middleware, http_exception_handler, request_id_middleware
from app.resize.router import router as resize_router

logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s: %(message)s")


class HealthResponse(BaseModel):
    status: str
    service: str


def create_app(settings: Settings | None = None) -> FastAPI:
    """HTTP front for the resizer; shares app.resize.service with the Lambda."""
    settings = settings or Settings()
    app = FastAPI(title="Image Resizer Service", version="1.0.0")

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    # last added = outermost
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(resize_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="resizer")

    return app


app = create_app()
