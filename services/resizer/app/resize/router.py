"""
Image resize: HTTP routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.config import Settings
from app.resize import controller
from app.resize.schemas import ResizeHttpRequest, ResizeResponse

router = APIRouter(prefix="/resize", tags=["resize"])


def _get_settings() -> Settings:
    return Settings()


@router.post(
    "",
    response_model=ResizeResponse,
    summary="Resize an image",
    description=(
        "Runs the resizer binary against an object in the configured bucket "
        "and returns the resized image inline as base64. Encoding defaults "
        "(strategy, compression, read method) come from service configuration."
    ),
    responses={
        413: {"description": "Resized image exceeds the configured maximum"},
        502: {"description": "Resizer exited non-zero or its output stream failed"},
        503: {"description": "Resizer binary or source bucket unavailable"},
        504: {"description": "Resizer did not finish in time"},
    },
)
async def resize_image(
    request: ResizeHttpRequest,
    settings: Settings = Depends(_get_settings),
) -> ResizeResponse:
    return await controller.resize_image(request, settings)
