"""
Image resize: controller layer.

Receives validated input from router, calls service functions, maps the
outcome onto an HTTP response or a domain exception.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.exceptions import (
    BucketNotConfigured,
    DelegateFailed,
    DelegateStreamBroken,
    DelegateUnavailable,
    ResizedImageTooLarge,
    ResizeHTTPError,
    ResizeTimedOut,
)
from app.resize import service
from app.resize.constants import ResizeOutcome
from app.resize.schemas import ResizeHttpRequest, ResizeResponse

if TYPE_CHECKING:
    from app.config import Settings
    from app.resize.service import ResizeResult

logger = logging.getLogger(__name__)


async def resize_image(request: ResizeHttpRequest, settings: Settings) -> ResizeResponse:
    if not settings.s3_bucket:
        raise BucketNotConfigured()

    resize_request = service.build_request(
        settings,
        request.key,
        max_width=request.max_width,
        max_height=request.max_height,
        output_format=request.format,
    )
    result = await service.resize(resize_request, settings)
    if not result.ok:
        logger.warning("Resize failed for key %s: %s", request.key, result.detail)
        raise _error_for(result, settings)

    return ResizeResponse(key=request.key, image=result.image, size_bytes=result.size_bytes)


def _error_for(result: ResizeResult, settings: Settings) -> ResizeHTTPError:
    if result.outcome is ResizeOutcome.SPAWN_FAILURE:
        return DelegateUnavailable()
    if result.outcome is ResizeOutcome.STREAM_FAILURE:
        return DelegateStreamBroken()
    if result.outcome is ResizeOutcome.TIMEOUT:
        return ResizeTimedOut(settings.resizer_timeout_seconds)
    if result.outcome is ResizeOutcome.BUFFER_LIMIT_EXCEEDED:
        return ResizedImageTooLarge(settings.resizer_max_output_bytes)
    return DelegateFailed(result.exit_code)
