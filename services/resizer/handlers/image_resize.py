"""
AWS Lambda handler: Image Resize

Invoked directly (RequestResponse) with a small JSON event; the resized image
is returned inline as a base64 string.

Event:
  {"key": "photos/cat.jpg", "maxWidth": 200, "maxHeight": 200, "format": "png"}
  Only "key" is required. maxWidth/maxHeight are forwarded as given; whole
  numbers such as 200.0 are sent as "200".

Flow:
  1. Validates the event.
  2. Loads settings from the environment (fresh on every invocation).
  3. Runs the resizer binary with the S3 location and options as CLI flags.
  4. Returns the base64-encoded image, or raises ResizeFailed.

Environment variables:
  S3_BUCKET                 - Bucket holding the source images
  RESIZE_STRATEGY           - nearest-neighbor, bilinear, bicubic, mitchell-netravali, lanczos2, lanczos3
  JPEG_COMPRESSION          - JPEG quality, 0 to 100
  PNG_COMPRESSION           - default, none, best-speed, best-compression
  S3_READ_METHOD            - authenticated, https, http
  RESIZER_PATH              - Path to the resizer binary (default: ./resizer.linux.x86)
  RESIZER_TIMEOUT_SECONDS   - Kill the resizer after this long (default: 25)
  RESIZER_MAX_OUTPUT_BYTES  - Largest image returned inline (default: 4718592)
  RESIZER_VERBOSE           - Pass --verbose to the resizer
"""
from __future__ import annotations

import asyncio
import logging

from app.config import Settings
from app.resize.constants import ResizeOutcome
from app.resize.schemas import ResizeEvent
from app.resize.service import build_request, resize

logger = logging.getLogger()
logger.setLevel(logging.INFO)


class ResizeFailed(Exception):
    """Lambda error result. The message carries the exit code or failure kind."""

    def __init__(
        self,
        outcome: ResizeOutcome,
        exit_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(detail or outcome.value)
        self.outcome = outcome
        self.exit_code = exit_code
        self.detail = detail


def handler(event: dict, context: object) -> str:
    """Lambda entry point: resizes one image and returns it base64-encoded."""
    resize_event = ResizeEvent.model_validate(event)
    settings = Settings()

    request = build_request(
        settings,
        resize_event.key,
        max_width=resize_event.max_width,
        max_height=resize_event.max_height,
        output_format=resize_event.output_format,
    )
    result = asyncio.run(resize(request, settings))

    if not result.ok:
        logger.error("Resize failed for key %s: %s", request.key, result.detail)
        raise ResizeFailed(result.outcome, result.exit_code, result.detail)

    return result.image
