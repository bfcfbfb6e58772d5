"""
Resizer service: domain-specific HTTP exceptions.

All exceptions use preset status codes and detail messages so that callers
never need to specify these at the call site. The http_exception_handler in
app.middleware wraps them in the standard error envelope using `code`.
"""
from fastapi import HTTPException, status


class ResizeHTTPError(HTTPException):
    code = "resize_error"


# ── Configuration ────────────────────────────────────────────────────────────

class BucketNotConfigured(ResizeHTTPError):
    code = "bucket_not_configured"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No source bucket is configured. Set S3_BUCKET.",
        )


# ── Resizer process ──────────────────────────────────────────────────────────

class DelegateFailed(ResizeHTTPError):
    code = "resizer_failed"

    def __init__(self, exit_code: int | None) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Image resizer exited with code {exit_code}.",
        )
        self.exit_code = exit_code


class DelegateUnavailable(ResizeHTTPError):
    code = "resizer_unavailable"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Image resizer could not be started.",
        )


class DelegateStreamBroken(ResizeHTTPError):
    code = "resizer_stream_failed"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Image resizer output stream failed before completion.",
        )


class ResizeTimedOut(ResizeHTTPError):
    code = "resize_timeout"

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=f"Image resize did not finish within {timeout_seconds:g} seconds.",
        )


class ResizedImageTooLarge(ResizeHTTPError):
    code = "resized_image_too_large"

    def __init__(self, max_bytes: int) -> None:
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Resized image exceeds the maximum allowed size of {max_bytes} bytes.",
        )
