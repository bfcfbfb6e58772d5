"""
Image resize: static constants and enum types.
"""
import enum


class ResizeOutcome(str, enum.Enum):
    SUCCESS = "SUCCESS"
    DELEGATE_FAILURE = "DELEGATE_FAILURE"  # resizer exited non-zero
    SPAWN_FAILURE = "SPAWN_FAILURE"        # resizer binary could not be started
    STREAM_FAILURE = "STREAM_FAILURE"      # stdout pipe failed before EOF
    TIMEOUT = "TIMEOUT"
    BUFFER_LIMIT_EXCEEDED = "BUFFER_LIMIT_EXCEEDED"


# Resizer CLI flags for optional settings, in the order they are emitted.
# Source location flags (--s3-bucket, --s3-key) always come first.
OPTION_FLAGS: tuple[str, ...] = (
    "max-width",
    "max-height",
    "format",
    "resize-strategy",
    "jpeg-compression",
    "png-compression",
    "s3-read-method",
)

VERBOSE_FLAG = "--verbose"
