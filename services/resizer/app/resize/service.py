"""
Image resize: business logic.

The actual decode/resize/encode work (including the S3 read) happens in an
external resizer binary. This module builds its command line, runs it as a
child process, buffers its stdout and reports the outcome as a tagged result.

Lifecycle of one invocation:
  1. build_args()  -> --s3-bucket, --s3-key, then one flag per set option.
  2. run_resizer() -> spawn, drain stdout in chunks, wait for exit.
  3. resize()      -> base64-encode the image on exit 0, otherwise report why.

Process faults (missing binary, broken pipe, timeout, oversized output) are
returned as outcomes, never raised. The child is always reaped.
"""
from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass

from app.config import Settings
from app.resize.constants import OPTION_FLAGS, VERBOSE_FLAG, ResizeOutcome
from app.resize.schemas import OptionSet, ResizeRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """What happened to one resizer process."""
    outcome: ResizeOutcome
    exit_code: int | None = None
    output: bytes = b""
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class ResizeResult:
    outcome: ResizeOutcome
    image: str | None = None  # base64, set only on success
    size_bytes: int = 0
    exit_code: int | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is ResizeOutcome.SUCCESS


class _OutputTooLarge(Exception):
    def __init__(self, received: int) -> None:
        super().__init__(received)
        self.received = received


# ── Request assembly ─────────────────────────────────────────────────────────

def build_request(
    settings: Settings,
    key: str,
    *,
    max_width: int | float | None = None,
    max_height: int | float | None = None,
    output_format: str | None = None,
) -> ResizeRequest:
    """Combine per-request options with the configured resizer defaults."""
    options = OptionSet(
        max_width=max_width,
        max_height=max_height,
        output_format=output_format,
        # Sent as --resize-strategy. Older deployments dropped RESIZE_STRATEGY via a
        # misspelled option key; setting it now changes the resizer's interpolation.
        resize_strategy=settings.resize_strategy,
        jpeg_compression=settings.jpeg_compression,
        png_compression=settings.png_compression,
        s3_read_method=settings.s3_read_method,
    )
    return ResizeRequest(bucket=settings.s3_bucket, key=key, options=options)


def build_args(request: ResizeRequest, *, verbose: bool = False) -> list[str]:
    """Resizer CLI arguments. Falsy option values (None, "", 0) produce no flag."""
    args = [
        f"--s3-bucket={request.bucket}",
        f"--s3-key={request.key}",
    ]
    values = request.options.model_dump(by_alias=True)
    for flag in OPTION_FLAGS:
        value = values.get(flag)
        if value:
            args.append(f"--{flag}={value}")
    if verbose:
        args.append(VERBOSE_FLAG)
    return args


# ── Process handling ─────────────────────────────────────────────────────────

async def run_resizer(args: list[str], settings: Settings) -> ProcessResult:
    """Run the resizer binary once and collect its stdout."""
    try:
        proc = await asyncio.create_subprocess_exec(
            settings.resizer_path,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=None,  # inherit: resizer diagnostics go to our stderr
        )
    except OSError as exc:
        logger.error("Could not start resizer %s: %s", settings.resizer_path, exc)
        return ProcessResult(
            ResizeOutcome.SPAWN_FAILURE,
            detail=f"Could not start resizer {settings.resizer_path}: {exc}",
        )

    try:
        exit_code, output = await asyncio.wait_for(
            _collect_output(proc, settings.resizer_read_chunk_bytes, settings.resizer_max_output_bytes),
            timeout=settings.resizer_timeout_seconds,
        )
    except asyncio.TimeoutError:
        await _kill(proc)
        logger.error("Resizer timed out after %ss, killed pid %s", settings.resizer_timeout_seconds, proc.pid)
        return ProcessResult(
            ResizeOutcome.TIMEOUT,
            detail=f"Resizer did not finish within {settings.resizer_timeout_seconds} seconds",
        )
    except _OutputTooLarge as exc:
        await _kill(proc)
        logger.error(
            "Resizer output exceeded %d bytes (received %d), killed pid %s",
            settings.resizer_max_output_bytes, exc.received, proc.pid,
        )
        return ProcessResult(
            ResizeOutcome.BUFFER_LIMIT_EXCEEDED,
            detail=f"Resizer output exceeded {settings.resizer_max_output_bytes} bytes",
        )
    except OSError as exc:
        await _kill(proc)
        logger.error("Resizer output stream failed: %s", exc)
        return ProcessResult(
            ResizeOutcome.STREAM_FAILURE,
            detail=f"Resizer output stream failed: {exc}",
        )

    if exit_code != 0:
        logger.warning("Resizer exited with code %s", exit_code)
        return ProcessResult(
            ResizeOutcome.DELEGATE_FAILURE,
            exit_code=exit_code,
            detail=f"Resizer exited with code {exit_code}",
        )

    return ProcessResult(ResizeOutcome.SUCCESS, exit_code=0, output=output)


async def _collect_output(
    proc: asyncio.subprocess.Process,
    chunk_size: int,
    max_bytes: int,
) -> tuple[int, bytes]:
    chunks: list[bytes] = []
    received = 0
    while True:
        chunk = await proc.stdout.read(chunk_size)
        if not chunk:
            break
        received += len(chunk)
        if received > max_bytes:
            raise _OutputTooLarge(received)
        chunks.append(chunk)

    logger.info("Received end of data stream, combining %d chunks", len(chunks))
    output = b"".join(chunks)
    logger.info("Combined chunks into %d bytes", len(output))

    exit_code = await proc.wait()
    return exit_code, output


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill the child if it is still running, then drain stdout and reap it.

    stdout must be drained: a full stream reader pauses the pipe, and wait()
    does not return until the pipe closes.
    """
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass  # exited between the check and the kill
    try:
        await proc.communicate()
    except OSError:
        await proc.wait()  # pipe already broken, nothing left to drain


# ── Entry point ──────────────────────────────────────────────────────────────

async def resize(request: ResizeRequest, settings: Settings) -> ResizeResult:
    """Resize one image. Never raises for resizer faults; check result.ok."""
    logger.info(
        "Starting image resize for key %s %s",
        request.key,
        request.options.model_dump(by_alias=True, exclude_none=True),
    )
    args = build_args(request, verbose=settings.resizer_verbose)
    result = await run_resizer(args, settings)

    if result.outcome is not ResizeOutcome.SUCCESS:
        return ResizeResult(
            outcome=result.outcome,
            exit_code=result.exit_code,
            detail=result.detail,
        )

    logger.info("Resizer finished successfully, base64 encoding")
    image = base64.b64encode(result.output).decode("ascii")
    logger.info("Base64 encoded %d bytes for key %s", len(result.output), request.key)
    return ResizeResult(
        outcome=ResizeOutcome.SUCCESS,
        image=image,
        size_bytes=len(result.output),
        exit_code=0,
    )
