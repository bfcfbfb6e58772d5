import sys
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.config import Settings

_ENV_VARS = (
    "S3_BUCKET",
    "RESIZE_STRATEGY",
    "JPEG_COMPRESSION",
    "PNG_COMPRESSION",
    "S3_READ_METHOD",
    "RESIZER_PATH",
    "RESIZER_TIMEOUT_SECONDS",
    "RESIZER_MAX_OUTPUT_BYTES",
    "RESIZER_READ_CHUNK_BYTES",
    "RESIZER_VERBOSE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_resizer(tmp_path: Path) -> Callable[..., Path]:
    """Write an executable Python script standing in for the resizer binary."""

    def _make(body: str, name: str = "resizer") -> Path:
        path = tmp_path / name
        path.write_text(f"#!{sys.executable}\nimport sys\n{textwrap.dedent(body)}")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: object) -> Settings:
        values: dict[str, object] = {"s3_bucket": "mybucket", "resizer_timeout_seconds": 10.0}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    from app.main import app

    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def echo_resizer(make_resizer: Callable[..., Path]) -> Path:
    """Fake resizer whose "image" is its own argument list, one per line."""
    return make_resizer('sys.stdout.buffer.write("\\n".join(sys.argv[1:]).encode())', name="echo-resizer")
