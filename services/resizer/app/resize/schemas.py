"""
Image resize: Pydantic V2 request/response schemas.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Resizer invocation ───────────────────────────────────────────────────────

class OptionSet(BaseModel):
    """Optional resizer settings. Dumped by alias, each alias is a CLI flag name."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_width: int | float | str | None = Field(default=None, alias="max-width")
    max_height: int | float | str | None = Field(default=None, alias="max-height")
    output_format: str | None = Field(default=None, alias="format")
    resize_strategy: str | None = Field(default=None, alias="resize-strategy")
    jpeg_compression: int | str | None = Field(default=None, alias="jpeg-compression")
    png_compression: int | str | None = Field(default=None, alias="png-compression")
    s3_read_method: str | None = Field(default=None, alias="s3-read-method")


class ResizeRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    bucket: str = Field(min_length=1)
    key: str = Field(min_length=1)
    options: OptionSet = Field(default_factory=OptionSet)


# ── Lambda event ─────────────────────────────────────────────────────────────

class ResizeEvent(BaseModel):
    """Direct-invoke Lambda payload: {key, maxWidth?, maxHeight?, format?}."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    key: str = Field(min_length=1)
    max_width: int | float | None = Field(default=None, alias="maxWidth")
    max_height: int | float | None = Field(default=None, alias="maxHeight")
    output_format: str | None = Field(default=None, alias="format")

    @field_validator("max_width", "max_height")
    @classmethod
    def _whole_numbers_as_int(cls, value: int | float | None) -> int | float | None:
        # JSON numbers like 200.0 go out as "200"; fractional values pass through
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


# ── HTTP ─────────────────────────────────────────────────────────────────────

class _Base(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
    )


class ResizeHttpRequest(_Base):
    """Resize an image stored in the configured bucket."""
    key: str = Field(min_length=1, max_length=1024, description="S3 key of the source image")
    max_width: int | None = Field(default=None, ge=0, description="Maximum output width in pixels")
    max_height: int | None = Field(default=None, ge=0, description="Maximum output height in pixels")
    format: str | None = Field(default=None, max_length=10, description="Output format: jpeg or png")


class ResizeResponse(BaseModel):
    key: str
    image: str = Field(description="Base64-encoded resized image")
    size_bytes: int = Field(description="Size of the decoded image in bytes")
