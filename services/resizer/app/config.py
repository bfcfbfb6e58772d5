from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",  # local runs only; Lambda config comes from the environment
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Source location ──────────────────────────────────────────────────────
    s3_bucket: str = ""

    # ── Resizer defaults (forwarded verbatim as CLI flags when set) ───────────
    resize_strategy: str | None = None   # nearest-neighbor, bilinear, bicubic, ...
    jpeg_compression: str | None = None  # 0-100
    png_compression: str | None = None   # default, none, best-speed, best-compression
    s3_read_method: str | None = None    # authenticated, https, http

    # ── Resizer process ──────────────────────────────────────────────────────
    resizer_path: str = "./resizer.linux.x86"
    resizer_timeout_seconds: float = 25.0
    # base64 of this many bytes fits the 6 MB synchronous Lambda response limit
    resizer_max_output_bytes: int = 4_718_592
    resizer_read_chunk_bytes: int = 65_536
    resizer_verbose: bool = False

    # ── HTTP ─────────────────────────────────────────────────────────────────
    # Comma-separated in .env (e.g. CORS_ORIGINS=http://localhost:3000,http://localhost:8080)
    cors_origins: str = "http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]
