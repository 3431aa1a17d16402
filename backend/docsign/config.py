from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Runtime
    app_env: str = "development"
    log_level: str = "INFO"

    # CORS
    frontend_url: str = "http://localhost:5173"

    # Storage
    storage_root: str = "storage/documents"
    max_upload_mb: int = 25
    max_signature_pixels: int = 25_000_000  # Decoded size limit for uploaded signature images

    # Signature header rendering
    header_font_path: Optional[str] = None  # TrueType file; bundled Pillow font when unset
    header_font_size: int = 24
    signature_timezone: str = "Europe/Paris"  # Day boundary used for "Fait le DD/MM/YYYY"

    # Default signature placement (percent of page, y measured down from the top)
    default_signature_x: float = 50
    default_signature_y: float = 16
    default_signature_width_percent: float = 36

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    def is_dev(self) -> bool:
        """True when running in development mode."""
        return (self.app_env or "").strip().lower() == "development"

    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @field_validator("header_font_path", mode="before")
    @classmethod
    def empty_font_path_is_none(cls, value):
        # HEADER_FONT_PATH= in .env means "use the bundled font"
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value

settings = Settings()
