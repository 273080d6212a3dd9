from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "CNC Cutting Cost Calculator"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    default_unit: str = "cm"
    default_currency: str = "IDR"
    default_locale: str = "en-US"
    svg_pixels_per_inch: float = 96.0
    dxf_mm_per_unit: float = 1.0  # DXF drawing units are assumed to be mm
    curve_samples: int = 64  # polyline steps per SVG curve segment
    max_upload_bytes: int = 10 * 1024 * 1024

    class Config:
        env_prefix = "CUTCOST_"


settings = Settings()
