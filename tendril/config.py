"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    tendril_env: str = "development"
    tendril_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Output limits
    max_points_per_stroke: int = 5000
    max_output_strokes: int = 5000

    # Seed used when a behavior call does not pass one
    noise_seed: int = 0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
