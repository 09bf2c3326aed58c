from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from tensu_drill.schemas import Difficulty


class Settings(BaseSettings):
    default_difficulty: Difficulty = Difficulty.beginner
    problem_ttl_hours: int = 24
    random_seed: int | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
