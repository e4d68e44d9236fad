from pathlib import Path

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    # === General ===
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # === Server ===
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")
    public_dir: Path = Field(default=BASE_DIR / "public", validation_alias="PUBLIC_DIR")

    # === SSE ===
    sse_queue_size: int = Field(default=100, ge=1, validation_alias="SSE_QUEUE_SIZE")
    sse_keepalive_seconds: float = Field(default=15.0, gt=0, validation_alias="SSE_KEEPALIVE_SECONDS")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return level

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
