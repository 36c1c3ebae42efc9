from functools import lru_cache
import os
from pydantic import BaseModel, Field


class Settings(BaseModel):
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(default="", alias="DATABASE_URL")
    postgres_db: str = Field(default="fieldbook", alias="POSTGRES_DB")
    postgres_user: str = Field(default="fieldbook", alias="POSTGRES_USER")
    postgres_password: str = Field(default="fieldbook", alias="POSTGRES_PASSWORD")
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")

    scheduler_enabled: bool = Field(default=True, alias="SCHEDULER_ENABLED")
    booking_sweep_interval_min: int = Field(default=1, alias="BOOKING_SWEEP_INTERVAL_MIN")

    notification_webhook_url: str = Field(default="", alias="NOTIFICATION_WEBHOOK_URL")
    notification_timeout_sec: float = Field(default=10.0, alias="NOTIFICATION_TIMEOUT_SEC")

    class Config:
        populate_by_name = True

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(**os.environ)
