"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]
PortInt = Annotated[int, Field(gt=0, le=65_535)]
IterationCount = Annotated[int, Field(ge=1_000, le=10_000_000)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    app_port: PortInt = Field(default=3000, validation_alias="APP_PORT")
    password_hash_iterations: IterationCount = Field(
        default=100_000,
        validation_alias="PASSWORD_HASH_ITERATIONS",
    )
    password_min_length: PositiveInt = Field(
        default=8,
        validation_alias="PASSWORD_MIN_LENGTH",
    )
    cors_allow_origins: str = Field(default="*", validation_alias="CORS_ALLOW_ORIGINS")

    @property
    def cors_origin_list(self) -> list[str]:
        """Return configured CORS origins split from the comma-separated env value."""

        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
