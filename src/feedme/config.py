"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix ``FEEDME_``)."""

    model_config = SettingsConfigDict(
        env_prefix="FEEDME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Float comparison for summed quantities
    quantity_rel_tolerance: float = 1e-9
    quantity_abs_tolerance: float = 1e-9

    # Decimal places used when displaying quantities to users
    display_precision: int = 2

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
