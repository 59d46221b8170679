from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # API Configuration
    api_title: str = "Week Planner API"
    api_version: str = "0.1.0"
    api_description: str = "Tasks, habits and an auto-scheduled weekly calendar"

    # Server Configuration
    host: str = "0.0.0.0"  # nosec B104
    port: int = 8000
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root logging level")

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./weekplanner.db", description="SQLAlchemy database URL"
    )
    seed_demo_data: bool = Field(
        default=False, description="Create sample tasks and habits on first startup"
    )

    # Scheduler Configuration
    schedule_horizon_days: int = Field(
        default=14, ge=1, le=90, description="Days ahead the auto-scheduler searches"
    )
    slot_granularity_minutes: int = Field(
        default=15, ge=1, le=60, description="Grid that placements are aligned to"
    )
    schedule_lock_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="How long a run waits for a concurrent run to finish",
    )

    # Environment
    environment: str = Field(
        default="development", pattern="^(development|staging|production|test)$"
    )

    # CORS Configuration
    cors_origins: list[str] | str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Allowed CORS origins",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format"""
        if not v.startswith(("sqlite://", "postgresql://", "postgres://")):
            raise ValueError("Database URL must be a SQLite or PostgreSQL URL")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and validate the logging level name"""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("slot_granularity_minutes")
    @classmethod
    def validate_granularity(cls, v: int) -> int:
        """The grid has to divide an hour evenly"""
        if 60 % v != 0:
            raise ValueError("slot_granularity_minutes must divide 60")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list, supporting both list and comma-separated string"""
        if isinstance(self.cors_origins, str):
            return [
                origin.strip() for origin in self.cors_origins.split(",") if origin.strip()
            ]
        return self.cors_origins

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )


# Global settings instance
settings = Settings()
