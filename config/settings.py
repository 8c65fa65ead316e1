"""
Application settings module.

Manages all configuration via environment variables using pydantic-settings.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from rentpool.matching.config import MatchingConfig, MatchingThresholds, MatchingWeights


class PostgresSettings(BaseSettings):
    """PostgreSQL connection settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="PG_", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    user: str = "admin"
    password: str = "1234"
    database: str = "rentpool_dev"
    pool_min: int = 2
    pool_max: int = 10
    command_timeout: float = 30.0  # Per-query timeout (seconds)

    @property
    def dsn(self) -> str:
        """Generate PostgreSQL DSN."""
        return (
            f"postgresql://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class RedisSettings(BaseSettings):
    """Redis connection settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="REDIS_", extra="ignore")

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str = ""
    request_ttl: int = 300  # Cached rental request lifetime (seconds)

    @property
    def url(self) -> str:
        """Generate Redis URL."""
        if self.password:
            return f"redis://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"redis://{self.host}:{self.port}/{self.db}"


class MatchingSettings(BaseSettings):
    """Scoring weights and pool policy overrides."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MATCHING_", extra="ignore")

    # Weights (sum to 100)
    weight_location: int = 40
    weight_budget: int = 25
    weight_features: int = 20
    weight_timing: int = 10
    weight_performance: int = 5

    # Thresholds
    normal_threshold: int = 40
    no_budget_threshold: int = 30
    fallback_top_n: int = 3
    max_results: int = 20

    # Budget bands
    strict_rent_multiplier: float = 1.2
    relaxed_rent_multiplier: float = 2.0

    # Time windows
    default_expiry_days: int = 14
    reverse_window_days: int = 60

    def to_config(self) -> MatchingConfig:
        """Build the immutable matching config from these settings."""
        return MatchingConfig(
            weights=MatchingWeights(
                location=self.weight_location,
                budget=self.weight_budget,
                features=self.weight_features,
                timing=self.weight_timing,
                performance=self.weight_performance,
            ),
            thresholds=MatchingThresholds(
                normal=self.normal_threshold,
                no_budget=self.no_budget_threshold,
                fallback_top_n=self.fallback_top_n,
                max_results=self.max_results,
            ),
            strict_rent_multiplier=self.strict_rent_multiplier,
            relaxed_rent_multiplier=self.relaxed_rent_multiplier,
            default_expiry_days=self.default_expiry_days,
            reverse_window_days=self.reverse_window_days,
        )


class SchedulerSettings(BaseSettings):
    """Pool maintenance job settings."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    cleanup_interval_minutes: int = 15
    timezone: str = "UTC"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    postgres: PostgresSettings = PostgresSettings()
    redis: RedisSettings = RedisSettings()
    matching: MatchingSettings = MatchingSettings()
    scheduler: SchedulerSettings = SchedulerSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
