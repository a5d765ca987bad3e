"""Configuration management using Pydantic settings."""

from typing import Optional

from pydantic_settings import BaseSettings


# ========================================
# Pydantic Settings (from .env)
# ========================================

class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Crossref settings
    crossref_base_url: str = "https://api.crossref.org"
    crossref_mailto: str = ""
    crossref_request_timeout: int = 30

    # Database settings
    database_url: Optional[str] = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "paper_registry"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_pool_size: int = 10
    postgres_max_overflow: int = 5

    # Ranking resolution
    ranking_table: str = "jcr_impact_factors"
    ranking_fuzzy_fallback: bool = False

    # Redis settings
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str = ""
    redis_ttl: int = 604800

    # Monitoring
    log_level: str = "INFO"
    log_file: str = ""

    # Environment
    environment: str = "development"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def database_url_resolved(self) -> str:
        """Explicit DATABASE_URL, or a PostgreSQL URL built from the postgres_* fields."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()


# ========================================
# Crossref API
# ========================================

CROSSREF_BASE_URL: str = settings.crossref_base_url
CROSSREF_REQUEST_TIMEOUT: int = settings.crossref_request_timeout
CROSSREF_USER_AGENT: str = (
    f"paper-registry/0.1 (mailto:{settings.crossref_mailto})"
    if settings.crossref_mailto
    else "paper-registry/0.1"
)


# ========================================
# Display
# ========================================

NOT_AVAILABLE: str = "N/A"
IMPACT_FACTOR_PLACES: str = "0.001"
PERCENTILE_PLACES: str = "0.1"
