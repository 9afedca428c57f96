"""Configuration management"""
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Database
    database_url: str = "sqlite:///./fintrack.db"

    # Local token auth
    secret_key: str = Field(default="dev-only-not-for-production")
    access_token_expire_days: int = 30

    # OAuth (Auth0) - optional external identity provider
    auth0_domain: Optional[str] = None
    auth0_audience: Optional[str] = None

    # CORS - comma-separated list of allowed origins
    allowed_origins: str = "http://localhost:5173"

    # Defaults applied to new users
    default_currency: str = "USD"
    default_financial_year_start: str = "04-01"  # MM-DD
    default_financial_year_end: str = "03-31"  # MM-DD

    # Listing / dashboard
    dashboard_top_categories: int = 5
    default_list_limit: int = 50

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables

    def validate_production_settings(self) -> None:
        """Validate settings for production use. Call during startup."""
        is_production = os.getenv("ENVIRONMENT", "").lower() == "production"
        if is_production and "dev-only" in self.secret_key.lower():
            raise ValueError(
                "SECRET_KEY must be set to a secure value in production. "
                "Set the SECRET_KEY environment variable."
            )


settings = Settings()
