# backend/depotview/config.py
"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation:
- ENVIRONMENT: Runtime mode (development, test, production)
- TRANSACTIONS_API_URL: Base URL of the statement backend serving transactions
- DISPLAY_CURRENCY / DISPLAY_LOCALE: How money is rendered for the UI

Environment-specific behavior:
- test: Allows any transactions URL
- development: Plain HTTP upstream allowed
- production: Transactions API must be served over HTTPS

Configuration is validated on application startup. Invalid configuration
will raise a ValueError with a descriptive message.

Usage:
    from depotview.config import settings

    if settings.is_production:
        ...
"""
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find the .env file in project root (parent of backend/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables:
        - ENVIRONMENT: Runtime environment (development, test, production)
        - APP_NAME: Application name (default: "Depot Portfolio Viewer")
        - DEBUG: Enable debug mode (default: False)
        - LOG_LEVEL: Logging level (default: "INFO")
        - LOG_FORMAT: "text" or "json" (default: "text")

    Upstream services:
        - TRANSACTIONS_API_URL: Statement backend base URL
        - TRANSACTIONS_API_TIMEOUT: Seconds before a transactions fetch fails
        - QUOTE_PROVIDER_TIMEOUT: Seconds before a quote fetch fails
    """

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Runtime environment (development, test, production)"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Log output format"
    )

    app_name: str = "Depot Portfolio Viewer"
    debug: bool = False

    # =========================================================================
    # UPSTREAM SERVICES
    # =========================================================================
    transactions_api_url: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the statement backend (serves /transactions/{client_id})"
    )
    transactions_api_timeout: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Timeout in seconds for transaction fetches"
    )
    quote_provider_timeout: int = Field(
        default=10,
        ge=1,
        le=120,
        description="Timeout in seconds for market quote fetches"
    )

    # =========================================================================
    # DISPLAY
    # =========================================================================
    display_currency: str = Field(
        default="EUR",
        min_length=3,
        max_length=3,
        description="ISO 4217 currency used for formatted amounts"
    )
    display_locale: Literal["de-DE", "en-US"] = Field(
        default="de-DE",
        description="Locale used for formatted amounts"
    )

    # =========================================================================
    # CORS
    # =========================================================================
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Allowed CORS origins"
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # =========================================================================
    # RATE LIMITING
    # =========================================================================
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable per-IP rate limiting"
    )
    trust_proxy_headers: bool = Field(
        default=False,
        description="Trust X-Forwarded-For from any client (only behind a trusted load balancer)"
    )
    trusted_proxy_ips: list[str] = Field(
        default=["127.0.0.1"],
        description="Proxy addresses whose forwarded headers are trusted"
    )

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_display_and_upstream(self) -> "Settings":
        """
        Validate display and upstream configuration.

        Rules:
        - display_currency is normalized to uppercase
        - production: transactions API must use HTTPS
        """
        object.__setattr__(self, "display_currency", self.display_currency.strip().upper())
        object.__setattr__(self, "transactions_api_url", self.transactions_api_url.rstrip("/"))

        if self.environment == "production":
            if not self.transactions_api_url.lower().startswith("https://"):
                raise ValueError(
                    "Production environment requires an HTTPS TRANSACTIONS_API_URL, "
                    f"got: {self.transactions_api_url[:30]}..."
                )

        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


# Create single instance
settings = Settings()
