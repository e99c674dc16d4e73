"""Application settings and configuration."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Load .env file if present
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # GEMINI CONFIG
    gemini_api_key: str | None = Field(
        default=None,
        description="Gemini API key (chat and quiz are unavailable without it)",
        validation_alias="GEMINI_API_KEY",
    )

    # Model Configuration
    model_name: str = Field(
        default="gemini-1.5-pro-latest",
        description="Gemini model used for chat and quiz generation",
        validation_alias="GEMINI_MODEL",
    )

    # Generation Settings
    chat_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Temperature for study chat replies",
        validation_alias="CHAT_TEMPERATURE",
    )

    quiz_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Temperature for quiz generation",
        validation_alias="QUIZ_TEMPERATURE",
    )

    # Server Settings
    host: str = Field(
        default="0.0.0.0",
        description="Host the API server binds to",
        validation_alias="HOST",
    )

    port: int = Field(
        default=3001,
        ge=1,
        le=65535,
        description="Port the API server listens on",
        validation_alias="PORT",
    )

    # Search Settings
    search_api_url: str = Field(
        default="https://en.wikipedia.org/w/api.php",
        description="MediaWiki API endpoint used for /search",
        validation_alias="SEARCH_API_URL",
    )

    search_result_limit: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum number of search hits requested",
        validation_alias="SEARCH_RESULT_LIMIT",
    )

    search_timeout: float = Field(
        default=10.0,
        gt=0.0,
        description="Search request timeout in seconds",
        validation_alias="SEARCH_TIMEOUT",
    )

    # Wikipedia needs no key; this keeps the Gemini gate in front of search
    search_requires_gemini_key: bool = Field(
        default=True,
        description="Answer 503 on /api/search when GEMINI_API_KEY is unset",
        validation_alias="SEARCH_REQUIRES_GEMINI_KEY",
    )

    # Client Settings
    api_url: str = Field(
        default="http://localhost:3001",
        description="Base URL of the API server used by the CLI panels",
        validation_alias="STUDY_PARTNER_API_URL",
    )

    api_timeout: float = Field(
        default=60.0,
        gt=0.0,
        description="CLI request timeout in seconds",
        validation_alias="API_TIMEOUT",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level",
        validation_alias="LOG_LEVEL",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("gemini_api_key")
    @classmethod
    def strip_api_key(cls, v: str | None) -> str | None:
        """Treat a blank key as missing."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Ensure log level is uppercase."""
        return v.strip().upper()

    @property
    def gemini_configured(self) -> bool:
        """Whether a Gemini API key is available."""
        return self.gemini_api_key is not None


# Loaded the first time and then cached for the server and the CLI
@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with loaded configuration
    """
    return Settings()
