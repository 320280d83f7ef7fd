from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    summarizer_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="SUMMARIZER_MODEL",
        description="Model used to narrate week plans",
    )
    summarizer_temperature: float = Field(
        default=0.3,
        validation_alias="SUMMARIZER_TEMPERATURE",
        description="Sampling temperature for week plan narration (0.0-2.0)",
    )
    summarizer_max_tokens: int = Field(default=2000, validation_alias="SUMMARIZER_MAX_TOKENS")
    summarizer_timeout_seconds: float = Field(default=30.0, validation_alias="SUMMARIZER_TIMEOUT_SECONDS")
    summarizer_max_retries: int = Field(default=2, validation_alias="SUMMARIZER_MAX_RETRIES")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_api_key(cls, value: str) -> str:
        """Week plans work without a key; only narration is disabled."""
        if not value:
            logger.warning(
                "OPENAI_API_KEY is not set. Week plan narration will be unavailable. "
                "Set it in .env file or environment variables to enable the summarizer."
            )
        return value

    @field_validator("summarizer_max_retries")
    @classmethod
    def validate_max_retries(cls, value: int) -> int:
        if value < 0:
            logger.warning(f"Invalid SUMMARIZER_MAX_RETRIES '{value}'. Defaulting to 0.")
            return 0
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
