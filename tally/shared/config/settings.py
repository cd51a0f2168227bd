from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tally.domain.values import Currency, RoundingMode


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    LOG_LEVEL: str = Field(
        default="INFO", description="Logging level [DEBUG, INFO, WARNING, ERROR]"
    )

    JSON_LOGS: bool = Field(
        default=False,
        description="Should logs be in JSON format?",
    )

    API_HOST: str = Field(
        default="0.0.0.0", description="Host address to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000, ge=1, le=65535, description="Port to run the API server on"
    )

    DEFAULT_CURRENCY: str = Field(
        default="INR",
        description="Currency used when a request does not name one",
        examples=["INR", "USD"],
    )

    DEFAULT_SCALE: int = Field(
        default=2,
        ge=0,
        le=18,
        description="Fractional digits for currencies missing from the registry",
    )

    DEFAULT_ROUNDING_MODE: str = Field(
        default="HALF_EVEN",
        description="Rounding mode used when none is requested",
        examples=["HALF_EVEN", "HALF_UP", "ROUND_CEIL"],
    )

    DIVISION_PRECISION: int = Field(
        default=20,
        ge=2,
        le=50,
        description="Fractional digits kept by every division before rounding",
    )

    UNIT_PRICE_PRECISION: int = Field(
        default=10,
        ge=2,
        le=30,
        description="Fractional digits of a unit price back-solved from an entered total",
    )

    MAX_DISTRIBUTION_PARTS: int = Field(
        default=10_000,
        ge=1,
        le=1_000_000,
        description="Largest number of parts a total can be distributed into",
    )

    ENABLE_METRICS: bool = Field(
        default=False,
        description="Should metrics collection be enabled?",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if value.upper() not in valid_levels:
            raise ValueError(
                f"Invalid LOG_LEVEL '{value}'. Must be one of {valid_levels}"
            )
        return value.upper()

    @field_validator("DEFAULT_CURRENCY")
    @classmethod
    def validate_default_currency(cls, value: str) -> str:
        return Currency(value.strip()).code

    @field_validator("DEFAULT_ROUNDING_MODE")
    @classmethod
    def validate_rounding_mode(cls, value: str) -> str:
        return RoundingMode.parse(value).value

    @model_validator(mode="after")
    def validate_precision_relationships(self) -> "Settings":
        if self.UNIT_PRICE_PRECISION > self.DIVISION_PRECISION:
            raise ValueError(
                f"UNIT_PRICE_PRECISION ({self.UNIT_PRICE_PRECISION}) "
                f"cannot be greater than DIVISION_PRECISION ({self.DIVISION_PRECISION})"
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    from tally.shared.logging import get_logger

    logger = get_logger(__name__)

    try:
        settings = Settings()
        logger.info("Settings loaded successfully")
        return settings

    except Exception as e:
        logger.error(f"Failed to load settings: {e}", exc_info=True)
        raise
