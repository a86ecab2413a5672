"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Tolerance used when checking that similarity weights add up to 1.0
WEIGHT_SUM_TOLERANCE = 1e-6


def check_weight_total(*weights: float) -> None:
    """Raise ValueError unless the weights add up to 1.0."""
    total = sum(weights)
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise ValueError(f"Similarity weights must sum to 1.0, got {total:.6f}")


class SimilarityWeights(BaseModel):
    """Weight table for the composite duplicate similarity score."""

    model_config = ConfigDict(frozen=True)

    date: float = Field(default=0.30, ge=0.0, le=1.0)
    amount: float = Field(default=0.40, ge=0.0, le=1.0)
    description: float = Field(default=0.20, ge=0.0, le=1.0)
    category: float = Field(default=0.10, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_total(self):
        """Weights must always sum to 1.0."""
        check_weight_total(self.date, self.amount, self.description, self.category)
        return self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="Spreadsheet Import Service", alias="APP_NAME")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Upload limits
    max_file_size_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_FILE_SIZE_BYTES")

    # Duplicate detection
    duplicate_threshold: float = Field(default=0.8, alias="DUPLICATE_THRESHOLD")
    description_reason_threshold: float = Field(default=0.8, alias="DESCRIPTION_REASON_THRESHOLD")
    weight_date: float = Field(default=0.30, alias="SIMILARITY_WEIGHT_DATE")
    weight_amount: float = Field(default=0.40, alias="SIMILARITY_WEIGHT_AMOUNT")
    weight_description: float = Field(default=0.20, alias="SIMILARITY_WEIGHT_DESCRIPTION")
    weight_category: float = Field(default=0.10, alias="SIMILARITY_WEIGHT_CATEGORY")
    existing_window_padding_days: int = Field(default=0, alias="EXISTING_WINDOW_PADDING_DAYS")

    # Row diagnostics
    report_coercion_errors: bool = Field(default=True, alias="REPORT_COERCION_ERRORS")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("max_file_size_bytes")
    @classmethod
    def validate_max_file_size(cls, v):
        """Validate upload limit is positive."""
        if v < 1:
            raise ValueError("Max file size must be at least 1 byte")
        return v

    @field_validator("duplicate_threshold", "description_reason_threshold")
    @classmethod
    def validate_threshold(cls, v):
        """Thresholds are compared against scores in [0, 1]."""
        if not (0.0 <= v <= 1.0):
            raise ValueError("Threshold must be between 0 and 1")
        return v

    @field_validator("existing_window_padding_days")
    @classmethod
    def validate_padding(cls, v):
        if v < 0:
            raise ValueError("Existing window padding cannot be negative")
        return v

    @model_validator(mode="after")
    def validate_weights(self):
        """Reject weight tables that do not sum to 1.0."""
        check_weight_total(
            self.weight_date, self.weight_amount, self.weight_description, self.weight_category
        )
        return self

    def similarity_weights(self) -> SimilarityWeights:
        """
        Build the similarity weight table from settings.

        Returns:
            SimilarityWeights instance
        """
        return SimilarityWeights(
            date=self.weight_date,
            amount=self.weight_amount,
            description=self.weight_description,
            category=self.weight_category,
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
