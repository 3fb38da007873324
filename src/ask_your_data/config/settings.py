from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings managed via Pydantic Settings.
    Reads variables from environment and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # --- Application Meta ---
    APP_NAME: str = "Ask Your Data"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    # --- Server Configuration ---
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # --- Data Ingestion Limits ---
    MAX_UPLOAD_SIZE_MB: int = 10

    # --- Query Engine ---
    TYPE_SAMPLE_SIZE: int = 100    # leading rows sampled per column
    TYPE_THRESHOLD: float = 0.8    # parseable share required to classify a column
    DEFAULT_LIMIT: int = 10        # "top"/"last" without an explicit count

    # --- Presentation ---
    RESULT_PREVIEW_ROWS: int = 50
    CHART_MAX_POINTS: int = 20

    @field_validator("TYPE_THRESHOLD")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not 0 < v <= 1:
            raise ValueError("TYPE_THRESHOLD must be in (0, 1].")
        return v

    @field_validator("TYPE_SAMPLE_SIZE", "DEFAULT_LIMIT")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Value must be a positive integer.")
        return v

settings = Settings()
