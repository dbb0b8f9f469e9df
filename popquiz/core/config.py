"""Application configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed settings object for the calculator service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")
    service_name: str = Field(default="popquiz-calculator", alias="SERVICE_NAME")
    environment: str = Field(default="local", alias="ENVIRONMENT")

    default_start_column: int = Field(default=6, ge=1, alias="DEFAULT_START_COLUMN")
    default_end_column: int = Field(default=8, ge=1, alias="DEFAULT_END_COLUMN")
    default_best_of: int = Field(default=2, ge=1, alias="DEFAULT_BEST_OF")

    result_filename: str = Field(default="pop_quiz_results.xlsx", alias="RESULT_FILENAME")
    result_column_header: str = Field(
        default="Best Pop quiz Result", alias="RESULT_COLUMN_HEADER"
    )
    result_sheet_name: str = Field(default="Results", alias="RESULT_SHEET_NAME")

    upload_chunk_size: int = Field(default=1024 * 1024, gt=0, alias="UPLOAD_CHUNK_SIZE")


settings = Settings()
