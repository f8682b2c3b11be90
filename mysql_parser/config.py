"""
Application configuration management.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Parsing
    default_dialect: str = "mysql"
    max_sql_length: int = 1024 * 1024

    # Normalization
    max_depth: int = 256

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Application
    log_level: str = "INFO"

    class Config:
        env_prefix = "MYSQL_PARSER_"
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
