from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docvault"
    db_username: str = "docvault"
    db_password: str = "secret"

    max_job_attempts: int = 3
    job_poll_interval_seconds: int = 5

    http_timeout_seconds: int = 30

    storage_backend: str = "s3"
    storage_endpoint: str = "s3.amazonaws.com"
    storage_secure: bool = True
    storage_public_base_url: str = ""
    aws_s3_region: str = "eu-north-1"
    aws_s3_bucket_name: str = ""
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""

    signed_url_ttl_seconds: int = 3600

    @field_validator(
        "aws_s3_region",
        "aws_s3_bucket_name",
        "aws_access_key_id",
        "aws_secret_access_key",
        mode="before",
    )
    @classmethod
    def _strip_quotes(cls, value: object) -> object:
        # .env files exported from other tooling often keep the quotes
        if isinstance(value, str):
            return value.replace('"', "")
        return value
