from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "cropdoc"
    db_username: str = "cropdoc"
    db_password: str = "secret"

    job_poll_interval_seconds: int = 5

    vendor_provider: str = "plantid"
    vendor_schema: str = "auto"
    diagnosis_source: str = "AI_Plant.id"

    plantid_api_key: str = ""
    plantid_endpoint: str = "https://plant.id/api/v3/health_assessment"
    plantid_timeout_seconds: int = 30
