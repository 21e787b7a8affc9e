from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOCKERDESK_", env_file=".env", extra="ignore")

    database_url: str = "sqlite+pysqlite:///./lockerdesk.db"
    pool_size: int = 500
    access_code_max_attempts: int = 10

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    # Tokens never expire unless a TTL is configured.
    token_ttl_minutes: int | None = None
    library_password: str = "change-me"
    operator_email: str = "library@lockerdesk.local"

    release_attempt_limit: str = "5/15 minutes"
    login_attempt_limit: str = "5/15 minutes"
    event_queue_size: int = 100

    log_level: str = "INFO"
    log_json: bool = False

    openapi_path: Path = Path(__file__).resolve().parents[1] / "openapi/openapi.yaml"


settings = Settings()
