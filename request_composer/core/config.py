from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    API_BASE_URL: str = "http://localhost:5050/api"
    HTTP_TIMEOUT_SECONDS: float = 30.0
    CONNECTIVITY_PROBE_URL: str | None = None
    FORCE_OFFLINE: bool = False
    CATALOG_PROVIDER: str = "api"  # "api" | "static"

    SNAPSHOT_PROVIDER: str = "json"  # "json" | "memory"
    SNAPSHOT_DIR: str = "./data/snapshots"
    SESSION_SNAPSHOT_KEY: str = "serviceRequestState"
    PERSIST_DEBOUNCE_SECONDS: float = 0.5

    OFFLINE_QUEUE_PATH: str = "./data/offline/pending-requests.json"

    WARNING_TTL_SECONDS: float = 3.0
    WIRE_INSTANCE_STRATEGY: str = "first_only"  # "first_only" | "all_instances"
    FIELD_REJECTION_PATTERNS: list[str] = ["should not exist", "is not allowed", "invalid field"]


settings = Settings()
