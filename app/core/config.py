import json

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str

    REDIS_URL: str = "redis://redis:6379/0"

    BACKEND_CORS_ORIGINS: str = '["http://localhost:5173","http://localhost:3000"]'

    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Sales Metrics Admin API"
    DEBUG: bool = False

    # External search/analytics service (owns the product search index)
    SEARCH_SERVICE_URL: str = ""  # e.g. "http://search:7700/api"
    SEARCH_SERVICE_API_KEY: str = ""
    SEARCH_SERVICE_TIMEOUT_SECONDS: float = 30.0

    # Metrics
    METRICS_CACHE_TTL_SECONDS: int = 3600
    METRICS_DEFAULT_CHANNEL: str = "all"
    METRICS_WARM_SCHEDULE_MINUTE: int = 5  # Minute past each hour for the beat warm-up

    RATE_LIMIT_ENABLED: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.BACKEND_CORS_ORIGINS, str):
            try:
                parsed: list[str] = json.loads(self.BACKEND_CORS_ORIGINS)
                return parsed
            except json.JSONDecodeError:
                return ["http://localhost:5173", "http://localhost:3000"]
        return self.BACKEND_CORS_ORIGINS


settings = Settings()
