from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    # Connection parts, as exported by the deployment environment.
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_NAME: str = "newsapi"
    DATABASE_USER: str = "newsapi"
    DATABASE_PASSWORD: str = "newsapi"
    DATABASE_SSL_MODE: str = "disable"
    # Full URL; takes precedence over the parts above when set.
    DATABASE_URL: str | None = None

    STORE_BACKEND: str = "sql"  # "sql" or "memory"

    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_ENABLED: bool = False

    # Cache TTLs
    CACHE_TTL_LIST: int = 60
    CACHE_TTL_DETAIL: int = 300

    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the async engine."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        url = URL.create(
            "postgresql+asyncpg",
            username=self.DATABASE_USER,
            password=self.DATABASE_PASSWORD,
            host=self.DATABASE_HOST,
            port=self.DATABASE_PORT,
            database=self.DATABASE_NAME,
        )
        return url.render_as_string(hide_password=False)


settings = Settings()
