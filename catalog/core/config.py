from functools import lru_cache
from typing import Literal, Optional
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]
BackendName = Literal["memory", "mongo"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "MarketplaceCatalog"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Storage backend, chosen once at startup
    REPOSITORY_BACKEND: BackendName = "memory"

    # Mongo (only used when REPOSITORY_BACKEND == "mongo")
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "marketplace"
    MONGO_COLLECTION: str = "products"
    MONGO_TLS: bool = False

    # Redis (optional, guards reseeding across workers)
    REDIS_URL: str = ""
    seed_lock_ttl: int = 30                    # seconds

    # In-memory backend
    memory_latency_s: float = 0.0              # 0 still yields to the event loop

    # Query limits
    max_page_size: Optional[int] = None        # None = no upper bound on ?limit=
    cheapest_default_limit: int = 5
    cheapest_available_default_limit: int = 3
    cheapest_max_limit: int = 50

    # API
    api_prefix: str = "/api"
    ALLOWED_ORIGINS: str = ""                  # CSV

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
