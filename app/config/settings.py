from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Firebase / Firestore
    firebase_service_account: Optional[str] = None  # service account JSON as a string
    firebase_project_id: Optional[str] = None
    use_in_memory_backends: bool = False  # local development and tests
    store_timeout_seconds: float = 10.0

    # Auth
    jwt_secret: str = ""
    jwt_expires_in: str = "7d"  # 7d | 12h | 30m | 45s | plain seconds
    jwt_cookie_expires_in: int = 7  # days
    auth_cookie_name: str = "token"
    cookie_domain: Optional[str] = None

    # Pagination
    default_page_limit: int = 10
    max_page_limit: int = 100

    # App
    app_name: str = "dran-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    api_prefix: str = "/v1"
    cors_origins: str = "http://localhost:3000,http://localhost:3001"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    login_rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
